"""
Background loading for report tabs.

A tab owns one `ReportLoader` per logical query. Each `load(period)` issues a
new token and runs the task on the global QThreadPool; when the task finishes
the result is committed only if its token is still the latest one issued.
Results of superseded requests are dropped, so a slow response for an old
period can never overwrite a newer one.
"""
from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Optional

from PySide6.QtCore import QObject, QRunnable, QThreadPool, Qt, Signal, Slot

from ...errors import ReportingError
from .period import ReportPeriod

_log = logging.getLogger(__name__)


class RequestSequence:
    """Monotonic request tokens; thread-safe."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._latest = 0

    def issue(self) -> int:
        with self._lock:
            self._latest += 1
            return self._latest

    def is_latest(self, token: int) -> bool:
        with self._lock:
            return token == self._latest

    @property
    def latest(self) -> int:
        with self._lock:
            return self._latest


class _JobRunnable(QRunnable):
    """
    Thin QRunnable wrapper that executes a callable on a pool thread.
    """
    def __init__(self, work: Callable[[], None]) -> None:
        super().__init__()
        self.setAutoDelete(True)
        self._work = work

    @Slot()
    def run(self) -> None:  # type: ignore[override]
        self._work()


class ReportLoader(QObject):
    """
    State cell (`data`, `error`, `loading`) for one report query.

    Signals:
      loaded(object)       latest result committed
      failed(str)          latest request raised; message is user-facing
      loadingChanged(bool)
    """

    loaded = Signal(object)
    failed = Signal(str)
    loadingChanged = Signal(bool)

    # worker -> owner thread; queued so state is only touched on the owner's thread
    _done = Signal(int, object, object)

    def __init__(
        self,
        task: Callable[[ReportPeriod], Any],
        *,
        pool: Optional[QThreadPool] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._task = task
        self._pool = pool or QThreadPool.globalInstance()
        self._seq = RequestSequence()
        self.data: Any = None
        self.error: Optional[str] = None
        self.loading = False
        self.period: Optional[ReportPeriod] = None
        self._done.connect(self._on_done, Qt.QueuedConnection)

    def load(self, period: ReportPeriod) -> int:
        """Start a fetch for `period`; returns its token."""
        token = self._seq.issue()
        self.period = period
        self.error = None
        self._set_loading(True)
        _log.debug("load #%d %s", token, period.label())
        self._pool.start(_JobRunnable(lambda: self._run(token, period)))
        return token

    def reload(self) -> Optional[int]:
        if self.period is None:
            return None
        return self.load(self.period)

    # ---- worker thread ----
    def _run(self, token: int, period: ReportPeriod) -> None:
        try:
            result = self._task(period)
        except Exception as e:  # reported through `failed`
            self._done.emit(token, None, e)
            return
        self._done.emit(token, result, None)

    # ---- owner thread ----
    @Slot(int, object, object)
    def _on_done(self, token: int, result: Any, exc: Optional[BaseException]) -> None:
        if not self._seq.is_latest(token):
            _log.debug("discarding stale result #%d (latest #%d)", token, self._seq.latest)
            return
        self._set_loading(False)
        if exc is not None:
            if isinstance(exc, ReportingError):
                message = str(exc)
            else:
                _log.error("report task failed", exc_info=(type(exc), exc, exc.__traceback__))
                message = f"An unexpected error occurred: {exc}"
            self.error = message
            self.failed.emit(message)
            return
        self.data = result
        self.error = None
        self.loaded.emit(result)

    def _set_loading(self, value: bool) -> None:
        if self.loading != value:
            self.loading = value
            self.loadingChanged.emit(value)
