# tests/test_report_loader.py
import threading
from datetime import date

import pytest
from PySide6.QtCore import QThreadPool

from ims_reporting.errors import ApiError
from ims_reporting.modules.reporting.loader import ReportLoader, RequestSequence
from ims_reporting.modules.reporting.period import ReportPeriod

JAN = ReportPeriod(date(2025, 1, 1), date(2025, 1, 31))
FEB = ReportPeriod(date(2025, 2, 1), date(2025, 2, 28))


@pytest.fixture
def pool():
    p = QThreadPool()
    p.setMaxThreadCount(2)
    yield p
    p.waitForDone(5000)


def test_request_sequence_is_monotonic():
    seq = RequestSequence()
    a, b = seq.issue(), seq.issue()
    assert b > a
    assert seq.is_latest(b) and not seq.is_latest(a)


def test_loaded_commits_result_and_toggles_loading(qtbot, pool):
    loader = ReportLoader(lambda p: {"start": p.start}, pool=pool)
    states = []
    loader.loadingChanged.connect(states.append)
    with qtbot.waitSignal(loader.loaded, timeout=3000) as blocker:
        loader.load(JAN)
    assert blocker.args == [{"start": date(2025, 1, 1)}]
    assert loader.data == {"start": date(2025, 1, 1)}
    assert loader.error is None
    assert loader.loading is False
    assert states == [True, False]


def test_stale_response_is_discarded(qtbot, pool):
    release_jan = threading.Event()

    def task(period):
        if period == JAN:
            release_jan.wait(5)
            return "january"
        return "february"

    loader = ReportLoader(task, pool=pool)
    seen = []
    loader.loaded.connect(seen.append)

    with qtbot.waitSignal(loader.loaded, timeout=3000):
        loader.load(JAN)
        loader.load(FEB)

    # let the superseded request finish and its completion be delivered
    release_jan.set()
    pool.waitForDone(3000)
    qtbot.wait(100)

    assert seen == ["february"]
    assert loader.data == "february"
    assert loader.period == FEB


def test_api_error_reported_through_failed(qtbot, pool):
    def task(period):
        raise ApiError("Network Error: Could not connect to the server.")

    loader = ReportLoader(task, pool=pool)
    with qtbot.waitSignal(loader.failed, timeout=3000) as blocker:
        loader.load(JAN)
    assert blocker.args == ["Network Error: Could not connect to the server."]
    assert loader.error == blocker.args[0]
    assert loader.loading is False


def test_unexpected_error_is_wrapped(qtbot, pool):
    loader = ReportLoader(lambda p: 1 / 0, pool=pool)
    with qtbot.waitSignal(loader.failed, timeout=3000) as blocker:
        loader.load(JAN)
    assert blocker.args[0].startswith("An unexpected error occurred")


def test_reload_reuses_last_period(qtbot, pool):
    calls = []
    loader = ReportLoader(lambda p: calls.append(p) or len(calls), pool=pool)
    assert loader.reload() is None
    with qtbot.waitSignal(loader.loaded, timeout=3000):
        loader.load(FEB)
    with qtbot.waitSignal(loader.loaded, timeout=3000):
        loader.reload()
    assert calls == [FEB, FEB]
