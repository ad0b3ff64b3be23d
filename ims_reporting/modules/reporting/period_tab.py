# ims_reporting/modules/reporting/period_tab.py
from __future__ import annotations

from datetime import date
from typing import Any, Optional

from PySide6.QtCore import QDate, Slot
from PySide6.QtWidgets import (
    QDateEdit,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from ...repositories.reporting_repo import ReportingRepo
from .loader import ReportLoader
from .period import ReportPeriod


class PeriodReportTab(QWidget):
    """
    Common shell for the reporting tabs:
      - Toolbar: From/To date, Refresh
      - Body: built by the subclass in `_build_body`
      - Footer: status line (loading / error / period)

    Subclasses implement `compute(period)` (runs on a pool thread, no widget
    access) and `render(result)` (runs on the GUI thread).
    """

    TITLE = "Report"
    LOGIC: Optional[type] = None

    def __init__(self, repo: ReportingRepo, parent=None, *, loader: Optional[ReportLoader] = None) -> None:
        super().__init__(parent)
        self.repo = repo
        self.logic = self.LOGIC(repo) if self.LOGIC is not None else None
        self.loader = loader or ReportLoader(self.compute, parent=self)

        self._build_ui()
        self._wire_signals()

    # ---- UI construction ----
    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(6, 6, 6, 6)
        root.setSpacing(6)

        bar = QHBoxLayout()
        bar.setContentsMargins(0, 0, 0, 0)
        bar.setSpacing(8)

        bar.addWidget(QLabel("From:"))
        self.dt_from = QDateEdit()
        self.dt_from.setCalendarPopup(True)
        self.dt_from.setDisplayFormat("yyyy-MM-dd")
        # default to first of current month
        today = QDate.currentDate()
        self.dt_from.setDate(QDate(today.year(), today.month(), 1))
        bar.addWidget(self.dt_from)

        bar.addSpacing(8)
        bar.addWidget(QLabel("To:"))
        self.dt_to = QDateEdit()
        self.dt_to.setCalendarPopup(True)
        self.dt_to.setDisplayFormat("yyyy-MM-dd")
        self.dt_to.setDate(today)
        bar.addWidget(self.dt_to)

        bar.addStretch(1)
        self.btn_refresh = QPushButton("Refresh")
        bar.addWidget(self.btn_refresh)
        root.addLayout(bar)

        self._build_body(root)

        self.lbl_status = QLabel("")
        self.lbl_status.setObjectName("ReportStatus")
        self.lbl_status.setWordWrap(True)
        root.addWidget(self.lbl_status)

    def _build_body(self, root: QVBoxLayout) -> None:
        raise NotImplementedError

    def _wire_signals(self) -> None:
        self.btn_refresh.clicked.connect(self.refresh)
        self.dt_from.dateChanged.connect(lambda *_: self.refresh())
        self.dt_to.dateChanged.connect(lambda *_: self.refresh())

        self.loader.loaded.connect(self._on_loaded)
        self.loader.failed.connect(self._on_failed)
        self.loader.loadingChanged.connect(self._on_loading)

    # ---- Behavior ----
    def period(self) -> ReportPeriod:
        return ReportPeriod(_to_date(self.dt_from.date()), _to_date(self.dt_to.date()))

    @Slot()
    def refresh(self) -> None:
        self.loader.load(self.period())

    def compute(self, period: ReportPeriod) -> Any:
        raise NotImplementedError

    def render(self, result: Any) -> None:
        raise NotImplementedError

    @Slot(object)
    def _on_loaded(self, result: Any) -> None:
        self.render(result)
        self.lbl_status.setText(self.period().label())

    @Slot(str)
    def _on_failed(self, message: str) -> None:
        self.lbl_status.setText(f"Could not load {self.TITLE.lower()}: {message}")

    @Slot(bool)
    def _on_loading(self, loading: bool) -> None:
        self.btn_refresh.setEnabled(not loading)
        if loading:
            self.lbl_status.setText("Loading…")


def _to_date(qd: QDate) -> date:
    return date(qd.year(), qd.month(), qd.day())


def summary_label(name: str) -> QLabel:
    lbl = QLabel("")
    lbl.setObjectName(name)
    return lbl
