# ims_reporting/modules/reporting/controller.py
from __future__ import annotations

import logging
from typing import Dict, Optional

from PySide6.QtCore import Slot
from PySide6.QtWidgets import QTabWidget, QVBoxLayout, QWidget

from ...repositories.api_client import ApiClient
from ...repositories.reporting_repo import ReportingRepo
from ..base_module import BaseModule
from .circular_economy_reports import CircularEconomyReportsTab
from .expense_reports import ExpenseReportsTab
from .financial_reports import FinancialReportsTab
from .inventory_reports import InventoryReportsTab
from .sales_reports import SalesReportsTab

_log = logging.getLogger(__name__)


class ReportingController(BaseModule):
    """
    Tabbed Reporting module.

    Tabs (in order):
      1) Sales
      2) Expenses
      3) Inventory (internal use + adjustments)
      4) Circular Economy (packaging deposits)
      5) Financials (income statement)

    A tab is (re)loaded when it becomes current; loads run in the background
    so switching tabs never blocks the UI.
    """

    TABS = (
        ("sales", "Sales", SalesReportsTab),
        ("expenses", "Expenses", ExpenseReportsTab),
        ("inventory", "Inventory", InventoryReportsTab),
        ("circular_economy", "Circular Economy", CircularEconomyReportsTab),
        ("financials", "Financials", FinancialReportsTab),
    )

    def __init__(
        self,
        repo: Optional[ReportingRepo] = None,
        current_user: Optional[dict] = None,
        *,
        api: Optional[ApiClient] = None,
    ) -> None:
        super().__init__()
        self.repo = repo or ReportingRepo(api or ApiClient())
        self.user = current_user

        self._root = QWidget()
        self._root.setObjectName("ReportingModuleRoot")

        layout = QVBoxLayout(self._root)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        self.tabs = QTabWidget(self._root)
        self.tabs.setObjectName("ReportingTabs")
        self.tabs.setTabPosition(QTabWidget.North)
        self.tabs.setMovable(False)
        self.tabs.setDocumentMode(True)
        layout.addWidget(self.tabs)

        # Map for programmatic navigation if other modules need to open a specific tab
        self._key_to_index: Dict[str, int] = {}
        for key, title, cls in self.TABS:
            widget = cls(self.repo)
            widget.setObjectName(f"Reporting_{key}")
            self._key_to_index[key] = self.tabs.addTab(widget, title)

        self.tabs.currentChanged.connect(self._on_tab_changed)
        self._safe_refresh(self.tabs.currentWidget())

    def get_widget(self) -> QWidget:
        return self._root

    def refresh(self) -> None:
        self._safe_refresh(self.tabs.currentWidget())

    def tab(self, key: str) -> Optional[QWidget]:
        idx = self._key_to_index.get(key)
        return None if idx is None else self.tabs.widget(idx)

    @Slot(int)
    def _on_tab_changed(self, index: int) -> None:
        self._safe_refresh(self.tabs.widget(index))

    def _safe_refresh(self, widget: QWidget | None) -> None:
        """
        Start a load for `widget`. Failures starting the load are logged and
        the tab keeps whatever it showed before; load errors themselves are
        reported by the tab's status line.
        """
        if widget is None:
            return
        fn = getattr(widget, "refresh", None)
        if not callable(fn):
            return
        try:
            fn()
        except Exception as exc:
            _log.warning(
                "Reporting.refresh_failed widget=%s objectName=%s exc=%s",
                type(widget).__name__,
                widget.objectName(),
                exc,
                exc_info=True,
            )

    # Optional helper to jump to a tab by key from elsewhere in the app
    def open_sub(self, key: str) -> None:
        idx = self._key_to_index.get(key)
        if idx is not None and 0 <= idx < self.tabs.count():
            self.tabs.setCurrentIndex(idx)
