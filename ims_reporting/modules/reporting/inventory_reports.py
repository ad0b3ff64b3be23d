# ims_reporting/modules/reporting/inventory_reports.py
from __future__ import annotations

from typing import Dict, Iterable, List

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QHBoxLayout, QSplitter, QVBoxLayout

from ...constants import ADJUSTMENT_TYPES
from ...repositories.internal_use_repo import InternalUseRecord
from ...repositories.stock_adjustments_repo import StockAdjustmentRecord
from ...utils.helpers import format_currency, format_number
from ...widgets.table_view import TableView
from .model import AdjustmentTypeTableModel, InventoryMovementTableModel
from .period import ReportPeriod
from .period_tab import PeriodReportTab, summary_label


# ------------------------------ Logic ---------------------------------------


def internal_use_stats(records: Iterable[InternalUseRecord]) -> dict:
    """{total_value, total_quantity, record_count}"""
    value = qty = 0.0
    count = 0
    for r in records:
        value += r.total_value
        qty += r.quantity
        count += 1
    return {"total_value": value, "total_quantity": qty, "record_count": count}


def stock_adjustment_stats(records: Iterable[StockAdjustmentRecord], by_type: bool = False) -> dict:
    """
    {total_cost_impact, total_quantity_adjusted, record_count}
    plus, when `by_type`, a 'by_type' list with one row per adjustment type
    seen (known types in their usual order, unknown ones after).
    """
    impact = qty = 0.0
    count = 0
    groups: Dict[str, dict] = {}
    for r in records:
        impact += r.total_cost_impact
        qty += r.quantity
        count += 1
        if by_type:
            g = groups.setdefault(
                r.type,
                {"type": r.type, "total_cost_impact": 0.0, "total_quantity": 0.0, "record_count": 0},
            )
            g["total_cost_impact"] += r.total_cost_impact
            g["total_quantity"] += r.quantity
            g["record_count"] += 1

    out = {"total_cost_impact": impact, "total_quantity_adjusted": qty, "record_count": count}
    if by_type:
        order = {t: i for i, t in enumerate(ADJUSTMENT_TYPES)}
        out["by_type"] = sorted(groups.values(), key=lambda g: order.get(g["type"], len(order)))
    return out


def movement_rows(
    internal_uses: Iterable[InternalUseRecord],
    adjustments: Iterable[StockAdjustmentRecord],
) -> List[dict]:
    """Internal use and write-offs in one list, newest first."""
    rows = []
    for u in internal_uses:
        rows.append(
            {
                "when": u.date,
                "kind": "Internal use",
                "item_name": u.item_name or "",
                "quantity": u.quantity,
                "value": u.total_value,
                "reason": u.reason,
            }
        )
    for a in adjustments:
        rows.append(
            {
                "when": a.date,
                "kind": f"Adjustment ({a.type})",
                "item_name": a.item_name or "",
                "quantity": a.quantity,
                "value": a.total_cost_impact,
                "reason": a.reason,
            }
        )
    rows.sort(key=lambda r: r["when"].timestamp() if r["when"] else float("-inf"), reverse=True)
    for r in rows:
        when = r.pop("when")
        r["date"] = when.strftime("%Y-%m-%d") if when else ""
    return rows


class InventoryReports:
    """
    Stock consumed outside of sales: internal use and adjustments.
    """

    def __init__(self, repo) -> None:
        self.repo = repo

    def build(self, period: ReportPeriod) -> dict:
        uses = self.repo.internal_uses_for(period)
        adjustments = self.repo.adjustments_for(period)
        return {
            "internal_use": internal_use_stats(uses),
            "adjustments": stock_adjustment_stats(adjustments, by_type=True),
            "rows": movement_rows(uses, adjustments),
        }


# ------------------------------ UI Tab --------------------------------------


class InventoryReportsTab(PeriodReportTab):
    TITLE = "Inventory report"
    LOGIC = InventoryReports

    def _build_body(self, root: QVBoxLayout) -> None:
        head = QHBoxLayout()
        self.lbl_internal = summary_label("InternalUseTotal")
        self.lbl_adjust = summary_label("AdjustmentTotal")
        head.addWidget(self.lbl_internal)
        head.addWidget(self.lbl_adjust)
        head.addStretch(1)
        root.addLayout(head)

        split = QSplitter(Qt.Vertical)
        split.setChildrenCollapsible(False)
        self.tbl_types = TableView()
        self.tbl_moves = TableView()
        split.addWidget(self.tbl_types)
        split.addWidget(self.tbl_moves)
        split.setStretchFactor(0, 1)
        split.setStretchFactor(1, 3)
        root.addWidget(split)

        self.model_types = AdjustmentTypeTableModel([])
        self.model_moves = InventoryMovementTableModel([])
        self.tbl_types.setModel(self.model_types)
        self.tbl_moves.setModel(self.model_moves)
        self._render_totals(internal_use_stats([]), stock_adjustment_stats([]))

    def compute(self, period: ReportPeriod) -> dict:
        return self.logic.build(period)

    def render(self, result: dict) -> None:
        self._render_totals(result["internal_use"], result["adjustments"])
        self.model_types.set_rows(result["adjustments"].get("by_type", []))
        self.model_moves.set_rows(result["rows"])
        self.tbl_types.autosize()
        self.tbl_moves.autosize()

    def _render_totals(self, use: dict, adj: dict) -> None:
        self.lbl_internal.setText(
            f"Internal use: {format_currency(use['total_value'])} "
            f"({format_number(use['total_quantity'])} units, {use['record_count']} records)"
        )
        self.lbl_adjust.setText(
            f"Adjustments: {format_currency(adj['total_cost_impact'])} "
            f"({format_number(adj['total_quantity_adjusted'])} units, {adj['record_count']} records)"
        )
