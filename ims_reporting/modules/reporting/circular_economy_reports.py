# ims_reporting/modules/reporting/circular_economy_reports.py
"""
Packaging deposit ledger ("circular economy" report).

Deposits charged on packaging are a liability owed back to customers, not
revenue. The ledger sums what was charged and what was refunded per product
and reports the outstanding balance as a plain difference: it is never
clamped, so refunds exceeding charges show up as a negative outstanding
amount and in `over_refunded_items` instead of being hidden.
"""
from __future__ import annotations

import logging
from typing import Dict, Iterable, List

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QHBoxLayout, QSplitter, QVBoxLayout

from ...constants import OTHER_PACKAGING_TYPES
from ...repositories.sales_repo import SaleLineItem, SaleRecord
from ...utils.helpers import format_currency
from ...widgets.table_view import TableView
from .model import DepositsChargedTableModel, DepositsRefundedTableModel, OtherPackagingTableModel
from .period import ReportPeriod
from .period_tab import PeriodReportTab, summary_label

_log = logging.getLogger(__name__)


def _item_key(line: SaleLineItem) -> str:
    return line.item_ref or line.item_name or ""


def packaging_ledger(sales: Iterable[SaleRecord]) -> dict:
    charged: Dict[str, dict] = {}
    refunded: Dict[str, dict] = {}
    other: Dict[str, float] = {}
    issued: Dict[str, float] = {}
    received: Dict[str, float] = {}

    for sale in sales:
        for line in sale.items:
            key = _item_key(line)

            if line.packaging_included:
                row = charged.setdefault(
                    key,
                    {
                        "item_ref": line.item_ref,
                        "item_name": line.item_name or "Unknown Item",
                        "sku": line.item_sku or "N/A",
                        "packaging_type_snapshot": line.packaging_type_snapshot,
                        "total_charged_quantity": 0.0,
                        "total_charged_deposit": 0.0,
                    },
                )
                row["total_charged_quantity"] += line.quantity
                row["total_charged_deposit"] += line.quantity * line.packaging_deposit_charged

                if line.packaging_quantity_returned > 0:
                    back = refunded.setdefault(
                        key,
                        {
                            "item_ref": line.item_ref,
                            "item_name": line.item_name or "Unknown Item",
                            "sku": line.item_sku or "N/A",
                            "total_returned_quantity": 0.0,
                            "total_refunded_deposit": 0.0,
                        },
                    )
                    back["total_returned_quantity"] += line.packaging_quantity_returned
                    back["total_refunded_deposit"] += line.packaging_quantity_returned * line.packaging_deposit_charged

            if line.packaging_type_snapshot in OTHER_PACKAGING_TYPES:
                t = line.packaging_type_snapshot
                other[t] = other.get(t, 0.0) + line.quantity

            container = line.reusable_packaging_item_id_snapshot
            if container:
                issued[container] = issued.get(container, 0.0) + line.quantity
                if line.packaging_quantity_returned > 0:
                    received[container] = received.get(container, 0.0) + line.packaging_quantity_returned

    total_charged = sum(r["total_charged_deposit"] for r in charged.values())
    total_refunded = sum(r["total_refunded_deposit"] for r in refunded.values())

    over = [
        k for k, r in refunded.items()
        if r["total_refunded_deposit"] > charged.get(k, {}).get("total_charged_deposit", 0.0)
    ]
    if over:
        _log.warning("Packaging refunds exceed deposits charged for %d item(s): %s", len(over), over)

    other_total = sum(other.values())
    other_rows = [
        {
            "type": t,
            "total_quantity": other[t],
            "percent": (other[t] / other_total * 100.0) if other_total else 0.0,
        }
        for t in OTHER_PACKAGING_TYPES
        if t in other
    ]

    return {
        "total_deposits_charged": total_charged,
        "total_deposits_refunded": total_refunded,
        "outstanding_deposits": total_charged - total_refunded,
        "deposits_charged_details": list(charged.values()),
        "deposits_refunded_details": list(refunded.values()),
        "other_packaging_sold": other_rows,
        "reusable_packaging_issued": [
            {"packaging_item_ref": k, "total_issued_quantity": v} for k, v in issued.items()
        ],
        "reusable_packaging_returned": [
            {"packaging_item_ref": k, "total_received_quantity": v} for k, v in received.items()
        ],
        "over_refunded_items": over,
    }


class CircularEconomyReports:
    def __init__(self, repo) -> None:
        self.repo = repo

    def build(self, period: ReportPeriod) -> dict:
        return packaging_ledger(self.repo.sales_for(period))


# ------------------------------ UI Tab --------------------------------------


class CircularEconomyReportsTab(PeriodReportTab):
    """
    Packaging deposits charged vs. refunded, plus non-deposit packaging sold.
    """

    TITLE = "Circular economy report"
    LOGIC = CircularEconomyReports

    def _build_body(self, root: QVBoxLayout) -> None:
        head = QHBoxLayout()
        self.lbl_charged = summary_label("DepositsCharged")
        self.lbl_refunded = summary_label("DepositsRefunded")
        self.lbl_outstanding = summary_label("DepositsOutstanding")
        for w in (self.lbl_charged, self.lbl_refunded, self.lbl_outstanding):
            head.addWidget(w)
        head.addStretch(1)
        root.addLayout(head)

        split = QSplitter(Qt.Vertical)
        split.setChildrenCollapsible(False)
        self.tbl_charged = TableView()
        self.tbl_refunded = TableView()
        self.tbl_other = TableView()
        for tv in (self.tbl_charged, self.tbl_refunded, self.tbl_other):
            split.addWidget(tv)
        root.addWidget(split)

        self.model_charged = DepositsChargedTableModel([])
        self.model_refunded = DepositsRefundedTableModel([])
        self.model_other = OtherPackagingTableModel([])
        self.tbl_charged.setModel(self.model_charged)
        self.tbl_refunded.setModel(self.model_refunded)
        self.tbl_other.setModel(self.model_other)
        self._render_totals(packaging_ledger([]))

    def compute(self, period: ReportPeriod) -> dict:
        return self.logic.build(period)

    def render(self, result: dict) -> None:
        self._render_totals(result)
        self.model_charged.set_rows(result["deposits_charged_details"])
        self.model_refunded.set_rows(result["deposits_refunded_details"])
        self.model_other.set_rows(result["other_packaging_sold"])
        for tv in (self.tbl_charged, self.tbl_refunded, self.tbl_other):
            tv.autosize()

    def _render_totals(self, ledger: dict) -> None:
        self.lbl_charged.setText(f"Charged: {format_currency(ledger['total_deposits_charged'])}")
        self.lbl_refunded.setText(f"Refunded: {format_currency(ledger['total_deposits_refunded'])}")
        text = f"Outstanding: {format_currency(ledger['outstanding_deposits'])}"
        if ledger["over_refunded_items"]:
            text += "  (refunds exceed deposits for some items)"
        self.lbl_outstanding.setText(text)
