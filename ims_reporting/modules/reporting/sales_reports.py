# ims_reporting/modules/reporting/sales_reports.py
from __future__ import annotations

from collections import defaultdict
from typing import Dict, Iterable, List

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QHBoxLayout, QSplitter, QVBoxLayout

from ...constants import SALE_RETURNED
from ...repositories.reporting_repo import ReportingRepo
from ...repositories.sales_repo import SaleRecord
from ...utils.helpers import format_currency, format_number
from ...widgets.table_view import TableView
from .model import (
    PaymentMethodTableModel,
    ProductPerformanceTableModel,
    SalesListTableModel,
    TopCustomersTableModel,
)
from .period import ReportPeriod
from .period_tab import PeriodReportTab, summary_label

UNKNOWN_PAYMENT_METHOD = "Other/Unknown Payment"


# ------------------------------ Logic ---------------------------------------


def sales_stats(sales: Iterable[SaleRecord]) -> Dict[str, float]:
    """
    {total_revenue, sales_count, total_outstanding_balance}

    The outstanding balance is summed per sale without clamping, so it always
    equals Σ total_amount - Σ amount_paid.
    """
    revenue = 0.0
    paid = 0.0
    count = 0
    for s in sales:
        revenue += s.total_amount
        paid += s.amount_paid
        count += 1
    return {
        "total_revenue": revenue,
        "sales_count": count,
        "total_outstanding_balance": revenue - paid,
    }


def sales_by_payment_method(sales: Iterable[SaleRecord]) -> List[dict]:
    """Rows {method, total_amount, count}, largest total first."""
    totals: Dict[str, float] = defaultdict(float)
    counts: Dict[str, int] = defaultdict(int)
    for s in sales:
        method = s.payment_method or UNKNOWN_PAYMENT_METHOD
        totals[method] += s.total_amount
        counts[method] += 1
    rows = [{"method": m, "total_amount": totals[m], "count": counts[m]} for m in totals]
    rows.sort(key=lambda r: r["total_amount"], reverse=True)
    return rows


def sales_over_time(sales: Iterable[SaleRecord]) -> List[dict]:
    """Per-day revenue {date: 'YYYY-MM-DD', total_revenue}, oldest first. Undated sales are skipped."""
    by_day: Dict[str, float] = defaultdict(float)
    for s in sales:
        if s.created_at is None:
            continue
        by_day[s.created_at.date().isoformat()] += s.total_amount
    return [{"date": d, "total_revenue": by_day[d]} for d in sorted(by_day)]


def _product_rollup(sales: Iterable[SaleRecord]) -> Dict[str, dict]:
    out: Dict[str, dict] = {}
    for s in sales:
        for line in s.items:
            key = line.item_ref or line.item_name or ""
            row = out.setdefault(
                key,
                {
                    "item_ref": line.item_ref,
                    "name": line.item_name or "Unknown Item",
                    "sku": line.item_sku or "N/A",
                    "total_quantity_sold": 0.0,
                    "total_profit": 0.0,
                },
            )
            row["total_quantity_sold"] += line.quantity
            row["total_profit"] += line.quantity * (line.price - line.cost_price_snapshot)
    return out


def most_profitable_products(sales: Iterable[SaleRecord], limit: int = 5) -> List[dict]:
    rows = sorted(_product_rollup(sales).values(), key=lambda r: r["total_profit"], reverse=True)
    return rows[:limit]


def top_selling_products(sales: Iterable[SaleRecord], limit: int = 5) -> List[dict]:
    rows = sorted(_product_rollup(sales).values(), key=lambda r: r["total_quantity_sold"], reverse=True)
    return rows[:limit]


def top_customers(sales: Iterable[SaleRecord], limit: int = 5) -> List[dict]:
    """
    Rows {customer_ref, name, total_spent, sale_count}, biggest spender first.
    Walk-in sales (no customer) are left out.
    """
    out: Dict[str, dict] = {}
    for s in sales:
        if not s.customer_ref:
            continue
        row = out.setdefault(
            s.customer_ref,
            {
                "customer_ref": s.customer_ref,
                "name": s.customer_name or "Unknown Customer",
                "total_spent": 0.0,
                "sale_count": 0,
            },
        )
        row["total_spent"] += s.total_amount
        row["sale_count"] += 1
    rows = sorted(out.values(), key=lambda r: r["total_spent"], reverse=True)
    return rows[:limit]


def sale_anomalies(sale: SaleRecord, tolerance: float = 0.005) -> List[str]:
    """
    Human-readable list of sale and line consistency problems. Never raises;
    an empty list means the record is consistent.
    """
    problems: List[str] = []
    if sale.amount_paid > sale.total_amount + tolerance:
        problems.append(
            f"Amount paid ({sale.amount_paid:,.2f}) exceeds total ({sale.total_amount:,.2f})."
        )
    lines_total = sum(i.line_total for i in sale.items)
    expected = lines_total + sale.packaging_deposit_total
    if sale.items and abs(expected - sale.total_amount) > tolerance:
        problems.append(
            f"Total ({sale.total_amount:,.2f}) does not match items plus deposits ({expected:,.2f})."
        )
    for i in sale.items:
        name = i.item_name or i.item_ref or "item"
        if i.packaging_quantity_returned > i.quantity:
            problems.append(f"More packaging returned than sold for '{name}'.")
        fully = i.quantity > 0 and i.packaging_quantity_returned == i.quantity
        if i.packaging_returned != fully:
            problems.append(f"Packaging returned flag is inconsistent for '{name}'.")
    return problems


def sales_rows(sales: Iterable[SaleRecord]) -> List[dict]:
    """Flatten sales for the list table, newest first."""
    out = []
    for s in sorted(sales, key=lambda x: x.created_at.timestamp() if x.created_at else float("-inf"), reverse=True):
        out.append(
            {
                "id": s.id,
                "date": s.created_at.strftime("%Y-%m-%d %H:%M") if s.created_at else "",
                "receipt_number": s.receipt_number or "",
                "customer": s.customer_name or "Walk-in",
                "total_amount": s.total_amount,
                "amount_paid": s.amount_paid,
                "balance": s.outstanding_balance,
                "payment_status": s.payment_status,
                "payment_method": s.payment_method,
                "status": s.status,
                "anomalies": sale_anomalies(s),
            }
        )
    return out


class SalesReports:
    """
    Thin logic layer for Sales reporting built on top of ReportingRepo.
    """

    def __init__(self, repo: ReportingRepo) -> None:
        self.repo = repo

    def build(self, period: ReportPeriod) -> dict:
        sales = self.repo.sales_for(period)
        # returned sales stay in the list but not in the product rankings
        kept = [s for s in sales if s.status != SALE_RETURNED]
        return {
            "stats": sales_stats(sales),
            "rows": sales_rows(sales),
            "by_payment_method": sales_by_payment_method(sales),
            "over_time": sales_over_time(sales),
            "most_profitable": most_profitable_products(kept),
            "top_selling": top_selling_products(kept),
            "top_customers": top_customers(sales),
        }


# ------------------------------ UI Tab --------------------------------------


class SalesReportsTab(PeriodReportTab):
    """
    Sales Reports UI:
      - Summary line: revenue, number of sales, outstanding balance
      - Top: sales list (payment status colored)
      - Bottom: by payment method | top products | top customers
    """

    TITLE = "Sales report"
    LOGIC = SalesReports

    def _build_body(self, root: QVBoxLayout) -> None:
        head = QHBoxLayout()
        self.lbl_revenue = summary_label("SalesRevenue")
        self.lbl_count = summary_label("SalesCount")
        self.lbl_outstanding = summary_label("SalesOutstanding")
        for w in (self.lbl_revenue, self.lbl_count, self.lbl_outstanding):
            head.addWidget(w)
        head.addStretch(1)
        root.addLayout(head)

        split = QSplitter(Qt.Vertical)
        split.setChildrenCollapsible(False)
        self.tbl_sales = TableView()
        split.addWidget(self.tbl_sales)

        lower = QSplitter(Qt.Horizontal)
        self.tbl_methods = TableView()
        self.tbl_products = TableView()
        self.tbl_customers = TableView()
        lower.addWidget(self.tbl_methods)
        lower.addWidget(self.tbl_products)
        lower.addWidget(self.tbl_customers)
        split.addWidget(lower)
        split.setStretchFactor(0, 3)
        split.setStretchFactor(1, 2)
        root.addWidget(split)

        self.model_sales = SalesListTableModel([])
        self.model_methods = PaymentMethodTableModel([])
        self.model_products = ProductPerformanceTableModel([])
        self.model_customers = TopCustomersTableModel([])
        self.tbl_sales.setModel(self.model_sales)
        self.tbl_methods.setModel(self.model_methods)
        self.tbl_products.setModel(self.model_products)
        self.tbl_customers.setModel(self.model_customers)
        self._render_stats(sales_stats([]))

    def compute(self, period: ReportPeriod) -> dict:
        return self.logic.build(period)

    def render(self, result: dict) -> None:
        self._render_stats(result["stats"])
        self.model_sales.set_rows(result["rows"])
        self.model_methods.set_rows(result["by_payment_method"])
        self.model_products.set_rows(result["most_profitable"])
        self.model_customers.set_rows(result["top_customers"])
        for tv in (self.tbl_sales, self.tbl_methods, self.tbl_products, self.tbl_customers):
            tv.autosize()

    def _render_stats(self, stats: dict) -> None:
        self.lbl_revenue.setText(f"Revenue: {format_currency(stats['total_revenue'])}")
        self.lbl_count.setText(f"Sales: {format_number(stats['sales_count'])}")
        self.lbl_outstanding.setText(f"Outstanding: {format_currency(stats['total_outstanding_balance'])}")


__all__ = [
    "sales_stats",
    "sales_by_payment_method",
    "sales_over_time",
    "most_profitable_products",
    "top_selling_products",
    "top_customers",
    "sale_anomalies",
    "sales_rows",
    "SalesReports",
    "SalesReportsTab",
]
