# ims_reporting/modules/reporting/financial_reports.py
from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Sequence

from PySide6.QtWidgets import QHBoxLayout, QVBoxLayout

from ...constants import SALE_RETURNED
from ...errors import ApiError
from ...repositories.expenses_repo import ExpenseRecord
from ...repositories.internal_use_repo import InternalUseRecord
from ...repositories.sales_repo import SaleRecord
from ...repositories.stock_adjustments_repo import StockAdjustmentRecord
from ...utils.helpers import format_currency, format_percent
from ...utils.validators import as_number
from ...widgets.table_view import TableView
from .circular_economy_reports import packaging_ledger
from .expense_reports import summarize_expenses
from .inventory_reports import internal_use_stats, stock_adjustment_stats
from .model import IncomeStatementTableModel
from .period import ReportPeriod
from .period_tab import PeriodReportTab, summary_label

_log = logging.getLogger(__name__)


# ------------------------------ Logic ---------------------------------------


def profit_and_loss(
    sales: Iterable[SaleRecord],
    expenses: Iterable[ExpenseRecord] = (),
    internal_uses: Iterable[InternalUseRecord] = (),
    adjustments: Iterable[StockAdjustmentRecord] = (),
) -> Dict:
    """
    Returns:
      {
        'total_revenue': float,              Σ(total_amount - packaging_deposit_total)
        'total_cogs': float,                 Σ line quantity * cost_price_snapshot
        'gross_profit': float,
        'total_operating_expenses': float,
        'expenses_by_category': [{'name', 'value'}, ...],
        'total_internal_use_cost': float,
        'total_stock_adjustment_loss': float,
        'net_profit': float,
        'gross_roi': float,                  percent; 0.0 when COGS is zero
        'sales_count': int,
      }
    Sales with status 'Returned' are left out. Packaging deposits are owed
    back to customers, so they never count as revenue.
    """
    revenue = 0.0
    cogs = 0.0
    count = 0
    for s in sales:
        if s.status == SALE_RETURNED:
            continue
        count += 1
        revenue += s.total_amount - s.packaging_deposit_total
        for line in s.items:
            cogs += line.quantity * line.cost_price_snapshot

    gross = revenue - cogs
    exp = summarize_expenses(expenses)
    use_cost = internal_use_stats(internal_uses)["total_value"]
    adj_loss = stock_adjustment_stats(adjustments)["total_cost_impact"]
    net = gross - exp["total_operating_expenses"] - use_cost - adj_loss

    return {
        "total_revenue": revenue,
        "total_cogs": cogs,
        "gross_profit": gross,
        "total_operating_expenses": exp["total_operating_expenses"],
        "expenses_by_category": exp["expenses_by_category"],
        "total_internal_use_cost": use_cost,
        "total_stock_adjustment_loss": adj_loss,
        "net_profit": net,
        "gross_roi": (gross / cogs * 100.0) if cogs else 0.0,
        "sales_count": count,
    }


def income_statement_rows(report: Dict) -> List[dict]:
    """
    Flatten a P&L dict into statement lines {line_item, amount, bold}.
    Expense categories are indented under Operating Expenses.
    """
    rows = [
        {"line_item": "Revenue (excl. packaging deposits)", "amount": report["total_revenue"]},
        {"line_item": "Cost of Goods Sold", "amount": report["total_cogs"]},
        {"line_item": "Gross Profit", "amount": report["gross_profit"], "bold": True},
        {"line_item": "Operating Expenses", "amount": report["total_operating_expenses"]},
    ]
    for cat in report.get("expenses_by_category", []):
        rows.append({"line_item": f"    {cat['name']}", "amount": cat["value"]})
    rows += [
        {"line_item": "Internal Use", "amount": report["total_internal_use_cost"]},
        {"line_item": "Stock Adjustment Losses", "amount": report["total_stock_adjustment_loss"]},
        {"line_item": "Net Profit", "amount": report["net_profit"], "bold": True},
    ]
    return rows


def reconcile(
    local: Dict,
    remote: Dict,
    keys: Optional[Sequence[str]] = None,
    tolerance: float = 0.01,
) -> List[dict]:
    """
    Compare locally derived totals against backend summaries. Returns one
    {key, local, remote, difference} row per key that differs by more than
    `tolerance`; keys missing on either side are skipped.
    """
    out = []
    for key in keys if keys is not None else sorted(set(local) & set(remote)):
        if key not in local or key not in remote:
            continue
        a = as_number(local[key])
        b = as_number(remote[key])
        if abs(a - b) > tolerance:
            out.append({"key": key, "local": a, "remote": b, "difference": a - b})
    return out


class FinancialReports:
    """
    Income statement for a period from the four record lists.
    """

    def __init__(self, repo, *, check_remote: bool = True) -> None:
        self.repo = repo
        self.check_remote = check_remote

    def build(self, period: ReportPeriod) -> Dict:
        bundle = self.repo.fetch_period_bundle(period)
        report = profit_and_loss(bundle.sales, bundle.expenses, bundle.internal_uses, bundle.adjustments)
        report["rows"] = income_statement_rows(report)
        report["mismatches"] = self._reconcile(period, report, bundle.sales) if self.check_remote else []
        return report

    def _reconcile(self, period: ReportPeriod, report: Dict, sales) -> List[dict]:
        try:
            remote = self.repo.remote_summaries(period)
        except ApiError as e:
            _log.warning("Skipping reconciliation for %s: %s", period.label(), e)
            return []
        ledger = packaging_ledger(sales)
        local = {
            "total_internal_use_cost": report["total_internal_use_cost"],
            "total_stock_adjustment_loss": report["total_stock_adjustment_loss"],
            "total_deposits_charged": ledger["total_deposits_charged"],
            "total_deposits_refunded": ledger["total_deposits_refunded"],
        }
        mismatches = reconcile(local, remote)
        for m in mismatches:
            _log.warning(
                "Reconciliation mismatch %s: local=%.2f remote=%.2f (%s)",
                m["key"], m["local"], m["remote"], period.label(),
            )
        return mismatches


# ------------------------------ UI Tab --------------------------------------


class FinancialReportsTab(PeriodReportTab):
    """
    Financials UI: income statement table with gross ROI and net profit.
    """

    TITLE = "Financial report"
    LOGIC = FinancialReports

    def _build_body(self, root: QVBoxLayout) -> None:
        head = QHBoxLayout()
        self.lbl_net = summary_label("NetProfit")
        self.lbl_roi = summary_label("GrossRoi")
        head.addWidget(self.lbl_net)
        head.addWidget(self.lbl_roi)
        head.addStretch(1)
        root.addLayout(head)

        self.tbl_stmt = TableView()
        self.model_stmt = IncomeStatementTableModel([])
        self.tbl_stmt.setModel(self.model_stmt)
        root.addWidget(self.tbl_stmt)

        self.lbl_recon = summary_label("ReconciliationNote")
        self.lbl_recon.setWordWrap(True)
        root.addWidget(self.lbl_recon)
        self._render_headline(profit_and_loss([]))

    def compute(self, period: ReportPeriod) -> Dict:
        return self.logic.build(period)

    def render(self, result: Dict) -> None:
        self._render_headline(result)
        self.model_stmt.set_rows(result["rows"])
        self.tbl_stmt.autosize()
        mismatches = result.get("mismatches") or []
        if mismatches:
            keys = ", ".join(m["key"] for m in mismatches)
            self.lbl_recon.setText(f"Totals differ from the server for: {keys}")
        else:
            self.lbl_recon.setText("")

    def _render_headline(self, report: Dict) -> None:
        self.lbl_net.setText(f"Net profit: {format_currency(report['net_profit'])}")
        self.lbl_roi.setText(f"Gross ROI: {format_percent(report['gross_roi'])}")
