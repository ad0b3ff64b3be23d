# ims_reporting/modules/reporting/expense_reports.py
from __future__ import annotations

from typing import Dict, Iterable, List

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QHBoxLayout, QSplitter, QVBoxLayout

from ...constants import UNCATEGORIZED
from ...repositories.expenses_repo import ExpenseRecord
from ...utils.helpers import format_currency
from ...widgets.table_view import TableView
from .model import ExpenseListTableModel, ExpenseSummaryTableModel
from .period import ReportPeriod
from .period_tab import PeriodReportTab, summary_label


# ------------------------------ Logic ---------------------------------------


def summarize_expenses(expenses: Iterable[ExpenseRecord]) -> dict:
    """
    Returns:
      {
        'total_operating_expenses': float,
        'expenses_by_category': [{'name': str, 'value': float}, ...]
      }
    Categories are ordered by value, largest first; equal values keep the
    order in which the category first appeared. Blank categories are
    reported as 'Uncategorized'.
    """
    totals: Dict[str, float] = {}
    grand = 0.0
    for e in expenses:
        name = (e.category or "").strip() or UNCATEGORIZED
        totals[name] = totals.get(name, 0.0) + e.amount
        grand += e.amount
    # sorted() is stable, dict keeps first-appearance order
    rows = sorted(
        ({"name": k, "value": v} for k, v in totals.items()),
        key=lambda r: r["value"],
        reverse=True,
    )
    return {"total_operating_expenses": grand, "expenses_by_category": rows}


def expense_rows(expenses: Iterable[ExpenseRecord]) -> List[dict]:
    """Rows for the lines table, newest first."""
    out = []
    for e in sorted(expenses, key=lambda x: x.date.timestamp() if x.date else float("-inf"), reverse=True):
        out.append(
            {
                "id": e.id,
                "date": e.date.strftime("%Y-%m-%d") if e.date else "",
                "category": e.category or UNCATEGORIZED,
                "description": e.description or "",
                "payee": e.payee or "",
                "amount": e.amount,
            }
        )
    return out


class ExpenseReports:
    """
    Thin logic layer for Expense reporting built on top of ReportingRepo.
    """

    def __init__(self, repo) -> None:
        self.repo = repo

    def build(self, period: ReportPeriod) -> dict:
        expenses = self.repo.expenses_for(period)
        summary = summarize_expenses(expenses)
        summary["rows"] = expense_rows(expenses)
        return summary


# ------------------------------ UI Tab --------------------------------------


class ExpenseReportsTab(PeriodReportTab):
    """
    Expense Reports UI:
      - Top table: summary by category (% computed in model)
      - Bottom table: raw expense lines
      - Footer: grand total label
    """

    TITLE = "Expense report"
    LOGIC = ExpenseReports

    def _build_body(self, root: QVBoxLayout) -> None:
        split = QSplitter(Qt.Vertical)
        split.setChildrenCollapsible(False)

        self.tbl_summary = TableView()
        split.addWidget(self.tbl_summary)
        self.tbl_lines = TableView()
        split.addWidget(self.tbl_lines)
        split.setStretchFactor(0, 2)
        split.setStretchFactor(1, 3)
        root.addWidget(split)

        footer = QHBoxLayout()
        footer.setContentsMargins(0, 0, 0, 0)
        footer.addStretch(1)
        self.lbl_total = summary_label("ExpenseGrandTotal")
        self.lbl_total.setText(f"Total: {format_currency(0)}")
        footer.addWidget(self.lbl_total)
        root.addLayout(footer)

        self.model_summary = ExpenseSummaryTableModel([])
        self.model_lines = ExpenseListTableModel([])
        self.tbl_summary.setModel(self.model_summary)
        self.tbl_lines.setModel(self.model_lines)

    def compute(self, period: ReportPeriod) -> dict:
        return self.logic.build(period)

    def render(self, result: dict) -> None:
        self.model_summary.set_rows(result["expenses_by_category"])
        self.model_lines.set_rows(result["rows"])
        self.tbl_summary.autosize()
        self.tbl_lines.autosize()
        self.lbl_total.setText(f"Total: {format_currency(result['total_operating_expenses'])}")
