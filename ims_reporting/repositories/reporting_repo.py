from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from ..modules.reporting.period import ReportPeriod
from ..utils.validators import as_number
from .api_client import ApiClient
from .expenses_repo import ExpenseRecord, ExpensesRepo
from .internal_use_repo import InternalUseRecord, InternalUseRepo
from .sales_repo import SaleRecord, SalesRepo
from .stock_adjustments_repo import StockAdjustmentRecord, StockAdjustmentsRepo


@dataclass
class PeriodRecords:
    period: ReportPeriod
    sales: List[SaleRecord] = field(default_factory=list)
    expenses: List[ExpenseRecord] = field(default_factory=list)
    internal_uses: List[InternalUseRecord] = field(default_factory=list)
    adjustments: List[StockAdjustmentRecord] = field(default_factory=list)


class ReportingRepo:
    """
    Read-only access for the Reporting tabs.

    Every list is requested with the same `startDate`/`endDate` params, then
    filtered again locally with `ReportPeriod.filter` so a backend that
    ignores the range cannot leak out-of-period rows into the totals.
    """

    def __init__(self, api: ApiClient) -> None:
        self.api = api
        self.sales = SalesRepo(api)
        self.expenses = ExpensesRepo(api)
        self.internal_use = InternalUseRepo(api)
        self.adjustments = StockAdjustmentsRepo(api)

    # ----------------------------------------------------------------------
    # ------------------------------ RECORDS -------------------------------
    # ----------------------------------------------------------------------

    def sales_for(self, period: ReportPeriod) -> List[SaleRecord]:
        return period.filter(self.sales.list_sales(period.to_params()), "created_at")

    def expenses_for(self, period: ReportPeriod) -> List[ExpenseRecord]:
        return period.filter(self.expenses.list_expenses(period.to_params()))

    def internal_uses_for(self, period: ReportPeriod) -> List[InternalUseRecord]:
        return period.filter(self.internal_use.list_records(period.to_params()))

    def adjustments_for(self, period: ReportPeriod) -> List[StockAdjustmentRecord]:
        return period.filter(self.adjustments.list_adjustments(period.to_params()))

    def fetch_period_bundle(self, period: ReportPeriod) -> PeriodRecords:
        return PeriodRecords(
            period=period,
            sales=self.sales_for(period),
            expenses=self.expenses_for(period),
            internal_uses=self.internal_uses_for(period),
            adjustments=self.adjustments_for(period),
        )

    # ----------------------------------------------------------------------
    # ------------------------- SERVER SUMMARIES ---------------------------
    # ----------------------------------------------------------------------

    def remote_summaries(self, period: ReportPeriod) -> Dict[str, float]:
        """
        Backend-computed totals keyed like the local aggregates, for
        `financial_reports.reconcile`.
        """
        params = period.to_params()
        use = self.internal_use.total_value(params)
        adj = self.adjustments.total_impact(params)
        pkg = self.sales.packaging_report(params) or {}

        return {
            "total_internal_use_cost": use["total_value"],
            "total_stock_adjustment_loss": adj["total_cost_impact"],
            "total_deposits_charged": as_number(pkg.get("totalDepositsCharged")),
            "total_deposits_refunded": as_number(pkg.get("totalDepositsRefunded")),
        }
