# tests/test_financial_reports.py
import pytest

from ims_reporting.modules.reporting.financial_reports import income_statement_rows, profit_and_loss, reconcile


def test_empty_inputs_are_all_zero():
    r = profit_and_loss([], [], [], [])
    for key in ("total_revenue", "total_cogs", "gross_profit", "total_operating_expenses",
                "total_internal_use_cost", "total_stock_adjustment_loss", "net_profit", "gross_roi"):
        assert r[key] == 0.0
    assert r["expenses_by_category"] == []


def test_deposits_are_not_revenue_and_net_profit_identity(builders):
    line = builders.line(quantity=2, price=1000, costPriceSnapshot=600, packagingIncluded=True, packagingDepositCharged=100)
    sale = builders.sale(items=[line], totalAmount=2200, packagingDepositTotal=200)
    r = profit_and_loss(
        [sale],
        [builders.expense("Rent", 300)],
        [builders.internal_use(1, 50)],
        [builders.adjustment("damaged", 1, 20)],
    )
    assert r["total_revenue"] == 2000
    assert r["total_cogs"] == 1200
    assert r["gross_profit"] == 800
    assert r["net_profit"] == 800 - 300 - 50 - 20
    assert r["net_profit"] == (
        r["gross_profit"] - r["total_operating_expenses"] - r["total_internal_use_cost"] - r["total_stock_adjustment_loss"]
    )
    assert r["gross_roi"] == pytest.approx(800 / 1200 * 100)


def test_returned_sales_are_excluded(builders):
    kept = builders.sale(id="a", items=[builders.line(quantity=1, price=500, costPriceSnapshot=100)], totalAmount=500)
    gone = builders.sale(id="b", items=[builders.line(quantity=1, price=900, costPriceSnapshot=100)], totalAmount=900, status="Returned")
    r = profit_and_loss([kept, gone])
    assert r["total_revenue"] == 500
    assert r["total_cogs"] == 100
    assert r["sales_count"] == 1


def test_roi_is_zero_without_cogs(builders):
    sale = builders.sale(items=[builders.line(quantity=1, price=500, costPriceSnapshot=0)], totalAmount=500)
    assert profit_and_loss([sale])["gross_roi"] == 0.0


def test_income_statement_rows(builders):
    r = profit_and_loss([], [builders.expense("Rent", 10), builders.expense("Fuel", 5)])
    rows = income_statement_rows(r)
    labels = [row["line_item"] for row in rows]
    assert labels[0].startswith("Revenue")
    assert "    Rent" in labels and "    Fuel" in labels
    assert rows[-1] == {"line_item": "Net Profit", "amount": -15.0, "bold": True}


def test_reconcile_reports_only_real_differences():
    local = {"a": 100.0, "b": 50.0, "c": 1.0}
    remote = {"a": 100.004, "b": 45.0}
    assert reconcile(local, remote) == [{"key": "b", "local": 50.0, "remote": 45.0, "difference": 5.0}]
    assert reconcile(local, remote, keys=["c"]) == []
