# tests/test_sales_reports.py
import pytest

from ims_reporting.modules.reporting.sales_reports import (
    most_profitable_products,
    sale_anomalies,
    sales_by_payment_method,
    sales_over_time,
    sales_rows,
    sales_stats,
    top_customers,
    top_selling_products,
)


def test_single_partial_sale(builders):
    sale = builders.sale(totalAmount=10000, amountPaid=4000)
    assert sale.payment_status == "Partial"
    stats = sales_stats([sale])
    assert stats == {"total_revenue": 10000, "sales_count": 1, "total_outstanding_balance": 6000}


def test_outstanding_equals_total_minus_paid_without_clamping(builders):
    sales = [
        builders.sale(id="a", totalAmount=100, amountPaid=30),
        builders.sale(id="b", totalAmount=50, amountPaid=80),  # overpaid
        builders.sale(id="c", totalAmount="oops", amountPaid=None),
    ]
    stats = sales_stats(sales)
    assert stats["total_revenue"] == 150
    assert stats["total_outstanding_balance"] == 150 - 110
    assert stats["sales_count"] == 3


def test_empty_sales_are_all_zero():
    assert sales_stats([]) == {"total_revenue": 0.0, "sales_count": 0, "total_outstanding_balance": 0.0}
    assert sales_by_payment_method([]) == []
    assert sales_over_time([]) == []


def test_breakdowns(builders):
    sales = [
        builders.sale(id="a", totalAmount=300, paymentMethod="Cash", created_at="2025-01-02T10:00:00Z"),
        builders.sale(id="b", totalAmount=500, paymentMethod="Mobile Money", created_at="2025-01-01T09:00:00Z"),
        builders.sale(id="c", totalAmount=400, paymentMethod="Cash", created_at="2025-01-02T18:00:00Z"),
    ]
    by_method = sales_by_payment_method(sales)
    assert by_method[0] == {"method": "Cash", "total_amount": 700, "count": 2}
    assert sales_over_time(sales) == [
        {"date": "2025-01-01", "total_revenue": 500},
        {"date": "2025-01-02", "total_revenue": 700},
    ]
    assert [r["id"] for r in sales_rows(sales)] == ["c", "a", "b"]


def test_product_rankings(builders):
    a = builders.line(item="p1", name="Juice", quantity=10, price=100, costPriceSnapshot=90)
    b = builders.line(item="p2", name="Cake", quantity=2, price=1000, costPriceSnapshot=400)
    sale = builders.sale(items=[a, b])
    assert [r["name"] for r in most_profitable_products([sale])] == ["Cake", "Juice"]
    assert [r["name"] for r in top_selling_products([sale])] == ["Juice", "Cake"]
    assert most_profitable_products([sale], limit=1)[0]["total_profit"] == pytest.approx(1200)


def test_anomalies_are_reported_not_raised(builders):
    line = builders.line(quantity=2, price=100, packagingQuantityReturned=3, packagingReturned=False)
    sale = builders.sale(items=[line], totalAmount=150, amountPaid=200)
    problems = sale_anomalies(sale)
    assert any("exceeds total" in p for p in problems)
    assert any("does not match" in p for p in problems)
    assert any("More packaging returned" in p for p in problems)


def test_consistent_sale_has_no_anomalies(builders):
    line = builders.line(quantity=2, price=100, packagingIncluded=True, packagingDepositCharged=50)
    sale = builders.sale(items=[line], totalAmount=300, amountPaid=300, packagingDepositTotal=100)
    assert sale_anomalies(sale) == []


def test_top_customers_by_total_spent(builders):
    aline = {"_id": "c-1", "name": "Aline"}
    bosco = {"_id": "c-2", "name": "Bosco"}
    sales = [
        builders.sale(id="a", customer=aline, totalAmount=300),
        builders.sale(id="b", customer=bosco, totalAmount=500),
        builders.sale(id="c", customer=aline, totalAmount=400),
        builders.sale(id="walk-in", totalAmount=9999),
    ]
    rows = top_customers(sales)
    assert [(r["name"], r["total_spent"], r["sale_count"]) for r in rows] == [
        ("Aline", 700, 2),
        ("Bosco", 500, 1),
    ]


def test_top_customers_limit(builders):
    sales = [builders.sale(id=str(i), customer=f"c-{i}", totalAmount=i) for i in range(1, 8)]
    rows = top_customers(sales)
    assert [r["customer_ref"] for r in rows] == ["c-7", "c-6", "c-5", "c-4", "c-3"]
    assert rows[0]["name"] == "Unknown Customer"
