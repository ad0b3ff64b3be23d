from __future__ import annotations

"""
Sales records and the sales endpoints.

Payloads are coerced into `SaleRecord` / `SaleLineItem` once, here, so the
report calculators only ever see numbers: missing or malformed numeric
fields become 0.0 instead of propagating NaN into totals.
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..constants import (
    EP_PACKAGING_REPORT,
    EP_SALES,
    PACKAGING_NONE,
    PAYMENT_METHODS,
    SALE_COMPLETED,
)
from ..modules.payments.calculations import status_from_paid, validate_payment_amount
from ..modules.sales.packaging_returns import deposit_refund, validate_packaging_return
from ..utils.validators import as_bool, as_number, parse_datetime, split_ref
from .api_client import ApiClient

_log = logging.getLogger(__name__)


@dataclass
class SaleLineItem:
    item_ref: str | None
    quantity: float
    price: float
    cost_price_snapshot: float = 0.0
    item_name: str | None = None
    item_sku: str | None = None
    packaging_included: bool = False
    packaging_deposit_charged: float = 0.0
    packaging_quantity_returned: float = 0.0
    packaging_returned: bool = False
    reusable_packaging_item_id_snapshot: str | None = None
    packaging_type_snapshot: str = PACKAGING_NONE

    @classmethod
    def from_payload(cls, d: Dict[str, Any]) -> "SaleLineItem":
        ref, name, sku = split_ref(d.get("item"))
        reusable, _, _ = split_ref(d.get("reusablePackagingItemIdSnapshot"))
        cost = d.get("costPriceSnapshot", d.get("costPrice"))
        return cls(
            item_ref=ref,
            item_name=name or d.get("name") or d.get("itemName"),
            item_sku=sku or d.get("sku") or d.get("itemSku"),
            quantity=as_number(d.get("quantity")),
            price=as_number(d.get("price")),
            cost_price_snapshot=as_number(cost),
            packaging_included=as_bool(d.get("packagingIncluded")),
            packaging_deposit_charged=as_number(d.get("packagingDepositCharged")),
            packaging_quantity_returned=as_number(d.get("packagingQuantityReturned")),
            packaging_returned=as_bool(d.get("packagingReturned")),
            reusable_packaging_item_id_snapshot=reusable,
            packaging_type_snapshot=str(d.get("packagingTypeSnapshot") or PACKAGING_NONE),
        )

    @property
    def line_total(self) -> float:
        return self.quantity * self.price


@dataclass
class SaleRecord:
    id: str
    created_at: datetime | None
    items: List[SaleLineItem] = field(default_factory=list)
    total_amount: float = 0.0
    amount_paid: float = 0.0
    payment_status: str = ""
    payment_method: str = "Cash"
    packaging_deposit_total: float = 0.0
    packaging_returned_total: float = 0.0
    status: str = SALE_COMPLETED
    customer_ref: str | None = None
    customer_name: str | None = None
    receipt_number: str | None = None

    @classmethod
    def from_payload(cls, d: Dict[str, Any]) -> "SaleRecord":
        cust, cust_name, _ = split_ref(d.get("customer"))
        items = [SaleLineItem.from_payload(i) for i in (d.get("items") or []) if isinstance(i, dict)]
        total = as_number(d.get("totalAmount"))
        paid = as_number(d.get("amountPaid"))
        return cls(
            id=str(d.get("_id") or d.get("id") or ""),
            created_at=parse_datetime(d.get("createdAt")),
            items=items,
            total_amount=total,
            amount_paid=paid,
            payment_status=str(d.get("paymentStatus") or status_from_paid(total, paid)),
            payment_method=str(d.get("paymentMethod") or "Cash"),
            packaging_deposit_total=as_number(d.get("packagingDepositTotal")),
            packaging_returned_total=as_number(d.get("packagingReturnedTotal")),
            status=str(d.get("status") or SALE_COMPLETED),
            customer_ref=cust,
            customer_name=cust_name or d.get("customerName"),
            receipt_number=d.get("receiptNumber"),
        )

    @property
    def outstanding_balance(self) -> float:
        return self.total_amount - self.amount_paid

    def find_item(self, item_ref: str) -> Optional[SaleLineItem]:
        return next((i for i in self.items if i.item_ref == item_ref), None)


class SalesRepo:
    """
    Read + write access to `/sales`.

    Writes (payments, packaging returns) are validated locally first so the
    user gets the same message the backend would give, without a round trip.
    """

    def __init__(self, api: ApiClient):
        self.api = api

    # ---------------------------------------------------------------------
    # READ
    # ---------------------------------------------------------------------
    def list_sales(self, params: Optional[Dict[str, Any]] = None) -> List[SaleRecord]:
        rows = self.api.fetch_all(EP_SALES, params)
        return [SaleRecord.from_payload(r) for r in rows]

    def get_sale(self, sale_id: str) -> SaleRecord:
        return SaleRecord.from_payload(self.api.get_data(f"{EP_SALES}/{sale_id}"))

    def packaging_report(self, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Server-side circular economy summary, used to cross-check the local ledger."""
        return self.api.get_data(EP_PACKAGING_REPORT, params)

    # ---------------------------------------------------------------------
    # WRITE
    # ---------------------------------------------------------------------
    def record_payment(self, sale: SaleRecord, amount: float, method: str = "Cash") -> SaleRecord:
        validate_payment_amount(sale.total_amount, sale.amount_paid, amount)
        if method not in PAYMENT_METHODS:
            _log.info("record_payment: unusual payment method %r for sale %s", method, sale.id)
        body = self.api.post(
            f"{EP_SALES}/{sale.id}/record-payment",
            {"amount": float(amount), "paymentMethod": method},
        )
        data = body.get("data")
        if isinstance(data, dict):
            return SaleRecord.from_payload(data)
        paid = sale.amount_paid + float(amount)
        return replace(sale, amount_paid=paid, payment_status=status_from_paid(sale.total_amount, paid))

    def return_packaging(
        self,
        sale: SaleRecord,
        item_ref: str,
        quantity: float,
        refund_method: str = "Cash",
    ) -> SaleRecord:
        """
        Return reusable packaging (containers only) for one product line and
        refund its deposit. Raises PackagingReturnError before any request
        when the line is not eligible or the quantity is out of bounds.
        """
        line = sale.find_item(item_ref)
        qty = int(validate_packaging_return(line, quantity))
        refund = deposit_refund(line, qty)  # type: ignore[arg-type]
        _log.info(
            "Returning %s packaging unit(s) for sale %s item %s (refund %.2f)",
            qty, sale.id, item_ref, refund,
        )
        body = self.api.post(
            f"{EP_SALES}/{sale.id}/items/{item_ref}/return-packaging",
            {"quantityReturned": qty, "refundMethod": refund_method},
        )
        data = body.get("data")
        if isinstance(data, dict):
            return SaleRecord.from_payload(data)
        return self.get_sale(sale.id)
