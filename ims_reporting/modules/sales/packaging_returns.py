"""
Reusable packaging return rules.

A line is eligible for a packaging-only return when it was sold with a linked
reusable packaging item and a deposit was charged. The quantity returned in
one submission is bounded by what was sold minus what has already come back.
"""
from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING, Optional

from ...errors import PackagingReturnError
from ...utils.validators import as_number, try_parse_float

if TYPE_CHECKING:  # pragma: no cover
    from ...repositories.sales_repo import SaleLineItem

__all__ = [
    "is_return_eligible",
    "max_returnable",
    "validate_packaging_return",
    "deposit_refund",
    "apply_packaging_return",
]


def is_return_eligible(line: Optional["SaleLineItem"]) -> bool:
    return bool(
        line is not None
        and line.reusable_packaging_item_id_snapshot
        and as_number(line.packaging_deposit_charged) > 0
    )


def max_returnable(line: "SaleLineItem") -> float:
    """quantity - packaging_quantity_returned, never below zero."""
    left = as_number(line.quantity) - as_number(line.packaging_quantity_returned)
    return left if left > 0 else 0.0


def validate_packaging_return(line: Optional["SaleLineItem"], quantity) -> float:
    """
    Return the parsed quantity or raise PackagingReturnError.

    Checks, in order: the line exists, it carries a reusable packaging link,
    a deposit was charged, the quantity is a positive whole number within
    max_returnable.
    """
    if line is None:
        raise PackagingReturnError("Product item not found in this sale.")
    if not line.reusable_packaging_item_id_snapshot:
        raise PackagingReturnError("No reusable packaging was associated with this product item in the sale.")
    if as_number(line.packaging_deposit_charged) <= 0:
        raise PackagingReturnError("Packaging deposit was not charged for this product item.")

    ok, qty = try_parse_float(quantity)
    if not ok or qty is None or qty <= 0 or not qty.is_integer():
        raise PackagingReturnError("Quantity returned for packaging must be a positive whole number.")

    limit = max_returnable(line)
    if qty > limit:
        name = line.item_name or line.item_ref or "item"
        raise PackagingReturnError(
            f"Cannot return more packaging than outstanding for product '{name}'. "
            f"Max returnable: {limit:g}."
        )
    return qty


def deposit_refund(line: "SaleLineItem", quantity: float) -> float:
    return as_number(quantity) * as_number(line.packaging_deposit_charged)


def apply_packaging_return(line: "SaleLineItem", quantity) -> "SaleLineItem":
    """
    Validated copy of `line` with the return recorded. The fully-returned
    flag flips once every sold unit's packaging has come back.
    """
    qty = validate_packaging_return(line, quantity)
    returned = as_number(line.packaging_quantity_returned) + qty
    return replace(
        line,
        packaging_quantity_returned=returned,
        packaging_returned=returned >= as_number(line.quantity),
    )
