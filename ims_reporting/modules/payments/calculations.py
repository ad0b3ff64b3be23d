"""
payments/calculations.py

Pure helpers for sale payment previews and roll-ups. Mirrors the rules the
backend applies when a sale is saved:
- paymentStatus is derived from amountPaid vs totalAmount.
- a recorded payment must be positive and may not exceed the remaining balance.

Do not import repositories or perform I/O here.
Only compute numbers; formatting belongs in utils.helpers.
"""
from __future__ import annotations

from typing import Tuple

from ...constants import PAYMENT_PAID, PAYMENT_PARTIAL, PAYMENT_UNPAID
from ...errors import PaymentError
from ...utils.validators import as_number, try_parse_float

__all__ = [
    "remaining_balance",
    "status_from_paid",
    "validate_payment_amount",
    "project_sale_after_payment",
]


# -----------------------------
# Sales helpers
# -----------------------------

def remaining_balance(total_amount: float, amount_paid: float) -> float:
    """
    remaining = total_amount - amount_paid.

    Not clamped: an overpaid sale shows up as a negative balance rather than
    disappearing from the outstanding total.
    """
    return as_number(total_amount) - as_number(amount_paid)


def status_from_paid(total: float, paid: float) -> str:
    """
    Threshold helper for status badges:
      - 'Paid'    if paid >= total
      - 'Partial' if 0 < paid < total
      - 'Unpaid'  if paid == 0
    """
    total = as_number(total)
    paid = as_number(paid)
    if paid >= total:
        return PAYMENT_PAID
    if paid > 0:
        return PAYMENT_PARTIAL
    return PAYMENT_UNPAID


def validate_payment_amount(total_amount: float, amount_paid: float, amount) -> float:
    """
    Return the parsed payment amount, or raise PaymentError with the same
    wording the payment dialog uses.
    """
    ok, value = try_parse_float(amount)
    if not ok or value is None or value <= 0:
        raise PaymentError("Please enter a valid amount.")
    remaining = remaining_balance(total_amount, amount_paid)
    if value > remaining:
        raise PaymentError(
            f"Payment amount ({value:,.2f}) cannot exceed the remaining balance of {remaining:,.2f}."
        )
    return value


def project_sale_after_payment(
    *,
    total_amount: float,
    current_paid_amount: float,
    new_payment_amount: float,
) -> Tuple[float, str]:
    """
    Returns (projected_paid_amount, projected_status) for a payment preview.
    """
    projected_paid = as_number(current_paid_amount) + as_number(new_payment_amount)
    return projected_paid, status_from_paid(total_amount, projected_paid)
