# utils/helpers.py
"""
Display formatting for report figures.

All formatters are non-authoritative and never fail: None, NaN, infinities and
unparseable input render as zero so the UI never shows 'nan' or 'None'.
"""
import logging
from typing import Union, Optional

from ..config import CURRENCY_SYMBOL
from .validators import as_number, try_parse_float

NumberLike = Union[float, int, str, None]

_log = logging.getLogger(__name__)


def _group(x: float, max_places: int, *, trim: bool, thousands: str, decimal: str) -> str:
    text = f"{x:,.{max_places}f}"
    if trim and "." in text:
        text = text.rstrip("0").rstrip(".")
    if text in ("-0", "-0.00", "-0.000"):
        text = text[1:]
    if thousands != "," or decimal != ".":
        text = text.replace(",", "\0").replace(".", decimal).replace("\0", thousands)
    return text


def fmt_money(
    v: NumberLike,
    places: int = 2,
    *,
    strict: bool = False,
    sentinel: Optional[str] = None,
) -> str:
    """
    Format a number as money with thousands separators and a fixed number of decimals.
    Used by table cells where columns should line up.

    Behavior on parse failure:
      - By default renders as zero.
      - If `sentinel` is provided (e.g., "N/A"), returns that sentinel instead.
      - If `strict=True`, raises ValueError on parse failures.
    """
    ok, x = try_parse_float(v)
    if not ok:
        _log.debug("fmt_money: failed to parse %r as float", v)
        if strict:
            raise ValueError(f"Could not parse {v!r} as a number.")
        if sentinel is not None:
            return str(sentinel)
        x = 0.0
    return _group(x, places, trim=False, thousands=",", decimal=".")


def format_currency(
    amount: NumberLike,
    symbol: Optional[str] = None,
    *,
    thousands: str = ",",
    decimal: str = ".",
) -> str:
    """
    'Rwf 1,234.5' style: symbol prefix, grouped thousands, at most two decimals.
    """
    sym = CURRENCY_SYMBOL if symbol is None else symbol
    body = _group(as_number(amount), 2, trim=True, thousands=thousands, decimal=decimal)
    return f"{sym} {body}" if sym else body


def format_number(n: NumberLike, *, thousands: str = ",", decimal: str = ".") -> str:
    """Grouped number with at most three decimals ('12,345.678')."""
    return _group(as_number(n), 3, trim=True, thousands=thousands, decimal=decimal)


def format_percent(n: NumberLike) -> str:
    """Percentage with exactly two decimals ('12.50%'). Input is already in percent units."""
    return f"{_group(as_number(n), 2, trim=False, thousands=',', decimal='.')}%"
