# utils/validators.py
import math
from datetime import date, datetime


# ---- Numeric parsing ----

def try_parse_float(x):
    """
    Best-effort parse to a finite float.

    Returns:
        (ok: bool, value: float|None)

    ok == False means parsing failed (or produced NaN/inf) and value is None.
    """
    if isinstance(x, bool):
        return True, float(x)
    try:
        val = float(x)
    except (TypeError, ValueError):
        return False, None
    if math.isnan(val) or math.isinf(val):
        return False, None
    return True, val


def as_number(x, default: float = 0.0) -> float:
    """
    Lenient parse used at the API boundary and inside aggregations:
    None, blanks, NaN, infinities and garbage all become `default`.
    """
    ok, val = try_parse_float(x)
    return val if ok else default  # type: ignore[return-value]


def as_bool(x) -> bool:
    if isinstance(x, str):
        return x.strip().lower() in ("1", "true", "yes", "y")
    return bool(x)


# ---- Dates ----

def parse_datetime(value) -> datetime | None:
    """
    Parse an ISO-8601 timestamp as sent by the backend ('2025-01-10T08:30:00.000Z').
    Returns None for empty or unparseable values.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.strptime(text[:10], "%Y-%m-%d")
    except ValueError:
        return None


# ---- Populated references ----

def split_ref(value) -> tuple[str | None, str | None, str | None]:
    """
    The backend sends references either as a bare id or, when populated, as
    an object ({'_id', 'name', 'sku'}). Returns (id, name, sku).
    """
    if value is None or value == "":
        return None, None, None
    if isinstance(value, dict):
        rid = value.get("_id") or value.get("id")
        return (
            None if rid is None else str(rid),
            value.get("name"),
            value.get("sku") or value.get("itemSku"),
        )
    return str(value), None, None
