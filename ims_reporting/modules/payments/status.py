from __future__ import annotations
from typing import Iterable, Optional

from ...constants import PAYMENT_STATUSES

# ---------- Canonical order (as sorted in sales tables) ----------
STATE_ORDER: dict[str, int] = {s.lower(): i for i, s in enumerate(PAYMENT_STATUSES)}

# ---------- Descriptions (tooltips) ----------
DESCRIPTIONS = {
    "unpaid":   "Nothing has been collected for this sale yet.",
    "partial":  "Part of the sale total has been collected; a balance is outstanding.",
    "paid":     "The sale total has been collected in full.",
    "refunded": "The sale was returned and its payment refunded.",
}

# Style tokens the table models map to cell colors
STYLES = {
    "unpaid":   {"badge": "danger",  "fg": "#991B1B", "bg": "#FEE2E2"},
    "partial":  {"badge": "warning", "fg": "#92400E", "bg": "#FEF3C7"},
    "paid":     {"badge": "success", "fg": "#065F46", "bg": "#D1FAE5"},
    "refunded": {"badge": "neutral", "fg": "#374151", "bg": "#F3F4F6"},
}

# ---------- API ----------

def normalize(state: Optional[str]) -> Optional[str]:
    """Lowercase & strip; return None if empty."""
    if state is None:
        return None
    s = str(state).strip().lower()
    return s or None


def is_valid(state: Optional[str]) -> bool:
    s = normalize(state)
    return s in STATE_ORDER if s is not None else False


def label(state: str) -> str:
    """Backend spelling ('Partial'); unknown values are title-cased."""
    s = normalize(state)
    for canonical in PAYMENT_STATUSES:
        if canonical.lower() == s:
            return canonical
    return (state or "").strip().title()


def description(state: str) -> str:
    return DESCRIPTIONS.get(normalize(state) or "", "")


def style_tokens(state: str) -> dict:
    """Unknown states fall back to the neutral style."""
    return STYLES.get(normalize(state) or "", STYLES["refunded"])


def sort_key(state: str) -> int:
    """Unknown states sort after known ones."""
    return STATE_ORDER.get(normalize(state) or "", 999)


def sort_states(states: Iterable[str]) -> list[str]:
    return sorted(states, key=sort_key)
