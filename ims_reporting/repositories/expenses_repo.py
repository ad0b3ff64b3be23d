from __future__ import annotations

"""
Operating expenses from `/expenses`.

Expenses are read-only for reporting: the list is filtered server side by
period/category/search and every row is coerced into an `ExpenseRecord`.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..constants import EP_EXPENSES
from ..utils.validators import as_number, parse_datetime
from .api_client import ApiClient


@dataclass
class ExpenseRecord:
    id: str
    date: datetime | None
    amount: float
    category: str
    description: str | None = None
    payee: str | None = None

    @classmethod
    def from_payload(cls, d: Dict[str, Any]) -> "ExpenseRecord":
        return cls(
            id=str(d.get("_id") or d.get("id") or ""),
            date=parse_datetime(d.get("date") or d.get("createdAt")),
            amount=as_number(d.get("amount")),
            category=str(d.get("category") or "").strip(),
            description=d.get("description"),
            payee=d.get("payee"),
        )


class ExpensesRepo:
    def __init__(self, api: ApiClient):
        self.api = api

    def list_expenses(self, params: Optional[Dict[str, Any]] = None) -> List[ExpenseRecord]:
        return [ExpenseRecord.from_payload(r) for r in self.api.fetch_all(EP_EXPENSES, params)]
