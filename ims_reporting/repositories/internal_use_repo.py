from __future__ import annotations

"""
Stock consumed internally (staff meals, cleaning, samples) from `/internal-use`.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..constants import EP_INTERNAL_USE, EP_INTERNAL_USE_TOTAL
from ..utils.validators import as_number, parse_datetime, split_ref
from .api_client import ApiClient


@dataclass
class InternalUseRecord:
    id: str
    item_ref: str | None
    item_name: str | None
    quantity: float
    unit_price_snapshot: float
    total_value: float
    reason: str = ""
    date: datetime | None = None

    @classmethod
    def from_payload(cls, d: Dict[str, Any]) -> "InternalUseRecord":
        ref, name, _ = split_ref(d.get("item"))
        qty = as_number(d.get("quantity"))
        unit = as_number(d.get("unitPrice", d.get("unitPriceSnapshot")))
        raw_total = d.get("totalValue")
        # older records predate the stored total
        total = qty * unit if raw_total is None else as_number(raw_total)
        return cls(
            id=str(d.get("_id") or d.get("id") or ""),
            item_ref=ref,
            item_name=d.get("itemName") or name,
            quantity=qty,
            unit_price_snapshot=unit,
            total_value=total,
            reason=str(d.get("reason") or ""),
            date=parse_datetime(d.get("date") or d.get("createdAt")),
        )


class InternalUseRepo:
    def __init__(self, api: ApiClient):
        self.api = api

    def list_records(self, params: Optional[Dict[str, Any]] = None) -> List[InternalUseRecord]:
        return [InternalUseRecord.from_payload(r) for r in self.api.fetch_all(EP_INTERNAL_USE, params)]

    def total_value(self, params: Optional[Dict[str, Any]] = None) -> Dict[str, float]:
        """Server-side {totalValue, totalQuantity, recordCount}, coerced to numbers."""
        data = self.api.get_data(EP_INTERNAL_USE_TOTAL, params) or {}
        return {
            "total_value": as_number(data.get("totalValue")),
            "total_quantity": as_number(data.get("totalQuantity")),
            "record_count": as_number(data.get("recordCount")),
        }
