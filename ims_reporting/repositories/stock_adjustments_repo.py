from __future__ import annotations

"""
Stock write-offs (damaged, expired, lost, shrinkage, other) from `/stock-adjustments`.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..constants import ADJUSTMENT_TYPES, EP_STOCK_ADJUSTMENTS, EP_STOCK_ADJUSTMENTS_TOTAL
from ..utils.validators import as_number, parse_datetime, split_ref
from .api_client import ApiClient

_log = logging.getLogger(__name__)


@dataclass
class StockAdjustmentRecord:
    id: str
    item_ref: str | None
    item_name: str | None
    quantity: float
    type: str
    unit_cost_snapshot: float
    total_cost_impact: float
    reason: str = ""
    date: datetime | None = None

    @classmethod
    def from_payload(cls, d: Dict[str, Any]) -> "StockAdjustmentRecord":
        ref, name, _ = split_ref(d.get("item"))
        qty = as_number(d.get("quantity"))
        unit = as_number(d.get("unitCost", d.get("unitCostSnapshot")))
        raw_total = d.get("totalCostImpact")
        total = qty * unit if raw_total is None else as_number(raw_total)
        kind = str(d.get("type") or "other").strip().lower()
        if kind not in ADJUSTMENT_TYPES:
            _log.debug("Unknown adjustment type %r on %s", kind, d.get("_id"))
        return cls(
            id=str(d.get("_id") or d.get("id") or ""),
            item_ref=ref,
            item_name=d.get("itemName") or name,
            quantity=qty,
            type=kind,
            unit_cost_snapshot=unit,
            total_cost_impact=total,
            reason=str(d.get("reason") or ""),
            date=parse_datetime(d.get("date") or d.get("createdAt")),
        )


class StockAdjustmentsRepo:
    def __init__(self, api: ApiClient):
        self.api = api

    def list_adjustments(self, params: Optional[Dict[str, Any]] = None) -> List[StockAdjustmentRecord]:
        return [StockAdjustmentRecord.from_payload(r) for r in self.api.fetch_all(EP_STOCK_ADJUSTMENTS, params)]

    def total_impact(self, params: Optional[Dict[str, Any]] = None) -> Dict[str, float]:
        data = self.api.get_data(EP_STOCK_ADJUSTMENTS_TOTAL, params) or {}
        return {
            "total_cost_impact": as_number(data.get("totalCostImpact")),
            "total_quantity_adjusted": as_number(data.get("totalQuantityAdjusted")),
            "record_count": as_number(data.get("recordCount")),
        }
