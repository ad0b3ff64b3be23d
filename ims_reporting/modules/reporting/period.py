from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class ReportPeriod:
    """
    Date range a report covers. Both bounds are inclusive at day granularity:
    `end` runs until the end of that day. A None bound is open on that side.
    """

    start: Optional[date] = None
    end: Optional[date] = None

    def __post_init__(self) -> None:
        # accept datetimes, keep only the calendar day
        if isinstance(self.start, datetime):
            object.__setattr__(self, "start", self.start.date())
        if isinstance(self.end, datetime):
            object.__setattr__(self, "end", self.end.date())

    @classmethod
    def last_days(cls, days: int, today: Optional[date] = None) -> "ReportPeriod":
        """The last `days` calendar days up to and including today."""
        end = today or date.today()
        return cls(end - timedelta(days=max(days, 1) - 1), end)

    @property
    def is_open(self) -> bool:
        return self.start is None and self.end is None

    def contains(self, when) -> bool:
        """
        Records without a date only match a fully open period.
        """
        if when is None:
            return self.is_open
        day = when.date() if isinstance(when, datetime) else when
        if self.start is not None and day < self.start:
            return False
        if self.end is not None and day > self.end:
            return False
        return True

    def filter(self, records: Iterable[T], attr: str = "date") -> List[T]:
        return [r for r in records if self.contains(getattr(r, attr, None))]

    def to_params(self) -> dict:
        """
        Query params understood by every list/summary endpoint.

        The backend compares `$lte new Date(endDate)`, and a bare date parses
        as midnight UTC, so the end bound is sent as the last millisecond of
        that day.
        """
        params = {}
        if self.start is not None:
            params["startDate"] = self.start.isoformat()
        if self.end is not None:
            params["endDate"] = f"{self.end.isoformat()}T23:59:59.999Z"
        return params

    def label(self) -> str:
        if self.is_open:
            return "All time"
        a = self.start.isoformat() if self.start else "…"
        b = self.end.isoformat() if self.end else "…"
        return f"{a} to {b}"
