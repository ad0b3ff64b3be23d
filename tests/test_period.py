# tests/test_period.py
from datetime import date, datetime, timezone

from ims_reporting.modules.reporting.period import ReportPeriod


def test_bounds_are_inclusive_whole_days():
    p = ReportPeriod(date(2025, 1, 1), date(2025, 1, 31))
    assert p.contains(datetime(2025, 1, 1, 0, 0))
    assert p.contains(datetime(2025, 1, 31, 23, 59, 59, tzinfo=timezone.utc))
    assert not p.contains(datetime(2025, 2, 1, 0, 0))
    assert not p.contains(date(2024, 12, 31))


def test_open_bounds_and_undated_records():
    assert ReportPeriod().contains(None)
    assert ReportPeriod(end=date(2025, 1, 1)).contains(date(1999, 1, 1))
    assert not ReportPeriod(start=date(2025, 1, 1)).contains(None)


def test_filter_and_params(builders):
    p = ReportPeriod(datetime(2025, 1, 10, 15, 0), date(2025, 1, 10))
    assert p.start == date(2025, 1, 10)
    inside = builders.expense("Rent", 10, date="2025-01-10")
    outside = builders.expense("Rent", 10, date="2025-01-11")
    assert p.filter([inside, outside]) == [inside]
    assert p.to_params() == {"startDate": "2025-01-10", "endDate": "2025-01-10T23:59:59.999Z"}
    assert ReportPeriod().to_params() == {}


def test_last_days():
    p = ReportPeriod.last_days(7, today=date(2025, 1, 10))
    assert (p.start, p.end) == (date(2025, 1, 4), date(2025, 1, 10))
