# tests/test_formatting.py
import math

import pytest

from ims_reporting.utils.helpers import fmt_money, format_currency, format_number, format_percent


@pytest.mark.parametrize("bad", [None, float("nan"), float("inf"), "abc", ""])
def test_currency_coerces_garbage_to_zero(bad):
    assert format_currency(bad) == format_currency(0)
    assert "nan" not in format_currency(bad).lower()


def test_currency_prefix_grouping_and_trimmed_decimals():
    assert format_currency(1234.5) == "Rwf 1,234.5"
    assert format_currency(1000000) == "Rwf 1,000,000"
    assert format_currency(12.346) == "Rwf 12.35"
    assert format_currency(0) == "Rwf 0"


def test_currency_custom_symbol_and_separators():
    assert format_currency(1234.5, "USD") == "USD 1,234.5"
    assert format_currency(1234.5, "", thousands=".", decimal=",") == "1.234,5"


def test_negative_zero_renders_as_zero():
    assert format_currency(-0.0001) == "Rwf 0"


def test_number_and_percent():
    assert format_number(12345.6789) == "12,345.679"
    assert format_number(None) == "0"
    assert format_percent(12.5) == "12.50%"
    assert format_percent(math.nan) == "0.00%"


def test_fmt_money_fixed_places_and_sentinel():
    assert fmt_money(1234) == "1,234.00"
    assert fmt_money("x") == "0.00"
    assert fmt_money("x", sentinel="N/A") == "N/A"
    with pytest.raises(ValueError):
        fmt_money("x", strict=True)
