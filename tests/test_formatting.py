from decimal import Decimal

import pandas as pd

from toku_budget.formatting import format_currency, format_date


def test_format_currency_usd() -> None:
    assert format_currency(Decimal("1234.5")) == "$1,234.50"
    assert format_currency(Decimal("0.005")) == "$0.01"
    assert format_currency(Decimal("-42")) == "-$42.00"


def test_format_currency_jpy_has_no_minor_units() -> None:
    assert format_currency(Decimal("1200"), "JPY") == "¥1,200"
    assert format_currency(Decimal("1200.5"), "jpy") == "¥1,201"


def test_format_currency_unknown_code_prefix() -> None:
    assert format_currency(Decimal("9.99"), "CHF") == "CHF 9.99"


def test_format_date() -> None:
    assert format_date("2025-05-16 13:45") == "May 16, 2025"
    assert format_date(pd.NaT) == ""


def test_format_currency_handles_amounts_beyond_default_precision() -> None:
    assert format_currency(Decimal("1e30")) == "$1" + ",000" * 10 + ".00"
    assert format_currency(Decimal("123456789012345678901234567"), "JPY") == "¥123,456,789,012,345,678,901,234,567"
