"""Formatting utilities for currency and date display."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any, Union

import pandas as pd

# code -> (symbol, minor unit digits)
CURRENCY_FORMATS = {
    'USD': ('$', 2),
    'CAD': ('CA$', 2),
    'AUD': ('A$', 2),
    'EUR': ('€', 2),
    'GBP': ('£', 2),
    'JPY': ('¥', 0),
}


def format_currency(amount: Union[Decimal, float, int], currency_code: str = 'USD') -> str:
    """Format an amount for display in ``currency_code``.

    Rounds half-up to the currency's minor units.  Unknown codes are used as
    a prefix.

    Example:
        >>> format_currency(Decimal('1234.5'))
        '$1,234.50'
        >>> format_currency(Decimal('-1200'), 'JPY')
        '-¥1,200'
        >>> format_currency(Decimal('9.99'), 'CHF')
        'CHF 9.99'
    """
    code = (currency_code or 'USD').upper()
    symbol, digits = CURRENCY_FORMATS.get(code, (f"{code} ", 2))
    value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    with localcontext() as ctx:
        # quantize fails once the result needs more digits than the context holds
        ctx.prec = max(ctx.prec, value.adjusted() + digits + 2)
        value = value.quantize(Decimal(1).scaleb(-digits), rounding=ROUND_HALF_UP)
        sign = '-' if value < 0 else ''
        return f"{sign}{symbol}{abs(value):,.{digits}f}"


def minor_units(currency_code: str) -> int:
    """Decimal places used by ``currency_code`` (2 for unknown codes)."""
    return CURRENCY_FORMATS.get((currency_code or 'USD').upper(), (None, 2))[1]


def format_date(value: Any) -> str:
    """Medium date style, e.g. ``May 16, 2025``."""
    ts = pd.Timestamp(value)
    if pd.isna(ts):
        return ''
    return f"{ts:%b} {ts.day}, {ts.year}"
