"""Calendar period windows for the month / quarter / year range picker.

A window is the half-open interval ``[start, end)`` that contains an anchor
instant.  Boundaries are local midnight on the first day of the period and
are computed with calendar arithmetic (one calendar month, quarter or year),
never as a fixed number of days.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from typing import Any, Optional

import pandas as pd

QUARTER_START_MONTHS = (1, 4, 7, 10)


class DateRangeMode(IntEnum):
    MONTH = 0
    QUARTER = 1
    YEAR = 2

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @property
    def months(self) -> int:
        """Length of one period in calendar months."""
        return {DateRangeMode.MONTH: 1, DateRangeMode.QUARTER: 3, DateRangeMode.YEAR: 12}[self]


@dataclass(frozen=True)
class DateWindow:
    """Half-open interval ``[start, end)``."""

    start: pd.Timestamp
    end: pd.Timestamp

    def __post_init__(self) -> None:
        if not self.start < self.end:
            raise ValueError(f"DateWindow start {self.start} must precede end {self.end}")

    def contains(self, instant: Any) -> bool:
        return bool(self.start <= pd.Timestamp(instant) < self.end)

    @property
    def span_months(self) -> int:
        return (self.end.year - self.start.year) * 12 + self.end.month - self.start.month

    @property
    def label(self) -> str:
        """Short display text, e.g. ``May 2025``, ``Q2 2025`` or ``2025``."""
        span = self.span_months
        if span == 1:
            return self.start.strftime("%B %Y")
        if span == 3:
            return f"Q{(self.start.month - 1) // 3 + 1} {self.start.year}"
        if span == 12 and self.start.month == 1:
            return str(self.start.year)
        last_day = self.end - pd.Timedelta(days=1)
        return f"{self.start:%Y-%m-%d} – {last_day:%Y-%m-%d}"


def quarter_start_month(month: int) -> int:
    """Return the first month of the calendar quarter containing ``month``."""
    return max((m for m in QUARTER_START_MONTHS if m <= month), default=1)


def _resolve_anchor(anchor: Any, tz: Optional[str]) -> pd.Timestamp:
    if anchor is None:
        return pd.Timestamp.now(tz=tz)
    ts = pd.Timestamp(anchor)
    if tz is not None:
        ts = ts.tz_localize(tz) if ts.tzinfo is None else ts.tz_convert(tz)
    return ts


def _first_instant(year: int, month: int, tz: Any) -> pd.Timestamp:
    # month may run past 12 when advancing; fold the overflow into the year
    extra_years, month_index = divmod(month - 1, 12)
    ts = pd.Timestamp(datetime(year + extra_years, month_index + 1, 1))
    if tz is not None:
        ts = ts.tz_localize(tz, nonexistent="shift_forward", ambiguous=False)
    return ts


def make_window(mode: DateRangeMode | int, anchor: Any = None, tz: Optional[str] = None) -> DateWindow:
    """Return the calendar period of kind ``mode`` that contains ``anchor``.

    Args:
        mode: Month, quarter or year.
        anchor: Any value ``pandas.Timestamp`` accepts.  Defaults to now.
        tz: Time zone of the calendar.  When given, a naive anchor is read as
            wall-clock time in that zone and the window is tz-aware.  When
            omitted, the window carries the anchor's own tz (or none).

    Returns:
        DateWindow with ``start <= anchor < end``.
    """
    mode = DateRangeMode(mode)
    ts = _resolve_anchor(anchor, tz)

    if mode is DateRangeMode.MONTH:
        start_month = ts.month
    elif mode is DateRangeMode.QUARTER:
        start_month = quarter_start_month(ts.month)
    else:
        start_month = 1

    start = _first_instant(ts.year, start_month, ts.tz)
    end = _first_instant(ts.year, start_month + mode.months, ts.tz)
    return DateWindow(start=start, end=end)
