"""Tests for month / quarter / year window derivation."""

from __future__ import annotations

from datetime import date, datetime

import pandas as pd
import pytest

from toku_budget.date_window import (
    DateRangeMode,
    DateWindow,
    make_window,
    quarter_start_month,
)

ANCHORS = [
    "2025-01-01 00:00:00",
    "2025-02-28 23:59:59",
    "2024-02-29 12:00:00",
    "2025-05-16 09:30:00",
    "2025-12-31 23:59:59.999999",
    "2023-07-01 00:00:00",
]


@pytest.mark.parametrize("anchor", ANCHORS)
@pytest.mark.parametrize("mode", list(DateRangeMode))
def test_anchor_falls_inside_its_window(mode: DateRangeMode, anchor: str) -> None:
    window = make_window(mode, anchor)
    ts = pd.Timestamp(anchor)
    assert window.start <= ts < window.end
    assert window.contains(ts)


@pytest.mark.parametrize("anchor", ANCHORS)
def test_month_window_spans_one_calendar_month(anchor: str) -> None:
    window = make_window(DateRangeMode.MONTH, anchor)
    ts = pd.Timestamp(anchor)
    assert window.start == pd.Timestamp(ts.year, ts.month, 1)
    assert window.end == window.start + pd.DateOffset(months=1)
    assert window.span_months == 1


def test_month_lengths_follow_the_calendar() -> None:
    feb_leap = make_window(DateRangeMode.MONTH, "2024-02-10")
    feb = make_window(DateRangeMode.MONTH, "2025-02-10")
    jan = make_window(DateRangeMode.MONTH, "2025-01-10")
    assert (feb_leap.end - feb_leap.start).days == 29
    assert (feb.end - feb.start).days == 28
    assert (jan.end - jan.start).days == 31


def test_december_month_rolls_into_next_year() -> None:
    window = make_window(DateRangeMode.MONTH, "2025-12-15")
    assert window.start == pd.Timestamp("2025-12-01")
    assert window.end == pd.Timestamp("2026-01-01")


@pytest.mark.parametrize(
    "month, expected",
    [(1, 1), (2, 1), (3, 1), (4, 4), (5, 4), (6, 4), (7, 7), (8, 7), (9, 7), (10, 10), (11, 10), (12, 10)],
)
def test_quarter_start_month(month: int, expected: int) -> None:
    assert quarter_start_month(month) == expected
    window = make_window(DateRangeMode.QUARTER, date(2025, month, 15))
    assert window.start == pd.Timestamp(2025, expected, 1)
    assert window.end == window.start + pd.DateOffset(months=3)


def test_quarter_start_defaults_to_january() -> None:
    assert quarter_start_month(0) == 1


def test_fourth_quarter_ends_next_january() -> None:
    window = make_window(DateRangeMode.QUARTER, "2025-11-30")
    assert window.start == pd.Timestamp("2025-10-01")
    assert window.end == pd.Timestamp("2026-01-01")


@pytest.mark.parametrize("anchor", ["2025-01-01", "2025-06-30 18:00", "2025-12-31 23:59"])
def test_year_window_ignores_month_and_day(anchor: str) -> None:
    window = make_window(DateRangeMode.YEAR, anchor)
    assert window.start == pd.Timestamp("2025-01-01 00:00:00")
    assert window.end == pd.Timestamp("2026-01-01 00:00:00")


def test_window_is_idempotent() -> None:
    anchor = datetime(2025, 5, 16, 14, 5)
    for mode in DateRangeMode:
        first = make_window(mode, anchor)
        second = make_window(mode, anchor)
        assert first == second
        assert (first.start, first.end) == (second.start, second.end)


def test_end_is_exclusive() -> None:
    window = make_window(DateRangeMode.QUARTER, "2025-05-16")
    assert window.contains("2025-04-01")
    assert window.contains("2025-06-30 23:59:59")
    assert not window.contains("2025-07-01")
    assert not window.contains("2025-03-31 23:59:59")


def test_quarter_scenario_window() -> None:
    window = make_window(DateRangeMode.QUARTER, "2025-05-16")
    assert window.start == pd.Timestamp("2025-04-01")
    assert window.end == pd.Timestamp("2025-07-01")
    assert window.label == "Q2 2025"


def test_labels() -> None:
    assert make_window(DateRangeMode.MONTH, "2025-05-16").label == "May 2025"
    assert make_window(DateRangeMode.YEAR, "2025-05-16").label == "2025"


def test_timezone_aware_window_uses_local_midnight() -> None:
    window = make_window(DateRangeMode.MONTH, "2025-03-15 12:00", tz="America/New_York")
    assert str(window.start.tz) == "America/New_York"
    assert window.start == pd.Timestamp("2025-03-01 00:00", tz="America/New_York")
    assert window.end == pd.Timestamp("2025-04-01 00:00", tz="America/New_York")


def test_aware_anchor_keeps_its_zone() -> None:
    anchor = pd.Timestamp("2025-01-01 03:00", tz="Asia/Tokyo")
    window = make_window(DateRangeMode.YEAR, anchor)
    assert window.start == pd.Timestamp("2025-01-01", tz="Asia/Tokyo")


def test_default_anchor_is_now() -> None:
    window = make_window(DateRangeMode.MONTH)
    assert window.contains(pd.Timestamp.now())


def test_mode_accepts_ordinal() -> None:
    assert make_window(1, "2025-05-16") == make_window(DateRangeMode.QUARTER, "2025-05-16")
    assert DateRangeMode.MONTH < DateRangeMode.QUARTER < DateRangeMode.YEAR


def test_window_rejects_empty_interval() -> None:
    with pytest.raises(ValueError):
        DateWindow(pd.Timestamp("2025-01-01"), pd.Timestamp("2025-01-01"))
