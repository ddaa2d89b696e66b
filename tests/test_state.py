from __future__ import annotations

import json

import pandas as pd

from toku_budget import config
from toku_budget.date_window import DateRangeMode, make_window
from toku_budget.persistent_cache import DEFAULT_PREFERENCES, load_preferences, save_preferences
from toku_budget.state import STATE_KEY, AppState, Section, get_app_state


def test_defaults() -> None:
    state = AppState()
    assert state.section is Section.OVERVIEW
    assert state.range_mode is DateRangeMode.MONTH
    assert state.currency == "USD"


def test_window_follows_range_mode(monkeypatch) -> None:
    monkeypatch.setattr(config, "TIMEZONE", None)
    state = AppState()
    assert state.window("2025-05-16") == make_window(DateRangeMode.MONTH, "2025-05-16")

    assert state.set_range_mode(DateRangeMode.QUARTER) is True
    window = state.window("2025-05-16")
    assert (window.start, window.end) == (pd.Timestamp("2025-04-01"), pd.Timestamp("2025-07-01"))

    assert state.set_range_mode(1) is False


def test_select_reports_changes() -> None:
    state = AppState()
    assert state.select(Section.TRANSACTIONS) is True
    assert state.select(Section.TRANSACTIONS) is False
    assert state.select("budgets") is True
    assert state.section is Section.BUDGETS


def test_section_labels() -> None:
    assert [s.label for s in Section] == ["Overview", "Transactions", "Subscriptions", "Bills", "Budgets"]


def test_cache_round_trip_and_bad_values() -> None:
    state = AppState(section=Section.BILLS, range_mode=DateRangeMode.YEAR, currency="JPY", dark_mode=True)
    assert AppState.from_cache(state.to_cache()) == state

    fallback = AppState.from_cache({'section': 'reports', 'range_mode': 'decade', 'currency': 'XXX'})
    assert fallback == AppState()


def test_get_app_state_is_created_once() -> None:
    session = {}
    first = get_app_state(session, {'range_mode': 'quarter'})
    second = get_app_state(session, {'range_mode': 'year'})
    assert first is second is session[STATE_KEY]
    assert first.range_mode is DateRangeMode.QUARTER


def test_preferences_file(tmp_path) -> None:
    path = tmp_path / "prefs.json"
    assert load_preferences(path) == DEFAULT_PREFERENCES

    save_preferences({'range_mode': 'year', 'section': 'bills', 'unknown': 1}, path)
    loaded = load_preferences(path)
    assert loaded['range_mode'] == 'year'
    assert loaded['section'] == 'bills'
    assert 'unknown' not in loaded

    path.write_text("{not json", encoding="utf-8")
    assert load_preferences(path) == DEFAULT_PREFERENCES


def test_preferences_drop_values_of_the_wrong_type(tmp_path) -> None:
    path = tmp_path / "prefs.json"
    path.write_text(json.dumps({'dark_mode': 'yes', 'currency': 'JPY', 'range_mode': 2}), encoding="utf-8")

    loaded = load_preferences(path)

    assert loaded['dark_mode'] is False
    assert loaded['currency'] == 'JPY'
    assert loaded['range_mode'] == 'month'


def test_save_preferences_replaces_file_in_one_step(tmp_path) -> None:
    path = tmp_path / "nested" / "prefs.json"
    save_preferences(AppState(range_mode=DateRangeMode.QUARTER).to_cache(), path)

    assert json.loads(path.read_text(encoding="utf-8"))['range_mode'] == 'quarter'
    assert [p.name for p in path.parent.iterdir()] == ["prefs.json"]
