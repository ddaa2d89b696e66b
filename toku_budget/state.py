"""Selection state for the sidebar section and the range picker."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, MutableMapping, Optional

from . import config
from .date_window import DateRangeMode, DateWindow, make_window
from .logging_setup import get_logger

logger = get_logger(__name__)

STATE_KEY = 'toku_app_state'


class Section(Enum):
    OVERVIEW = 'overview'
    TRANSACTIONS = 'transactions'
    SUBSCRIPTIONS = 'subscriptions'
    BILLS = 'bills'
    BUDGETS = 'budgets'

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @property
    def icon(self) -> str:
        return _SECTION_ICONS[self]


_SECTION_ICONS = {
    Section.OVERVIEW: '📊',
    Section.TRANSACTIONS: '🧾',
    Section.SUBSCRIPTIONS: '🔁',
    Section.BILLS: '📅',
    Section.BUDGETS: '🥧',
}


@dataclass
class AppState:
    section: Section = Section.OVERVIEW
    range_mode: DateRangeMode = DateRangeMode.MONTH
    currency: str = config.DEFAULT_CURRENCY
    dark_mode: bool = False

    def window(self, anchor: Any = None) -> DateWindow:
        """Window for the selected range mode around ``anchor`` (default now)."""
        return make_window(self.range_mode, anchor=anchor, tz=config.TIMEZONE)

    def select(self, section: Section) -> bool:
        """Switch sections.  Returns ``True`` when the selection changed."""
        section = Section(section)
        if section is self.section:
            return False
        logger.debug("Sidebar selection -> %s", section.value)
        self.section = section
        return True

    def set_range_mode(self, mode: DateRangeMode | int) -> bool:
        mode = DateRangeMode(mode)
        if mode is self.range_mode:
            return False
        logger.debug("Range mode -> %s", mode.label)
        self.range_mode = mode
        return True

    def to_cache(self) -> Dict[str, Any]:
        return {
            'section': self.section.value,
            'range_mode': self.range_mode.name.lower(),
            'currency': self.currency,
            'dark_mode': self.dark_mode,
        }

    @classmethod
    def from_cache(cls, cache: Optional[Dict[str, Any]]) -> "AppState":
        """Build state from saved preferences, ignoring unknown values."""
        cache = cache or {}
        state = cls()
        try:
            state.section = Section(cache.get('section', state.section.value))
        except ValueError:
            pass
        mode_name = str(cache.get('range_mode', '')).upper()
        if mode_name in DateRangeMode.__members__:
            state.range_mode = DateRangeMode[mode_name]
        if cache.get('currency') in config.DISPLAY_CURRENCIES:
            state.currency = cache['currency']
        state.dark_mode = bool(cache.get('dark_mode', False))
        return state


def get_app_state(session_state: MutableMapping[str, Any], cache: Optional[Dict[str, Any]] = None) -> AppState:
    """Return the session's AppState, creating it from ``cache`` on first use."""
    state = session_state.get(STATE_KEY)
    if not isinstance(state, AppState):
        state = AppState.from_cache(cache)
        session_state[STATE_KEY] = state
    return state
