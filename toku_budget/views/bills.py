"""Bills section."""

from __future__ import annotations

import streamlit as st

from ..date_window import DateWindow
from ..state import AppState
from ..transactions import TransactionStore
from ..ui import BudgetUI


def render(store: TransactionStore, state: AppState, window: DateWindow) -> None:
    BudgetUI().render_header("📅 Bills", window)
    st.info("No bills scheduled yet.")
