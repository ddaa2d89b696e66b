"""Budgets section - where the period's spending went, per category."""

from __future__ import annotations

import streamlit as st

from ..analytics import category_breakdown, for_currency
from ..categories import category_lookup, list_categories
from ..date_window import DateWindow
from ..formatting import format_currency
from ..state import AppState
from ..transactions import TransactionStore
from ..ui import BudgetUI
from ..visualization import create_budget_bar


def render(store: TransactionStore, state: AppState, window: DateWindow) -> None:
    ui = BudgetUI()
    ui.render_header("🥧 Budgets", window)

    frame = store.frame(window)
    frame = for_currency(frame, state.currency)
    lookup = category_lookup(list_categories(store.db_path))
    breakdown = category_breakdown(frame, lookup)
    if breakdown.empty:
        st.info(f"No {state.currency} expenses in {window.label}.")
        return

    st.plotly_chart(create_budget_bar(breakdown), use_container_width=True)
    display = breakdown.assign(
        Amount=breakdown['Amount'].map(lambda a: format_currency(a, state.currency)),
        Share=breakdown['Share'].map(lambda s: f"{s:.1f}%"),
    )
    st.dataframe(display, use_container_width=True, hide_index=True)
