"""Overview section - period totals and spending mix."""

from __future__ import annotations

import streamlit as st

from ..analytics import category_breakdown, daily_flow, for_currency, period_summary
from ..categories import category_lookup, list_categories
from ..date_window import DateWindow
from ..formatting import format_currency
from ..state import AppState
from ..transactions import TransactionStore
from ..ui import BudgetUI
from ..visualization import create_category_pie, create_daily_flow_chart


def render(store: TransactionStore, state: AppState, window: DateWindow) -> None:
    ui = BudgetUI()
    ui.render_header("📊 Overview", window)

    frame = store.frame(window)
    frame = for_currency(frame, state.currency)
    if frame.empty:
        st.info(f"No {state.currency} transactions in {window.label}. Add some from the Transactions section.")
        return

    summary = period_summary(frame)
    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("💰 Income", format_currency(summary['income'], state.currency))
    with col2:
        st.metric("💸 Expenses", format_currency(summary['expenses'], state.currency))
    with col3:
        st.metric("📈 Net", format_currency(summary['net_flow'], state.currency))
    with col4:
        st.metric("💾 Savings Rate", f"{summary['savings_rate']:.1f}%")

    lookup = category_lookup(list_categories(store.db_path))
    breakdown = category_breakdown(frame, lookup)

    col_left, col_right = st.columns([1, 1])
    with col_left:
        st.plotly_chart(create_category_pie(breakdown), use_container_width=True)
    with col_right:
        st.plotly_chart(create_daily_flow_chart(daily_flow(frame)), use_container_width=True)
