"""Transactions section - table for the active period, add form and delete."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, MutableMapping, Optional

import streamlit as st

from ..categories import category_lookup, list_categories
from ..config import CATEGORY_PLACEHOLDER
from ..date_window import DateWindow
from ..errors import BudgetError
from ..formatting import format_currency, format_date
from ..models import TxKind
from ..state import AppState
from ..transactions import LiveQuery, TransactionStore
from ..ui import BudgetUI, transactions_table

LIVE_QUERY_KEY = 'transactions_live_query'


def get_live_query(
    session_state: MutableMapping[str, Any],
    store: TransactionStore,
    window: DateWindow,
) -> LiveQuery:
    """Return the session's live query, re-pointed at ``window`` when it moved."""
    query = session_state.get(LIVE_QUERY_KEY)
    if not isinstance(query, LiveQuery) or query.store is not store:
        if isinstance(query, LiveQuery):
            query.close()
        query = LiveQuery(store, window)
        session_state[LIVE_QUERY_KEY] = query
    elif query.window != window:
        query.set_window(window)
    return query


def render(store: TransactionStore, state: AppState, window: DateWindow) -> None:
    ui = BudgetUI()
    ui.render_header("🧾 Transactions", window)

    categories = list_categories(store.db_path)
    lookup = category_lookup(categories)
    query = get_live_query(st.session_state, store, window)

    if st.button("➕ Add", type="primary"):
        st.session_state['show_new_transaction'] = True

    if st.session_state.get('show_new_transaction', False):
        _render_new_transaction_form(store, categories)

    if not query.results:
        st.info(f"No transactions in {window.label}.")
        return

    st.dataframe(
        transactions_table(query.results, lookup),
        use_container_width=True,
        hide_index=True,
    )
    _render_delete_control(store, query)


def _render_new_transaction_form(store: TransactionStore, categories) -> None:
    st.subheader("New Transaction")
    col1, col2 = st.columns(2)
    with col1:
        kind = st.radio(
            "Type",
            options=list(TxKind),
            format_func=lambda k: k.label,
            horizontal=True,
            key="new_txn_kind",
        )
        amount = st.number_input("Amount", min_value=0.0, step=0.01, format="%.2f", key="new_txn_amount")
        entry_date = st.date_input("Date", value=date.today(), key="new_txn_date")
    with col2:
        options = [None] + list(categories)
        category = st.selectbox(
            "Category",
            options=options,
            format_func=lambda c: CATEGORY_PLACEHOLDER if c is None else c.name,
            key="new_txn_category",
        )
        note = st.text_input("Note", key="new_txn_note")

    is_valid = amount > 0
    col_save, col_cancel, _ = st.columns([1, 1, 4])
    with col_cancel:
        if st.button("Cancel", key="new_txn_cancel"):
            st.session_state['show_new_transaction'] = False
            st.rerun()
    with col_save:
        if st.button("💾 Save", disabled=not is_valid, key="new_txn_save"):
            try:
                store.create(
                    amount=str(amount),
                    kind=kind,
                    date=_as_datetime(entry_date),
                    note=note,
                    category_id=category.id if category is not None else None,
                )
            except BudgetError as exc:
                st.error(f"❌ Could not save transaction: {exc}")
                return
            st.session_state['show_new_transaction'] = False
            st.rerun()


def _render_delete_control(store: TransactionStore, query: LiveQuery) -> None:
    results = query.results
    labels = {
        txn.id: f"{format_date(txn.date)} · {txn.kind.label} · "
                f"{format_currency(txn.amount, txn.currency_code)} · {txn.note or ''}"
        for txn in results
    }
    col_pick, col_delete = st.columns([4, 1])
    with col_pick:
        selected_id = st.selectbox(
            "Select a transaction",
            options=list(labels),
            format_func=lambda tid: labels.get(tid, tid),
            key="delete_selector",
        )
    with col_delete:
        st.write("")
        if st.button("🗑️ Delete", key="delete_txn_btn") and selected_id:
            try:
                store.delete(selected_id)
            except BudgetError as exc:
                st.error(f"❌ Could not delete transaction: {exc}")
                return
            st.rerun()


def _as_datetime(value: Optional[date]) -> datetime:
    if value is None:
        return datetime.combine(date.today(), datetime.min.time())
    return datetime.combine(value, datetime.min.time())
