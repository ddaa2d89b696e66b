"""Streamlit chrome shared by every section: page config, sidebar, toolbar.

Section bodies live in :mod:`toku_budget.views`.  Everything here renders
through ``st`` except :func:`transactions_table`, which only shapes data and
is safe to call without a running Streamlit session.
"""

from __future__ import annotations

import hashlib
import io
from typing import Any, Iterable, Mapping, MutableMapping

import pandas as pd
import streamlit as st
from streamlit.errors import StreamlitAPIException

from . import config
from .categories import category_label
from .csv_io import export_transactions_csv, import_transactions_csv
from .date_window import DateRangeMode, DateWindow
from .errors import BudgetError
from .formatting import format_currency, format_date
from .models import Category, Transaction
from .state import AppState, Section
from .transactions import TransactionStore

TABLE_COLUMNS = ['Date', 'Category', 'Type', 'Amount', 'Note']
IMPORTED_DIGESTS_KEY = 'imported_csv_digests'
UPLOADER_GENERATION_KEY = 'import_csv_generation'


def claim_upload(session_state: MutableMapping[str, Any], payload: bytes) -> bool:
    """Record ``payload`` as imported.  Returns ``False`` if it already was this session."""
    digest = hashlib.sha256(payload).hexdigest()
    seen = session_state.setdefault(IMPORTED_DIGESTS_KEY, set())
    if digest in seen:
        return False
    seen.add(digest)
    return True


def release_upload(session_state: MutableMapping[str, Any], payload: bytes) -> None:
    """Forget ``payload`` so a failed import can be retried."""
    session_state.get(IMPORTED_DIGESTS_KEY, set()).discard(hashlib.sha256(payload).hexdigest())


def transactions_table(
    transactions: Iterable[Transaction],
    lookup: Mapping[str, Category],
) -> pd.DataFrame:
    """Display rows for the transactions table, in the order given.

    The frame is indexed by transaction id so a selection maps back to a
    record.
    """
    rows = []
    ids = []
    for txn in transactions:
        ids.append(txn.id)
        rows.append({
            'Date': format_date(txn.date),
            'Category': category_label(txn.category_id, lookup),
            'Type': txn.kind.label,
            'Amount': format_currency(txn.amount, txn.currency_code),
            'Note': txn.note or '',
        })
    return pd.DataFrame(rows, columns=TABLE_COLUMNS, index=pd.Index(ids, name='id'))


class BudgetUI:
    """Page-level chrome for the Toku Budget app."""
    _PAGE_CONFIGURED = False

    def setup_page_config(self) -> None:
        if BudgetUI._PAGE_CONFIGURED:
            return
        try:
            st.set_page_config(
                page_title="Toku Budget",
                page_icon="💴",
                layout="wide",
                initial_sidebar_state="expanded",
            )
        except StreamlitAPIException:
            # Already configured on an earlier rerun
            pass
        finally:
            BudgetUI._PAGE_CONFIGURED = True

    def render_sidebar_navigation(self, state: AppState) -> bool:
        """Section list in the sidebar.  Returns ``True`` if the selection changed."""
        st.sidebar.title("Toku Budget")
        sections = list(Section)
        choice = st.sidebar.radio(
            "Sections",
            options=sections,
            index=sections.index(state.section),
            format_func=lambda s: f"{s.icon} {s.label}",
            label_visibility="collapsed",
        )
        return state.select(choice)

    def render_toolbar(self, state: AppState) -> bool:
        """Range picker, currency chips and appearance toggle.

        Returns ``True`` if any preference changed.
        """
        col_range, col_currency, col_appearance = st.columns([3, 2, 1])
        modes = list(DateRangeMode)
        with col_range:
            mode = st.radio(
                "Range",
                options=modes,
                index=modes.index(state.range_mode),
                format_func=lambda m: m.label,
                horizontal=True,
                label_visibility="collapsed",
            )
        with col_currency:
            currencies = list(config.DISPLAY_CURRENCIES)
            currency = st.radio(
                "Currency",
                options=currencies,
                index=currencies.index(state.currency) if state.currency in currencies else 0,
                horizontal=True,
                label_visibility="collapsed",
            )
        with col_appearance:
            dark_mode = st.toggle("🌙 Dark", value=state.dark_mode)

        changed = state.set_range_mode(mode)
        if currency != state.currency:
            state.currency = currency
            changed = True
        if dark_mode != state.dark_mode:
            state.dark_mode = dark_mode
            changed = True
        return changed

    def render_header(self, title: str, window: DateWindow) -> None:
        st.header(title)
        last_day = window.end - pd.Timedelta(days=1)
        st.caption(f"{window.label} · {format_date(window.start)} – {format_date(last_day)}")

    def _import_upload(self, store: TransactionStore, payload: bytes, generation: int) -> None:
        if not claim_upload(st.session_state, payload):
            st.info("This file was already imported.")
            return
        try:
            result = import_transactions_csv(store, io.BytesIO(payload))
        except BudgetError as exc:
            release_upload(st.session_state, payload)
            st.error(f"Import failed: {exc}")
            return
        # a new key empties the uploader on the next rerun
        st.session_state[UPLOADER_GENERATION_KEY] = generation + 1
        st.success(f"✅ Imported {result.inserted} transactions")
        if result.created_categories:
            st.info(f"Added categories: {', '.join(result.created_categories)}")
        for line_no, reason in result.skipped:
            st.warning(f"Line {line_no}: {reason}")

    def render_import_export(self, store: TransactionStore, window: DateWindow) -> None:
        """Import/Export menu in the sidebar."""
        with st.sidebar.expander("⇅ Import/Export"):
            generation = st.session_state.setdefault(UPLOADER_GENERATION_KEY, 0)
            uploaded = st.file_uploader("Import CSV…", type=["csv"], key=f"import_csv_{generation}")
            if uploaded is not None and st.button("Import", key="import_csv_btn"):
                self._import_upload(store, uploaded.getvalue(), generation)

            scope = st.radio(
                "Export range",
                options=["Current period", "All transactions"],
                key="export_scope",
            )
            buffer = io.StringIO()
            try:
                count = export_transactions_csv(
                    store, buffer, window=window if scope == "Current period" else None
                )
            except BudgetError as exc:
                st.error(f"Export failed: {exc}")
                return
            st.download_button(
                f"Export CSV… ({count} rows)",
                data=buffer.getvalue(),
                file_name="toku_budget_transactions.csv",
                mime="text/csv",
            )

    def apply_dark_mode(self, state: AppState) -> None:
        if state.dark_mode:
            st.markdown("""
            <style>
            .stApp {
                background-color: #1e1e1e;
                color: #ffffff;
            }
            .stMetric {
                background-color: #2d2d2d;
                padding: 1rem;
                border-radius: 0.5rem;
            }
            </style>
            """, unsafe_allow_html=True)
