"""Toku Budget - main entry point for the Streamlit app.

Run with:

```bash
streamlit run toku_budget/app.py
```
"""

from __future__ import annotations

import sys
from pathlib import Path

import streamlit as st

# Add project root to path for imports when executed as a script
project_root = Path(__file__).parent.parent.resolve()
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from toku_budget import config, db, views
from toku_budget.categories import seed_categories
from toku_budget.errors import BudgetError
from toku_budget.logging_setup import configure_logging, get_logger
from toku_budget.persistent_cache import load_preferences, save_preferences
from toku_budget.state import Section, get_app_state
from toku_budget.transactions import TransactionStore
from toku_budget.ui import BudgetUI

logger = get_logger("toku_budget.app")

STORE_KEY = 'transaction_store'

SECTION_VIEWS = {
    Section.OVERVIEW: views.overview.render,
    Section.TRANSACTIONS: views.transactions.render,
    Section.SUBSCRIPTIONS: views.subscriptions.render,
    Section.BILLS: views.bills.render,
    Section.BUDGETS: views.budgets.render,
}


@st.cache_resource
def _initialize() -> bool:
    """One-time startup: logging, data directories, schema and seed data."""
    configure_logging()
    config.ensure_data_directories()
    db.init_db()
    try:
        seed_categories()
    except BudgetError:
        logger.warning("Continuing without default categories")
    return True


def _get_store() -> TransactionStore:
    store = st.session_state.get(STORE_KEY)
    if not isinstance(store, TransactionStore):
        store = TransactionStore()
        st.session_state[STORE_KEY] = store
    return store


def _persist_preferences(state) -> None:
    try:
        save_preferences(state.to_cache())
    except OSError:
        logger.warning("Could not save preferences to %s", config.CACHE_PATH, exc_info=True)


def main() -> None:
    ui = BudgetUI()
    ui.setup_page_config()
    _initialize()

    state = get_app_state(st.session_state, load_preferences())
    store = _get_store()

    changed = ui.render_sidebar_navigation(state)
    changed |= ui.render_toolbar(state)
    if changed:
        _persist_preferences(state)
    ui.apply_dark_mode(state)

    window = state.window()
    ui.render_import_export(store, window)

    try:
        SECTION_VIEWS[state.section](store, state, window)
    except BudgetError as exc:
        st.error(f"❌ {exc}")


if __name__ == "__main__":
    main()
