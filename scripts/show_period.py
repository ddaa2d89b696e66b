#!/usr/bin/env python3
"""Print the transactions of the current month, quarter or year."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from toku_budget import config, db
from toku_budget.analytics import for_currency, period_summary
from toku_budget.categories import category_lookup, list_categories
from toku_budget.date_window import DateRangeMode, make_window
from toku_budget.formatting import format_currency
from toku_budget.transactions import TransactionStore
from toku_budget.ui import transactions_table


def main(mode: DateRangeMode, anchor: str | None = None, currency: str = config.DEFAULT_CURRENCY) -> None:
    db.init_db()
    window = make_window(mode, anchor=anchor, tz=config.TIMEZONE)
    store = TransactionStore()
    transactions = store.list(window)
    print(f"{window.label}: {window.start:%Y-%m-%d} to {window.end:%Y-%m-%d} (exclusive)")
    if not transactions:
        print("No transactions in this period.")
        return

    lookup = category_lookup(list_categories())
    print(transactions_table(transactions, lookup).to_string(index=False))

    currency = currency.upper()
    summary = period_summary(for_currency(store.frame(window), currency))
    print(
        f"\n{currency} totals: income {format_currency(summary['income'], currency)}"
        f" · expenses {format_currency(summary['expenses'], currency)}"
        f" · net {format_currency(summary['net_flow'], currency)}"
    )


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description='Show transactions for a calendar period.')
    parser.add_argument('--mode', choices=[m.name.lower() for m in DateRangeMode], default='month')
    parser.add_argument('--anchor', help='Any date inside the period (default: today)')
    parser.add_argument('--currency', default=config.DEFAULT_CURRENCY, help='Currency the totals are taken in')
    args = parser.parse_args()
    main(DateRangeMode[args.mode.upper()], anchor=args.anchor, currency=args.currency)
