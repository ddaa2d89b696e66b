"""Period totals and category breakdowns for the Overview and Budgets sections.

Inputs are frames produced by :meth:`TransactionStore.frame`, already limited
to the active date window.  Sums are taken over ``Decimal`` values so totals
match the stored amounts exactly.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Dict, Mapping

import pandas as pd

from .categories import category_label
from .models import Category, TxKind


def _total(series: pd.Series) -> Decimal:
    return sum(series, Decimal('0'))


def for_currency(data: pd.DataFrame, currency_code: str) -> pd.DataFrame:
    """Rows recorded in ``currency_code``; totals never mix currencies."""
    if data.empty:
        return data
    return data[data['currency_code'] == currency_code.upper()]


def period_summary(data: pd.DataFrame) -> Dict[str, object]:
    """Income, expenses, net flow and savings rate for a windowed frame."""
    if data.empty:
        return {
            'income': Decimal('0'),
            'expenses': Decimal('0'),
            'net_flow': Decimal('0'),
            'savings_rate': 0.0,
            'count': 0,
        }
    income = _total(data.loc[data['kind'] == int(TxKind.INCOME), 'amount'])
    expenses = _total(data.loc[data['kind'] == int(TxKind.EXPENSE), 'amount'])
    net_flow = income - expenses
    savings_rate = float(net_flow / income * 100) if income > 0 else 0.0
    return {
        'income': income,
        'expenses': expenses,
        'net_flow': net_flow,
        'savings_rate': savings_rate,
        'count': int(len(data)),
    }


def category_breakdown(data: pd.DataFrame, lookup: Mapping[str, Category]) -> pd.DataFrame:
    """Expense totals per category label, largest first.

    Returns a frame with columns ``Category``, ``Amount`` (Decimal) and
    ``Share`` (percent of all expenses in the frame).
    """
    columns = ['Category', 'Amount', 'Share']
    if data.empty:
        return pd.DataFrame(columns=columns)
    expenses = data[data['kind'] == int(TxKind.EXPENSE)].copy()
    if expenses.empty:
        return pd.DataFrame(columns=columns)
    expenses['Category'] = expenses['category_id'].map(lambda cid: category_label(cid, lookup))
    totals = (
        expenses.groupby('Category')['amount']
        .apply(_total)
        .reset_index()
        .rename(columns={'amount': 'Amount'})
    )
    grand_total = _total(totals['Amount'])
    totals['Share'] = totals['Amount'].map(
        lambda amount: float(amount / grand_total * 100) if grand_total else 0.0
    )
    totals['_sort'] = totals['Amount'].map(float)
    totals = totals.sort_values(['_sort', 'Category'], ascending=[False, True]).drop(columns='_sort')
    return totals.reset_index(drop=True)[columns]


def daily_flow(data: pd.DataFrame) -> pd.DataFrame:
    """Per-day income and expense totals (floats, for charting)."""
    if data.empty:
        return pd.DataFrame(columns=['Day', 'Income', 'Expenses'])
    working = data.copy()
    working['Day'] = pd.to_datetime(working['date']).dt.normalize()
    working['value'] = working['amount'].map(float)
    working['Income'] = working['value'].where(working['kind'] == int(TxKind.INCOME), 0.0)
    working['Expenses'] = working['value'].where(working['kind'] == int(TxKind.EXPENSE), 0.0)
    return working.groupby('Day')[['Income', 'Expenses']].sum().reset_index().sort_values('Day')
