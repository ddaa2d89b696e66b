"""Section bodies rendered in the main area of the app."""

from __future__ import annotations

from . import bills, budgets, overview, subscriptions, transactions

__all__ = ['bills', 'budgets', 'overview', 'subscriptions', 'transactions']
