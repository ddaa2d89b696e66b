"""Transaction store: list / create / delete over the SQLite database.

The store is the only writer.  Every successful write is announced to
subscribers as a :class:`ChangeEvent`, which is how views stay current
without re-querying on a timer.  :class:`LiveQuery` is the usual subscriber:
it keeps the newest-first list for one :class:`~toku_budget.date_window.DateWindow`.
"""

from __future__ import annotations

import sqlite3
import uuid
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, List, Optional, Tuple

import pandas as pd

from . import db
from .config import DEFAULT_CURRENCY
from .date_window import DateWindow
from .errors import NotFoundError, PersistenceError, ValidationError
from .formatting import minor_units
from .logging_setup import get_logger
from .models import Transaction, TxKind

logger = get_logger(__name__)


@dataclass(frozen=True)
class ChangeEvent:
    action: str  # "insert" or "delete"
    transaction_id: str


Listener = Callable[[ChangeEvent], None]


MAX_WHOLE_DIGITS = 12


def parse_amount(value: Any, currency_code: str = DEFAULT_CURRENCY) -> Decimal:
    """Convert user input to an exact positive ``Decimal``.

    Floats go through ``str`` so ``0.1`` becomes ``Decimal('0.1')`` rather
    than its binary expansion.

    Raises:
        ValidationError: if the value is not a finite number greater than 0,
            has more than ``MAX_WHOLE_DIGITS`` whole digits, or has more
            decimal places than ``currency_code`` uses.
    """
    if isinstance(value, bool) or value is None:
        raise ValidationError("Amount is required")
    if isinstance(value, Decimal):
        amount = value
    else:
        text = str(value).strip().replace(",", "")
        try:
            amount = Decimal(text)
        except InvalidOperation as exc:
            raise ValidationError(f"Amount is not a number: {value!r}") from exc
    if not amount.is_finite():
        raise ValidationError(f"Amount must be finite: {value!r}")
    if amount <= 0:
        raise ValidationError("Amount must be greater than 0")
    if amount.adjusted() + 1 > MAX_WHOLE_DIGITS:
        raise ValidationError(f"Amount is too large: {value!r}")
    places = minor_units(currency_code)
    if -amount.normalize().as_tuple().exponent > places:
        raise ValidationError(f"Amount has more than {places} decimal places: {value!r}")
    return amount


def normalize_note(note: Optional[str]) -> Optional[str]:
    if note is None:
        return None
    text = str(note).strip()
    return text or None


def normalize_currency(code: Optional[str]) -> str:
    text = (code or DEFAULT_CURRENCY).strip().upper()
    if len(text) != 3 or not text.isalpha():
        raise ValidationError(f"Currency code must be 3 letters: {code!r}")
    return text


def validate_fields(
    amount: Any,
    kind: Any,
    date: Any,
    currency_code: Optional[str] = DEFAULT_CURRENCY,
) -> Tuple[Decimal, TxKind, str, str]:
    """Check a transaction's values without touching the database.

    Returns ``(amount, kind, stored_date, currency_code)`` ready for insert.

    Raises:
        ValidationError: the first value that does not parse.
    """
    currency = normalize_currency(currency_code)
    parsed_amount = parse_amount(amount, currency)
    try:
        parsed_kind = TxKind.parse(kind)
    except (ValueError, TypeError) as exc:
        raise ValidationError(str(exc)) from exc
    try:
        stored_date = db.to_iso_timestamp(date)
    except (ValueError, TypeError) as exc:
        raise ValidationError(str(exc)) from exc
    return parsed_amount, parsed_kind, stored_date, currency


def apply_window(df: pd.DataFrame, window: Optional[DateWindow], date_col: str = 'date') -> pd.DataFrame:
    """Filter a frame to ``window`` and sort it newest first.

    This is the in-memory twin of the SQL used by :meth:`TransactionStore.list`.
    """
    data = df.copy()
    data[date_col] = pd.to_datetime(data[date_col], errors='coerce')
    data = data.dropna(subset=[date_col])
    if window is not None:
        start, end = _naive(window.start), _naive(window.end)
        data = data[(data[date_col] >= start) & (data[date_col] < end)]
    return data.sort_values(date_col, ascending=False, kind='mergesort')


def _naive(ts: pd.Timestamp) -> pd.Timestamp:
    return ts.tz_localize(None) if ts.tzinfo is not None else ts


class TransactionStore:
    """CRUD facade for transactions with change notifications."""

    def __init__(self, db_path: Optional[Any] = None):
        self.db_path = db_path
        self._listeners: List[Listener] = []

    # Observers ---------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` for change events.  Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, event: ChangeEvent) -> None:
        for listener in list(self._listeners):
            listener(event)

    # Queries -----------------------------------------------------------------

    def list(self, window: Optional[DateWindow] = None) -> List[Transaction]:
        """Transactions inside ``window`` (all of them when omitted), newest first."""
        start, end = (window.start, window.end) if window is not None else (None, None)
        rows = self._run("list transactions", db.fetch_transaction_rows, start, end, self.db_path)
        return [Transaction.from_row(row) for row in rows]

    def frame(self, window: Optional[DateWindow] = None) -> pd.DataFrame:
        start, end = (window.start, window.end) if window is not None else (None, None)
        return self._run("load transactions", db.fetch_transactions, start, end, self.db_path)

    def get(self, transaction_id: str) -> Transaction:
        row = self._run("load transaction", db.get_transaction_row, transaction_id, self.db_path)
        if row is None:
            raise NotFoundError(f"No transaction with id {transaction_id}")
        return Transaction.from_row(row)

    def count(self) -> int:
        return self._run("count transactions", db.count_transactions, self.db_path)

    # Mutations ---------------------------------------------------------------

    def create(
        self,
        amount: Any,
        kind: Any,
        date: Any,
        note: Optional[str] = None,
        category_id: Optional[str] = None,
        currency_code: str = DEFAULT_CURRENCY,
    ) -> Transaction:
        """Validate and persist a new transaction.

        Raises:
            ValidationError: bad amount, kind, date or currency.  Nothing is written.
            PersistenceError: the database rejected the insert.
        """
        parsed_amount, parsed_kind, stored_date, currency = validate_fields(
            amount, kind, date, currency_code
        )
        record: Dict[str, Any] = {
            'id': uuid.uuid4().hex,
            'date': stored_date,
            'amount': str(parsed_amount),
            'kind': int(parsed_kind),
            'note': normalize_note(note),
            'currency_code': currency,
            'category_id': category_id or None,
        }
        self._run("create transaction", db.insert_transaction, record, self.db_path)
        transaction = Transaction.from_row(record)
        logger.info("Created %s %s on %s (%s)", parsed_kind.label.lower(), parsed_amount, stored_date[:10], record['id'])
        self._notify(ChangeEvent('insert', transaction.id))
        return transaction

    def delete(self, transaction_id: str, missing_ok: bool = True) -> bool:
        """Permanently remove a transaction.

        Returns ``True`` when a row was removed and ``False`` for an unknown id.

        Raises:
            NotFoundError: unknown id and ``missing_ok`` is false.
            PersistenceError: the database rejected the delete.
        """
        removed = self._run("delete transaction", db.delete_transaction, transaction_id, self.db_path)
        if not removed:
            if not missing_ok:
                raise NotFoundError(f"No transaction with id {transaction_id}")
            logger.debug("Delete ignored, no transaction with id %s", transaction_id)
            return False
        logger.info("Deleted transaction %s", transaction_id)
        self._notify(ChangeEvent('delete', transaction_id))
        return True

    # Internal ----------------------------------------------------------------

    def _run(self, action: str, func: Callable[..., Any], *args: Any) -> Any:
        try:
            return func(*args)
        except sqlite3.Error as exc:
            logger.exception("Failed to %s", action)
            raise PersistenceError(f"Failed to {action}: {exc}") from exc


class LiveQuery:
    """Newest-first transaction list for a window, refreshed on store changes."""

    def __init__(self, store: TransactionStore, window: Optional[DateWindow] = None):
        self.store = store
        self.window = window
        self.results: List[Transaction] = store.list(window)
        self._unsubscribe: Optional[Callable[[], None]] = store.subscribe(self._on_change)

    def _on_change(self, event: ChangeEvent) -> None:
        self.refresh()

    def refresh(self) -> List[Transaction]:
        self.results = self.store.list(self.window)
        return self.results

    def set_window(self, window: Optional[DateWindow]) -> List[Transaction]:
        self.window = window
        return self.refresh()

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def __len__(self) -> int:
        return len(self.results)

    def __iter__(self):
        return iter(self.results)
