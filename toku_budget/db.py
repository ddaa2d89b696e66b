from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional

import pandas as pd

from .config import DB_PATH
from .errors import PersistenceError

SCHEMA_SQL = """
PRAGMA journal_mode=WAL;
PRAGMA synchronous=NORMAL;

CREATE TABLE IF NOT EXISTS categories (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    icon TEXT,
    color_hex TEXT
);

CREATE INDEX IF NOT EXISTS ix_category_name ON categories (name);

CREATE TABLE IF NOT EXISTS transactions (
    id TEXT PRIMARY KEY,
    date TEXT NOT NULL,
    amount TEXT NOT NULL,
    kind INTEGER NOT NULL CHECK (kind IN (0, 1)),
    note TEXT,
    currency_code TEXT NOT NULL DEFAULT 'USD',
    category_id TEXT,
    created_at TEXT
);

CREATE INDEX IF NOT EXISTS ix_txn_date ON transactions (date);
CREATE INDEX IF NOT EXISTS ix_txn_category ON transactions (category_id);

CREATE TABLE IF NOT EXISTS meta (
    key TEXT PRIMARY KEY,
    value TEXT
);
"""

# Fixed width so that text order in SQLite equals chronological order
ISO_FORMAT = "%Y-%m-%dT%H:%M:%S.%f"

TRANSACTION_COLUMNS = ["id", "date", "amount", "kind", "note", "currency_code", "category_id"]


def _resolve_path(path: Optional[Any]) -> Path:
    # DB_PATH is looked up at call time so tests can monkeypatch it
    return Path(path) if path else Path(DB_PATH)


@contextmanager
def connect(path: Optional[Any] = None) -> Iterator[sqlite3.Connection]:
    target = _resolve_path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(target))
    conn.row_factory = sqlite3.Row
    try:
        yield conn
    finally:
        conn.close()


def init_db(path: Optional[Any] = None) -> None:
    with connect(path) as conn:
        conn.executescript(SCHEMA_SQL)
        conn.commit()


def to_iso_timestamp(value: Any) -> str:
    """Convert a date-like value to the stored text form.

    Tz-aware values keep their wall-clock time; the zone itself is not
    stored.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValueError("A transaction date is required")
    ts = pd.Timestamp(value)
    if pd.isna(ts):
        raise ValueError(f"Unparseable date: {value!r}")
    if ts.tzinfo is not None:
        ts = ts.tz_localize(None)
    return ts.strftime(ISO_FORMAT)


# ---------------------------------------------------------------------------
# Transactions
# ---------------------------------------------------------------------------


def insert_transaction(record: Dict[str, Any], path: Optional[Any] = None) -> None:
    """Insert one transaction row.  ``record`` holds the stored column values."""
    sql = (
        "INSERT INTO transactions (id, date, amount, kind, note, currency_code, category_id, created_at) "
        "VALUES (:id, :date, :amount, :kind, :note, :currency_code, :category_id, :created_at)"
    )
    payload = dict(record)
    payload.setdefault("created_at", datetime.utcnow().strftime(ISO_FORMAT))
    with connect(path) as conn:
        conn.execute(sql, payload)
        conn.commit()


def delete_transaction(transaction_id: str, path: Optional[Any] = None) -> int:
    """Delete a transaction by id.  Returns the number of rows removed."""
    with connect(path) as conn:
        cursor = conn.execute("DELETE FROM transactions WHERE id = ?", (transaction_id,))
        conn.commit()
        return cursor.rowcount


def _window_clause(start: Any, end: Any) -> tuple[str, List[Any]]:
    where: List[str] = []
    params: List[Any] = []
    if start is not None:
        where.append("date >= ?")
        params.append(to_iso_timestamp(start))
    if end is not None:
        where.append("date < ?")
        params.append(to_iso_timestamp(end))
    clause = (" WHERE " + " AND ".join(where)) if where else ""
    return clause, params


def fetch_transaction_rows(
    start: Any = None,
    end: Any = None,
    path: Optional[Any] = None,
) -> List[sqlite3.Row]:
    """Rows with ``start <= date < end``, newest first.

    Rows sharing a date come back in reverse insertion order.
    """
    clause, params = _window_clause(start, end)
    sql = (
        f"SELECT {', '.join(TRANSACTION_COLUMNS)} FROM transactions{clause} "
        "ORDER BY date DESC, rowid DESC"
    )
    with connect(path) as conn:
        return conn.execute(sql, params).fetchall()


def fetch_transactions(
    start: Any = None,
    end: Any = None,
    path: Optional[Any] = None,
) -> pd.DataFrame:
    """Same rows as :func:`fetch_transaction_rows` as a DataFrame.

    ``amount`` holds ``Decimal`` values and ``date`` is datetime64.
    """
    rows = fetch_transaction_rows(start, end, path)
    df = pd.DataFrame([tuple(r) for r in rows], columns=TRANSACTION_COLUMNS)
    df['date'] = pd.to_datetime(df['date'])
    df['amount'] = df['amount'].map(Decimal)
    return df


def get_transaction_row(transaction_id: str, path: Optional[Any] = None) -> Optional[sqlite3.Row]:
    with connect(path) as conn:
        return conn.execute(
            f"SELECT {', '.join(TRANSACTION_COLUMNS)} FROM transactions WHERE id = ?",
            (transaction_id,),
        ).fetchone()


def count_transactions(path: Optional[Any] = None) -> int:
    with connect(path) as conn:
        return conn.execute("SELECT COUNT(*) FROM transactions").fetchone()[0]


# ---------------------------------------------------------------------------
# Categories and metadata
# ---------------------------------------------------------------------------


def fetch_category_rows(path: Optional[Any] = None) -> List[sqlite3.Row]:
    with connect(path) as conn:
        return conn.execute(
            "SELECT id, name, icon, color_hex FROM categories ORDER BY name ASC, id ASC"
        ).fetchall()


def insert_categories(
    records: Iterable[Dict[str, Any]],
    meta: Optional[Dict[str, str]] = None,
    path: Optional[Any] = None,
) -> int:
    """Insert category rows and upsert ``meta`` entries in one commit.

    Returns the number of categories inserted.
    """
    rows = [
        (r["id"], r["name"], r.get("icon"), r.get("color_hex"))
        for r in records
    ]
    with connect(path) as conn:
        conn.executemany(
            "INSERT INTO categories (id, name, icon, color_hex) VALUES (?, ?, ?, ?)",
            rows,
        )
        for key, value in (meta or {}).items():
            conn.execute(
                "INSERT INTO meta (key, value) VALUES (?, ?) "
                "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                (key, value),
            )
        conn.commit()
    return len(rows)


def delete_category(category_id: str, restrict: bool = False, path: Optional[Any] = None) -> int:
    """Delete a category.  Returns the number of rows removed.

    With ``restrict`` the delete is refused while transactions reference the
    category.  Otherwise those transactions keep the dangling id.
    """
    with connect(path) as conn:
        if restrict:
            references = conn.execute(
                "SELECT COUNT(*) FROM transactions WHERE category_id = ?",
                (category_id,),
            ).fetchone()[0]
            if references:
                raise PersistenceError(
                    f"Category {category_id} is referenced by {references} transaction(s)"
                )
        cursor = conn.execute("DELETE FROM categories WHERE id = ?", (category_id,))
        conn.commit()
        return cursor.rowcount


def get_meta(key: str, path: Optional[Any] = None) -> Optional[str]:
    with connect(path) as conn:
        row = conn.execute("SELECT value FROM meta WHERE key = ?", (key,)).fetchone()
    return row[0] if row else None
