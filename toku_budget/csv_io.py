"""CSV import and export for the Import/Export menu.

Export writes one row per transaction, newest first.  Import pushes every
row through :meth:`TransactionStore.create` so it is validated exactly like
the add form; rows that fail validation are skipped and reported.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Any, Dict, List, Optional, Tuple, Union

import pandas as pd

from . import categories as cat
from .date_window import DateWindow
from .errors import ValidationError
from .logging_setup import get_logger
from .models import TxKind
from .transactions import TransactionStore, validate_fields

logger = get_logger(__name__)

EXPORT_COLUMNS = ['id', 'date', 'kind', 'amount', 'currency_code', 'category', 'note']
REQUIRED_IMPORT_COLUMNS = {'date', 'amount'}

CsvTarget = Union[str, Path, IO[str], IO[bytes]]


@dataclass
class ImportResult:
    inserted: int = 0
    skipped: List[Tuple[int, str]] = field(default_factory=list)
    created_categories: List[str] = field(default_factory=list)


def export_transactions_csv(
    store: TransactionStore,
    target: CsvTarget,
    window: Optional[DateWindow] = None,
) -> int:
    """Write transactions (optionally limited to ``window``) as CSV.

    Returns the number of rows written.
    """
    lookup = cat.category_lookup(cat.list_categories(store.db_path))
    rows = []
    for txn in store.list(window):
        category = lookup.get(txn.category_id) if txn.category_id else None
        rows.append({
            'id': txn.id,
            'date': txn.date.isoformat(),
            'kind': txn.kind.name.lower(),
            'amount': str(txn.amount),
            'currency_code': txn.currency_code,
            'category': category.name if category else '',
            'note': txn.note or '',
        })
    df = pd.DataFrame(rows, columns=EXPORT_COLUMNS)
    if isinstance(target, (str, Path)):
        Path(target).parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(target, index=False)
    logger.info("Exported %d transactions", len(df))
    return len(df)


def _normalise_header(name: Any) -> str:
    return str(name).strip().lower().replace(' ', '_')


def import_transactions_csv(store: TransactionStore, source: CsvTarget) -> ImportResult:
    """Create a transaction for every valid CSV row.

    Recognised columns: ``date`` and ``amount`` (required), ``kind``
    (``expense``/``income``, default expense), ``note``, ``category``
    (matched by name, created when unknown) and ``currency_code``.

    Raises:
        ValidationError: the file is not readable CSV or lacks a required column.
        PersistenceError: the database failed mid-import; rows already
            created stay in place.
    """
    try:
        df = pd.read_csv(source, dtype=str, keep_default_na=False)
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as exc:
        raise ValidationError(f"Could not read CSV: {exc}") from exc
    df = df.rename(columns=_normalise_header)
    missing = REQUIRED_IMPORT_COLUMNS - set(df.columns)
    if missing:
        raise ValidationError(f"CSV is missing required column(s): {', '.join(sorted(missing))}")

    by_name: Dict[str, str] = {
        c.name.strip().lower(): c.id for c in cat.list_categories(store.db_path)
    }
    result = ImportResult()

    for idx, row in df.iterrows():
        line_no = int(idx) + 2  # header is line 1
        category_name = (row.get('category') or '').strip()
        kind = (row.get('kind') or TxKind.EXPENSE.name).strip()
        currency_code = (row.get('currency_code') or '').strip() or 'USD'
        category_id = None
        try:
            # a rejected row must not leave a new category behind
            validate_fields(row['amount'], kind, row['date'], currency_code)
            if category_name:
                category_id = by_name.get(category_name.lower())
                if category_id is None:
                    created = cat.create_category(category_name, db_path=store.db_path)
                    by_name[category_name.lower()] = created.id
                    category_id = created.id
                    result.created_categories.append(created.name)
            store.create(
                amount=row['amount'],
                kind=kind,
                date=row['date'],
                note=row.get('note'),
                category_id=category_id,
                currency_code=currency_code,
            )
        except ValidationError as exc:
            result.skipped.append((line_no, str(exc)))
            continue
        result.inserted += 1

    logger.info(
        "Imported %d transactions, skipped %d invalid rows", result.inserted, len(result.skipped)
    )
    return result
