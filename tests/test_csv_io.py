"""Import/export tests using in-memory CSV buffers."""

from __future__ import annotations

import io
from decimal import Decimal

import pandas as pd
import pytest

from toku_budget import categories as cat
from toku_budget.csv_io import EXPORT_COLUMNS, export_transactions_csv, import_transactions_csv
from toku_budget.date_window import DateRangeMode, make_window
from toku_budget.errors import ValidationError
from toku_budget.models import TxKind
from toku_budget.transactions import TransactionStore


def test_export_writes_window_newest_first(store: TransactionStore) -> None:
    rent = cat.create_category("Rent")
    store.create("1200.00", TxKind.EXPENSE, "2025-05-01", category_id=rent.id)
    store.create("3000", TxKind.INCOME, "2025-05-15", note="Salary")
    store.create("9.99", TxKind.EXPENSE, "2025-06-02")

    buffer = io.StringIO()
    count = export_transactions_csv(store, buffer, window=make_window(DateRangeMode.MONTH, "2025-05-16"))

    assert count == 2
    exported = pd.read_csv(io.StringIO(buffer.getvalue()), dtype=str, keep_default_na=False)
    assert list(exported.columns) == EXPORT_COLUMNS
    assert list(exported['kind']) == ['income', 'expense']
    assert list(exported['amount']) == ['3000', '1200.00']
    assert list(exported['category']) == ['', 'Rent']
    assert list(exported['note']) == ['Salary', '']


def test_export_to_path(store: TransactionStore, tmp_path) -> None:
    store.create("5", TxKind.EXPENSE, "2025-05-01")
    target = tmp_path / "exports" / "all.csv"
    assert export_transactions_csv(store, target) == 1
    assert target.exists()


def test_import_validates_each_row(store: TransactionStore) -> None:
    cat.create_category("Groceries")
    source = io.StringIO(
        "Date,Amount,Kind,Category,Note\n"
        "2025-05-01,45.10,expense,groceries,Weekly shop\n"
        "2025-05-02,0,expense,,Zero\n"
        "2025-05-03,2500,income,Salary,\n"
        "not a date,10,expense,,\n"
        "2025-05-04,12.00,,Coffee,\n"
    )

    result = import_transactions_csv(store, source)

    assert result.inserted == 3
    assert [line for line, _ in result.skipped] == [3, 5]
    assert sorted(result.created_categories) == ["Coffee", "Salary"]

    transactions = store.list()
    assert [t.amount for t in transactions] == [Decimal("12.00"), Decimal("2500"), Decimal("45.10")]
    assert transactions[0].kind is TxKind.EXPENSE
    assert transactions[1].kind is TxKind.INCOME
    assert transactions[1].note is None

    lookup = cat.category_lookup(cat.list_categories())
    assert lookup[transactions[2].category_id].name == "Groceries"


def test_import_requires_date_and_amount(store: TransactionStore) -> None:
    with pytest.raises(ValidationError):
        import_transactions_csv(store, io.StringIO("Date,Note\n2025-05-01,hi\n"))
    assert store.count() == 0


def test_export_then_import_preserves_amounts(store: TransactionStore, tmp_path) -> None:
    store.create("0.10", TxKind.EXPENSE, "2025-05-01 10:15")
    target = tmp_path / "out.csv"
    export_transactions_csv(store, target)

    store.delete(store.list()[0].id)
    result = import_transactions_csv(store, target)

    assert result.inserted == 1
    restored = store.list()[0]
    assert restored.amount == Decimal("0.10")
    assert restored.date == pd.Timestamp("2025-05-01 10:15")


def test_rejected_row_creates_no_category(store: TransactionStore) -> None:
    source = io.StringIO(
        "date,amount,category\n"
        "2025-05-01,0,Brandnew\n"
        "someday,5,Otherbrand\n"
        "2025-05-02,5,Fresh\n"
    )

    result = import_transactions_csv(store, source)

    assert result.inserted == 1
    assert [line for line, _ in result.skipped] == [2, 3]
    assert result.created_categories == ["Fresh"]
    assert [c.name for c in cat.list_categories()] == ["Fresh"]


def test_import_reads_uploaded_bytes(store: TransactionStore) -> None:
    result = import_transactions_csv(store, io.BytesIO(b"Date,Amount,Kind\n2025-05-01,7.25,income\n"))
    assert result.inserted == 1
    assert store.list()[0].kind is TxKind.INCOME


def test_import_rejects_empty_file(store: TransactionStore) -> None:
    with pytest.raises(ValidationError):
        import_transactions_csv(store, io.StringIO(""))
