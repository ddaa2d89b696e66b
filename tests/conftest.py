from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from toku_budget import db as db_mod
from toku_budget.transactions import TransactionStore


@pytest.fixture
def temp_db(tmp_path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the store at a fresh SQLite file."""
    db_path = tmp_path / "toku_budget.db"
    monkeypatch.setattr(db_mod, "DB_PATH", str(db_path))
    db_mod.init_db()
    return db_path


@pytest.fixture
def store(temp_db) -> TransactionStore:
    return TransactionStore()
