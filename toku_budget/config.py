"""Configuration management for Toku Budget.

This module centralizes all configuration values including paths,
defaults, and environment variable overrides.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

# Base project root - assumes this file is in toku_budget/
_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

# Data directories
DATA_DIR = Path(os.getenv("TOKU_DATA_DIR", _PROJECT_ROOT / "data"))
EXPORTS_DIR = DATA_DIR / "exports"

# Database
DB_PATH = Path(
    os.getenv("TOKU_DB_PATH", DATA_DIR / "toku_budget.db")
).resolve()

# UI preferences (range mode, section, currency, appearance)
CACHE_PATH = DATA_DIR / "preferences.json"

# Currency handling
DEFAULT_CURRENCY = "USD"
DISPLAY_CURRENCIES = ("USD", "JPY")

# Time zone used to derive date windows; None means the machine's local time
TIMEZONE: Optional[str] = os.getenv("TOKU_TIMEZONE") or None

# What happens to transactions when their category is deleted:
#   "orphan"   - keep the dangling reference, render the placeholder label
#   "restrict" - refuse the delete while any transaction references it
CATEGORY_DELETE_POLICY = os.getenv("TOKU_CATEGORY_DELETE_POLICY", "orphan").strip().lower()

CATEGORY_PLACEHOLDER = "—"


def ensure_data_directories() -> None:
    """Create all required data directories if they don't exist."""
    for directory in [DATA_DIR, EXPORTS_DIR]:
        directory.mkdir(parents=True, exist_ok=True)


def get_db_path() -> str:
    """Get the database path as a string."""
    return str(DB_PATH)
