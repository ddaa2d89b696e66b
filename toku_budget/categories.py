"""Category records: first-run seeding, lookup and deletion policy."""

from __future__ import annotations

import sqlite3
import uuid
from typing import Any, Dict, List, Mapping, Optional

from . import config, db
from .errors import PersistenceError, ValidationError
from .logging_setup import get_logger
from .models import Category

logger = get_logger(__name__)

DEFAULT_CATEGORIES = [
    "Groceries",
    "Transport",
    "Entertainment",
    "Utilities",
    "Rent",
    "Health",
    "Shopping",
    "Other",
]
DEFAULT_ICON = "tag"
DEFAULT_COLOR = "#6B7280"

# Bump when DEFAULT_CATEGORIES gains entries that existing installs should receive
SEED_VERSION = 1
SEED_MARKER_KEY = "category_seed_version"

DELETE_POLICIES = ("orphan", "restrict")


def _new_record(name: str, icon: str = DEFAULT_ICON, color_hex: str = DEFAULT_COLOR) -> Dict[str, Any]:
    return {'id': uuid.uuid4().hex, 'name': name, 'icon': icon, 'color_hex': color_hex}


def seed_categories(db_path: Optional[Any] = None) -> int:
    """Insert the default categories once per seed version.

    The guard is the ``category_seed_version`` marker rather than an empty
    table, so a category created by hand does not stop a fresh install from
    being seeded.  Names already present are not duplicated.

    Returns:
        Number of categories inserted (0 when the marker is current).
    """
    try:
        marker = db.get_meta(SEED_MARKER_KEY, db_path)
        if marker is not None and marker.isdigit() and int(marker) >= SEED_VERSION:
            logger.debug("Category seed v%s already applied", marker)
            return 0
        existing = {row['name'] for row in db.fetch_category_rows(db_path)}
        records = [_new_record(name) for name in DEFAULT_CATEGORIES if name not in existing]
        inserted = db.insert_categories(records, meta={SEED_MARKER_KEY: str(SEED_VERSION)}, path=db_path)
    except sqlite3.Error as exc:
        logger.exception("Category seeding failed")
        raise PersistenceError(f"Failed to seed categories: {exc}") from exc
    logger.info("Seeded %d default categories (seed v%d)", inserted, SEED_VERSION)
    return inserted


def list_categories(db_path: Optional[Any] = None) -> List[Category]:
    """All categories sorted by name."""
    try:
        rows = db.fetch_category_rows(db_path)
    except sqlite3.Error as exc:
        raise PersistenceError(f"Failed to load categories: {exc}") from exc
    return [Category.from_row(row) for row in rows]


def create_category(
    name: str,
    icon: str = DEFAULT_ICON,
    color_hex: str = DEFAULT_COLOR,
    db_path: Optional[Any] = None,
) -> Category:
    cleaned = (name or '').strip()
    if not cleaned:
        raise ValidationError("Category name cannot be empty")
    record = _new_record(cleaned, icon, color_hex)
    try:
        db.insert_categories([record], path=db_path)
    except sqlite3.Error as exc:
        logger.exception("Failed to create category %r", cleaned)
        raise PersistenceError(f"Failed to create category: {exc}") from exc
    logger.info("Created category %r", cleaned)
    return Category(**record)


def delete_category(category_id: str, policy: Optional[str] = None, db_path: Optional[Any] = None) -> bool:
    """Delete a category under the configured reference policy.

    ``orphan`` leaves referencing transactions pointing at the missing id,
    which renders as the placeholder label.  ``restrict`` raises
    :class:`PersistenceError` while references remain.
    """
    policy = (policy or config.CATEGORY_DELETE_POLICY).lower()
    if policy not in DELETE_POLICIES:
        raise ValidationError(f"Unknown category delete policy: {policy!r}")
    try:
        removed = db.delete_category(category_id, restrict=(policy == 'restrict'), path=db_path)
    except sqlite3.Error as exc:
        logger.exception("Failed to delete category %s", category_id)
        raise PersistenceError(f"Failed to delete category: {exc}") from exc
    if removed:
        logger.info("Deleted category %s (policy=%s)", category_id, policy)
    return bool(removed)


def category_lookup(categories: List[Category]) -> Dict[str, Category]:
    return {c.id: c for c in categories}


def category_label(category_id: Optional[str], lookup: Mapping[str, Category]) -> str:
    """Name of the referenced category, or the placeholder when it is unset or gone."""
    if not category_id:
        return config.CATEGORY_PLACEHOLDER
    category = lookup.get(category_id)
    return category.name if category is not None else config.CATEGORY_PLACEHOLDER
