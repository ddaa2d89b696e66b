"""Sidebar and toolbar preferences kept between sessions as JSON.

Only the keys of ``DEFAULT_PREFERENCES`` are read or written.  A stored value
whose type differs from the default's is dropped, so a hand-edited or older
file can never put the app into a state it cannot render.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from . import config

DEFAULT_PREFERENCES: Dict[str, Any] = {
    'section': 'overview',
    'range_mode': 'month',
    'currency': config.DEFAULT_CURRENCY,
    'dark_mode': False,
}


def _clean(data: Dict[str, Any]) -> Dict[str, Any]:
    prefs = dict(DEFAULT_PREFERENCES)
    for key, default in DEFAULT_PREFERENCES.items():
        value = data.get(key)
        if type(value) is type(default):
            prefs[key] = value
    return prefs


def load_preferences(path: Optional[Path] = None) -> Dict[str, Any]:
    target = Path(path or config.CACHE_PATH)
    try:
        data = json.loads(target.read_text(encoding='utf-8'))
    except (json.JSONDecodeError, OSError, UnicodeDecodeError):
        return dict(DEFAULT_PREFERENCES)
    return _clean(data) if isinstance(data, dict) else dict(DEFAULT_PREFERENCES)


def save_preferences(prefs: Dict[str, Any], path: Optional[Path] = None) -> None:
    """Write ``prefs`` through a temporary file so a crash never leaves half a file."""
    target = Path(path or config.CACHE_PATH)
    target.parent.mkdir(parents=True, exist_ok=True)
    scratch = target.with_suffix(target.suffix + '.tmp')
    scratch.write_text(json.dumps(_clean(prefs), indent=2, sort_keys=True), encoding='utf-8')
    os.replace(scratch, target)
