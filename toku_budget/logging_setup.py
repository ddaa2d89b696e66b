"""Package logging.

Modules log through ``get_logger(__name__)``.  Nothing is printed until the
Streamlit entry point (or a script) calls :func:`configure_logging`, which
Streamlit may do on every rerun of the app script.
"""

from __future__ import annotations

import logging
import os
from typing import IO, Optional, Union

PACKAGE_LOGGER = "toku_budget"
LOG_FORMAT = "%(asctime)s %(levelname)-7s [%(name)s] %(message)s"
_HANDLER_NAME = "toku_budget.console"

logging.getLogger(PACKAGE_LOGGER).addHandler(logging.NullHandler())


def resolve_level(level: Union[int, str, None] = None) -> int:
    """Numeric level from ``level``, else ``TOKU_LOG_LEVEL``, else INFO.

    Unknown names fall back to INFO.
    """
    if level is None:
        level = os.getenv("TOKU_LOG_LEVEL") or logging.INFO
    if isinstance(level, int):
        return level
    text = str(level).strip().upper()
    if text.isdigit():
        return int(text)
    value = logging.getLevelName(text)
    return value if isinstance(value, int) else logging.INFO


def configure_logging(
    level: Union[int, str, None] = None,
    stream: Optional[IO[str]] = None,
) -> logging.Logger:
    """Attach the console handler to the package logger.

    Calling again only updates the level; the handler is never duplicated.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    resolved = resolve_level(level)
    handler = next((h for h in logger.handlers if h.get_name() == _HANDLER_NAME), None)
    if handler is None:
        handler = logging.StreamHandler(stream)
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False
    logger.setLevel(resolved)
    return logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
