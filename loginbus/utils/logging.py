"""Root logger setup for the CLI.

``LOGINBUS_LOG_LEVEL`` (a level name or number) wins over everything else.
Otherwise a truthy ``LOGINBUS_DEBUG`` forces DEBUG. Without either variable
the level comes from the caller or from the settings ``debug_logging`` flag.
"""

from __future__ import annotations

import logging
import os
from typing import Optional, Union

LEVEL_ENV = "LOGINBUS_LOG_LEVEL"
DEBUG_ENV = "LOGINBUS_DEBUG"

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_DATEFMT = "%H:%M:%S"
_TRUTHY = {"1", "true", "yes", "on"}


def _level_from_text(text: str) -> Optional[int]:
    text = text.strip()
    if text.isdigit():
        return int(text)
    level = logging.getLevelName(text.upper())
    return level if isinstance(level, int) else None


def env_level() -> Optional[int]:
    """Level forced by the environment, or ``None`` when nothing is set."""
    raw = os.getenv(LEVEL_ENV, "")
    if raw.strip():
        level = _level_from_text(raw)
        return logging.INFO if level is None else level
    if os.getenv(DEBUG_ENV, "").strip().lower() in _TRUTHY:
        return logging.DEBUG
    return None


def configure_root(default_level: Union[int, str] = logging.INFO) -> int:
    """Install the compact format once and set the root level.

    Returns the effective level.
    """
    if isinstance(default_level, str):
        parsed = _level_from_text(default_level)
        default_level = logging.INFO if parsed is None else parsed
    level = env_level()
    if level is None:
        level = default_level

    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level, format=_FORMAT, datefmt=_DATEFMT)
    root.setLevel(level)
    return level


def apply_preferences(debug_enabled: bool) -> int:
    """Apply the settings debug flag unless the environment overrides it."""
    level = env_level()
    if level is None:
        level = logging.DEBUG if debug_enabled else logging.INFO
    logging.getLogger().setLevel(level)
    return level


def env_debug() -> bool:
    level = env_level()
    return level is not None and level <= logging.DEBUG
