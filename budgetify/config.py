"""Configuration management for Budgetify.

This module centralizes configuration values including paths,
defaults, and environment variable overrides.  Numeric defaults used by
the aggregation functions are kept in the bundled ``settings.json`` so
they can be tuned without touching code.
"""

from __future__ import annotations

import json
import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional, Union

# Base project root - assumes this file is in budgetify/
_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

# Data directories
DATA_DIR = Path(os.getenv("BUDGETIFY_DATA_DIR", _PROJECT_ROOT / "data"))

# Database
DB_PATH = Path(
    os.getenv("BUDGETIFY_DB_PATH", DATA_DIR / "budgetify.db")
).resolve()

# Display currency used by the formatting helpers
DEFAULT_CURRENCY = os.getenv("BUDGETIFY_CURRENCY", "INR")

LOG_LEVEL = os.getenv("BUDGETIFY_LOG_LEVEL", "INFO")

SETTINGS_PATH = Path(__file__).parent / "settings.json"


def ensure_data_directories() -> None:
    """Create all required data directories if they don't exist."""
    DATA_DIR.mkdir(parents=True, exist_ok=True)


def configure_logging(level: Optional[Union[str, int]] = None) -> None:
    """Configure the root ``budgetify`` logger.

    Args:
        level: Logging level name or number. Defaults to ``BUDGETIFY_LOG_LEVEL``.
    """
    logging.basicConfig(
        level=level or LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@lru_cache(maxsize=None)
def load_settings(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load the settings file.

    Args:
        path: Alternate settings file, mainly for tests.

    Returns:
        Dictionary containing the settings

    Raises:
        FileNotFoundError: If the settings file doesn't exist
        json.JSONDecodeError: If the settings file is invalid JSON
    """
    target = path or SETTINGS_PATH
    if not target.exists():
        raise FileNotFoundError(f"Settings file not found: {target}")
    with open(target, 'r', encoding='utf-8') as f:
        return json.load(f)


def get_setting(*keys: str, default: Any = None) -> Any:
    """Get a nested settings value by key path.

    Example:
        >>> get_setting('projection', 'default_annual_rate')
        10
    """
    try:
        value = load_settings()
        for key in keys:
            value = value[key]
        return value
    except (KeyError, FileNotFoundError):
        return default
