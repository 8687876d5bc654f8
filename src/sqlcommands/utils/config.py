"""
Environment-driven settings.
"""

from __future__ import annotations

import logging
import os

SLOW_QUERY_ENV = "SQLCOMMANDS_SLOW_QUERY_MS"
LOG_LEVEL_ENV = "SQLCOMMANDS_LOG_LEVEL"


def resolve_slow_query_ms(default: int = 100, override: int | None = None) -> int:
    """
    Slow-query threshold in milliseconds: explicit override, then the
    environment, then ``default``. Unparseable or negative values fall back.
    """
    if override is not None:
        return max(0, int(override))
    raw = os.getenv(SLOW_QUERY_ENV)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value >= 0 else default


def resolve_log_level(default: int = logging.INFO) -> int:
    raw = os.getenv(LOG_LEVEL_ENV)
    if not raw:
        return default
    level = logging.getLevelName(raw.strip().upper())
    return level if isinstance(level, int) else default
