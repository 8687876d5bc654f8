"""
Utility helpers shared across sqlcommands packages.
"""

from .config import resolve_log_level, resolve_slow_query_ms
from .logging import configure_logging, get_logger, time_call

__all__ = [
    "configure_logging",
    "get_logger",
    "resolve_log_level",
    "resolve_slow_query_ms",
    "time_call",
]
