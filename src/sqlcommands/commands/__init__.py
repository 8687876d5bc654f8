"""
SQL command value objects and the upsert composers dialects plug in.
"""

from .types import SqlCommand, SqlFilter, SqlParameter
from .upsert import merge, merge_from_dual, on_conflict, on_duplicate_key

__all__ = [
    "SqlCommand",
    "SqlFilter",
    "SqlParameter",
    "merge",
    "merge_from_dual",
    "on_conflict",
    "on_duplicate_key",
]
