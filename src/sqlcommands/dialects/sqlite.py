"""
SQLite dialect profile.
"""

from __future__ import annotations

import enum
import uuid
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import TYPE_CHECKING, Final

from ..commands.upsert import on_conflict
from .base import UNLIMITED, Dialect

if TYPE_CHECKING:
    from ..metadata.descriptors import TableDescriptor


TYPE_MAP: Final = {
    int: "INTEGER",
    bool: "INTEGER",
    float: "REAL",
    Decimal: "REAL",
    str: "TEXT",
    bytes: "BLOB",
    datetime: "TEXT",
    date: "TEXT",
    time: "TEXT",
    timedelta: "TEXT",
    uuid.UUID: "TEXT",
    enum.Enum: "INTEGER",
}


def limit_offset(table: "TableDescriptor", offset: int, max_results: int) -> str:
    if offset == 0 and max_results == UNLIMITED:
        return ""
    # LIMIT -1 is SQLite's "no limit"; OFFSET is only legal after a LIMIT.
    clause = f" LIMIT {max_results}"
    if offset > 0:
        clause += f" OFFSET {offset}"
    return clause


SQLITE: Final[Dialect] = Dialect(
    name="sqlite",
    param_style="named",
    quote_chars=('"', '"'),
    type_map=TYPE_MAP,
    auto_increment="AUTOINCREMENT",
    paginate=limit_offset,
    upsert=on_conflict,
    aliases=("sqlite3",),
)
