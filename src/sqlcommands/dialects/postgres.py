"""
PostgreSQL dialect profile.
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
    int: "BIGINT",
    bool: "BOOLEAN",
    float: "DOUBLE PRECISION",
    Decimal: "NUMERIC(18, 2)",
    str: "TEXT",
    bytes: "BYTEA",
    datetime: "TIMESTAMP",
    date: "DATE",
    time: "TIME",
    timedelta: "INTERVAL",
    uuid.UUID: "UUID",
    enum.Enum: "INTEGER",
}


def limit_offset(table: "TableDescriptor", offset: int, max_results: int) -> str:
    parts: list[str] = []
    if max_results != UNLIMITED:
        parts.append(f" LIMIT {max_results}")
    if offset > 0:
        parts.append(f" OFFSET {offset}")
    return "".join(parts)


POSTGRES: Final[Dialect] = Dialect(
    name="postgresql",
    param_style="pyformat",
    quote_chars=('"', '"'),
    type_map=TYPE_MAP,
    auto_increment="GENERATED BY DEFAULT AS IDENTITY",
    paginate=limit_offset,
    upsert=on_conflict,
    aliases=("postgres", "psycopg", "pg"),
)
