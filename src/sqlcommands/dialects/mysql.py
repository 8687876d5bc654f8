"""
MySQL dialect profile using pyformat placeholders.
"""

from __future__ import annotations

import enum
import uuid
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import TYPE_CHECKING, Final

from ..commands.upsert import on_duplicate_key
from .base import UNLIMITED, Dialect

if TYPE_CHECKING:
    from ..metadata.descriptors import TableDescriptor


# Largest BIGINT UNSIGNED; MySQL has no LIMIT ALL.
MAX_LIMIT: Final = 18446744073709551615

TYPE_MAP: Final = {
    int: "BIGINT",
    bool: "TINYINT(1)",
    float: "DOUBLE",
    Decimal: "DECIMAL(18,2)",
    str: "VARCHAR(255)",
    bytes: "BLOB",
    datetime: "DATETIME",
    date: "DATE",
    time: "TIME",
    timedelta: "TIME",
    uuid.UUID: "CHAR(36)",
    enum.Enum: "INT",
}


def limit_offset(table: "TableDescriptor", offset: int, max_results: int) -> str:
    if offset == 0 and max_results == UNLIMITED:
        return ""
    limit = MAX_LIMIT if max_results == UNLIMITED else max_results
    clause = f" LIMIT {limit}"
    if offset > 0:
        clause += f" OFFSET {offset}"
    return clause


MYSQL: Final[Dialect] = Dialect(
    name="mysql",
    param_style="pyformat",
    quote_chars=("`", "`"),
    type_map=TYPE_MAP,
    auto_increment="AUTO_INCREMENT",
    paginate=limit_offset,
    upsert=on_duplicate_key,
    aliases=("mariadb", "pymysql"),
)
