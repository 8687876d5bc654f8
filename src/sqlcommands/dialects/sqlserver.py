"""
SQL Server dialect profile using pyformat placeholders (pymssql).
"""

from __future__ import annotations

import enum
import uuid
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import TYPE_CHECKING, Final

from ..commands.upsert import merge
from .base import UNLIMITED, Dialect, DropTableMode, standard_drop_table

if TYPE_CHECKING:
    from ..metadata.descriptors import TableDescriptor


TYPE_MAP: Final = {
    int: "BIGINT",
    bool: "BIT",
    float: "FLOAT",
    Decimal: "DECIMAL(18, 2)",
    str: "NVARCHAR(MAX)",
    bytes: "VARBINARY(MAX)",
    datetime: "DATETIME2",
    date: "DATE",
    time: "TIME",
    timedelta: "TIME",
    uuid.UUID: "UNIQUEIDENTIFIER",
    enum.Enum: "INT",
}


def offset_fetch(table: "TableDescriptor", offset: int, max_results: int) -> str:
    if offset == 0 and max_results == UNLIMITED:
        return ""
    # OFFSET/FETCH is only valid after an ORDER BY.
    clause = "" if table.order_by else " ORDER BY (SELECT NULL)"
    clause += f" OFFSET {offset} ROWS"
    if max_results != UNLIMITED:
        clause += f" FETCH NEXT {max_results} ROWS ONLY"
    return clause


def drop_table(dialect: Dialect, table_name: str, ignore_if_missing: bool, mode: DropTableMode) -> str:
    if mode is DropTableMode.UNSAFE:
        return standard_drop_table(dialect, table_name, ignore_if_missing, mode)
    quoted = dialect.format_table(table_name)
    guard = f"IF NOT EXISTS (SELECT 1 FROM {quoted}) DROP TABLE {quoted};"
    if ignore_if_missing:
        object_name = table_name.replace("'", "''")
        return f"IF OBJECT_ID(N'{object_name}', N'U') IS NOT NULL {guard}"
    return guard


SQLSERVER: Final[Dialect] = Dialect(
    name="sqlserver",
    param_style="pyformat",
    quote_chars=("[", "]"),
    type_map=TYPE_MAP,
    auto_increment="IDENTITY",
    paginate=offset_fetch,
    upsert=merge,
    drop_modes=frozenset({DropTableMode.UNSAFE, DropTableMode.SAFE}),
    drop_table=drop_table,
    aliases=("mssql", "tsql", "pymssql"),
)
