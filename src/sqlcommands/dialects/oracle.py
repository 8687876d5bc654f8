"""
Oracle dialect profile using named placeholders (python-oracledb).
"""

from __future__ import annotations

import enum
import uuid
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import TYPE_CHECKING, Final

from ..commands.upsert import merge_from_dual
from .base import UNLIMITED, Dialect

if TYPE_CHECKING:
    from ..metadata.descriptors import TableDescriptor


# Oracle has no time-of-day type; datetime.time fields need an explicit db_type.
TYPE_MAP: Final = {
    int: "NUMBER(19)",
    bool: "NUMBER(1)",
    float: "BINARY_DOUBLE",
    Decimal: "NUMBER(18,2)",
    str: "NVARCHAR2(2000)",
    bytes: "BLOB",
    datetime: "TIMESTAMP",
    date: "DATE",
    timedelta: "INTERVAL DAY TO SECOND",
    uuid.UUID: "RAW(16)",
    enum.Enum: "NUMBER(10)",
}


def offset_fetch(table: "TableDescriptor", offset: int, max_results: int) -> str:
    clause = ""
    if offset > 0:
        clause += f" OFFSET {offset} ROWS"
    if max_results != UNLIMITED:
        clause += f" FETCH NEXT {max_results} ROWS ONLY"
    return clause


ORACLE: Final[Dialect] = Dialect(
    name="oracle",
    param_style="named",
    quote_chars=('"', '"'),
    type_map=TYPE_MAP,
    auto_increment="GENERATED BY DEFAULT AS IDENTITY",
    paginate=offset_fetch,
    upsert=merge_from_dual,
    aliases=("oracledb",),
    identity_before_key=True,
)
