"""
Rendering helpers shared by the command builder and upsert composers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, List, Optional

from ..errors import InvalidArgumentError
from .types import SqlFilter, SqlParameter

if TYPE_CHECKING:
    from ..dialects.base import Dialect
    from ..metadata.descriptors import ColumnDescriptor, ColumnValue


def bind_value(
    dialect: "Dialect",
    column: "ColumnDescriptor",
    current: "ColumnValue",
    parameters: List[SqlParameter],
) -> str:
    """
    Return the SQL for a column value: a placeholder registered in
    ``parameters`` or the literal ``NULL`` for an absent value.
    """
    if not current.present:
        return "NULL"
    parameters.append(SqlParameter(column.attribute, current.value))
    return dialect.placeholder(column.attribute)


def equality(
    dialect: "Dialect",
    column: "ColumnDescriptor",
    current: "ColumnValue",
    parameters: List[SqlParameter],
) -> str:
    return f"{dialect.quote_identifier(column.name)} = {bind_value(dialect, column, current, parameters)}"


def merge_filter(
    dialect: "Dialect",
    conditions: List[str],
    parameters: List[SqlParameter],
    sql_filter: Optional[SqlFilter],
) -> None:
    """
    AND the caller's filter into ``conditions`` and append its bindings.

    A filter binding reusing a builder parameter name must carry the same
    value; otherwise one of the two would be silently lost when bound by name.
    """
    if sql_filter is None or sql_filter.is_empty:
        return
    known = {parameter.name: parameter.value for parameter in parameters}
    for parameter in sql_filter.parameters:
        if parameter.name in known:
            if known[parameter.name] != parameter.value:
                raise InvalidArgumentError(
                    "filter",
                    parameter.name,
                    "reuses a parameter name already bound to a different value",
                )
            continue
        parameters.append(parameter)
        known[parameter.name] = parameter.value
    conditions.append(f"({dialect.escape_text(sql_filter.text.strip())})")


def where_clause(conditions: Iterable[str]) -> str:
    conditions = list(conditions)
    if not conditions:
        return ""
    return " WHERE " + " AND ".join(conditions)
