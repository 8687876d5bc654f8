"""
Upsert composers: the three statement shapes dialects use to insert a row or
update it when its primary key already exists.

Every composer shares one candidate rule: a column is written iff it is not
computed and not excluded by ``UPSERT_ALWAYS`` or, while its value is absent,
``UPSERT_IF_NULL``. Absent candidates are written as ``NULL``.
"""

from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING, List, Optional, Tuple

from ..core.fields import IgnoreRule
from ..errors import MissingPrimaryKeyError, NoEligibleColumnsError
from .render import bind_value
from .types import SqlCommand, SqlParameter

if TYPE_CHECKING:
    from ..core.model import Model
    from ..dialects.base import Dialect
    from ..metadata.descriptors import ColumnDescriptor, ColumnValue, TableDescriptor

Candidate = Tuple["ColumnDescriptor", "ColumnValue"]


def upsert_candidates(table: "TableDescriptor", data: "Model") -> List[Candidate]:
    candidates: List[Candidate] = []
    for column in table.columns:
        if column.is_computed:
            continue
        current = column.read(data)
        if column.excluded(current, IgnoreRule.UPSERT_ALWAYS, IgnoreRule.UPSERT_IF_NULL):
            continue
        candidates.append((column, current))
    if not candidates:
        raise NoEligibleColumnsError(table.model, "UPSERT")
    return candidates


def _insert_head(
    dialect: "Dialect",
    table: "TableDescriptor",
    candidates: List[Candidate],
    parameters: List[SqlParameter],
) -> str:
    columns = ", ".join(dialect.quote_identifier(column.name) for column, _ in candidates)
    values = ", ".join(
        bind_value(dialect, column, current, parameters) for column, current in candidates
    )
    return f"INSERT INTO {dialect.format_table(table.table_name)} ({columns}) VALUES ({values})"


def on_duplicate_key(dialect: "Dialect", table: "TableDescriptor", data: "Model") -> SqlCommand:
    """``INSERT ... ON DUPLICATE KEY UPDATE c = VALUES(c)`` over every candidate."""
    candidates = upsert_candidates(table, data)
    parameters: List[SqlParameter] = []
    head = _insert_head(dialect, table, candidates, parameters)
    updates = ", ".join(
        f"{quoted} = VALUES({quoted})"
        for quoted in (dialect.quote_identifier(column.name) for column, _ in candidates)
    )
    return SqlCommand(f"{head} ON DUPLICATE KEY UPDATE {updates};", parameters)


def on_conflict(dialect: "Dialect", table: "TableDescriptor", data: "Model") -> SqlCommand:
    """
    ``INSERT ... ON CONFLICT (keys) DO UPDATE SET c = excluded.c``.

    The conflict target is the primary-key candidates; key columns are left
    out of the update list.
    """
    candidates = upsert_candidates(table, data)
    keys = [dialect.quote_identifier(column.name) for column, _ in candidates if column.primary_key]
    if not keys:
        raise MissingPrimaryKeyError(
            table.model, "UPSERT", "needs at least one eligible primary key for ON CONFLICT."
        )
    updates = [
        f"{quoted} = excluded.{quoted}"
        for quoted in (
            dialect.quote_identifier(column.name)
            for column, _ in candidates
            if not column.primary_key
        )
    ]
    if not updates:
        raise NoEligibleColumnsError(table.model, "UPSERT", clause="DO UPDATE SET")

    parameters: List[SqlParameter] = []
    head = _insert_head(dialect, table, candidates, parameters)
    return SqlCommand(
        f"{head} ON CONFLICT ({', '.join(keys)}) DO UPDATE SET {', '.join(updates)};",
        parameters,
    )


def merge(
    dialect: "Dialect",
    table: "TableDescriptor",
    data: "Model",
    *,
    source_from: Optional[str] = None,
    alias_keyword: str = "AS ",
) -> SqlCommand:
    """
    ``MERGE INTO t USING (SELECT ... ) source ON (...) WHEN MATCHED ... WHEN NOT MATCHED ...``.

    The source row is a literal projection, one ``value AS column`` per
    candidate, so absent candidates appear as ``NULL AS column``. The matched
    branch is omitted when every candidate is a key.
    """
    candidates = upsert_candidates(table, data)
    target = dialect.format_table(table.table_name)
    parameters: List[SqlParameter] = []

    projection = ", ".join(
        f"{bind_value(dialect, column, current, parameters)} AS {dialect.quote_identifier(column.name)}"
        for column, current in candidates
    )
    from_clause = f" FROM {source_from}" if source_from else ""

    keys = [column for column, _ in candidates if column.primary_key]
    if not keys:
        raise MissingPrimaryKeyError(
            table.model, "UPSERT", "needs at least one eligible primary key for MERGE."
        )
    match = " AND ".join(
        f"{target}.{quoted} = source.{quoted}"
        for quoted in (dialect.quote_identifier(column.name) for column in keys)
    )

    quoted_columns = [dialect.quote_identifier(column.name) for column, _ in candidates]
    updates = [
        f"{quoted} = source.{quoted}"
        for (column, _), quoted in zip(candidates, quoted_columns)
        if not column.primary_key
    ]

    text = (
        f"MERGE INTO {target} USING (SELECT {projection}{from_clause}) {alias_keyword}source "
        f"ON ({match})"
    )
    if updates:
        text += f" WHEN MATCHED THEN UPDATE SET {', '.join(updates)}"
    text += (
        f" WHEN NOT MATCHED THEN INSERT ({', '.join(quoted_columns)}) "
        f"VALUES ({', '.join(f'source.{quoted}' for quoted in quoted_columns)});"
    )
    return SqlCommand(text, parameters)


merge_from_dual = partial(merge, source_from="dual", alias_keyword="")
