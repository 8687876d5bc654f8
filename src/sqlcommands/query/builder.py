"""
Command builder translating model metadata into dialect-specific SQL.
"""

from __future__ import annotations

from typing import Any, List, Optional, Type, Union

from ..commands.render import bind_value, equality, merge_filter, where_clause
from ..commands.types import SqlCommand, SqlFilter, SqlParameter
from ..core.fields import IgnoreRule
from ..core.model import Model
from ..dialects import Dialect, DropTableMode, get_dialect
from ..dialects.base import UNLIMITED
from ..errors import (
    EmptyConditionError,
    InvalidArgumentError,
    MissingPrimaryKeyError,
    NoEligibleColumnsError,
    UnmappableTypeError,
    UnsupportedOperationError,
)
from ..metadata import MetadataCache, TableDescriptor, default_cache
from ..security.redaction import redact_parameters
from ..utils import get_logger

ModelSource = Union[Type[Model], Model]


class CommandBuilder:
    """
    Produces :class:`SqlCommand` objects for one dialect.

    Builders hold no per-call state: every method reads the cached table
    descriptor, renders fresh SQL and either returns a complete command or
    raises before any text is produced.
    """

    def __init__(self, dialect: Union[Dialect, str], *, cache: Optional[MetadataCache] = None) -> None:
        self.dialect = get_dialect(dialect) if isinstance(dialect, str) else dialect
        self.cache = cache if cache is not None else default_cache
        self.logger = get_logger("query.builder")

    def __repr__(self) -> str:
        return f"<CommandBuilder {self.dialect.name}>"

    # ------------------------------------------------------------------ #
    # Metadata
    # ------------------------------------------------------------------ #
    def describe(self, source: ModelSource) -> TableDescriptor:
        if isinstance(source, Model):
            return self.cache.get(type(source))
        return self.cache.get(source)

    @staticmethod
    def _require_instance(data: Any, operation: str) -> Model:
        if not isinstance(data, Model):
            raise TypeError(f"{operation} requires a Model instance, received {data!r}")
        return data

    def _table(self, table: TableDescriptor) -> str:
        return self.dialect.format_table(table.table_name)

    def _log(self, operation: str, table: TableDescriptor, command: SqlCommand) -> SqlCommand:
        self.logger.debug(
            "Built %s for %s: %s",
            operation,
            table.model_name,
            command.text,
            extra={"sql": command.text, "params": redact_parameters(command.parameters)},
        )
        return command

    # ------------------------------------------------------------------ #
    # Schema
    # ------------------------------------------------------------------ #
    def create_table(self, model: ModelSource) -> SqlCommand:
        table = self.describe(model)
        keys = [column for column in table.primary_keys if not column.is_computed]
        inline_key = len(keys) == 1
        pieces: List[str] = []
        for column in table.columns:
            if column.is_computed:
                continue
            column_type = column.db_type or self.dialect.column_type(column.python_type)
            if not column_type:
                raise UnmappableTypeError(
                    table.model, column.name, column.python_type, self.dialect.name
                )
            modifiers: List[str] = []
            if column.primary_key and inline_key:
                modifiers.append("PRIMARY KEY")
            if column.auto_increment and self.dialect.auto_increment:
                modifiers.append(self.dialect.auto_increment)
            if self.dialect.identity_before_key:
                modifiers.reverse()
            pieces.append(
                " ".join([self.dialect.quote_identifier(column.name), column_type, *modifiers])
            )

        if not pieces:
            raise NoEligibleColumnsError(table.model, "CREATE TABLE")
        if len(keys) > 1:
            key_list = ", ".join(self.dialect.quote_identifier(column.name) for column in keys)
            pieces.append(f"PRIMARY KEY ({key_list})")

        command = SqlCommand(f"CREATE TABLE {self._table(table)} ({', '.join(pieces)});")
        return self._log("CREATE TABLE", table, command)

    def drop_table(
        self,
        table: Union[str, Type[Model]],
        ignore_if_missing: bool = True,
        mode: DropTableMode = DropTableMode.UNSAFE,
    ) -> SqlCommand:
        if not self.dialect.supports_drop_mode(mode):
            supported = ", ".join(sorted(m.name for m in self.dialect.drop_modes))
            raise UnsupportedOperationError(
                self.dialect.name, f"{mode.name} DROP TABLE", f"supported modes are {supported}"
            )
        table_name = table if isinstance(table, str) else self.describe(table).table_name
        if not table_name.strip():
            raise InvalidArgumentError("table", table_name, "must be a non-empty table name")

        text = self.dialect.drop_table(self.dialect, table_name, ignore_if_missing, mode)
        self.logger.warning(
            "DROP TABLE generated for %s; confirm the destructive command before running it.",
            table_name,
        )
        return SqlCommand(text)

    # ------------------------------------------------------------------ #
    # Writes
    # ------------------------------------------------------------------ #
    def insert(self, data: Model) -> SqlCommand:
        data = self._require_instance(data, "INSERT")
        table = self.describe(data)
        columns: List[str] = []
        values: List[str] = []
        parameters: List[SqlParameter] = []
        for column in table.columns:
            if column.is_computed:
                continue
            current = column.read(data)
            if column.excluded(current, IgnoreRule.INSERT_ALWAYS, IgnoreRule.INSERT_IF_NULL):
                continue
            columns.append(self.dialect.quote_identifier(column.name))
            values.append(bind_value(self.dialect, column, current, parameters))

        if not columns:
            raise NoEligibleColumnsError(table.model, "INSERT")

        command = SqlCommand(
            f"INSERT INTO {self._table(table)} ({', '.join(columns)}) VALUES ({', '.join(values)});",
            parameters,
        )
        return self._log("INSERT", table, command)

    def update(self, data: Model, filter: Optional[SqlFilter] = None) -> SqlCommand:
        data = self._require_instance(data, "UPDATE")
        table = self.describe(data)
        assignments: List[str] = []
        parameters: List[SqlParameter] = []
        for column in table.columns:
            if column.is_computed or column.primary_key:
                continue
            current = column.read(data)
            if column.excluded(current, IgnoreRule.UPDATE_ALWAYS, IgnoreRule.UPDATE_IF_NULL):
                continue
            assignments.append(
                f"{self.dialect.quote_identifier(column.name)} = "
                f"{bind_value(self.dialect, column, current, parameters)}"
            )

        if not assignments:
            raise NoEligibleColumnsError(table.model, "UPDATE", clause="SET")

        conditions: List[str] = []
        for column in table.primary_keys:
            current = column.read(data)
            if current.present:
                conditions.append(equality(self.dialect, column, current, parameters))
        merge_filter(self.dialect, conditions, parameters, filter)

        if not conditions:
            detail = (
                "has no primary key value and no filter; refusing an unconditional UPDATE."
                if table.primary_keys
                else "declares no primary key; supply a filter."
            )
            raise MissingPrimaryKeyError(table.model, "UPDATE", detail)

        command = SqlCommand(
            f"UPDATE {self._table(table)} SET {', '.join(assignments)}{where_clause(conditions)};",
            parameters,
        )
        return self._log("UPDATE", table, command)

    def upsert(self, data: Model) -> SqlCommand:
        data = self._require_instance(data, "UPSERT")
        table = self.describe(data)
        command = self.dialect.upsert(self.dialect, table, data)
        return self._log("UPSERT", table, command)

    def delete(
        self,
        data: Optional[Model] = None,
        filter: Optional[SqlFilter] = None,
        primary_key_only: bool = True,
        *,
        model: Optional[Type[Model]] = None,
    ) -> SqlCommand:
        if data is None and model is None:
            raise InvalidArgumentError("model", None, "is required when no data instance is given")
        if data is not None:
            data = self._require_instance(data, "DELETE")
        table = self.describe(data if data is not None else model)  # type: ignore[arg-type]

        conditions: List[str] = []
        parameters: List[SqlParameter] = []
        if data is not None:
            candidates = table.primary_keys if primary_key_only else table.columns
            for column in candidates:
                if column.is_computed or column.ignores(IgnoreRule.DELETE_ALWAYS):
                    continue
                current = column.read(data)
                if current.present:
                    conditions.append(equality(self.dialect, column, current, parameters))
        merge_filter(self.dialect, conditions, parameters, filter)

        if not conditions:
            raise EmptyConditionError(table.model)

        command = SqlCommand(
            f"DELETE FROM {self._table(table)}{where_clause(conditions)};", parameters
        )
        return self._log("DELETE", table, command)

    # ------------------------------------------------------------------ #
    # Reads
    # ------------------------------------------------------------------ #
    def select(
        self,
        source: ModelSource,
        distinct: bool = False,
        filter: Optional[SqlFilter] = None,
        offset: int = 0,
        max_results: int = UNLIMITED,
    ) -> SqlCommand:
        """
        Build a SELECT over the model's table.

        ``source`` is a model class or a template instance; every present,
        selectable field of a template becomes an equality condition. Computed
        columns are selected as ``expression AS column`` and compared through
        their expression. ``max_results=-1`` means no limit.
        """
        self.dialect.validate_pagination(offset, max_results)
        table = self.describe(source)
        template = source if isinstance(source, Model) else None

        select_list: List[str] = []
        conditions: List[str] = []
        parameters: List[SqlParameter] = []
        for column in table.columns:
            if column.ignores(IgnoreRule.SELECT_ALWAYS):
                continue
            quoted = self.dialect.quote_identifier(column.name)
            expression = self.dialect.escape_text(column.expression or "")
            if column.is_computed:
                select_list.append(f"{expression} AS {quoted}")
            else:
                select_list.append(quoted)

            current = column.read(template)
            if not current.present:
                continue
            if column.is_computed:
                placeholder = bind_value(self.dialect, column, current, parameters)
                conditions.append(f"({expression}) = {placeholder}")
            else:
                conditions.append(equality(self.dialect, column, current, parameters))

        if not select_list:
            raise NoEligibleColumnsError(table.model, "SELECT")
        merge_filter(self.dialect, conditions, parameters, filter)

        text = "SELECT "
        if distinct:
            text += "DISTINCT "
        text += f"{', '.join(select_list)} FROM {self._table(table)}{where_clause(conditions)}"
        if table.group_by:
            text += f" GROUP BY {self.dialect.escape_text(table.group_by)}"
        if table.having:
            text += f" HAVING {self.dialect.escape_text(table.having)}"
        if table.order_by:
            text += f" ORDER BY {self.dialect.escape_text(table.order_by)}"
        text += self.dialect.pagination_clause(table, offset, max_results)

        command = SqlCommand(f"{text};", parameters)
        return self._log("SELECT", table, command)

    def select_first(
        self, source: ModelSource, filter: Optional[SqlFilter] = None
    ) -> SqlCommand:
        return self.select(source, filter=filter, max_results=1)
