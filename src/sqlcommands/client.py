"""
Executor running built commands against a database adapter.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Generator, Iterable, List, Optional, Type, TypeVar, Union

from .adapters import ConnectionConfig, DatabaseAdapter, adapter_for
from .commands.types import SqlCommand, SqlFilter
from .core.model import Model
from .dialects import DropTableMode
from .dialects.base import UNLIMITED
from .query import CommandBuilder
from .security.redaction import redact_parameters
from .utils import get_logger

TModel = TypeVar("TModel", bound=Model)
Commands = Union[SqlCommand, Iterable[SqlCommand]]


class TransactionError(RuntimeError):
    pass


def _flatten(commands: tuple[Commands, ...]) -> List[SqlCommand]:
    flat: List[SqlCommand] = []
    for item in commands:
        if isinstance(item, SqlCommand):
            flat.append(item)
        else:
            flat.extend(item)
    return flat


class SqlClient:
    """
    Runs commands produced by a :class:`CommandBuilder` on one connection.

    Outside :meth:`transaction` every statement is committed as soon as it has
    run. Selected rows are hydrated into model instances through
    :meth:`Model.from_row`, so driver values are coerced to each field's type.
    """

    def __init__(
        self,
        adapter: DatabaseAdapter,
        *,
        connection_config: Optional[ConnectionConfig] = None,
        builder: Optional[CommandBuilder] = None,
    ) -> None:
        self.adapter = adapter
        self.builder = builder or CommandBuilder(adapter.dialect)
        self.connection_config = connection_config
        self.logger = get_logger("client")
        self._in_transaction = False
        if connection_config is not None:
            self.adapter.connect(connection_config)

    @classmethod
    def connect(cls, url: str, **kwargs: Any) -> "SqlClient":
        """
        Open a client from a DSN (``postgresql://...``) or a SQLite file path.
        """
        if "://" in url:
            config = ConnectionConfig.from_dsn(url, **kwargs)
        else:
            config = ConnectionConfig(url=url, **kwargs)
        return cls(adapter_for(config), connection_config=config)

    @property
    def dialect(self):
        return self.builder.dialect

    # ------------------------------------------------------------------ #
    # Context management
    # ------------------------------------------------------------------ #
    def __enter__(self) -> "SqlClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self.adapter.close()

    # ------------------------------------------------------------------ #
    # Schema
    # ------------------------------------------------------------------ #
    def create_table(self, model: Type[Model]) -> None:
        self._run(self.builder.create_table(model))

    def drop_table(
        self,
        table: Union[str, Type[Model]],
        ignore_if_missing: bool = True,
        mode: DropTableMode = DropTableMode.UNSAFE,
    ) -> None:
        self._run(self.builder.drop_table(table, ignore_if_missing, mode))

    # ------------------------------------------------------------------ #
    # Writes
    # ------------------------------------------------------------------ #
    def insert(self, data: Model) -> bool:
        return self._run(self.builder.insert(data)) == 1

    def update(self, data: Model, filter: Optional[SqlFilter] = None) -> int:
        return self._run(self.builder.update(data, filter))

    def upsert(self, data: Model) -> int:
        return self._run(self.builder.upsert(data))

    def delete(
        self,
        data: Optional[Model] = None,
        filter: Optional[SqlFilter] = None,
        primary_key_only: bool = True,
        *,
        model: Optional[Type[Model]] = None,
    ) -> int:
        return self._run(self.builder.delete(data, filter, primary_key_only, model=model))

    # ------------------------------------------------------------------ #
    # Reads
    # ------------------------------------------------------------------ #
    def select(
        self,
        source: Union[Type[TModel], TModel],
        distinct: bool = False,
        filter: Optional[SqlFilter] = None,
        offset: int = 0,
        max_results: int = UNLIMITED,
    ) -> List[TModel]:
        model = type(source) if isinstance(source, Model) else source
        command = self.builder.select(source, distinct, filter, offset, max_results)
        return [model.from_row(row) for row in self.fetch(command)]

    def select_first(
        self, source: Union[Type[TModel], TModel], filter: Optional[SqlFilter] = None
    ) -> Optional[TModel]:
        results = self.select(source, filter=filter, max_results=1)
        return results[0] if results else None

    def fetch(self, command: SqlCommand) -> List[Dict[str, Any]]:
        """
        Run a row-returning command and return each row as a column-keyed dict.
        """
        cursor = self._execute(command)
        try:
            columns = [description[0] for description in cursor.description or ()]
            rows = [dict(zip(columns, row)) for row in cursor.fetchall()]
        finally:
            cursor.close()
        self._end_statement()
        return rows

    # ------------------------------------------------------------------ #
    # Batches
    # ------------------------------------------------------------------ #
    def run_commands(self, *commands: Commands) -> int:
        """
        Run commands one by one, each committed on its own. Returns the summed
        affected-row counts, counting unknown (negative) counts as zero.
        """
        return sum(self._run(command) for command in _flatten(commands))

    def run_transaction(self, *commands: Commands) -> int:
        """
        Run commands atomically: all are committed, or none are if any fails.
        The failure is re-raised after the rollback.
        """
        batch = _flatten(commands)
        with self.transaction():
            return sum(self._run(command) for command in batch)

    @contextmanager
    def transaction(self) -> Generator["SqlClient", None, None]:
        if self._in_transaction:
            raise TransactionError("Nested transactions are not supported.")
        self.adapter.begin()
        self._in_transaction = True
        try:
            yield self
        except Exception:
            self._in_transaction = False
            self.logger.warning("Rolling back transaction after error.", exc_info=True)
            self.adapter.rollback()
            raise
        else:
            self._in_transaction = False
            self.adapter.commit()

    # ------------------------------------------------------------------ #
    # Execution helpers
    # ------------------------------------------------------------------ #
    def _execute(self, command: SqlCommand) -> Any:
        self.logger.debug(
            "Executing command",
            extra={"sql": command.text, "params": redact_parameters(command.parameters)},
        )
        return self.adapter.execute(command.text, command.as_mapping())

    def _run(self, command: SqlCommand) -> int:
        cursor = self._execute(command)
        try:
            rowcount = getattr(cursor, "rowcount", -1)
        finally:
            cursor.close()
        self._end_statement()
        return max(0, rowcount if rowcount is not None else -1)

    def _end_statement(self) -> None:
        if not self._in_transaction:
            self.adapter.commit()
