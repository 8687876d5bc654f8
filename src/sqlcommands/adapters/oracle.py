"""
Oracle database adapter implementation.
"""

from __future__ import annotations

from typing import Any

from ..dialects.oracle import ORACLE
from .base import AdapterConfigurationError, ConnectionConfig, DBAPIAdapter


def _load_driver():
    try:
        import oracledb

        return oracledb
    except ImportError:
        return None


class OracleAdapter(DBAPIAdapter):
    """
    Adapter wrapping python-oracledb in thin mode.

    Oracle has no BEGIN statement; while a transaction is open the
    connection's autocommit flag is switched off and restored afterwards.
    """

    dialect = ORACLE
    name = "oracle"
    driver_hint = "oracledb"
    begin_statement = None

    def __init__(self, slow_query_ms: int | None = None) -> None:
        super().__init__(slow_query_ms)
        self._restore_autocommit = False

    def _load_driver(self) -> Any:
        return _load_driver()

    def _open(self, driver: Any, config: ConnectionConfig) -> Any:
        if not config.dsn:
            raise AdapterConfigurationError(
                "ConnectionConfig must be built from a DSN for Oracle connections."
            )
        dsn = config.dsn
        connect_dsn = driver.makedsn(dsn.host or "localhost", dsn.port or 1521, service_name=dsn.database)
        connection = driver.connect(
            user=dsn.username, password=dsn.password, dsn=connect_dsn, **(config.options or {})
        )
        connection.autocommit = bool(config.autocommit)
        if config.timeout:
            connection.call_timeout = int(config.timeout * 1000)
        return connection

    def prepare_sql(self, sql: str) -> str:
        # oracledb rejects a trailing statement terminator outside PL/SQL blocks.
        return sql.rstrip().rstrip(";")

    def begin(self) -> None:
        connection = self._ensure_connection()
        if connection.autocommit:
            connection.autocommit = False
            self._restore_autocommit = True

    def commit(self) -> None:
        super().commit()
        self._end_transaction()

    def rollback(self) -> None:
        super().rollback()
        self._end_transaction()

    def _end_transaction(self) -> None:
        if self._restore_autocommit:
            self._ensure_connection().autocommit = True
            self._restore_autocommit = False
