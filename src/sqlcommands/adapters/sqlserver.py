"""
SQL Server database adapter implementation.
"""

from __future__ import annotations

from typing import Any

from ..dialects.sqlserver import SQLSERVER
from .base import AdapterConfigurationError, ConnectionConfig, DBAPIAdapter


def _load_driver():
    try:
        import pymssql  # type: ignore[import-untyped]

        return pymssql
    except ImportError:
        return None


class SQLServerAdapter(DBAPIAdapter):
    """
    Adapter wrapping the pymssql driver.
    """

    dialect = SQLSERVER
    name = "sqlserver"
    driver_hint = "pymssql"
    begin_statement = "BEGIN TRANSACTION"

    def _load_driver(self) -> Any:
        return _load_driver()

    def _open(self, driver: Any, config: ConnectionConfig) -> Any:
        if not config.dsn:
            raise AdapterConfigurationError(
                "ConnectionConfig must be built from a DSN for SQL Server connections."
            )
        dsn = config.dsn
        connect_kwargs: dict[str, Any] = {
            "server": dsn.host or "localhost",
            "user": dsn.username,
            "password": dsn.password,
            "database": dsn.database or "",
            "autocommit": bool(config.autocommit),
            **(config.options or {}),
        }
        if dsn.port:
            connect_kwargs["port"] = dsn.port
        if config.timeout:
            connect_kwargs.setdefault("login_timeout", int(config.timeout))
        return driver.connect(**connect_kwargs)
