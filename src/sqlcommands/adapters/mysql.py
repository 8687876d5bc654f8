"""
MySQL database adapter implementation.
"""

from __future__ import annotations

from typing import Any

from ..dialects.mysql import MYSQL
from .base import AdapterConfigurationError, ConnectionConfig, DBAPIAdapter


def _load_driver():
    try:
        import pymysql  # type: ignore[import-untyped]

        return pymysql
    except ImportError:
        try:
            import MySQLdb

            return MySQLdb
        except ImportError:
            return None


class MySQLAdapter(DBAPIAdapter):
    """
    Adapter wrapping a MySQL DB-API driver (PyMySQL or mysqlclient).
    """

    dialect = MYSQL
    name = "mysql"
    driver_hint = "PyMySQL or mysqlclient"
    begin_statement = "START TRANSACTION"

    def _load_driver(self) -> Any:
        return _load_driver()

    def _open(self, driver: Any, config: ConnectionConfig) -> Any:
        if not config.dsn:
            raise AdapterConfigurationError(
                "ConnectionConfig must be built from a DSN for MySQL connections."
            )
        dsn = config.dsn
        options = dict(config.options or {})
        if config.timeout and "connect_timeout" not in options:
            options["connect_timeout"] = int(config.timeout)
        connect_kwargs = {
            "host": dsn.host or "localhost",
            "user": dsn.username,
            "password": dsn.password,
            "database": dsn.database,
            **options,
        }
        if dsn.port:
            connect_kwargs["port"] = dsn.port
        connection = driver.connect(**connect_kwargs)
        connection.autocommit(bool(config.autocommit))
        return connection
