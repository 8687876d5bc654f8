"""
Database adapter interfaces and implementations.
"""

from typing import Dict, Type

from .base import (
    AdapterConfigurationError,
    AdapterConnectionError,
    AdapterError,
    AdapterExecutionError,
    ConnectionConfig,
    DatabaseAdapter,
    DBAPIAdapter,
)
from .mysql import MySQLAdapter
from .oracle import OracleAdapter
from .postgres import PostgresAdapter
from .sqlite import SQLiteAdapter
from .sqlserver import SQLServerAdapter

ADAPTERS: Dict[str, Type[DBAPIAdapter]] = {
    "sqlite": SQLiteAdapter,
    "postgresql": PostgresAdapter,
    "postgres": PostgresAdapter,
    "mysql": MySQLAdapter,
    "mariadb": MySQLAdapter,
    "mssql": SQLServerAdapter,
    "sqlserver": SQLServerAdapter,
    "oracle": OracleAdapter,
}


def adapter_for(config: ConnectionConfig) -> DBAPIAdapter:
    """
    Instantiate the adapter matching the DSN scheme; plain paths use SQLite.
    """
    scheme = config.dsn.driver.split("+", 1)[0] if config.dsn else "sqlite"
    try:
        adapter_cls = ADAPTERS[scheme]
    except KeyError as exc:
        raise AdapterConfigurationError(f"No adapter registered for scheme '{scheme}'.") from exc
    return adapter_cls()


__all__ = [
    "ADAPTERS",
    "AdapterConfigurationError",
    "AdapterConnectionError",
    "AdapterError",
    "AdapterExecutionError",
    "ConnectionConfig",
    "DBAPIAdapter",
    "DatabaseAdapter",
    "MySQLAdapter",
    "OracleAdapter",
    "PostgresAdapter",
    "SQLServerAdapter",
    "SQLiteAdapter",
    "adapter_for",
]
