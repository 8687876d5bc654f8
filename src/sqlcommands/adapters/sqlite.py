"""
SQLite database adapter implementation.
"""

from __future__ import annotations

import sqlite3
import uuid
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Any

from ..dialects.sqlite import SQLITE
from .base import ConnectionConfig, DBAPIAdapter

# Values are stored as TEXT, matching the column types CREATE TABLE declares.
sqlite3.register_adapter(Decimal, str)
sqlite3.register_adapter(uuid.UUID, str)
sqlite3.register_adapter(timedelta, str)
sqlite3.register_adapter(datetime, datetime.isoformat)
sqlite3.register_adapter(date, date.isoformat)
sqlite3.register_adapter(time, time.isoformat)


class SQLiteAdapter(DBAPIAdapter):
    """
    Adapter wrapping the Python stdlib sqlite3 module.
    """

    dialect = SQLITE
    name = "sqlite"
    driver_hint = "sqlite3"

    def _load_driver(self) -> Any:
        return sqlite3

    def _open(self, driver: Any, config: ConnectionConfig) -> sqlite3.Connection:
        timeout = config.timeout if config.timeout is not None else 5.0
        connection = driver.connect(
            self._normalize_path(config.url),
            isolation_level=None if config.autocommit else "",
            timeout=timeout,
            check_same_thread=False,
        )
        connection.execute("PRAGMA foreign_keys = ON")
        return connection

    def begin(self) -> None:
        connection = self._ensure_connection()
        if not connection.in_transaction:
            connection.execute("BEGIN")

    @staticmethod
    def _normalize_path(url: str) -> str:
        url = url.split("?", 1)[0]
        if url in ("sqlite://", "sqlite:///:memory:", ":memory:"):
            return ":memory:"
        prefix = "sqlite:///"
        if url.startswith(prefix):
            return url[len(prefix) :]
        return url
