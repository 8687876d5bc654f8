"""
PostgreSQL database adapter implementation.
"""

from __future__ import annotations

from typing import Any

from ..dialects.postgres import POSTGRES
from .base import ConnectionConfig, DBAPIAdapter


def _load_driver():
    try:
        import psycopg

        return psycopg
    except ImportError:
        return None


class PostgresAdapter(DBAPIAdapter):
    """
    Adapter wrapping the psycopg PostgreSQL driver.
    """

    dialect = POSTGRES
    name = "postgres"
    driver_hint = "psycopg"

    def _load_driver(self) -> Any:
        return _load_driver()

    def _open(self, driver: Any, config: ConnectionConfig) -> Any:
        options = dict(config.options or {})
        if config.timeout and "connect_timeout" not in options:
            options["connect_timeout"] = int(config.timeout)
        url = config.url.split("?", 1)[0]
        connection = driver.connect(url, **options)
        connection.autocommit = bool(config.autocommit)
        return connection

    def _ensure_connection(self) -> Any:
        connection = super()._ensure_connection()
        if getattr(connection, "closed", False):
            self.logger.warning("PostgreSQL connection closed; reconnecting.")
            assert self._state is not None
            connection = self.connect(self._state.config)
        return connection
