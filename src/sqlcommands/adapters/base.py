"""
Adapter protocol and shared DB-API plumbing for sqlcommands.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from typing import Any, Mapping, Protocol

from ..dialects.base import Dialect
from ..security.dsns import DSNConfig, parse_dsn
from ..security.redaction import redact_parameters
from ..utils import get_logger, resolve_slow_query_ms, time_call


class AdapterError(RuntimeError):
    """Base error for adapter-related failures."""


class AdapterConfigurationError(AdapterError):
    """Raised when configuration or required dependencies are invalid."""


class AdapterConnectionError(AdapterError):
    """Raised when establishing or using a connection fails."""


class AdapterExecutionError(AdapterError):
    """Raised when SQL execution or parameter validation fails."""


_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}

_INT_OPTIONS = {"connect_timeout", "login_timeout", "port"}


def _parse_bool(value: str, *, key: str) -> bool:
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise AdapterConfigurationError(f"Invalid boolean value for '{key}': {value!r}")


def _parse_float(value: str, *, key: str) -> float:
    try:
        return float(value)
    except ValueError as exc:
        raise AdapterConfigurationError(f"Invalid float value for '{key}': {value!r}") from exc


def _parse_options(query: dict[str, str]) -> dict[str, Any]:
    options: dict[str, Any] = {}
    for key, value in query.items():
        if key in _INT_OPTIONS:
            try:
                options[key] = int(value)
            except ValueError as exc:
                raise AdapterConfigurationError(
                    f"Invalid integer value for '{key}': {value!r}"
                ) from exc
        else:
            options[key] = value
    return options


@dataclass
class ConnectionConfig:
    """
    Normalized connection configuration for adapters.

    ``url`` is either a DSN (``postgresql://user:pw@host/db?timeout=5``) or,
    for SQLite, a plain file path.
    """

    url: str
    autocommit: bool = False
    timeout: float | None = None
    options: dict[str, Any] | None = None
    dsn: DSNConfig | None = None
    source: str | None = None

    @classmethod
    def from_dsn(cls, dsn: str, **kwargs: Any) -> "ConnectionConfig":
        try:
            parsed = parse_dsn(dsn)
        except ValueError as exc:
            raise AdapterConfigurationError(str(exc)) from exc
        query = dict(parsed.query)

        parsed_autocommit = (
            _parse_bool(query.pop("autocommit"), key="autocommit") if "autocommit" in query else None
        )
        parsed_timeout = (
            _parse_float(query.pop("timeout"), key="timeout") if "timeout" in query else None
        )
        options = _parse_options(query)
        options.update(kwargs.pop("options", None) or {})

        autocommit = kwargs.pop("autocommit", parsed_autocommit)
        return cls(
            url=dsn,
            dsn=parsed,
            autocommit=bool(autocommit),
            timeout=kwargs.pop("timeout", parsed_timeout),
            options=options or None,
            **kwargs,
        )

    @classmethod
    def from_env(cls, env_var: str, **kwargs: Any) -> "ConnectionConfig":
        value = os.getenv(env_var)
        if not value:
            raise AdapterConfigurationError(f"Environment variable {env_var} is not set")
        return cls.from_dsn(value, source=env_var, **kwargs)

    def redacted_dsn(self) -> str:
        """
        Return a DSN safe for logging (credentials removed).
        """
        if self.dsn:
            return self.dsn.redacted()
        return self.url

    def descriptive_label(self) -> str:
        redacted = self.redacted_dsn()
        if self.source:
            return f"{self.source} ({redacted})"
        return redacted


class DatabaseAdapter(Protocol):
    """
    Adapter interface used by :class:`~sqlcommands.client.SqlClient`.
    """

    dialect: Dialect

    def connect(self, config: ConnectionConfig) -> Any:
        """
        Establish a connection handle using the supplied configuration.
        """

    def close(self) -> None:
        """
        Close underlying resources. Implementations should be idempotent.
        """

    def execute(self, sql: str, params: Mapping[str, Any] | None = None) -> Any:
        """
        Execute a single SQL statement with named parameters, returning a DB-API cursor.
        """

    def begin(self) -> None:
        """
        Start a transaction spanning subsequent ``execute`` calls.
        """

    def commit(self) -> None:
        ...

    def rollback(self) -> None:
        ...


_PYFORMAT_RE = re.compile(r"%\((\w+)\)s")
_NAMED_RE = re.compile(r"(?<![\w:]):([A-Za-z_]\w*)")
_QUOTED_RE = re.compile(r"'(?:[^']|'')*'|\"(?:[^\"]|\"\")*\"")


@dataclass
class ConnectionState:
    connection: Any
    config: ConnectionConfig
    driver: Any


class DBAPIAdapter:
    """
    Shared implementation for adapters wrapping a DB-API 2.0 driver.

    Subclasses set ``dialect`` and ``name`` and implement ``_load_driver`` and
    ``_open``. ``begin_statement`` is sent on ``begin`` only while the
    connection runs in autocommit mode; otherwise the driver opens the
    transaction implicitly.
    """

    dialect: Dialect
    name = "dbapi"
    driver_hint = "A DB-API driver"
    begin_statement: str | None = "BEGIN"

    def __init__(self, slow_query_ms: int | None = None) -> None:
        self._state: ConnectionState | None = None
        self.logger = get_logger(f"adapters.{self.name}")
        self.slow_query_ms = resolve_slow_query_ms(default=100, override=slow_query_ms)

    # ------------------------------------------------------------------ #
    # Driver hooks
    # ------------------------------------------------------------------ #
    def _load_driver(self) -> Any:
        raise NotImplementedError

    def _open(self, driver: Any, config: ConnectionConfig) -> Any:
        raise NotImplementedError

    def _in_autocommit(self, connection: Any) -> bool:
        return bool(self._state and self._state.config.autocommit)

    def prepare_sql(self, sql: str) -> str:
        return sql

    # ------------------------------------------------------------------ #
    # Connection management
    # ------------------------------------------------------------------ #
    @property
    def connected(self) -> bool:
        return self._state is not None

    def connect(self, config: ConnectionConfig) -> Any:
        driver = self._load_driver()
        if driver is None:
            raise AdapterConfigurationError(
                f"{self.driver_hint} is required to use {type(self).__name__}."
            )
        self.logger.info(
            "Connecting to %s %s (autocommit=%s)",
            self.dialect.name,
            config.descriptive_label(),
            config.autocommit,
        )
        try:
            connection = self._open(driver, config)
        except AdapterError:
            raise
        except Exception as exc:
            raise AdapterConnectionError(f"Failed to connect to {self.dialect.name}.") from exc
        self._state = ConnectionState(connection, config, driver)
        return connection

    def close(self) -> None:
        if self._state:
            try:
                self._state.connection.close()
            finally:
                self._state = None

    def _ensure_connection(self) -> Any:
        if not self._state:
            raise AdapterConnectionError(f"{type(self).__name__} is not connected.")
        return self._state.connection

    # ------------------------------------------------------------------ #
    # Execution
    # ------------------------------------------------------------------ #
    def execute(self, sql: str, params: Mapping[str, Any] | None = None) -> Any:
        connection = self._ensure_connection()
        params = dict(params or {})
        sql = self.prepare_sql(sql)
        self._validate_params(sql, params)
        cursor = connection.cursor()
        try:
            with time_call(
                f"{self.name}.execute",
                self.logger,
                sql=sql,
                params=redact_parameters(params),
                threshold_ms=self.slow_query_ms,
            ):
                # pyformat drivers only unescape %% when a mapping is passed
                if params or self.dialect.param_style == "pyformat":
                    cursor.execute(sql, params)
                else:
                    cursor.execute(sql)
        except Exception:
            cursor.close()
            raise
        return cursor

    def placeholder_names(self, sql: str) -> set[str]:
        if self.dialect.param_style == "pyformat":
            return set(_PYFORMAT_RE.findall(sql))
        # quoted literals and identifiers may contain ":word" text
        return set(_NAMED_RE.findall(_QUOTED_RE.sub("''", sql)))

    def _validate_params(self, sql: str, params: Mapping[str, Any]) -> None:
        missing = self.placeholder_names(sql) - set(params)
        if missing:
            raise AdapterExecutionError(
                f"Missing values for parameters: {', '.join(sorted(missing))}."
            )

    # ------------------------------------------------------------------ #
    # Transactions
    # ------------------------------------------------------------------ #
    def begin(self) -> None:
        connection = self._ensure_connection()
        if self.begin_statement and self._in_autocommit(connection):
            connection.cursor().execute(self.begin_statement)

    def commit(self) -> None:
        self._ensure_connection().commit()

    def rollback(self) -> None:
        self._ensure_connection().rollback()
