"""Redaction helpers for DSNs and logged command parameters."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

REDACTED_VALUE = "***"

_SENSITIVE_KEY_TOKENS = (
    "password",
    "passwd",
    "pwd",
    "secret",
    "token",
    "apikey",
    "api_key",
    "access_key",
    "private_key",
    "credential",
    "sslkey",
    "ssl_key",
)

_SENSITIVE_VALUE_TOKENS = (
    "password",
    "passwd",
    "secret",
    "token",
    "bearer",
    "authorization",
)


def _compact(value: str) -> str:
    return "".join(ch for ch in value if ch.isalnum())


def is_sensitive_key(key: str) -> bool:
    normalized = key.lower()
    compact = _compact(normalized)
    return any(token in normalized or _compact(token) in compact for token in _SENSITIVE_KEY_TOKENS)


def is_sensitive_value(value: str) -> bool:
    normalized = value.lower()
    return any(token in normalized for token in _SENSITIVE_VALUE_TOKENS)


def redact_value(value: Any, *, key: str | None = None) -> Any:
    if key is not None and is_sensitive_key(str(key)):
        return REDACTED_VALUE
    if isinstance(value, Mapping):
        return {k: redact_value(v, key=str(k)) for k, v in value.items()}
    if isinstance(value, (bytes, bytearray)):
        decoded = bytes(value).decode("utf-8", errors="ignore")
        return REDACTED_VALUE if decoded and is_sensitive_value(decoded) else value
    if isinstance(value, str):
        return REDACTED_VALUE if is_sensitive_value(value) else value
    return value


def redact_query_params(query: Mapping[str, str]) -> dict[str, str]:
    return {key: REDACTED_VALUE if is_sensitive_key(key) else val for key, val in query.items()}


def redact_parameters(parameters: Mapping[str, Any] | Iterable[Any] | None) -> dict[str, Any]:
    """
    Return a loggable ``{name: value}`` view of command parameters.

    Accepts a mapping or an iterable of :class:`~sqlcommands.commands.SqlParameter`.
    Values are masked when their name or their content looks like a credential.
    """
    if not parameters:
        return {}
    if isinstance(parameters, Mapping):
        items = parameters.items()
    else:
        items = ((parameter.name, parameter.value) for parameter in parameters)
    return {name: redact_value(value, key=name) for name, value in items}
