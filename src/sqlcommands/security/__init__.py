"""Credential handling for DSNs and logged parameters."""

from .dsns import DSNConfig, parse_dsn
from .redaction import REDACTED_VALUE, redact_parameters, redact_value

__all__ = ["DSNConfig", "REDACTED_VALUE", "parse_dsn", "redact_parameters", "redact_value"]
