"""
Dialect profile registry.
"""

from typing import Dict

from .base import Dialect, DropTableMode
from .mysql import MYSQL
from .oracle import ORACLE
from .postgres import POSTGRES
from .sqlite import SQLITE
from .sqlserver import SQLSERVER

DIALECTS = (SQLITE, MYSQL, POSTGRES, SQLSERVER, ORACLE)

_REGISTRY: Dict[str, Dialect] = {}
for _dialect in DIALECTS:
    _REGISTRY[_dialect.name] = _dialect
    for _alias in _dialect.aliases:
        _REGISTRY[_alias] = _dialect


def get_dialect(name: str) -> Dialect:
    """
    Resolve a dialect profile by name or alias, case-insensitively.
    """
    try:
        return _REGISTRY[name.strip().lower()]
    except KeyError as exc:
        known = ", ".join(sorted(d.name for d in DIALECTS))
        raise ValueError(f"Unknown dialect '{name}'; expected one of: {known}") from exc


__all__ = [
    "DIALECTS",
    "Dialect",
    "DropTableMode",
    "MYSQL",
    "ORACLE",
    "POSTGRES",
    "SQLITE",
    "SQLSERVER",
    "get_dialect",
]
