"""
Value objects produced and consumed by the command builder.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Mapping, Tuple, Union


@dataclass(frozen=True)
class SqlParameter:
    """A named parameter binding; ``name`` carries no dialect prefix."""

    name: str
    value: Any


def _normalize_parameters(
    parameters: Union[Iterable[SqlParameter], Mapping[str, Any], None],
) -> Tuple[SqlParameter, ...]:
    if parameters is None:
        return ()
    if isinstance(parameters, Mapping):
        return tuple(SqlParameter(name, value) for name, value in parameters.items())
    return tuple(parameters)


@dataclass(frozen=True)
class SqlCommand:
    """
    Fully formed SQL text plus its ordered parameter bindings.
    """

    text: str
    parameters: Tuple[SqlParameter, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "parameters", _normalize_parameters(self.parameters))

    def as_mapping(self) -> Dict[str, Any]:
        """
        Parameters keyed by name, the shape DB-API drivers bind for the
        ``named`` and ``pyformat`` parameter styles.
        """
        return {parameter.name: parameter.value for parameter in self.parameters}

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class SqlFilter:
    """
    Raw boolean SQL fragment (no leading ``WHERE``) with its bindings. Builders
    AND it with the conditions they derive from instance data.
    """

    text: str
    parameters: Tuple[SqlParameter, ...] = field(default=())

    def __post_init__(self) -> None:
        object.__setattr__(self, "parameters", _normalize_parameters(self.parameters))

    @property
    def is_empty(self) -> bool:
        return not self.text.strip()
