"""
Dialect profile record describing how SQL is rendered for one backend.
"""

from __future__ import annotations

import enum
import re
import types
import typing
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, FrozenSet, Mapping, Optional, Tuple

from ..errors import InvalidArgumentError

if TYPE_CHECKING:
    from ..commands.types import SqlCommand
    from ..core.model import Model
    from ..metadata.descriptors import TableDescriptor


class DropTableMode(enum.Enum):
    """
    ``UNSAFE`` drops unconditionally. ``SAFE`` drops only an empty table and
    needs a dialect able to express the guard.
    """

    UNSAFE = "unsafe"
    SAFE = "safe"


PaginationComposer = Callable[["TableDescriptor", int, int], str]
UpsertComposer = Callable[["Dialect", "TableDescriptor", "Model"], "SqlCommand"]
DropComposer = Callable[["Dialect", str, bool, DropTableMode], str]

UNLIMITED = -1

_PERCENT_RE = re.compile(r"%%|%\(\w+\)s|%")


def standard_drop_table(
    dialect: "Dialect", table_name: str, ignore_if_missing: bool, mode: DropTableMode
) -> str:
    guard = "IF EXISTS " if ignore_if_missing else ""
    return f"DROP TABLE {guard}{dialect.format_table(table_name)};"


def _unwrap_optional(python_type: Any) -> Any:
    origin = typing.get_origin(python_type)
    if origin is typing.Union or origin is types.UnionType:
        args = [arg for arg in typing.get_args(python_type) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return python_type


@dataclass(frozen=True)
class Dialect:
    """
    Fixed bundle of rendering rules for one SQL backend.

    The record holds plain values plus three composer functions
    (pagination, upsert, drop table); nothing about a dialect is decided by
    subclassing.
    """

    name: str
    param_style: str
    quote_chars: Tuple[str, str]
    type_map: Mapping[Any, str]
    auto_increment: str
    paginate: PaginationComposer
    upsert: UpsertComposer
    drop_modes: FrozenSet[DropTableMode] = frozenset({DropTableMode.UNSAFE})
    drop_table: DropComposer = standard_drop_table
    aliases: Tuple[str, ...] = field(default=())
    identity_before_key: bool = False

    # Identifiers ---------------------------------------------------------
    def quote_identifier(self, identifier: str) -> str:
        opening, closing = self.quote_chars
        escaped = identifier.replace(closing, closing * 2)
        return f"{opening}{escaped}{closing}"

    def format_table(self, table_name: str) -> str:
        if "." in table_name:
            schema, table = table_name.split(".", 1)
            return f"{self.quote_identifier(schema)}.{self.quote_identifier(table)}"
        return self.quote_identifier(table_name)

    # Parameters ----------------------------------------------------------
    def placeholder(self, name: str) -> str:
        if self.param_style == "named":
            return f":{name}"
        if self.param_style == "pyformat":
            return f"%({name})s"
        raise ValueError(f"Unsupported param_style: {self.param_style}")

    def escape_text(self, text: str) -> str:
        """
        Prepare caller-written SQL for the driver's parameter style.

        pyformat drivers read every ``%`` as a format marker, so a lone ``%`` is
        doubled; ``%%`` and ``%(name)s`` placeholders are left as written.
        """
        if self.param_style != "pyformat":
            return text
        return _PERCENT_RE.sub(lambda match: "%%" if match.group() == "%" else match.group(), text)

    # Types ---------------------------------------------------------------
    def column_type(self, python_type: Any) -> Optional[str]:
        """
        Native column keyword for a Python type, or ``None`` when unmapped.

        ``Optional[X]`` maps like ``X``. An enumeration without its own entry
        maps like ``str`` when every member value is a string and to the
        ``enum.Enum`` entry otherwise.
        """
        python_type = _unwrap_optional(python_type)
        try:
            mapped = self.type_map.get(python_type)
        except TypeError:
            return None
        if mapped is not None:
            return mapped
        if isinstance(python_type, type) and issubclass(python_type, enum.Enum):
            if {type(member.value) for member in python_type} == {str}:
                return self.type_map.get(str)
            return self.type_map.get(enum.Enum)
        return None

    # Pagination ----------------------------------------------------------
    def validate_pagination(self, offset: int, max_results: int) -> None:
        if offset < 0:
            raise InvalidArgumentError("offset", offset, "must be greater than or equal to zero")
        if max_results < UNLIMITED:
            raise InvalidArgumentError(
                "max_results", max_results, "must be -1 (unlimited) or a non-negative count"
            )

    def pagination_clause(self, table: "TableDescriptor", offset: int, max_results: int) -> str:
        self.validate_pagination(offset, max_results)
        return self.paginate(table, offset, max_results)

    def supports_drop_mode(self, mode: DropTableMode) -> bool:
        return mode in self.drop_modes
