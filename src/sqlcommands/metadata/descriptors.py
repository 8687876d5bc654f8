"""
Immutable table and column descriptors read by the command builder.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, NamedTuple, Optional, Tuple, Type

from ..core.fields import Field, IgnoreRule

if TYPE_CHECKING:
    from ..core.model import Model


class ColumnValue(NamedTuple):
    """Current value of a column on an instance; ``present`` is False when absent."""

    present: bool
    value: Any


ABSENT = ColumnValue(False, None)


@dataclass(frozen=True)
class ColumnDescriptor:
    field: Field
    attribute: str
    name: str
    python_type: Any
    db_type: Optional[str]
    primary_key: bool
    auto_increment: bool
    expression: Optional[str]
    ignore_rules: IgnoreRule

    @classmethod
    def from_field(cls, field_obj: Field) -> "ColumnDescriptor":
        return cls(
            field=field_obj,
            attribute=field_obj.require_name(),
            name=field_obj.column_name(),
            python_type=field_obj.python_type,
            db_type=field_obj.db_type,
            primary_key=field_obj.primary_key,
            auto_increment=field_obj.auto_increment,
            expression=field_obj.expression,
            ignore_rules=field_obj.ignore,
        )

    @property
    def is_computed(self) -> bool:
        return bool(self.expression and self.expression.strip())

    def ignores(self, rule: IgnoreRule) -> bool:
        return bool(self.ignore_rules & rule)

    def read(self, instance: Optional["Model"]) -> ColumnValue:
        if instance is None:
            return ABSENT
        value = instance._field_values.get(self.attribute)
        if value is None:
            return ABSENT
        return ColumnValue(True, self.field.to_db(value))

    def excluded(self, current: ColumnValue, always: IgnoreRule, if_null: IgnoreRule) -> bool:
        """
        Apply ignore rules for one operation: ``always`` wins regardless of the
        value, ``if_null`` only applies to an absent value.
        """
        if self.ignores(always):
            return True
        return not current.present and self.ignores(if_null)


@dataclass(frozen=True)
class TableDescriptor:
    model: Type["Model"]
    table_name: str
    order_by: Optional[str]
    group_by: Optional[str]
    having: Optional[str]
    columns: Tuple[ColumnDescriptor, ...]

    @property
    def primary_keys(self) -> Tuple[ColumnDescriptor, ...]:
        return tuple(column for column in self.columns if column.primary_key)

    @property
    def model_name(self) -> str:
        return self.model.__name__
