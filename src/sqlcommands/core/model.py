"""
Model base classes and metadata orchestration for sqlcommands.
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Mapping, Optional, Type, TypeVar

from .fields import Field, IgnoreRule


class ModelConfigurationError(Exception):
    """Raised when a model class is misconfigured."""


@dataclass
class ModelOptions:
    """
    Container for model metadata calculated by :class:`ModelMeta`.
    """

    model: Type["Model"]
    table_name: str = ""
    order_by: Optional[str] = None
    group_by: Optional[str] = None
    having: Optional[str] = None
    fields: "OrderedDict[str, Field]" = field(default_factory=OrderedDict)

    def add_field(self, field_obj: Field) -> None:
        if field_obj.name in self.fields:
            raise ModelConfigurationError(
                f"Duplicate field name '{field_obj.name}' on model '{self.model.__name__}'"
            )
        column = field_obj.column_name()
        for existing in self.fields.values():
            if existing.column_name() == column:
                raise ModelConfigurationError(
                    f"Fields '{existing.name}' and '{field_obj.name}' on model "
                    f"'{self.model.__name__}' both map to column '{column}'"
                )
        self.fields[field_obj.require_name()] = field_obj

    def get_field(self, name: str) -> Field:
        try:
            return self.fields[name]
        except KeyError as exc:
            raise KeyError(f"Unknown field '{name}' on model '{self.model.__name__}'") from exc

    def get_fields(self) -> Iterable[Field]:
        return self.fields.values()


TModel = TypeVar("TModel", bound="Model")


class ModelMeta(type):
    """
    Metaclass responsible for collecting fields and establishing metadata.
    """

    def __new__(mcls, name: str, bases: tuple[type, ...], attrs: Dict[str, Any]) -> "ModelMeta":
        # Allow creation of the base Model class without processing fields.
        if not bases:
            return super().__new__(mcls, name, bases, attrs)

        declared_fields: Dict[str, Field] = {}
        for attr_name, value in list(attrs.items()):
            if isinstance(value, Field):
                declared_fields[attr_name] = attrs.pop(attr_name)

        cls = super().__new__(mcls, name, bases, attrs)

        meta = getattr(cls, "Meta", None)
        options = ModelOptions(model=cls, table_name=name)
        if meta:
            options.table_name = getattr(meta, "table", None) or name
            options.order_by = getattr(meta, "order_by", None)
            options.group_by = getattr(meta, "group_by", None)
            options.having = getattr(meta, "having", None)
        cls._meta = options

        sorted_fields = sorted(
            declared_fields.items(), key=lambda item: item[1].creation_counter
        )
        for attr_name, field_obj in sorted_fields:
            field_obj.contribute_to_class(cls, attr_name)
            options.add_field(field_obj)

        return cls


class Model(metaclass=ModelMeta):
    """
    Base model providing the data container for mapped fields.

    Fields that are never assigned stay absent, which ignore rules treat the
    same as an explicit ``None``.
    """

    _meta: ModelOptions

    def __init__(self, **kwargs: Any) -> None:
        self._field_values: Dict[str, Any] = {}
        unknown = set(kwargs) - set(self._meta.fields)
        if unknown:
            raise TypeError(
                f"Unexpected field(s) for {self.__class__.__name__}: {', '.join(sorted(unknown))}"
            )
        for name, value in kwargs.items():
            setattr(self, name, value)

    def __repr__(self) -> str:
        field_parts = ", ".join(
            f"{name}={value!r}" for name, value in self._field_values.items()
        )
        return f"<{self.__class__.__name__} {field_parts}>"

    def __eq__(self, other: object) -> bool:
        if other.__class__ is not self.__class__:
            return NotImplemented
        return self.to_dict() == other.to_dict()  # type: ignore[attr-defined]

    __hash__ = object.__hash__

    def to_dict(self) -> Dict[str, Any]:
        return {name: getattr(self, name) for name in self._meta.fields}

    @classmethod
    def from_row(cls: Type[TModel], row: Mapping[str, Any]) -> TModel:
        """
        Build an instance from a result row keyed by column name.

        Values are converted with each field's ``to_python``; a value that
        cannot be converted raises :class:`~sqlcommands.errors.TypeCoercionError`.
        Columns missing from the row leave the field absent.
        """
        instance = cls()
        for field_obj in cls._meta.get_fields():
            if field_obj.ignore & IgnoreRule.SELECT_ALWAYS:
                continue
            column = field_obj.column_name()
            if column in row:
                value = row[column]
            elif field_obj.require_name() in row:
                value = row[field_obj.require_name()]
            else:
                continue
            setattr(instance, field_obj.require_name(), value)
        return instance
