"""
Field definitions and descriptors for sqlcommands models.
"""

from __future__ import annotations

import enum
import re
import uuid
from datetime import date, datetime, time, timedelta
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Any, Optional, cast

from ..errors import TypeCoercionError

if TYPE_CHECKING:
    from .model import Model


class FieldError(Exception):
    """Internal exception for field configuration issues."""


class IgnoreRule(enum.IntFlag):
    """
    Per-operation exclusion flags for a column.

    ``*_ALWAYS`` flags drop the column from the operation unconditionally;
    ``*_IF_NULL`` flags drop it only while the instance value is absent.
    """

    NONE = 0
    SELECT_ALWAYS = 1
    INSERT_ALWAYS = 2
    UPDATE_ALWAYS = 4
    DELETE_ALWAYS = 8
    UPSERT_ALWAYS = 16
    SELECT_IF_NULL = 32
    INSERT_IF_NULL = 64
    UPDATE_IF_NULL = 128
    DELETE_IF_NULL = 256
    UPSERT_IF_NULL = 512
    ALWAYS = SELECT_ALWAYS | INSERT_ALWAYS | UPDATE_ALWAYS | DELETE_ALWAYS | UPSERT_ALWAYS
    ALWAYS_IF_NULL = (
        SELECT_IF_NULL | INSERT_IF_NULL | UPDATE_IF_NULL | DELETE_IF_NULL | UPSERT_IF_NULL
    )


class Field:
    """
    Base class for model field descriptors.

    Fields store values on model instances and carry the column metadata the
    command builder reads: column name, type override, key flags, computed
    expression and ignore rules.
    """

    python_type: Any = object
    _creation_counter = 0

    def __init__(
        self,
        python_type: Any = None,
        *,
        name: Optional[str] = None,
        db_type: Optional[str] = None,
        primary_key: bool = False,
        auto_increment: bool = False,
        expression: Optional[str] = None,
        ignore: IgnoreRule = IgnoreRule.ALWAYS_IF_NULL,
    ) -> None:
        if python_type is not None:
            self.python_type = python_type
        self.db_column = name
        self.db_type = db_type
        self.primary_key = primary_key
        self.auto_increment = auto_increment
        self.expression = expression
        self.ignore = IgnoreRule(ignore)

        self.model: type["Model"] | None = None  # Will be set during contribute_to_class
        self.name: str | None = None
        self.creation_counter = Field._creation_counter
        Field._creation_counter += 1

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.name or '?'}>"

    # Descriptor protocol -------------------------------------------------
    def __get__(self, instance: object | None, owner: type | None = None) -> Any:
        if instance is None:
            return self
        model_instance = cast("Model", instance)
        return model_instance._field_values.get(self.require_name())

    def __set__(self, instance: object, value: Any) -> None:
        model_instance = cast("Model", instance)
        name = self.require_name()
        if value is None:
            model_instance._field_values[name] = None
            return
        model_instance._field_values[name] = self.to_python(value)

    def __delete__(self, instance: object) -> None:
        model_instance = cast("Model", instance)
        model_instance._field_values.pop(self.require_name(), None)

    # Metadata helpers ----------------------------------------------------
    def contribute_to_class(self, model: type["Model"], name: str) -> None:
        """
        Attach the field to the model class as a descriptor.
        """
        self.model = model
        self.name = name
        if self.db_column is None:
            self.db_column = name
        setattr(model, name, self)

    def require_name(self) -> str:
        if self.name is None:
            raise FieldError("Field name is not set.")
        return self.name

    def require_model(self) -> type["Model"]:
        if self.model is None:
            raise FieldError("Field model is not set.")
        return self.model

    def column_name(self) -> str:
        if self.db_column:
            return self.db_column
        return self.require_name()

    # Conversion ----------------------------------------------------------
    def to_python(self, value: Any) -> Any:
        return value

    def to_db(self, value: Any) -> Any:
        """
        Value handed to the driver when the field is bound as a parameter.
        """
        return value

    def coercion_error(self, value: Any) -> TypeCoercionError:
        return TypeCoercionError(self.require_model(), self.column_name(), value, self.python_type)


class IntegerField(Field):
    python_type = int

    def to_python(self, value: Any) -> int:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        try:
            return int(value)
        except (TypeError, ValueError) as exc:
            raise self.coercion_error(value) from exc


class BooleanField(Field):
    python_type = bool

    def to_python(self, value: Any) -> bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            lowered = value.lower()
            if lowered in {"true", "t", "1"}:
                return True
            if lowered in {"false", "f", "0"}:
                return False
        if isinstance(value, (int, Decimal)) and value in (0, 1):
            return bool(value)
        raise self.coercion_error(value)


class FloatField(Field):
    python_type = float

    def to_python(self, value: Any) -> float:
        try:
            return float(value)
        except (TypeError, ValueError) as exc:
            raise self.coercion_error(value) from exc


class DecimalField(Field):
    python_type = Decimal

    def to_python(self, value: Any) -> Decimal:
        if isinstance(value, Decimal):
            return value
        try:
            return Decimal(str(value))
        except (InvalidOperation, ValueError) as exc:
            raise self.coercion_error(value) from exc


class StringField(Field):
    python_type = str

    def to_python(self, value: Any) -> str:
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return str(value)


class BytesField(Field):
    python_type = bytes

    def to_python(self, value: Any) -> bytes:
        if isinstance(value, (bytes, bytearray, memoryview)):
            return bytes(value)
        raise self.coercion_error(value)


class DateTimeField(Field):
    python_type = datetime

    def to_python(self, value: Any) -> datetime:
        if isinstance(value, datetime):
            return value
        if isinstance(value, date):
            return datetime.combine(value, time())
        if isinstance(value, str):
            try:
                return datetime.fromisoformat(value)
            except ValueError as exc:
                raise self.coercion_error(value) from exc
        raise self.coercion_error(value)


class DateField(Field):
    python_type = date

    def to_python(self, value: Any) -> date:
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        if isinstance(value, str):
            try:
                return date.fromisoformat(value)
            except ValueError as exc:
                raise self.coercion_error(value) from exc
        raise self.coercion_error(value)


class TimeField(Field):
    python_type = time

    def to_python(self, value: Any) -> time:
        if isinstance(value, time):
            return value
        if isinstance(value, timedelta):
            return (datetime.min + value).time()
        if isinstance(value, str):
            try:
                return time.fromisoformat(value)
            except ValueError as exc:
                raise self.coercion_error(value) from exc
        raise self.coercion_error(value)


# Matches str(timedelta): "[-]D day[s], H:MM:SS[.ffffff]" with the day part optional.
_TIMEDELTA_RE = re.compile(
    r"^(?:(?P<days>-?\d+) days?, )?(?P<hours>\d+):(?P<minutes>\d{2}):(?P<seconds>\d{2}(?:\.\d+)?)$"
)


class TimeDeltaField(Field):
    python_type = timedelta

    def to_python(self, value: Any) -> timedelta:
        if isinstance(value, timedelta):
            return value
        if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
            return timedelta(seconds=float(value))
        if isinstance(value, str):
            match = _TIMEDELTA_RE.match(value.strip())
            if match:
                return timedelta(
                    days=int(match.group("days") or 0),
                    hours=int(match.group("hours")),
                    minutes=int(match.group("minutes")),
                    seconds=float(match.group("seconds")),
                )
        raise self.coercion_error(value)


class UUIDField(Field):
    python_type = uuid.UUID

    def to_python(self, value: Any) -> uuid.UUID:
        if isinstance(value, uuid.UUID):
            return value
        try:
            if isinstance(value, (bytes, bytearray)) and len(value) == 16:
                return uuid.UUID(bytes=bytes(value))
            return uuid.UUID(str(value))
        except ValueError as exc:
            raise self.coercion_error(value) from exc


class EnumField(Field):
    """
    Enumeration field stored as its member value.

    Stored values are matched against member values first and member names
    second.
    """

    def __init__(self, enum_type: type[enum.Enum], **kwargs: Any) -> None:
        super().__init__(enum_type, **kwargs)
        self.enum_type = enum_type

    def to_python(self, value: Any) -> enum.Enum:
        if isinstance(value, self.enum_type):
            return value
        try:
            return self.enum_type(value)
        except ValueError:
            pass
        if isinstance(value, str) and value in self.enum_type.__members__:
            return self.enum_type[value]
        raise self.coercion_error(value)

    def to_db(self, value: Any) -> Any:
        if isinstance(value, enum.Enum):
            return value.value
        return value
