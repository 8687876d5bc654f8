"""
Core building blocks for sqlcommands models and field declarations.
"""

from .fields import (
    BooleanField,
    BytesField,
    DateField,
    DateTimeField,
    DecimalField,
    EnumField,
    Field,
    FloatField,
    IgnoreRule,
    IntegerField,
    StringField,
    TimeDeltaField,
    TimeField,
    UUIDField,
)
from .model import Model, ModelConfigurationError, ModelMeta, ModelOptions

__all__ = [
    "BooleanField",
    "BytesField",
    "DateField",
    "DateTimeField",
    "DecimalField",
    "EnumField",
    "Field",
    "FloatField",
    "IgnoreRule",
    "IntegerField",
    "Model",
    "ModelConfigurationError",
    "ModelMeta",
    "ModelOptions",
    "StringField",
    "TimeDeltaField",
    "TimeField",
    "UUIDField",
]
