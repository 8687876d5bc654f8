"""
sqlcommands public package initialization.

Declare tables as :class:`Model` subclasses, build dialect-specific commands
with :class:`CommandBuilder` and run them through :class:`SqlClient`.
"""

from .core.fields import (  # noqa: F401
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
from .core.model import Model, ModelConfigurationError  # noqa: F401
from .commands import SqlCommand, SqlFilter, SqlParameter  # noqa: F401
from .dialects import (  # noqa: F401
    MYSQL,
    ORACLE,
    POSTGRES,
    SQLITE,
    SQLSERVER,
    Dialect,
    DropTableMode,
    get_dialect,
)
from .errors import (  # noqa: F401
    EmptyConditionError,
    InvalidArgumentError,
    MissingPrimaryKeyError,
    NoEligibleColumnsError,
    NoPrimaryKeyError,
    SqlCommandError,
    TypeCoercionError,
    UnmappableTypeError,
    UnsupportedOperationError,
)
from .metadata import MetadataCache, get_table_descriptor  # noqa: F401
from .query import CommandBuilder  # noqa: F401
from .client import SqlClient  # noqa: F401

__all__ = [
    "BooleanField",
    "BytesField",
    "CommandBuilder",
    "DateField",
    "DateTimeField",
    "DecimalField",
    "Dialect",
    "DropTableMode",
    "EmptyConditionError",
    "EnumField",
    "Field",
    "FloatField",
    "IgnoreRule",
    "IntegerField",
    "InvalidArgumentError",
    "MYSQL",
    "MetadataCache",
    "MissingPrimaryKeyError",
    "Model",
    "ModelConfigurationError",
    "NoEligibleColumnsError",
    "NoPrimaryKeyError",
    "ORACLE",
    "POSTGRES",
    "SQLITE",
    "SQLSERVER",
    "SqlClient",
    "SqlCommand",
    "SqlCommandError",
    "SqlFilter",
    "SqlParameter",
    "StringField",
    "TimeDeltaField",
    "TimeField",
    "TypeCoercionError",
    "UUIDField",
    "UnmappableTypeError",
    "UnsupportedOperationError",
    "get_dialect",
    "get_table_descriptor",
]
