"""
Error hierarchy raised while building or materialising SQL commands.
"""

from __future__ import annotations

from typing import Any, Optional


class SqlCommandError(Exception):
    """Base class for command building failures."""


class UnmappableTypeError(SqlCommandError):
    """
    Raised by CREATE TABLE when a column has neither a ``db_type`` override nor
    an entry in the dialect's type table.
    """

    def __init__(self, model: type, column: str, python_type: Any, dialect: str) -> None:
        self.model = model
        self.column = column
        self.python_type = python_type
        self.dialect = dialect
        type_name = getattr(python_type, "__name__", repr(python_type))
        super().__init__(
            f"No {dialect} column type for '{model.__name__}.{column}' ({type_name}); "
            "declare db_type on the field."
        )


class UnsupportedOperationError(SqlCommandError):
    def __init__(self, dialect: str, operation: str, detail: str) -> None:
        self.dialect = dialect
        self.operation = operation
        super().__init__(f"{dialect} does not support {operation}: {detail}")


class NoEligibleColumnsError(SqlCommandError):
    """
    Raised when a write resolves to zero columns once ignore rules are applied.
    """

    def __init__(self, model: type, operation: str, clause: Optional[str] = None) -> None:
        self.model = model
        self.operation = operation
        self.clause = clause
        where = f" for the {clause} clause" if clause else ""
        super().__init__(f"No eligible columns{where} of {operation} on '{model.__name__}'.")


class MissingPrimaryKeyError(SqlCommandError):
    def __init__(self, model: type, operation: str, detail: str) -> None:
        self.model = model
        self.operation = operation
        super().__init__(f"{operation} on '{model.__name__}' {detail}")


NoPrimaryKeyError = MissingPrimaryKeyError


class EmptyConditionError(SqlCommandError):
    """
    Raised instead of emitting a DELETE without a WHERE clause.
    """

    def __init__(self, model: type) -> None:
        self.model = model
        super().__init__(
            f"DELETE on '{model.__name__}' has no condition; "
            "supply populated data or a filter."
        )


class InvalidArgumentError(SqlCommandError, ValueError):
    def __init__(self, argument: str, value: Any, requirement: str) -> None:
        self.argument = argument
        self.value = value
        super().__init__(f"'{argument}' {requirement} (received {value!r}).")


class TypeCoercionError(SqlCommandError, ValueError):
    """
    Raised during row hydration when a stored value cannot be converted to the
    field's Python type.
    """

    def __init__(self, model: type, column: str, value: Any, python_type: Any) -> None:
        self.model = model
        self.column = column
        self.value = value
        self.python_type = python_type
        type_name = getattr(python_type, "__name__", repr(python_type))
        super().__init__(
            f"Cannot convert {value!r} from column '{column}' to {type_name} "
            f"on '{model.__name__}'."
        )
