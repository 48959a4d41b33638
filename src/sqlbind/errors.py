"""
Structured error types for sqlbind.

Every failure raised by sqlbind itself derives from :class:`SqlBindError`,
which carries a category, a structured :class:`ErrorContext` (table, column,
query, free-form metadata) and an optional chained cause. Exceptions raised
by the DB-API driver are never rewrapped by :class:`~sqlbind.db.DB`; they
propagate to the caller unchanged. :class:`~sqlbind.safe.SafeDB` wraps them
in :class:`DatabaseError` so its ``Err`` values always hold a SqlBindError.

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────────┐
        │                        SqlBindError                              │
        │              (category, context, cause)                          │
        ├─────────────────────────────────────────────────────────────────┤
        │  ArgumentError      SchemaError        PrimaryKeyError          │
        │  (ARGUMENT)         (SCHEMA)           (SCHEMA)                 │
        │                                                                  │
        │  ConversionError    PlaceholderError   DatabaseError            │
        │  (CONVERSION)       (QUERY)            (DATABASE)               │
        │                                              │                   │
        │                                   SequenceError  NoRowsError     │
        └─────────────────────────────────────────────────────────────────┘

Examples:
    >>> err = PrimaryKeyError("no primary key on User").with_context(table="users")
    >>> err.context.table
    'users'
    >>> err.to_dict()["category"]
    'SCHEMA'

Guardrails:
    ❌ DON'T: Raise bare ValueError/TypeError from mapping code
    ✅ DO: Raise the matching SqlBindError subclass

    ❌ DON'T: Swallow the driver exception
    ✅ DO: Pass it as cause= for error chaining

Tags:
    error-handling, exception-hierarchy, error-context, sqlbind
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification."""

    ARGUMENT = "ARGUMENT"
    SCHEMA = "SCHEMA"
    CONVERSION = "CONVERSION"
    QUERY = "QUERY"
    DATABASE = "DATABASE"
    INTERNAL = "INTERNAL"


@dataclass
class ErrorContext:
    """
    Structured metadata attached to an error.

    Attributes:
        table: Table the statement targeted
        column: Column involved (conversion, primary key)
        query: SQL text that was being built or executed
        metadata: Additional key-value pairs
    """

    table: str | None = None
    column: str | None = None
    query: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["table", "column", "query"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class SqlBindError(Exception):
    """
    Base exception for all sqlbind errors.

    Subclasses set ``default_category``; callers may override it per
    instance. ``cause`` is chained as ``__cause__`` so tracebacks show the
    original driver or parsing failure.
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> SqlBindError:
        """
        Add context to this error (fluent API).

        Usage:
            raise PrimaryKeyError("missing key").with_context(table="users")
        """
        for key, value in kwargs.items():
            if key != "metadata" and hasattr(self.context, key):
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# ARGUMENT / SCHEMA ERRORS
# =============================================================================


class ArgumentError(SqlBindError):
    """Invalid argument passed to a sqlbind operation."""

    default_category = ErrorCategory.ARGUMENT


class SchemaError(SqlBindError):
    """A dataclass cannot be mapped (bad annotation, duplicate primary key)."""

    default_category = ErrorCategory.SCHEMA


class PrimaryKeyError(SchemaError):
    """Update or delete requested on a struct without a usable primary key."""

    def __init__(self, message: str, *, struct_name: str = "", **kwargs: Any):
        super().__init__(message, **kwargs)
        self.struct_name = struct_name


# =============================================================================
# CONVERSION ERRORS
# =============================================================================


class ConversionError(SqlBindError):
    """
    A scanned value cannot be stored into the destination field.

    Raised both for combinations the converter does not handle and for
    string-mediated parses that fail.
    """

    default_category = ErrorCategory.CONVERSION

    def __init__(
        self,
        message: str,
        *,
        source_type: type | None = None,
        value: Any = None,
        target_type: Any = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.source_type = source_type
        self.value = value
        self.target_type = target_type

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.source_type is not None:
            result["source_type"] = self.source_type.__name__
        if self.target_type is not None:
            result["target_type"] = getattr(self.target_type, "__name__", repr(self.target_type))
        if self.value is not None:
            result["value"] = repr(self.value)
        return result


# =============================================================================
# QUERY / DATABASE ERRORS
# =============================================================================


class PlaceholderError(SqlBindError):
    """Placeholder renumbering pattern could not be built."""

    default_category = ErrorCategory.QUERY


class DatabaseError(SqlBindError):
    """Database query or transaction error."""

    default_category = ErrorCategory.DATABASE


class SequenceError(DatabaseError):
    """Next value of a primary-key sequence could not be fetched."""

    def __init__(self, message: str, *, sequence: str = "", **kwargs: Any):
        super().__init__(message, **kwargs)
        self.sequence = sequence


class NoRowsError(DatabaseError):
    """A single-row query returned no rows."""

    pass


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "SqlBindError",
    "ArgumentError",
    "SchemaError",
    "PrimaryKeyError",
    "ConversionError",
    "PlaceholderError",
    "DatabaseError",
    "SequenceError",
    "NoRowsError",
]
