"""Tests for the sqlbind error hierarchy."""

from __future__ import annotations

from sqlbind.errors import (
    ArgumentError,
    ConversionError,
    DatabaseError,
    ErrorCategory,
    NoRowsError,
    PrimaryKeyError,
    SchemaError,
    SequenceError,
    SqlBindError,
)


class TestCategories:
    def test_defaults(self) -> None:
        assert ArgumentError("x").category == ErrorCategory.ARGUMENT
        assert PrimaryKeyError("x").category == ErrorCategory.SCHEMA
        assert NoRowsError("x").category == ErrorCategory.DATABASE

    def test_hierarchy(self) -> None:
        assert issubclass(PrimaryKeyError, SchemaError)
        assert issubclass(SequenceError, DatabaseError)
        assert issubclass(ConversionError, SqlBindError)

    def test_override(self) -> None:
        err = DatabaseError("x", category=ErrorCategory.INTERNAL)
        assert err.category == ErrorCategory.INTERNAL


class TestContext:
    def test_with_context(self) -> None:
        err = PrimaryKeyError("missing").with_context(table="users", attempt=2)
        assert err.context.table == "users"
        assert err.context.metadata == {"attempt": 2}

    def test_to_dict(self) -> None:
        cause = ValueError("bad")
        err = SequenceError("seq failed", sequence="s", cause=cause).with_context(query="SELECT 1")
        assert err.__cause__ is cause
        assert err.to_dict() == {
            "error_type": "SequenceError",
            "message": "seq failed",
            "category": "DATABASE",
            "context": {"query": "SELECT 1"},
            "cause": "bad",
        }

    def test_conversion_to_dict(self) -> None:
        err = ConversionError("no", source_type=str, value="x", target_type=int)
        d = err.to_dict()
        assert d["source_type"] == "str"
        assert d["target_type"] == "int"
        assert d["value"] == "'x'"

    def test_repr(self) -> None:
        assert repr(ArgumentError("bad")) == "ArgumentError('bad', category=ARGUMENT)"

