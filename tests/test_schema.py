"""Tests for dataclass column mapping."""

from __future__ import annotations

import dataclasses

import pytest

from sqlbind.errors import SchemaError
from sqlbind.schema import (
    DB_KEY,
    SEQ_KEY,
    column,
    get_struct_data,
    new_instance,
    table_schema,
    unwrap_optional,
)
from tests._support.models import Account, Audit, Document, Tag, TwoKeys, User, UserId


class TestColumn:
    def test_metadata(self) -> None:
        f = column("name", default="x")
        assert f.metadata[DB_KEY] == "name"
        assert SEQ_KEY not in f.metadata
        assert f.default == "x"

    def test_sequence(self) -> None:
        f = column("id", seq="users_id_seq", default=None)
        assert f.metadata[SEQ_KEY] == "users_id_seq"

    def test_keeps_extra_metadata(self) -> None:
        f = column("id", metadata={"doc": "key"})
        assert f.metadata["doc"] == "key"
        assert f.metadata[DB_KEY] == "id"


class TestTableSchema:
    def test_columns_flattened_and_lowercased(self) -> None:
        schema = table_schema(User)
        assert schema.column_names() == [
            "id", "name", "email", "score", "avatar", "created_by", "note",
        ]

    def test_embedded_path(self) -> None:
        binding = table_schema(User).columns["created_by"]
        assert binding.path == ("audit", "created_by")
        assert binding.attribute == "created_by"

    def test_primary(self) -> None:
        schema = table_schema(User)
        assert schema.primary is not None
        assert schema.primary.column == "id"
        assert schema.primary.sequence == "users_id_seq"

    def test_no_primary(self) -> None:
        assert table_schema(Tag).primary is None

    def test_optional_unwrapped(self) -> None:
        binding = table_schema(User).columns["email"]
        assert binding.type is str
        assert binding.nullable is True
        assert table_schema(User).columns["name"].nullable is False

    def test_reference_not_traversed(self) -> None:
        assert table_schema(Document).column_names() == ["id", "title"]

    def test_duplicate_primary_rejected(self) -> None:
        with pytest.raises(SchemaError, match="more than one primary field"):
            table_schema(TwoKeys)

    def test_cached_per_type(self) -> None:
        assert table_schema(User) is table_schema(User)


class TestUnwrapOptional:
    def test_plain(self) -> None:
        assert unwrap_optional(int) == (int, False)

    def test_optional(self) -> None:
        assert unwrap_optional(int | None) == (int, True)


class TestGetStructData:
    def test_binds_values(self) -> None:
        user = User(id=3, name="ann", audit=Audit(created_by="root"))
        data = get_struct_data(user)
        assert data.name == "User"
        assert data.fields["name"].value == "ann"
        assert data.fields["created_by"].value == "root"
        assert data.primary_field is not None
        assert data.primary_field.value == 3

    def test_set_writes_embedded_owner(self) -> None:
        user = User()
        data = get_struct_data(user)
        data.fields["note"].set("hello")
        assert user.audit.note == "hello"

    def test_fresh_per_call(self) -> None:
        user = User()
        assert get_struct_data(user) is not get_struct_data(user)

    def test_not_a_dataclass(self) -> None:
        data = get_struct_data({"name": "x"})
        assert data.fields == {}
        assert data.primary_field is None

    def test_class_is_not_an_instance(self) -> None:
        assert get_struct_data(User).fields == {}

    def test_none_embedded_value_skipped(self) -> None:
        user = User()
        user.audit = None  # type: ignore[assignment]
        data = get_struct_data(user)
        assert "created_by" not in data.fields
        assert "name" in data.fields

    def test_frozen_dataclass_writable(self) -> None:
        @dataclasses.dataclass(frozen=True)
        class Frozen:
            label: str = column("label", default="")

        obj = Frozen()
        get_struct_data(obj).fields["label"].set("x")
        assert obj.label == "x"


class TestNewInstance:
    def test_defaults_and_embedded(self) -> None:
        user = new_instance(User)
        assert user.id is None
        assert user.name == ""
        assert isinstance(user.audit, Audit)
        assert user.cache == {}

    def test_factories_not_shared(self) -> None:
        assert new_instance(User).audit is not new_instance(User).audit

    def test_custom_int_type_field(self) -> None:
        account = new_instance(Account)
        assert account.id is None
        assert table_schema(Account).columns["id"].type is UserId
