"""Tests for the Result-returning SafeDB surface."""

from __future__ import annotations

from sqlbind import Err, Ok, SafeDB, get_postgres_safe_db, get_sqlite_safe_db
from sqlbind.errors import DatabaseError, NoRowsError, PrimaryKeyError
from tests._support.models import FakeConnection, Tag, User


class TestSafeDB:
    def test_ok(self, fake_conn: FakeConnection) -> None:
        safe = get_postgres_safe_db(fake_conn)
        result = safe.delete(User(id=2), "users")
        assert isinstance(result, Ok)
        assert result.unwrap().rowcount == 1
        assert fake_conn.last_sql == "DELETE FROM users WHERE id=$1"

    def test_sqlbind_error_returned(self, fake_conn: FakeConnection) -> None:
        result = get_postgres_safe_db(fake_conn).update(Tag(label="x"), "tags")
        assert result.is_err()
        assert isinstance(result.error, PrimaryKeyError)
        assert fake_conn.statements == []

    def test_driver_error_wrapped(self, fake_conn: FakeConnection) -> None:
        boom = RuntimeError("disk full")
        fake_conn.respond("INSERT", [], boom)
        result = get_sqlite_safe_db(fake_conn).insert(Tag(label="x"), "tags")
        assert isinstance(result, Err)
        assert isinstance(result.error, DatabaseError)
        assert result.error.cause is boom
        assert result.to_dict()["error"]["category"] == "DATABASE"

    def test_select_int_no_rows(self, fake_conn: FakeConnection) -> None:
        fake_conn.respond("SELECT", ["n"], [])
        result = get_postgres_safe_db(fake_conn).select_int("SELECT n FROM t")
        assert isinstance(result.error, NoRowsError)
        assert result.unwrap_or(-1) == -1

    def test_select(self, fake_conn: FakeConnection) -> None:
        fake_conn.respond("select", ["label"], [("a",)])
        tags: list[Tag] = []
        result = get_postgres_safe_db(fake_conn).select(tags, Tag, "select * from tags")
        assert result.unwrap() == [{"label": "a"}]
        assert tags == [Tag(label="a")]

    def test_close(self, fake_conn: FakeConnection) -> None:
        safe = get_postgres_safe_db(fake_conn)
        safe.execute("DELETE FROM tags")
        assert safe.close(commit=True) == Ok(None)
        assert fake_conn.commits == 1

    def test_null_sensitive(self, fake_conn: FakeConnection) -> None:
        safe = get_postgres_safe_db(fake_conn).null_sensitive()
        assert isinstance(safe, SafeDB)
        assert safe.db.is_null_sensitive

    def test_map_chain(self, fake_conn: FakeConnection) -> None:
        fake_conn.respond("SELECT", ["n"], [(5,)])
        result = get_postgres_safe_db(fake_conn).select_int("SELECT n FROM t").map(lambda n: n * 2)
        assert result == Ok(10)
