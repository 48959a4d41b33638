"""Checked API surface: every DB operation as a Result.

:class:`SafeDB` mirrors :class:`~sqlbind.db.DB` method for method, but
returns ``Ok(value)`` on success and ``Err(error)`` on failure instead of
raising. Errors are always :class:`~sqlbind.errors.SqlBindError` instances;
driver exceptions are wrapped in :class:`~sqlbind.errors.DatabaseError`
with the original kept as ``cause``.

    safe = get_postgres_safe_db(conn)
    match safe.delete(user, "users"):
        case Ok(value=res):
            print(res.rowcount)
        case Err(error=err):
            print(err.to_dict())
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Callable, TypeVar

from sqlbind.db import DB, ExecResult, get_oracle_db, get_postgres_db, get_sqlite_db
from sqlbind.errors import DatabaseError, SqlBindError
from sqlbind.operations import RowValue
from sqlbind.protocols import Connection, Cursor
from sqlbind.result import Result, try_result

T = TypeVar("T")


def _as_sqlbind_error(error: Exception) -> Exception:
    if isinstance(error, SqlBindError):
        return error
    return DatabaseError(str(error) or type(error).__name__, cause=error)


def _checked(f: Callable[[], T]) -> Result[T]:
    return try_result(f).map_err(_as_sqlbind_error)


class SafeDB:
    """Result-returning wrapper around a :class:`DB`."""

    def __init__(self, db: DB) -> None:
        self.db = db

    def null_sensitive(self) -> SafeDB:
        return SafeDB(self.db.null_sensitive())

    def close(self, commit: bool) -> Result[None]:
        return _checked(lambda: self.db.close(commit))

    def execute(self, query: str, *args: Any) -> Result[ExecResult]:
        return _checked(lambda: self.db.execute(query, *args))

    def query(self, query: str, *args: Any) -> Result[Cursor]:
        return _checked(lambda: self.db.query(query, *args))

    def query_row(self, query: str, *args: Any) -> Result[Sequence[Any] | None]:
        return _checked(lambda: self.db.query_row(query, *args))

    def select_maps(self, query: str, *args: Any) -> Result[list[RowValue]]:
        return _checked(lambda: self.db.select_maps(query, *args))

    def select(self, dest: list, cls: type, query: str, *args: Any) -> Result[list[RowValue]]:
        return _checked(lambda: self.db.select(dest, cls, query, *args))

    def select_int(self, query: str, *args: Any) -> Result[int | None]:
        return _checked(lambda: self.db.select_int(query, *args))

    def insert(self, obj: Any, table: str) -> Result[ExecResult]:
        return _checked(lambda: self.db.insert(obj, table))

    def update(self, obj: Any, table: str) -> Result[ExecResult]:
        return _checked(lambda: self.db.update(obj, table))

    def delete(self, obj: Any, table: str) -> Result[ExecResult]:
        return _checked(lambda: self.db.delete(obj, table))

    def insert_map(self, values: Mapping[str, Any], table: str) -> Result[ExecResult]:
        return _checked(lambda: self.db.insert_map(values, table))

    def update_map(self, values: Mapping[str, Any], table: str, where: str = "", *args: Any) -> Result[ExecResult]:
        return _checked(lambda: self.db.update_map(values, table, where, *args))

    def __repr__(self) -> str:
        return f"SafeDB({self.db!r})"


def get_postgres_safe_db(conn: Connection) -> SafeDB:
    return SafeDB(get_postgres_db(conn))


def get_oracle_safe_db(conn: Connection) -> SafeDB:
    return SafeDB(get_oracle_db(conn))


def get_sqlite_safe_db(conn: Connection) -> SafeDB:
    return SafeDB(get_sqlite_db(conn))


__all__ = [
    "SafeDB",
    "get_postgres_safe_db",
    "get_oracle_safe_db",
    "get_sqlite_safe_db",
]
