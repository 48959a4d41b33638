"""
Structural protocols for sqlbind.

sqlbind never imports a database driver. It talks to any PEP 249 (DB-API
2.0) connection through :class:`Connection` / :class:`Cursor`, and the
operations in :mod:`sqlbind.operations` accept anything shaped like
:class:`Executor`, the three-method surface :class:`~sqlbind.db.DB`
exposes.

Architecture:
    ::

        Connection (driver)             Executor (sqlbind)
        ┌──────────────────────┐        ┌──────────────────────────────┐
        │ cursor()   → Cursor  │        │ execute(sql, *args) → result │
        │ commit()             │  ───▶  │ query(sql, *args)   → cursor │
        │ rollback()           │        │ query_row(sql, *args)→ row   │
        └──────────────────────┘        └──────────────────────────────┘

Implementations:
    sqlite3, psycopg, oracledb, pg8000 ... (Connection)
    sqlbind.db.DB (Executor)

Tags:
    protocol, dbapi, connection, executor, sqlbind
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Cursor(Protocol):
    """The subset of a DB-API cursor sqlbind relies on."""

    description: Sequence[Sequence[Any]] | None
    rowcount: int

    def execute(self, sql: str, params: Sequence[Any] = ()) -> Any:
        """Execute a statement with positional parameters."""
        ...

    def fetchone(self) -> Sequence[Any] | None:
        ...

    def fetchall(self) -> Sequence[Sequence[Any]]:
        ...

    def close(self) -> None:
        ...


@runtime_checkable
class Connection(Protocol):
    """
    Minimal DB-API connection: the opaque collaborator behind a DB.

    Transactions are implicit in DB-API: statements issued on a cursor
    belong to the current transaction until ``commit()`` or
    ``rollback()``.
    """

    def cursor(self) -> Cursor:
        ...

    def commit(self) -> None:
        ...

    def rollback(self) -> None:
        ...


@runtime_checkable
class Executor(Protocol):
    """Anything that can run statements for the struct/map operations."""

    def execute(self, query: str, *args: Any) -> Any:
        """Run a statement, return an ExecResult-like object."""
        ...

    def query(self, query: str, *args: Any) -> Cursor:
        """Run a query, return a cursor positioned before the first row."""
        ...

    def query_row(self, query: str, *args: Any) -> Sequence[Any] | None:
        """Run a query, return its first row (``None`` when empty)."""
        ...


__all__ = [
    "Cursor",
    "Connection",
    "Executor",
]
