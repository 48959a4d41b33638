"""Executor facade over a DB-API connection.

:class:`DB` pairs a connection with a :class:`~sqlbind.dialect.Dialect`
and runs every statement inside one lazily opened transaction::

    ┌────────────────────────────────────────────────────────────────────┐
    │                                DB                                   │
    │                                                                    │
    │   conn: Connection         ← any DB-API 2.0 connection              │
    │   dialect: Dialect         ← placeholder style, sequences          │
    │                                                                    │
    │   execute(sql, *args)      → ExecResult                            │
    │   query(sql, *args)        → cursor                                │
    │   query_row(sql, *args)    → row | None                            │
    │   select_maps / select / select_int                                │
    │   insert / update / delete / insert_map / update_map               │
    │   close(commit)                                                    │
    └────────────────────────────────────────────────────────────────────┘

States: no transaction → (first execute/query/query_row) → transaction
open → (close) → no transaction. One DB per logical transaction; a DB is
not safe to share between threads.

Usage::

    import sqlite3
    from sqlbind import get_sqlite_db

    with get_sqlite_db(sqlite3.connect("app.db")) as db:
        db.insert(user, "users")
        db.update(user, "users")
    # committed here, rolled back if the block raised
"""

from __future__ import annotations

import weakref
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from sqlbind import operations
from sqlbind.dialect import Dialect, OracleDialect, PostgreSQLDialect, SQLiteDialect, get_dialect
from sqlbind.errors import ArgumentError
from sqlbind.logging import get_logger
from sqlbind.operations import RowValue
from sqlbind.protocols import Connection, Cursor

logger = get_logger(__name__)


@dataclass(frozen=True)
class ExecResult:
    """Outcome of a statement run through :meth:`DB.execute`."""

    rowcount: int
    lastrowid: Any = None

    def rows_affected(self) -> int:
        return self.rowcount


class Transaction:
    """The cursors opened on a connection since the last commit/rollback.

    DB-API transactions start implicitly with the first statement; the
    first cursor is opened eagerly so a dead connection fails here.
    Query cursors are held weakly: one the caller has dropped is no
    longer tracked, and :meth:`release` closes and forgets one at once.
    """

    def __init__(self, conn: Connection) -> None:
        self._conn = conn
        self._primary: Cursor = conn.cursor()
        self._queries: weakref.WeakSet[Any] = weakref.WeakSet()
        logger.debug("tx.begin")

    def cursor(self, *, fresh: bool = False) -> Cursor:
        if not fresh:
            return self._primary
        cur = self._conn.cursor()
        self._queries.add(cur)
        return cur

    def release(self, cursor: Cursor) -> None:
        self._queries.discard(cursor)
        cursor.close()

    @property
    def open_queries(self) -> int:
        return len(self._queries)

    def _close_cursors(self) -> None:
        for cur in list(self._queries):
            cur.close()
        self._queries.clear()
        self._primary.close()

    def commit(self) -> None:
        self._close_cursors()
        self._conn.commit()
        logger.debug("tx.commit")

    def rollback(self) -> None:
        self._close_cursors()
        self._conn.rollback()
        logger.debug("tx.rollback")


class _TxState:
    # Shared by a DB and its null_sensitive() copies
    __slots__ = ("tx",)

    def __init__(self) -> None:
        self.tx: Transaction | None = None


class DB:
    """Transaction-scoped executor with struct/map helpers.

    Parameters:
        conn: Any object satisfying the :class:`Connection` protocol.
        dialect: SQL dialect that numbers placeholders and fetches sequences.
        null_sensitive: Write ``None`` fields as NULL instead of skipping them.

    Errors from sqlbind are raised as :class:`~sqlbind.errors.SqlBindError`
    subclasses; driver exceptions propagate unchanged.
    """

    def __init__(self, conn: Connection, dialect: Dialect, *, null_sensitive: bool = False) -> None:
        if conn is None:
            raise ArgumentError("DB: connection is None")
        self.conn = conn
        self.dialect = dialect
        self._null_sensitive = null_sensitive
        self._state = _TxState()

    @classmethod
    def from_settings(cls, conn: Connection, settings: Any = None) -> DB:
        """Build a DB whose dialect and null sensitivity come from settings.

        ``settings`` defaults to a fresh
        :class:`~sqlbind.settings.SqlBindSettings` read from the environment.
        """
        if settings is None:
            from sqlbind.settings import SqlBindSettings

            settings = SqlBindSettings()
        return cls(conn, get_dialect(settings.dialect), null_sensitive=settings.null_sensitive)

    @property
    def is_null_sensitive(self) -> bool:
        return self._null_sensitive

    @property
    def in_transaction(self) -> bool:
        return self._state.tx is not None

    def null_sensitive(self) -> DB:
        """Copy of this DB that writes ``None`` fields as NULL.

        The copy shares the connection and the transaction.
        """
        copy = DB(self.conn, self.dialect, null_sensitive=True)
        copy._state = self._state
        return copy

    # -- Transaction -------------------------------------------------------

    def _tx(self) -> Transaction:
        if self._state.tx is None:
            self._state.tx = Transaction(self.conn)
        return self._state.tx

    def close(self, commit: bool) -> None:
        """Commit or roll back the open transaction; no-op if none was opened."""
        tx = self._state.tx
        if tx is None:
            return
        self._state.tx = None
        if commit:
            tx.commit()
        else:
            tx.rollback()

    def __enter__(self) -> DB:
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.close(commit=exc_type is None)

    # -- DB-API pass-through -----------------------------------------------

    def execute(self, query: str, *args: Any) -> ExecResult:
        """Run a statement inside the transaction."""
        cursor = self._tx().cursor()
        logger.debug("sql.execute", sql=query, args=list(args))
        cursor.execute(query, args)
        return ExecResult(
            rowcount=cursor.rowcount,
            lastrowid=getattr(cursor, "lastrowid", None),
        )

    def query(self, query: str, *args: Any) -> Cursor:
        """Run a query inside the transaction and return its own cursor."""
        cursor = self._tx().cursor(fresh=True)
        logger.debug("sql.query", sql=query, args=list(args))
        cursor.execute(query, args)
        return cursor

    def query_row(self, query: str, *args: Any) -> Sequence[Any] | None:
        """First row of ``query``, or ``None`` when it returns nothing.

        If the transaction cannot be opened the query still runs on a
        throwaway cursor outside it.
        """
        tx: Transaction | None
        try:
            tx = self._tx()
            cursor = tx.cursor(fresh=True)
        except Exception as e:
            logger.warning("tx.begin_failed", error=str(e), sql=query)
            tx = None
            cursor = self.conn.cursor()
        logger.debug("sql.query", sql=query, args=list(args))
        try:
            cursor.execute(query, args)
            return cursor.fetchone()
        finally:
            if tx is not None:
                tx.release(cursor)
            else:
                cursor.close()

    # -- Struct / map helpers ----------------------------------------------

    def select_maps(self, query: str, *args: Any) -> list[RowValue]:
        """Run a SELECT and return rows as dicts."""
        return operations.select_maps(self, query, *args)

    def select(self, dest: list, cls: type, query: str, *args: Any) -> list[RowValue]:
        """Scan rows into ``cls`` instances appended to ``dest``."""
        return operations.select_struct(self, dest, cls, query, *args)

    def select_int(self, query: str, *args: Any) -> int | None:
        return operations.select_int(self, query, *args)

    def insert(self, obj: Any, table: str) -> ExecResult:
        return operations.insert_struct(self, obj, table, self.dialect, self._null_sensitive)

    def update(self, obj: Any, table: str) -> ExecResult:
        return operations.update_struct(self, obj, table, self.dialect, self._null_sensitive)

    def delete(self, obj: Any, table: str) -> ExecResult:
        return operations.delete_struct(self, obj, table, self.dialect)

    def insert_map(self, values: Mapping[str, Any], table: str) -> ExecResult:
        return operations.insert_map(self, values, table, self.dialect)

    def update_map(self, values: Mapping[str, Any], table: str, where: str = "", *args: Any) -> ExecResult:
        return operations.update_map(self, values, table, self.dialect, where, *args)

    def __repr__(self) -> str:
        state = "open" if self.in_transaction else "idle"
        return f"DB(dialect={self.dialect.name!r}, tx={state}, null_sensitive={self._null_sensitive})"


# =========================================================================
# Constructors
# =========================================================================


def get_postgres_db(conn: Connection) -> DB:
    """DB with ``$1``-style placeholders."""
    return DB(conn, PostgreSQLDialect())


def get_oracle_db(conn: Connection) -> DB:
    """DB with ``:1``-style placeholders."""
    return DB(conn, OracleDialect())


def get_sqlite_db(conn: Connection) -> DB:
    """DB with ``?1``-style placeholders."""
    return DB(conn, SQLiteDialect())


__all__ = [
    "DB",
    "ExecResult",
    "Transaction",
    "get_postgres_db",
    "get_oracle_db",
    "get_sqlite_db",
]
