"""SQL dialect abstraction for generated statements.

A dialect in sqlbind is reduced to what statement generation actually
varies on: the numbered placeholder prefix and how the next value of a
primary-key sequence is fetched. Every supported backend binds arguments
by number, which is what lets UPDATE renumber the placeholders of a
caller-supplied WHERE clause.

Architecture::

    ┌──────────────┐ ┌──────────────┐ ┌──────────────┐
    │ PostgreSQL   │ │ Oracle       │ │ SQLite       │
    │ $1, $2, $3   │ │ :1, :2, :3   │ │ ?1, ?2, ?3   │
    │ nextval('s') │ │ s.nextval    │ │ (no seqs)    │
    └──────────────┘ └──────────────┘ └──────────────┘

Examples:
    >>> from sqlbind.dialect import get_dialect
    >>> d = get_dialect("oracle")
    >>> d.placeholders(3)
    ':1, :2, :3'
    >>> d.next_sequence_query("users_seq")
    'SELECT users_seq.nextval FROM dual'

Tags:
    dialect, sql, placeholders, sequences, sqlbind
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Dialect(Protocol):
    """SQL dialect contract."""

    @property
    def name(self) -> str:
        """Human-readable dialect name (e.g. ``'postgresql'``)."""
        ...

    @property
    def arg_prefix(self) -> str:
        """Character that precedes a placeholder number (``$``, ``:``, ``?``)."""
        ...

    def placeholder(self, index: int) -> str:
        """Single numbered placeholder (0-based index, 1-based in SQL)."""
        ...

    def placeholders(self, count: int, start: int = 0) -> str:
        """Comma-separated placeholder list.

        >>> dialect.placeholders(3)
        '$1, $2, $3'       # PostgreSQL
        ':1, :2, :3'       # Oracle
        """
        ...

    def next_sequence_query(self, sequence: str) -> str | None:
        """Query returning the next value of ``sequence`` as a single integer.

        ``None`` means the backend has no sequences and the key column is
        left for the database to fill in.
        """
        ...


# =========================================================================
# Concrete Dialect Implementations
# =========================================================================


class _NumberedDialect:
    """Shared placeholder generation for ``<prefix><n>`` styles."""

    _prefix = ""

    @property
    def arg_prefix(self) -> str:
        return self._prefix

    def placeholder(self, index: int) -> str:
        return f"{self._prefix}{index + 1}"

    def placeholders(self, count: int, start: int = 0) -> str:
        return ", ".join(self.placeholder(i) for i in range(start, start + count))


class PostgreSQLDialect(_NumberedDialect):
    """PostgreSQL dialect — ``$1`` placeholders, ``nextval('seq')``.

    ``$n`` is the server-side numbering used by asyncpg, pg8000 (numeric
    paramstyle) and prepared statements.
    """

    _prefix = "$"

    @property
    def name(self) -> str:
        return "postgresql"

    def next_sequence_query(self, sequence: str) -> str | None:
        return f"SELECT nextval('{sequence}')"


class OracleDialect(_NumberedDialect):
    """Oracle dialect — ``:1, :2`` numbered placeholders, ``seq.nextval``.

    Compatible with ``oracledb`` (python-oracledb) numeric bind variables.
    """

    _prefix = ":"

    @property
    def name(self) -> str:
        return "oracle"

    def next_sequence_query(self, sequence: str) -> str | None:
        return f"SELECT {sequence}.nextval FROM dual"


class SQLiteDialect(_NumberedDialect):
    """SQLite dialect — ``?1`` numbered placeholders, no sequences.

    ``?NNN`` parameters bind positionally in :mod:`sqlite3`, so generated
    statements run with plain tuples of arguments.
    """

    _prefix = "?"

    @property
    def name(self) -> str:
        return "sqlite"

    def next_sequence_query(self, sequence: str) -> str | None:  # noqa: ARG002
        return None


# =========================================================================
# Registry / Factory
# =========================================================================

# Pre-instantiated singletons (dialects are stateless)
_DIALECTS: dict[str, Dialect] = {
    "postgresql": PostgreSQLDialect(),
    "postgres": PostgreSQLDialect(),  # alias
    "oracle": OracleDialect(),
    "sqlite": SQLiteDialect(),
}


def get_dialect(db_type: str) -> Dialect:
    """Get a dialect by database type name.

    Args:
        db_type: One of ``'postgresql'``, ``'postgres'``, ``'oracle'``,
                 ``'sqlite'`` or a name added with :func:`register_dialect`.

    Returns:
        Pre-instantiated :class:`Dialect` for the requested backend.

    Raises:
        ValueError: If ``db_type`` is not recognised.
    """
    key = db_type.lower()
    if key not in _DIALECTS:
        raise ValueError(
            f"Unknown dialect '{db_type}'. "
            f"Supported: {sorted(set(_DIALECTS) - {'postgres'})}"
        )
    return _DIALECTS[key]


def register_dialect(name: str, dialect: Dialect) -> None:
    """Register a custom dialect implementation.

    Args:
        name: Lookup key (lower-cased automatically).
        dialect: Instance implementing :class:`Dialect`.
    """
    _DIALECTS[name.lower()] = dialect


__all__ = [
    "Dialect",
    "PostgreSQLDialect",
    "OracleDialect",
    "SQLiteDialect",
    "get_dialect",
    "register_dialect",
]
