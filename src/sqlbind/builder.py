"""SQL text generation.

Pure functions: they build statements and argument lists, never execute
anything. Placeholders always come from the :class:`~sqlbind.dialect.Dialect`,
numbered from 1 in the order arguments are passed.

    >>> from sqlbind.dialect import PostgreSQLDialect
    >>> build_update("users", {"name": "ann"}, PostgreSQLDialect(), "WHERE id=$1", [7])
    ('UPDATE users SET name=$1 WHERE id=$2', ['ann', 7])
"""

from __future__ import annotations

import itertools
import re
from collections.abc import Mapping, Sequence
from typing import Any

from sqlbind.dialect import Dialect
from sqlbind.errors import ArgumentError, PlaceholderError
from sqlbind.schema import StructData, table_schema

SELECT_ALL = "select *"


def prepare_select_query(query: str, cls: type) -> str:
    """Expand a leading ``SELECT *`` into the mapped columns of ``cls``.

    Only the first eight characters are inspected (case-insensitively);
    the remainder of the query is kept as written.
    """
    query = query.strip()
    if query[: len(SELECT_ALL)].lower() != SELECT_ALL:
        return query
    columns = table_schema(cls).column_names()
    if not columns:
        return query
    return query[: len(SELECT_ALL) - 1] + ", ".join(columns) + query[len(SELECT_ALL):]


def offset_arg_nums(query: str, start: int, arg_prefix: str) -> str:
    """Renumber every ``<arg_prefix><digits>`` placeholder from ``start`` upward.

    Raises:
        PlaceholderError: If ``arg_prefix`` cannot delimit a placeholder.
    """
    if not arg_prefix or any(ch.isalnum() or ch.isspace() for ch in arg_prefix):
        raise PlaceholderError(f"invalid placeholder prefix {arg_prefix!r}")
    try:
        rx = re.compile(re.escape(arg_prefix) + r"\d+")
    except re.error as e:
        raise PlaceholderError(f"invalid placeholder prefix {arg_prefix!r}: {e}", cause=e) from e

    numbers = itertools.count(start)
    return rx.sub(lambda _: f"{arg_prefix}{next(numbers)}", query)


def build_insert(table: str, values: Mapping[str, Any], dialect: Dialect) -> tuple[str, list[Any]]:
    """``INSERT INTO <table>(<cols>) VALUES(<placeholders>)`` plus its arguments.

    An empty ``values`` produces ``INSERT INTO <table> DEFAULT VALUES``.
    """
    if not values:
        return f"INSERT INTO {table} DEFAULT VALUES", []
    cols = ", ".join(values)
    ph = dialect.placeholders(len(values))
    return f"INSERT INTO {table}({cols}) VALUES({ph})", list(values.values())


def build_update(
    table: str,
    values: Mapping[str, Any],
    dialect: Dialect,
    where: str = "",
    args: Sequence[Any] = (),
) -> tuple[str, list[Any]]:
    """``UPDATE <table> SET c=<ph>, ... <where>`` plus its arguments.

    Placeholders in ``where`` are written from 1 by the caller; they are
    shifted past the SET arguments, whose values come first in the
    returned argument list.
    """
    if not values:
        raise ArgumentError(f"nothing to update in {table}").with_context(table=table)
    sets = [f"{col}={dialect.placeholder(i)}" for i, col in enumerate(values)]
    prepared = list(values.values())
    prepared.extend(args)
    sql = f"UPDATE {table} SET " + ", ".join(sets)
    if where:
        sql += " " + offset_arg_nums(where, len(values) + 1, dialect.arg_prefix)
    return sql, prepared


def build_delete(table: str, column: str, dialect: Dialect) -> str:
    return f"DELETE FROM {table} WHERE {column}={dialect.placeholder(0)}"


def struct_values(data: StructData, *, null_sensitive: bool = False) -> dict[str, Any]:
    """Column → value map of the non-primary fields of ``data``.

    Unless ``null_sensitive``, fields currently ``None`` are left out so the
    statement does not touch their columns.
    """
    values: dict[str, Any] = {}
    for col_name, f in data.fields.items():
        if f.is_primary:
            continue
        value = f.value
        if value is None and not null_sensitive:
            continue
        values[col_name] = value
    return values


__all__ = [
    "prepare_select_query",
    "offset_arg_nums",
    "build_insert",
    "build_update",
    "build_delete",
    "struct_values",
]
