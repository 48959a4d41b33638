"""Struct and map operations over any executor.

Each function takes an :class:`~sqlbind.protocols.Executor` first, which is
usually a :class:`~sqlbind.db.DB` but can be any object with ``execute``,
``query`` and ``query_row``. Write operations also take the
:class:`~sqlbind.dialect.Dialect` that numbers their placeholders.

Rows come back as :data:`RowValue` dicts keyed by the column names the
driver reports; struct scans match them to mapped columns
case-insensitively and ignore columns the dataclass does not map.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from typing import Any

from sqlbind.builder import (
    build_delete,
    build_insert,
    build_update,
    prepare_select_query,
    struct_values,
)
from sqlbind.convert import convert, convert_value
from sqlbind.dialect import Dialect
from sqlbind.errors import ArgumentError, NoRowsError, PrimaryKeyError, SequenceError
from sqlbind.logging import get_logger
from sqlbind.protocols import Executor
from sqlbind.schema import StructData, StructField, get_struct_data, new_instance

logger = get_logger(__name__)

RowValue = dict[str, Any]


# ── Reads ────────────────────────────────────────────────────────────────


def select_maps(executor: Executor, query: str, *args: Any) -> list[RowValue]:
    """Run ``query`` and return every row as a column → value dict."""
    cursor = executor.query(query, *args)
    try:
        columns = [desc[0] for desc in cursor.description or ()]
        return [dict(zip(columns, row)) for row in cursor.fetchall()]
    finally:
        cursor.close()


def select_struct(executor: Executor, dest: list, cls: type, query: str, *args: Any) -> list[RowValue]:
    """Scan the rows of ``query`` into new ``cls`` instances appended to ``dest``.

    A query starting with ``SELECT *`` is first expanded to the columns
    ``cls`` maps. Returns the raw rows as well.

    Raises:
        ArgumentError: ``dest`` is not a list or ``cls`` is not a dataclass.
        ConversionError: A value cannot be stored in its field.
    """
    if dest is None:
        raise ArgumentError("select target list is None")
    if not isinstance(dest, list):
        raise ArgumentError(f"select target must be a list, got {type(dest).__name__}")
    if not (isinstance(cls, type) and dataclasses.is_dataclass(cls)):
        raise ArgumentError(f"select item type must be a dataclass, got {cls!r}")

    query = prepare_select_query(query, cls)
    rows = select_maps(executor, query, *args)

    for row in rows:
        item = new_instance(cls)
        data = get_struct_data(item)
        for col_name, value in row.items():
            field = data.fields.get(str(col_name).lower())
            if field is None:
                continue
            convert(field, value)
        dest.append(item)

    return rows


def select_int(executor: Executor, query: str, *args: Any) -> int | None:
    """First column of the first row as an ``int`` (``None`` for NULL).

    Raises:
        NoRowsError: The query returned no rows.
    """
    row = executor.query_row(query, *args)
    if row is None:
        raise NoRowsError("query returned no rows").with_context(query=query)
    return convert_value(int, row[0], nullable=True)


# ── Writes ───────────────────────────────────────────────────────────────


def insert_map(executor: Executor, values: Mapping[str, Any], table: str, dialect: Dialect) -> Any:
    sql, args = build_insert(table, values, dialect)
    return executor.execute(sql, *args)


def update_map(
    executor: Executor,
    values: Mapping[str, Any],
    table: str,
    dialect: Dialect,
    where: str = "",
    *args: Any,
) -> Any:
    """Update ``table`` setting ``values``; ``where`` placeholders start at 1."""
    sql, prepared = build_update(table, values, dialect, where, args)
    return executor.execute(sql, *prepared)


def _next_sequence_value(executor: Executor, field: StructField, dialect: Dialect) -> int | None:
    query = dialect.next_sequence_query(field.sequence_name)
    if query is None:
        return None
    try:
        value = select_int(executor, query)
    except Exception as e:
        raise SequenceError(
            f"cannot fetch next value of {field.sequence_name}: {e}",
            sequence=field.sequence_name,
            cause=e,
        ).with_context(column=field.column_name, query=query) from e
    if value is None:
        raise SequenceError(
            f"sequence {field.sequence_name} returned NULL",
            sequence=field.sequence_name,
        ).with_context(column=field.column_name, query=query)
    logger.debug("sequence.next", sequence=field.sequence_name, value=value)
    return value


def insert_struct(
    executor: Executor,
    obj: Any,
    table: str,
    dialect: Dialect,
    null_sensitive: bool = False,
) -> Any:
    """Insert the mapped fields of ``obj`` into ``table``.

    The primary field is never taken from ``obj``: its value comes from the
    field's sequence, or from the database when the dialect has no
    sequences. Either way it is written back to ``obj`` once known.
    """
    data = get_struct_data(obj)
    values: dict[str, Any] = {}
    new_id: int | None = None

    pk = data.primary_field
    if pk is not None:
        new_id = _next_sequence_value(executor, pk, dialect)
        if new_id is not None:
            values[pk.column_name] = new_id

    values.update(struct_values(data, null_sensitive=null_sensitive))
    result = insert_map(executor, values, table, dialect)

    if pk is not None:
        if new_id is None and _is_int_type(pk.type):
            # rowid of the new row; only meaningful for integer keys
            new_id = getattr(result, "lastrowid", None)
        if new_id is not None:
            convert(pk, new_id)
    return result


def _is_int_type(tp: Any) -> bool:
    return isinstance(tp, type) and issubclass(tp, int) and not issubclass(tp, bool)


def _require_primary(data: StructData, action: str, table: str) -> StructField:
    pk = data.primary_field
    if pk is None or pk.value is None:
        name = data.name or "<not a dataclass>"
        raise PrimaryKeyError(
            f"{action} error: no primary key on struct {name}",
            struct_name=data.name,
        ).with_context(table=table)
    return pk


def update_struct(
    executor: Executor,
    obj: Any,
    table: str,
    dialect: Dialect,
    null_sensitive: bool = False,
) -> Any:
    """Update the row of ``obj`` identified by its primary field.

    Raises:
        PrimaryKeyError: ``obj`` has no primary field or its value is None.
    """
    data = get_struct_data(obj)
    pk = _require_primary(data, "update", table)
    values = struct_values(data, null_sensitive=null_sensitive)
    where = f"WHERE {pk.column_name}={dialect.placeholder(0)}"
    return update_map(executor, values, table, dialect, where, pk.value)


def delete_struct(executor: Executor, obj: Any, table: str, dialect: Dialect) -> Any:
    """Delete the row of ``obj`` identified by its primary field.

    Raises:
        PrimaryKeyError: ``obj`` has no primary field or its value is None.
    """
    data = get_struct_data(obj)
    pk = _require_primary(data, "delete", table)
    return executor.execute(build_delete(table, pk.column_name, dialect), pk.value)


__all__ = [
    "RowValue",
    "select_maps",
    "select_struct",
    "select_int",
    "insert_map",
    "update_map",
    "insert_struct",
    "update_struct",
    "delete_struct",
]
