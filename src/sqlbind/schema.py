"""Column mapping for dataclasses.

A dataclass field is mapped to a column by carrying a ``db`` entry in its
field metadata, usually through :func:`column`. A field that also carries a
non-empty ``seq`` entry is the primary key; the sequence names where the
next key value comes from on insert.

Fields without a ``db`` entry whose declared type is itself a dataclass are
*embedded*: their columns are flattened into the parent, the same way an
anonymous struct contributes its fields. Fields typed ``Optional[SomeRow]``
are references to other rows and are never traversed.

The per-type descriptor (:class:`TableSchema`) is computed once and cached.
Binding it to an instance yields a fresh :class:`StructData` whose
:class:`StructField` entries read and write that instance.

Example::

    @dataclass
    class Audit:
        created_by: str | None = column("created_by", default=None)

    @dataclass
    class User:
        id: int | None = column("ID", seq="users_seq", default=None)
        name: str = column("name", default="")
        audit: Audit = field(default_factory=Audit)

    data = get_struct_data(User(name="ann"))
    sorted(data.fields)          # ['created_by', 'id', 'name']
    data.primary_field.name      # 'id'

Tags:
    reflection, dataclasses, column-mapping, sqlbind
"""

from __future__ import annotations

import dataclasses
import types
import typing
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Union

from sqlbind.errors import SchemaError

DB_KEY = "db"
SEQ_KEY = "seq"


def column(name: str, *, seq: str = "", **kwargs: Any) -> Any:
    """Declare a dataclass field mapped to column ``name``.

    ``seq`` marks the field as the primary key backed by that sequence.
    Remaining keyword arguments (``default``, ``default_factory``, ``repr``
    ...) are forwarded to :func:`dataclasses.field`.
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[DB_KEY] = name
    if seq:
        metadata[SEQ_KEY] = seq
    return dataclasses.field(metadata=metadata, **kwargs)


# ── Schema descriptor ────────────────────────────────────────────────────


@dataclass(frozen=True)
class ColumnBinding:
    """Where one column lives inside a dataclass type."""

    path: tuple[str, ...]
    column: str
    sequence: str
    type: Any
    nullable: bool

    @property
    def attribute(self) -> str:
        return self.path[-1]

    @property
    def is_primary(self) -> bool:
        return bool(self.sequence)


@dataclass(frozen=True)
class TableSchema:
    """Column bindings of a dataclass type, in declaration order."""

    name: str
    columns: dict[str, ColumnBinding]
    primary: ColumnBinding | None

    def column_names(self) -> list[str]:
        return list(self.columns)


def unwrap_optional(tp: Any) -> tuple[Any, bool]:
    """Split ``Optional[X]`` into ``(X, True)``; other types give ``(tp, False)``."""
    if tp is Any:
        return Any, True
    origin = typing.get_origin(tp)
    if origin is Union or origin is types.UnionType:
        args = typing.get_args(tp)
        rest = [a for a in args if a is not type(None)]
        nullable = len(rest) != len(args)
        if len(rest) == 1:
            return rest[0], nullable
        return tp, nullable
    return tp, False


def _type_hints(cls: type) -> dict[str, Any]:
    try:
        return typing.get_type_hints(cls)
    except (NameError, TypeError) as e:
        raise SchemaError(f"Cannot resolve field types of {cls.__name__}: {e}", cause=e) from e


def _is_dataclass_type(tp: Any) -> bool:
    return isinstance(tp, type) and dataclasses.is_dataclass(tp)


@lru_cache(maxsize=None)
def table_schema(cls: type) -> TableSchema:
    """Build (once per type) the column bindings of dataclass ``cls``.

    Raises:
        SchemaError: If two fields carry a sequence name or a field type
            cannot be resolved.
    """
    columns: dict[str, ColumnBinding] = {}
    primary: list[ColumnBinding] = []

    def visit(tp: type, prefix: tuple[str, ...]) -> None:
        hints = _type_hints(tp)
        for f in dataclasses.fields(tp):
            declared = hints.get(f.name, f.type)
            col_name = f.metadata.get(DB_KEY)
            if col_name:
                col_name = str(col_name).lower()
                inner, nullable = unwrap_optional(declared)
                binding = ColumnBinding(
                    path=prefix + (f.name,),
                    column=col_name,
                    sequence=f.metadata.get(SEQ_KEY, "") or "",
                    type=inner,
                    nullable=nullable,
                )
                if binding.is_primary:
                    primary.append(binding)
                columns[col_name] = binding
            elif _is_dataclass_type(declared):
                visit(declared, prefix + (f.name,))

    visit(cls, ())

    if len(primary) > 1:
        names = ", ".join(".".join(b.path) for b in primary)
        raise SchemaError(f"{cls.__name__} declares more than one primary field: {names}")

    return TableSchema(
        name=cls.__name__,
        columns=columns,
        primary=primary[0] if primary else None,
    )


# ── Bound struct data ────────────────────────────────────────────────────


@dataclass
class StructField:
    """A mapped column bound to the instance that holds its value."""

    name: str
    column_name: str
    sequence_name: str
    is_primary: bool
    type: Any
    nullable: bool
    owner: Any

    @property
    def value(self) -> Any:
        return getattr(self.owner, self.name)

    def set(self, value: Any) -> None:
        # object.__setattr__ also writes frozen dataclasses
        object.__setattr__(self.owner, self.name, value)


@dataclass
class StructData:
    name: str
    primary_field: StructField | None
    fields: dict[str, StructField]


def get_struct_data(value: Any) -> StructData:
    """Collect the mapped fields of a dataclass instance.

    Anything that is not a dataclass instance yields an empty StructData.
    Columns inside an embedded value that is currently ``None`` are left
    out.
    """
    if isinstance(value, type) or not dataclasses.is_dataclass(value):
        return StructData(name="", primary_field=None, fields={})

    schema = table_schema(type(value))
    fields: dict[str, StructField] = {}
    primary: StructField | None = None

    for col_name, binding in schema.columns.items():
        owner = value
        for attr in binding.path[:-1]:
            owner = getattr(owner, attr)
            if owner is None:
                break
        if owner is None:
            continue
        sf = StructField(
            name=binding.attribute,
            column_name=col_name,
            sequence_name=binding.sequence,
            is_primary=binding.is_primary,
            type=binding.type,
            nullable=binding.nullable,
            owner=owner,
        )
        if sf.is_primary:
            primary = sf
        fields[col_name] = sf

    return StructData(name=schema.name, primary_field=primary, fields=fields)


def new_instance(cls: type) -> Any:
    """Create a blank instance of dataclass ``cls`` without calling ``__init__``.

    Field defaults are applied, embedded dataclasses are instantiated
    recursively and every other field starts as ``None``.
    """
    obj = cls.__new__(cls)
    hints = _type_hints(cls)
    for f in dataclasses.fields(cls):
        if f.default is not dataclasses.MISSING:
            v = f.default
        elif f.default_factory is not dataclasses.MISSING:
            v = f.default_factory()
        elif DB_KEY not in f.metadata and _is_dataclass_type(hints.get(f.name)):
            v = new_instance(hints[f.name])
        else:
            v = None
        object.__setattr__(obj, f.name, v)
    return obj


__all__ = [
    "column",
    "ColumnBinding",
    "TableSchema",
    "table_schema",
    "unwrap_optional",
    "StructField",
    "StructData",
    "get_struct_data",
    "new_instance",
]
