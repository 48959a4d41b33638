"""Storing driver values into typed dataclass fields.

DB-API drivers hand back whatever their wire protocol produced: ``int``,
``str``, ``Decimal``, ``bytes``, ``memoryview``... The declared field type
decides what is stored. :func:`convert` tries, in order:

1. ``None``: stored when the field is nullable, rejected otherwise.
2. Direct assignment when the value already is an instance of the field
   type. Byte buffers are copied so the field never shares memory with the
   driver's buffer.
3. Conversion between types of the same kind (bool, int, float, str,
   bytes), e.g. an ``int`` into an ``int`` subclass.
4. Parsing the value's text form into ``int``, ``float``, ``Decimal`` or
   ``bool`` fields.
5. ``str`` fields accept ``str`` and UTF-8 ``bytes``.

Everything else raises :class:`~sqlbind.errors.ConversionError`.
"""

from __future__ import annotations

import typing
from decimal import Decimal, InvalidOperation
from typing import Any

from sqlbind.errors import ConversionError
from sqlbind.schema import StructField

_BYTES_TYPES = (bytes, bytearray, memoryview)

# bool before int: bool is an int subclass
_KINDS: tuple[type, ...] = (bool, int, float, str, bytes, bytearray)

_TRUE = {"1", "t", "true", "y", "yes", "on"}
_FALSE = {"0", "f", "false", "n", "no", "off"}


def clone_bytes(b: Any) -> Any:
    """Return an independent copy of a byte buffer (``None`` stays ``None``)."""
    if b is None:
        return None
    if isinstance(b, bytearray):
        return bytearray(b)
    return bytes(b)


def as_string(src: Any) -> str:
    """Textual form of a scanned value, used for string-mediated parsing."""
    if isinstance(src, str):
        return src
    if isinstance(src, _BYTES_TYPES):
        return bytes(src).decode("utf-8", errors="replace")
    if isinstance(src, bool):
        return "true" if src else "false"
    if isinstance(src, float):
        text = repr(src)
        # 2.0 -> "2" so whole floats still parse as integers
        return text[:-2] if text.endswith(".0") else text
    return str(src)


def _kind(tp: Any) -> type | None:
    if not isinstance(tp, type):
        return None
    for kind in _KINDS:
        if issubclass(tp, kind):
            return kind
    return None


def _type_name(tp: Any) -> str:
    return getattr(tp, "__name__", repr(tp))


def _parse_bool(s: str) -> bool:
    lowered = s.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ValueError(f"invalid syntax {s!r}")


def _parse(dest: type, src: Any) -> Any:
    s = as_string(src)
    try:
        if "_" in s:
            raise ValueError("digit separators are not accepted")
        if issubclass(dest, bool):
            return dest(_parse_bool(s))
        if issubclass(dest, int):
            return dest(int(s.strip(), 10))
        if issubclass(dest, float):
            return dest(float(s))
        return dest(Decimal(s.strip()))
    except (ValueError, InvalidOperation) as e:
        raise ConversionError(
            f"converting driver value type {type(src).__name__} ({s!r}) "
            f"to a {_type_name(dest)}: {e}",
            source_type=type(src),
            value=src,
            target_type=dest,
            cause=e,
        ) from e


def convert_value(dest: Any, src: Any, *, nullable: bool = True) -> Any:
    """Return ``src`` coerced to type ``dest``.

    Raises:
        ConversionError: When the combination is unsupported or parsing fails.
    """
    if src is None:
        if nullable:
            return None
        raise ConversionError(
            f"unsupported scan, storing NULL into non-nullable type {_type_name(dest)}",
            source_type=type(None),
            target_type=dest,
        )

    origin = typing.get_origin(dest)
    if origin is not None:
        dest = origin

    if dest is Any or not isinstance(dest, type):
        return clone_bytes(src) if isinstance(src, _BYTES_TYPES) else src

    # bool is an int subclass but never an int value
    bool_into_int = isinstance(src, bool) and issubclass(dest, int) and not issubclass(dest, bool)

    if isinstance(src, dest) and not bool_into_int:
        if isinstance(src, _BYTES_TYPES):
            return clone_bytes(src)
        return src

    src_kind = _kind(type(src))
    dest_kind = _kind(dest)

    if src_kind is not None and src_kind is dest_kind:
        try:
            return dest(src)
        except (TypeError, ValueError) as e:
            raise ConversionError(
                f"converting driver value type {type(src).__name__} ({src!r}) "
                f"to a {_type_name(dest)}: {e}",
                source_type=type(src),
                value=src,
                target_type=dest,
                cause=e,
            ) from e

    if issubclass(dest, (bool, int, float, Decimal)):
        return _parse(dest, src)

    if issubclass(dest, str):
        if isinstance(src, str):
            return dest(src)
        if isinstance(src, _BYTES_TYPES):
            try:
                return dest(bytes(src).decode("utf-8"))
            except UnicodeDecodeError as e:
                raise ConversionError(
                    f"converting driver value type {type(src).__name__} "
                    f"to a {_type_name(dest)}: {e}",
                    source_type=type(src),
                    value=src,
                    target_type=dest,
                    cause=e,
                ) from e

    if issubclass(dest, (bytes, bytearray)) and isinstance(src, _BYTES_TYPES):
        return dest(src)

    raise ConversionError(
        f"unsupported scan, storing driver value type {type(src).__name__} "
        f"into type {_type_name(dest)}",
        source_type=type(src),
        value=src,
        target_type=dest,
    )


def convert(field: StructField, src: Any) -> None:
    """Store scanned value ``src`` into ``field`` of its bound instance."""
    try:
        field.set(convert_value(field.type, src, nullable=field.nullable))
    except ConversionError as e:
        raise e.with_context(column=field.column_name)


__all__ = [
    "as_string",
    "clone_bytes",
    "convert",
    "convert_value",
]
