"""Decoding of schema-declared default literals into typed values.

Decoding is lenient: anything that is not a recognizable literal for the
column's type yields ``ABSENT`` instead of raising, so incomplete schema
metadata never blocks row editing.
"""

from __future__ import annotations

import re

from typed_rows.values import ABSENT, Absent, Blob, ColumnType, Integer, Real, Text, TypedValue

_INTEGER_LITERAL = re.compile(r"^[+-]?[0-9]+$")
_HEX_INTEGER_LITERAL = re.compile(r"^([+-]?)0[xX]([0-9a-fA-F]+)$")
_REAL_LITERAL = re.compile(r"^[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?$")
_BLOB_LITERAL = re.compile(r"^[xX]'([0-9a-fA-F]*)'$")


def is_expression(raw: str) -> bool:
    """Return True if a default is an opaque SQL expression, e.g. ``(uuid())``.

    This is a textual check on the leading parenthesis only.
    """
    return raw.lstrip().startswith("(")


def unescape_literal(raw: str) -> str | None:
    """Unquote a SQL string literal, resolving doubled-quote escapes.

    Returns None if ``raw`` is not a quoted literal.
    """
    value = raw.strip()
    if len(value) < 2:
        return None

    quote = value[0]
    if quote not in ("'", '"') or value[-1] != quote:
        return None

    inner = value[1:-1]
    doubled = quote * 2
    # A lone quote inside the literal would have terminated it.
    if quote in inner.replace(doubled, ""):
        return None
    return inner.replace(doubled, quote)


def unescape_literal_blob(raw: str) -> bytes | None:
    """Decode a hex blob literal such as ``X'DEADBEEF'``.

    Returns None if ``raw`` is not a well-formed hex blob literal.
    """
    match = _BLOB_LITERAL.match(raw.strip())
    if match is None:
        return None
    digits = match.group(1)
    if len(digits) % 2 != 0:
        return None
    return bytes.fromhex(digits)


def parse_integer(raw: str) -> int | None:
    """Parse a decimal or hex integer literal without loss of precision."""
    value = raw.strip()
    if _INTEGER_LITERAL.match(value):
        return int(value)
    match = _HEX_INTEGER_LITERAL.match(value)
    if match:
        sign = -1 if match.group(1) == "-" else 1
        return sign * int(match.group(2), 16)
    return None


def parse_real(raw: str) -> float | None:
    """Parse a decimal floating point literal. ``nan``/``inf`` are rejected."""
    value = raw.strip()
    if not _REAL_LITERAL.match(value):
        return None
    return float(value)


def decode_literal(column_type: ColumnType, raw: str | None) -> TypedValue | Absent:
    """Convert a raw default literal into a typed value.

    Args:
        column_type: Declared type of the column.
        raw: The default as declared in the schema, or None.

    Returns:
        The decoded value, or ABSENT when there is no literal to decode:
        no default, an expression default, or an unrecognized literal.
    """
    if raw is None or is_expression(raw):
        return ABSENT

    if column_type is ColumnType.BLOB:
        data = unescape_literal_blob(raw)
        return Blob.from_bytes(data) if data is not None else ABSENT
    elif column_type is ColumnType.TEXT:
        text = unescape_literal(raw)
        return Text(text) if text is not None else ABSENT
    elif column_type is ColumnType.INTEGER:
        number = parse_integer(raw)
        return Integer(number) if number is not None else ABSENT
    elif column_type is ColumnType.REAL:
        real = parse_real(raw)
        return Real(real) if real is not None else ABSENT
    elif column_type is ColumnType.ANY:
        return ABSENT
    raise TypeError(f"Unhandled column type: {column_type!r}")
