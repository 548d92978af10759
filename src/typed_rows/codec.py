"""Row codec: copying, canonical hashing and the JSON wire form of values.

The wire form mirrors the server's tagged encoding::

    "Null"
    {"Integer": 5}
    {"Real": 5.1}
    {"Text": "abc"}
    {"Blob": {"Base64UrlSafe": "AAE="}}

Only the ``Base64UrlSafe`` blob representation is accepted.
"""

from __future__ import annotations

import json
from typing import Any

from typed_rows.errors import DecodingError
from typed_rows.values import (
    ABSENT,
    Blob,
    Integer,
    Null,
    Real,
    Record,
    Text,
    TypedValue,
    narrow,
    variant_name,
)

__all__ = [
    "copy_row",
    "from_json",
    "hash_value",
    "narrow",
    "row_from_json",
    "row_to_json",
    "to_json",
]

BLOB_ENCODING = "Base64UrlSafe"


def to_json(value: TypedValue) -> Any:
    """Convert a value to its JSON-compatible wire form."""
    if isinstance(value, Null):
        return "Null"
    elif isinstance(value, Integer):
        return {"Integer": value.value}
    elif isinstance(value, Real):
        return {"Real": value.value}
    elif isinstance(value, Text):
        return {"Text": value.value}
    elif isinstance(value, Blob):
        return {"Blob": {BLOB_ENCODING: value.base64_url_safe}}
    raise TypeError(f"Cannot serialize {variant_name(value)}")


def from_json(data: Any) -> TypedValue:
    """Convert a wire-form value back into a TypedValue.

    Raises:
        DecodingError: On malformed input or an unsupported blob encoding.
    """
    if data == "Null":
        return Null()
    if not isinstance(data, dict) or len(data) != 1:
        raise DecodingError(f"Malformed value: {data!r}")

    tag, payload = next(iter(data.items()))
    try:
        if tag == "Integer":
            return Integer(payload)
        elif tag == "Real":
            return Real(payload)
        elif tag == "Text":
            return Text(payload)
    except TypeError as e:
        raise DecodingError(f"Malformed {tag} payload: {payload!r}") from e

    if tag == "Blob":
        if not isinstance(payload, dict) or list(payload) != [BLOB_ENCODING]:
            raise DecodingError(f"Expected {BLOB_ENCODING} blob, got: {payload!r}")
        return Blob(payload[BLOB_ENCODING])

    raise DecodingError(f"Unknown value variant: {tag!r}")


def hash_value(value: TypedValue) -> str:
    """Return a stable string key for a value.

    Equal values hash identically. The key is derived from the sorted,
    compact JSON wire form, so it does not depend on the platform.
    """
    if value is ABSENT or not isinstance(value, TypedValue):
        raise TypeError(f"Cannot hash {variant_name(value)}")

    if isinstance(value, Real) and value.value == 0.0:
        value = Real(0.0)
    return "__" + json.dumps(to_json(value), sort_keys=True, separators=(",", ":"))


def copy_row(row: Record) -> Record:
    """Shallow-copy a record.

    Only the mapping is copied; the value objects are shared with ``row``.
    Values are immutable, so replacing a key in either copy never affects
    the other.
    """
    return dict(row)


def row_to_json(row: Record) -> dict[str, Any]:
    """Wire form of a record. ABSENT slots are omitted, Null is kept."""
    return {name: to_json(value) for name, value in row.items() if value is not ABSENT}


def row_from_json(data: dict[str, Any]) -> Record:
    """Decode a wire-form record."""
    if not isinstance(data, dict):
        raise DecodingError(f"Malformed record: {data!r}")
    return {name: from_json(value) for name, value in data.items()}
