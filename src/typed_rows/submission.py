"""Preparation of insert and update payloads from edited records."""

from __future__ import annotations

from typing import Any

from typed_rows.codec import copy_row, row_to_json
from typed_rows.errors import DecodingError, SubmissionError
from typed_rows.schema import Table
from typed_rows.values import ABSENT, Blob, Null, Record


def _check_blobs(row: Record) -> None:
    for name, value in row.items():
        if isinstance(value, Blob):
            try:
                value.to_bytes()
            except DecodingError as e:
                raise DecodingError(f"Invalid blob for column '{name}': {e}") from e


def _check_columns(table: Table, row: Record) -> None:
    unknown = [name for name in row if table.get_column(name) is None]
    if unknown:
        raise SubmissionError(f"Unknown columns for table '{table.name}': {unknown}")


def prepare_insert(table: Table, row: Record) -> dict[str, Any]:
    """Wire payload for inserting ``row`` into ``table``.

    ABSENT columns are omitted so server defaults apply; Null is sent as
    an explicit NULL.
    """
    _check_columns(table, row)
    _check_blobs(row)
    return row_to_json(row)


def prepare_update(table: Table, row: Record) -> tuple[dict[str, Any], dict[str, Any]]:
    """Split ``row`` into the primary key and the update patch.

    ``row`` itself is left untouched.

    Returns:
        A ``(primary_key, patch)`` pair, both in wire form. The patch
        excludes primary-key columns and ABSENT slots.

    Raises:
        SubmissionError: If the table has no primary key or the record
            lacks a value for it.
    """
    _check_columns(table, row)
    pk_columns = table.primary_key_columns
    if not pk_columns:
        raise SubmissionError(f"Table '{table.name}' has no primary key")

    patch = copy_row(row)
    key: Record = {}
    for column in pk_columns:
        value = patch.pop(column.name, ABSENT)
        if value is ABSENT or isinstance(value, Null):
            raise SubmissionError(f"Missing primary key value for column '{column.name}'")
        key[column.name] = value

    _check_blobs(patch)
    return row_to_json(key), row_to_json(patch)
