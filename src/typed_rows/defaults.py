"""Construction of the default record for inserting a new row."""

from __future__ import annotations

from loguru import logger

from typed_rows.config import DEFAULT_CONFIG, Config
from typed_rows.literals import decode_literal, is_expression
from typed_rows.schema import Column, Table
from typed_rows.values import (
    ABSENT,
    Absent,
    Blob,
    ColumnType,
    Integer,
    Null,
    Real,
    Record,
    Text,
    TypedValue,
    value_to_string,
)


def has_usable_default(column: Column) -> bool:
    """Whether the server will fill the column when it is omitted.

    Expression defaults count: the server evaluates them at insert time.
    A literal that cannot be decoded for the column's type does not.
    """
    if column.default is None:
        return False
    if is_expression(column.default):
        return True
    return decode_literal(column.data_type, column.default) is not ABSENT


def fallback_value(column: Column, config: Config = DEFAULT_CONFIG) -> TypedValue | Absent:
    """Generic value for a required column without a usable default.

    Returns ABSENT if the column's type has no fallback.
    """
    data_type = column.data_type
    if data_type is ColumnType.BLOB:
        if column.foreign_key is not None:
            # Not base64, replaced by the caller before submission.
            return Blob(config.foreign_key_token(column.foreign_key.foreign_table))
        return Blob("")
    elif data_type is ColumnType.TEXT:
        return Text("")
    elif data_type is ColumnType.INTEGER:
        return Integer(0)
    elif data_type is ColumnType.REAL:
        return Real(0.0)
    return ABSENT


def build_default_row(table: Table, config: Config = DEFAULT_CONFIG) -> Record:
    """Build the initial record for a new row of ``table``.

    Columns are visited in schema order:

    1. A column with a usable default is left ABSENT so the server applies
       the default. Its literal is only shown as a placeholder.
    2. A nullable column is set to an explicit Null.
    3. A required column gets a generic fallback for its type.
    4. A required column whose type has no fallback is left ABSENT and a
       warning is logged. The rest of the row is still built.
    """
    row: Record = {}
    for column in table.columns:
        if has_usable_default(column):
            row[column.name] = ABSENT
            continue
        elif column.nullable:
            row[column.name] = Null()
            continue

        value = fallback_value(column, config)
        if value is ABSENT:
            logger.warning(
                "No fallback for column: {}, type: '{}' - skipping default",
                column.name,
                column.data_type.value,
            )
        row[column.name] = value
    return row


def default_placeholder(
    column: Column, is_update: bool = False, config: Config = DEFAULT_CONFIG
) -> str | None:
    """Placeholder text announcing a column's default to the editing surface.

    Defaults only apply on insert, so there is no placeholder for updates.
    """
    if is_update or column.default is None:
        return None

    if is_expression(column.default):
        return column.default

    literal = decode_literal(column.data_type, column.default)
    if literal is ABSENT:
        return None

    text = value_to_string(literal, null_text=config.null_placeholder)
    if isinstance(literal, Blob):
        return f"{text} (decoded: {literal.to_bytes()!r})"
    return text
