"""Typed Rows - typed cell values, default rows and filter compilation for tabular stores."""

from typed_rows.codec import copy_row, from_json, hash_value, row_from_json, row_to_json, to_json
from typed_rows.config import Config, load_config
from typed_rows.defaults import build_default_row, default_placeholder
from typed_rows.errors import (
    DecodingError,
    FilterSyntaxError,
    NarrowingError,
    SubmissionError,
    TypedRowsError,
)
from typed_rows.fields import FieldState, parse_input
from typed_rows.filters import FilterCompiler, compile_filter, to_query_string
from typed_rows.literals import decode_literal
from typed_rows.schema import Column, ForeignKey, Table, load_table
from typed_rows.submission import prepare_insert, prepare_update
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
    ValueKind,
    narrow,
    value_to_string,
)

__all__ = [
    # Values
    "ABSENT",
    "Absent",
    "Blob",
    "ColumnType",
    "Integer",
    "Null",
    "Real",
    "Record",
    "Text",
    "TypedValue",
    "ValueKind",
    "narrow",
    "value_to_string",
    # Schema
    "Column",
    "ForeignKey",
    "Table",
    "load_table",
    # Rows
    "build_default_row",
    "copy_row",
    "decode_literal",
    "default_placeholder",
    "FieldState",
    "from_json",
    "hash_value",
    "parse_input",
    "prepare_insert",
    "prepare_update",
    "row_from_json",
    "row_to_json",
    "to_json",
    # Filters
    "FilterCompiler",
    "compile_filter",
    "to_query_string",
    # Config
    "Config",
    "load_config",
    # Errors
    "DecodingError",
    "FilterSyntaxError",
    "NarrowingError",
    "SubmissionError",
    "TypedRowsError",
]

__version__ = "0.1.0"
