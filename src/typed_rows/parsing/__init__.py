"""Parsing module for the filter expression language."""

from typed_rows.parsing.filter_lexer import FilterLexer
from typed_rows.parsing.filter_parser import (
    And,
    Comparison,
    FilterExpr,
    FilterOp,
    FilterParser,
    Or,
)

__all__ = [
    "And",
    "Comparison",
    "FilterExpr",
    "FilterLexer",
    "FilterOp",
    "FilterParser",
    "Or",
]
