"""Parser for the filter expression language.

Grammar::

    filter     : <empty> | group | '(' flat ')'
    group      : operand ('&&' operand)* | operand ('||' operand)*
    operand    : comparison | '(' group ')'
    flat       : comparison ('&&' comparison)* | comparison ('||' comparison)*
    comparison : COLUMN OP value
    value      : STRING | WORD+

Only one level of parentheses is allowed: either one pair around the whole
filter or parenthesized sub-groups inside it, not both. ``&&`` and ``||`` are
never mixed within one group; there is no implicit precedence.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Union

import ply.lex as lex

from typed_rows.errors import FilterSyntaxError
from typed_rows.parsing.filter_lexer import FilterLexer


class FilterOp(Enum):
    """Comparison operators and their parameter names."""

    EQ = "$eq"
    NE = "$ne"
    LT = "$lt"
    LE = "$lte"
    GT = "$gt"
    GE = "$gte"


# Token type → operator
COMPARISON_TOKENS: dict[str, FilterOp] = {
    "EQ": FilterOp.EQ,
    "NE": FilterOp.NE,
    "LT": FilterOp.LT,
    "LE": FilterOp.LE,
    "GT": FilterOp.GT,
    "GE": FilterOp.GE,
}

ORDERING_OPS = frozenset({FilterOp.LT, FilterOp.LE, FilterOp.GT, FilterOp.GE})

_COLUMN_NAME = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


@dataclass(frozen=True)
class Comparison:
    """A single ``column OP value`` clause."""

    column: str
    op: FilterOp
    value: str


@dataclass(frozen=True)
class And:
    """Conjunction of clauses, in order of appearance."""

    children: tuple[FilterExpr, ...]


@dataclass(frozen=True)
class Or:
    """Disjunction of clauses, in order of appearance."""

    children: tuple[FilterExpr, ...]


FilterExpr = Union[Comparison, And, Or]


class _TokenStream:
    """Cursor over the token list of a single parse."""

    def __init__(self, tokens: list[lex.LexToken], source: str) -> None:
        self.tokens = tokens
        self.pos = 0
        self.source = source

    def peek(self) -> lex.LexToken | None:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return None

    def next(self) -> lex.LexToken | None:
        tok = self.peek()
        if tok is not None:
            self.pos += 1
        return tok

    def position(self) -> int:
        tok = self.peek()
        return tok.lexpos if tok is not None else len(self.source)


class FilterParser:
    """Recursive-descent parser producing a typed filter AST."""

    def __init__(self, ordering_operators: bool = True) -> None:
        self.lexer = FilterLexer()
        self.lexer.build()
        self.ordering_operators = ordering_operators

    def parse(self, data: str) -> FilterExpr | None:
        """Parse a filter expression.

        Returns:
            The AST, or None for an empty filter.

        Raises:
            FilterSyntaxError: If the expression is malformed.
        """
        tokens = self.lexer.tokenize(data)
        if not tokens:
            return None

        self._check_balanced(tokens)
        depth = 0
        if self._is_wrapped(tokens):
            tokens = tokens[1:-1]
            if not tokens:
                raise FilterSyntaxError("Empty group", 0)
            depth = 1

        stream = _TokenStream(tokens, data)
        expr = self._parse_group(stream, depth=depth)

        tok = stream.peek()
        if tok is not None:
            raise FilterSyntaxError(f"Unexpected '{tok.value}'", tok.lexpos)
        return expr

    def _check_balanced(self, tokens: list[lex.LexToken]) -> None:
        depth = 0
        for tok in tokens:
            if tok.type == "LPAREN":
                depth += 1
            elif tok.type == "RPAREN":
                depth -= 1
                if depth < 0:
                    raise FilterSyntaxError("Unbalanced parentheses: unexpected ')'", tok.lexpos)
        if depth != 0:
            raise FilterSyntaxError("Unbalanced parentheses: missing ')'")

    def _is_wrapped(self, tokens: list[lex.LexToken]) -> bool:
        """Whether the first '(' is closed by the last token."""
        if tokens[0].type != "LPAREN" or tokens[-1].type != "RPAREN":
            return False
        depth = 0
        for i, tok in enumerate(tokens):
            if tok.type == "LPAREN":
                depth += 1
            elif tok.type == "RPAREN":
                depth -= 1
                if depth == 0:
                    return i == len(tokens) - 1
        return False

    def _parse_group(self, stream: _TokenStream, depth: int) -> FilterExpr:
        operands = [self._parse_operand(stream, depth)]
        connective: str | None = None

        while True:
            tok = stream.peek()
            if tok is None or tok.type not in ("AND", "OR"):
                break
            if connective is None:
                connective = tok.type
            elif tok.type != connective:
                raise FilterSyntaxError(
                    "Mixing '&&' and '||' requires parentheses", tok.lexpos
                )
            stream.next()
            operands.append(self._parse_operand(stream, depth))

        if connective is None:
            return operands[0]
        elif connective == "AND":
            return And(tuple(operands))
        return Or(tuple(operands))

    def _parse_operand(self, stream: _TokenStream, depth: int) -> FilterExpr:
        tok = stream.peek()
        if tok is None:
            raise FilterSyntaxError("Expected a comparison", stream.position())

        if tok.type == "LPAREN":
            if depth >= 1:
                raise FilterSyntaxError("Only one level of parentheses is supported", tok.lexpos)
            stream.next()
            if stream.peek() is not None and stream.peek().type == "RPAREN":
                raise FilterSyntaxError("Empty group", tok.lexpos)
            expr = self._parse_group(stream, depth + 1)
            closing = stream.next()
            if closing is None or closing.type != "RPAREN":
                raise FilterSyntaxError("Expected ')'", stream.position())
            return expr

        return self._parse_comparison(stream)

    def _parse_comparison(self, stream: _TokenStream) -> Comparison:
        column = stream.next()
        if column.type != "WORD" or not _COLUMN_NAME.fullmatch(column.value):
            raise FilterSyntaxError(f"Expected a column name, got '{column.value}'", column.lexpos)

        op_tok = stream.peek()
        if op_tok is None or op_tok.type not in COMPARISON_TOKENS:
            raise FilterSyntaxError(
                f"Expected a comparison operator after '{column.value}'", stream.position()
            )
        op = COMPARISON_TOKENS[op_tok.type]
        if op in ORDERING_OPS and not self.ordering_operators:
            raise FilterSyntaxError(f"Unsupported operator '{op_tok.value}'", op_tok.lexpos)
        stream.next()

        value = self._parse_value(stream)
        if value is None:
            raise FilterSyntaxError(
                f"Expected a value after '{column.value} {op_tok.value}'", stream.position()
            )
        return Comparison(column=column.value, op=op, value=value)

    def _parse_value(self, stream: _TokenStream) -> str | None:
        tok = stream.peek()
        if tok is None:
            return None
        if tok.type == "STRING":
            stream.next()
            return tok.value
        if tok.type != "WORD":
            return None

        # A run of bare words is taken verbatim, inner whitespace included.
        first = last = stream.next()
        while stream.peek() is not None and stream.peek().type == "WORD":
            last = stream.next()
        return stream.source[first.lexpos:last.lexpos + len(last.value)]
