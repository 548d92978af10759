"""Compilation of filter expressions into bracket-path query parameters.

``(x = 3 || x = 4) && y != foo`` compiles to::

    filter[$and][0][$or][0][x][$eq] = 3
    filter[$and][0][$or][1][x][$eq] = 4
    filter[$and][1][y][$ne] = foo

The receiver rebuilds the nested ``$and``/``$or`` groups from the paths.
Parameters are emitted in the order the clauses appear.
"""

from __future__ import annotations

from urllib.parse import urlencode

from loguru import logger

from typed_rows.config import DEFAULT_CONFIG, Config
from typed_rows.parsing.filter_parser import And, Comparison, FilterExpr, FilterParser, Or

FilterParams = list[tuple[str, str]]


class FilterCompiler:
    """Compiles filter strings into ordered ``(key, value)`` pairs."""

    def __init__(self, config: Config = DEFAULT_CONFIG) -> None:
        self.config = config
        self.parser = FilterParser(ordering_operators=config.ordering_operators)

    def compile(self, text: str) -> FilterParams:
        """Compile a filter string.

        Raises:
            FilterSyntaxError: If the expression is malformed. Nothing is
                returned for a partially parsed expression.
        """
        expr = self.parser.parse(text.strip())
        if expr is None:
            return []

        params: FilterParams = []
        self._emit(expr, self.config.param_prefix, params)
        logger.debug("Compiled filter {!r} into {} parameters", text, len(params))
        return params

    def _emit(self, expr: FilterExpr, path: str, params: FilterParams) -> None:
        if isinstance(expr, Comparison):
            params.append((f"{path}[{expr.column}][{expr.op.value}]", expr.value))
        elif isinstance(expr, And):
            for i, child in enumerate(expr.children):
                self._emit(child, f"{path}[$and][{i}]", params)
        elif isinstance(expr, Or):
            for i, child in enumerate(expr.children):
                self._emit(child, f"{path}[$or][{i}]", params)
        else:
            raise TypeError(f"Unhandled filter node: {type(expr).__name__}")


_default_compiler: FilterCompiler | None = None


def compile_filter(text: str, config: Config | None = None) -> FilterParams:
    """Compile a filter string with the given or default configuration."""
    global _default_compiler
    if config is not None and config != DEFAULT_CONFIG:
        return FilterCompiler(config).compile(text)
    if _default_compiler is None:
        _default_compiler = FilterCompiler()
    return _default_compiler.compile(text)


def to_query_string(params: FilterParams) -> str:
    """URL-encode compiled parameters, preserving their order."""
    return urlencode(params)
