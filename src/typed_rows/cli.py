"""Command-line interface for compiling filters and building default rows."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from loguru import logger

from typed_rows.codec import row_to_json
from typed_rows.config import DEFAULT_CONFIG, Config, load_config
from typed_rows.defaults import build_default_row
from typed_rows.errors import FilterSyntaxError
from typed_rows.filters import FilterCompiler, to_query_string
from typed_rows.schema import load_table


def configure_logging(verbose: bool) -> None:
    """Send log output to stderr, DEBUG when verbose and WARNING otherwise."""
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "WARNING", format="{level}: {message}")


def run_filter(expression: str, config: Config, query_string: bool) -> int:
    """Compile a filter expression and print its parameters."""
    try:
        params = FilterCompiler(config).compile(expression)
    except FilterSyntaxError as e:
        print(f"Syntax error: {e}", file=sys.stderr)
        return 1

    if query_string:
        print(to_query_string(params))
    else:
        for key, value in params:
            print(f"{key}={value}")
    return 0


def run_defaults(schema_path: Path, config: Config) -> int:
    """Print the default row of a table as wire JSON."""
    try:
        table = load_table(schema_path)
    except (OSError, ValueError, KeyError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    row = build_default_row(table, config)
    print(json.dumps(row_to_json(row), indent=2))
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    arg_parser = argparse.ArgumentParser(
        description="Compile row filters and build default rows for a tabular store"
    )
    arg_parser.add_argument(
        "-c", "--config",
        type=Path,
        help="Path to a JSON config file",
    )
    arg_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log debug output to stderr",
    )
    subparsers = arg_parser.add_subparsers(dest="command", required=True)

    filter_parser = subparsers.add_parser("filter", help="Compile a filter expression")
    filter_parser.add_argument("expression", help="e.g. \"(x = 3 || x = 4) && y != foo\"")
    filter_parser.add_argument(
        "-q", "--query-string",
        action="store_true",
        help="Print a URL-encoded query string instead of one pair per line",
    )

    defaults_parser = subparsers.add_parser("defaults", help="Print a table's default row")
    defaults_parser.add_argument("schema", type=Path, help="Path to a table schema JSON file")

    args = arg_parser.parse_args(argv)
    configure_logging(args.verbose)

    config = DEFAULT_CONFIG
    if args.config:
        try:
            config = load_config(args.config)
        except (OSError, ValueError, TypeError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    if args.command == "filter":
        return run_filter(args.expression, config, args.query_string)
    return run_defaults(args.schema, config)


if __name__ == "__main__":
    sys.exit(main())
