"""Command line tool for describing shapes and rendering records.

Usage:
    typed-records describe shapes.ttr                  # every shape
    typed-records describe shapes.ttr Person           # selected shapes
    typed-records render shapes.ttr rows.json          # prints to stdout
    typed-records render shapes.ttr rows.json -o out.sql

The rows file is a JSON object mapping shape names to lists of rows. A row
is either an object keyed by field name or an array in field order:

    {"Person": [{"Name": "Samantha", "Age": 29}, ["Bob", 35]]}
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

import structlog

from typed_records.config import LOG_LEVELS
from typed_records.errors import RecordError
from typed_records.logging_config import configure_logging
from typed_records.render import render_all
from typed_records.schema import Schema

logger = structlog.get_logger(__name__)


def describe_shapes(schema: Schema, names: list[str]) -> list[str]:
    """Return description lines for the named shapes (all shapes if none are named)."""
    lines = []
    for name in names or schema.list_shapes():
        shape = schema.get_shape(name)
        lines.append(f"{shape.name} ({shape.qualified_name})")
        for f in shape.fields:
            lines.append(f"  {f.position}: {f.name}: {f.type_name} ({f.kind.value})")
    return lines


def render_rows(schema: Schema, data: Any) -> tuple[list[str], list[str]]:
    """Build and render every row of a rows document.

    Returns:
        The rendered statements and the error messages, each in input order.
    """
    if not isinstance(data, dict):
        raise ValueError("Rows file must contain a JSON object mapping shape names to rows")

    statements: list[str] = []
    errors: list[str] = []
    for shape_name, rows in data.items():
        if shape_name not in schema:
            errors.append(f"Unknown shape '{shape_name}'")
            continue
        if not isinstance(rows, list):
            errors.append(f"{shape_name}: rows must be a list")
            continue

        built: list[tuple[int, Any]] = []
        for index, row in enumerate(rows):
            try:
                built.append((index, schema.create_record(shape_name, row)))
            except (RecordError, ValueError, TypeError) as e:
                errors.append(f"{shape_name}[{index}]: {e}")

        results = render_all([record for _, record in built], schema.registry)
        for (index, _), result in zip(built, results):
            if result.ok:
                statements.append(result.statement)
            else:
                errors.append(f"{shape_name}[{index}]: {result.error}")

    logger.info("rows_rendered", statements=len(statements), errors=len(errors))
    return statements, errors


def run_describe(schema: Schema, names: list[str]) -> int:
    try:
        lines = describe_shapes(schema, names)
    except KeyError as e:
        print(f"Error: {e.args[0]}", file=sys.stderr)
        return 1
    print("\n".join(lines))
    return 0


def run_render(schema: Schema, data_path: Path, output: Path | None) -> int:
    if not data_path.exists():
        print(f"Error: File not found: {data_path}", file=sys.stderr)
        return 1

    with open(data_path, encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            print(f"Error: Invalid JSON in {data_path}: {e}", file=sys.stderr)
            return 1

    try:
        statements, errors = render_rows(schema, data)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    for message in errors:
        print(f"Error: {message}", file=sys.stderr)

    text = "\n".join(statements)
    if output:
        with open(output, "w", encoding="utf-8") as f:
            f.write(text + "\n" if text else "")
        print(f"Wrote {output}", file=sys.stderr)
    elif text:
        print(text)

    return 1 if errors else 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    arg_parser = argparse.ArgumentParser(
        prog="typed-records",
        description="Describe record shapes and render records as insert statements",
    )
    arg_parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=None,
        help="Override the configured log level",
    )
    subparsers = arg_parser.add_subparsers(dest="command", required=True)

    describe_parser = subparsers.add_parser("describe", help="List shapes and their fields")
    describe_parser.add_argument("schema", type=Path, help="Shape definition file")
    describe_parser.add_argument("shapes", nargs="*", help="Shapes to describe (default: all)")

    render_parser = subparsers.add_parser("render", help="Render rows as insert statements")
    render_parser.add_argument("schema", type=Path, help="Shape definition file")
    render_parser.add_argument("data", type=Path, help="JSON rows file")
    render_parser.add_argument("-o", "--output", type=Path, help="Output file (default: stdout)")

    args = arg_parser.parse_args(argv)
    configure_logging(level=args.log_level)

    if not args.schema.exists():
        print(f"Error: File not found: {args.schema}", file=sys.stderr)
        return 1
    try:
        schema = Schema.load(args.schema)
    except (SyntaxError, ValueError) as e:
        print(f"Error: {args.schema}: {e}", file=sys.stderr)
        return 1

    if args.command == "describe":
        return run_describe(schema, args.shapes)
    return run_render(schema, args.data, args.output)


if __name__ == "__main__":
    sys.exit(main())
