"""Command line tool printing the DDL of a dataclass."""

from __future__ import annotations

import argparse
import importlib
import logging
import sys
from typing import Any

from ql_records.errors import SchemaError
from ql_records.schema import SchemaOptions, table_schema


def load_record_type(target: str) -> Any:
    """Import ``package.module:ClassName`` and return the class."""
    module_name, sep, attr_path = target.partition(":")
    if not sep or not module_name or not attr_path:
        raise ValueError(f"Expected MODULE:CLASS, got '{target}'")
    obj: Any = importlib.import_module(module_name)
    for attr in attr_path.split("."):
        obj = getattr(obj, attr)
    return obj


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    arg_parser = argparse.ArgumentParser(
        description="Print the QL table schema derived from a dataclass"
    )
    arg_parser.add_argument(
        "record",
        help="Record type to describe, as MODULE:CLASS",
    )
    arg_parser.add_argument(
        "-n", "--name",
        default="",
        help="Table name (default: the class name)",
    )
    arg_parser.add_argument(
        "--keep-prefix",
        action="store_true",
        help="Prefix the table name with ql_",
    )
    arg_parser.add_argument(
        "--no-if-not-exists",
        action="store_true",
        help="Omit IF NOT EXISTS from create statements",
    )
    arg_parser.add_argument(
        "--no-transaction",
        action="store_true",
        help="Do not wrap the statements in a transaction",
    )
    arg_parser.add_argument(
        "-p", "--pretty",
        action="store_true",
        help="Print one statement per line with upper-case keywords",
    )
    arg_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    args = arg_parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    options = SchemaOptions(
        keep_reserved_prefix=args.keep_prefix,
        no_if_not_exists=args.no_if_not_exists,
        no_transaction=args.no_transaction,
    )

    try:
        record_type = load_record_type(args.record)
    except (ImportError, AttributeError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        schema = table_schema(record_type, args.name, options)
    except SchemaError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(schema.pretty() if args.pretty else str(schema))
    return 0


if __name__ == "__main__":
    sys.exit(main())
