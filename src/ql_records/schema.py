"""Table and index DDL synthesis for record types."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from ql_records.errors import SchemaError
from ql_records.introspection import FieldDescriptor, IndexDirective, describe_record

logger = logging.getLogger(__name__)

# Prefix reserved by the engine for its own tables
RESERVED_PREFIX = "ql_"


@dataclass(frozen=True)
class SchemaOptions:
    """Formatting options for generated DDL.

    Attributes:
        keep_reserved_prefix: Prepend the engine's reserved ``ql_`` prefix
            to the table name.
        no_if_not_exists: Omit ``if not exists`` from create statements.
        no_transaction: Emit bare statements instead of wrapping them in
            ``begin transaction; ... commit;``.
    """

    keep_reserved_prefix: bool = False
    no_if_not_exists: bool = False
    no_transaction: bool = False


@dataclass
class TableSchema:
    """A table derived from a record type, with its indices."""

    name: str
    columns: list[FieldDescriptor]
    indices: list[IndexDirective] = field(default_factory=list)
    options: SchemaOptions = field(default_factory=SchemaOptions)

    def statements(self, upper: bool = False) -> list[str]:
        """Return the create statements, table first, without separators.

        Args:
            upper: Write SQL keywords in upper case.
        """
        def kw(text: str) -> str:
            return text.upper() if upper else text

        if_not_exists = "" if self.options.no_if_not_exists else kw("if not exists ")
        column_list = ", ".join(f"{c.column_name} {c.column_type.value}" for c in self.columns)
        result = [f"{kw('create table')} {if_not_exists}{self.name} ({column_list})"]
        for index in self.indices:
            create = kw("create unique index" if index.unique else "create index")
            result.append(
                f"{create} {if_not_exists}{index.index_name} "
                f"{kw('on')} {self.name} ({index.on_expression})"
            )
        return result

    def __str__(self) -> str:
        statements = self.statements()
        if self.options.no_transaction:
            return "; ".join(statements)
        return "begin transaction; " + "".join(f"{s}; " for s in statements) + "commit;"

    def pretty(self) -> str:
        """Return the DDL with upper-case keywords, one statement per line."""
        lines = [f"{s};" for s in self.statements(upper=True)]
        if self.options.no_transaction:
            return "\n".join(lines)
        body = "\n".join(f"\t{line}" for line in lines)
        return f"BEGIN TRANSACTION;\n{body}\nCOMMIT;"


def table_schema(
    record: Any, name: str = "", options: SchemaOptions | None = None
) -> TableSchema:
    """Derive the table schema of a record type.

    Args:
        record: A dataclass type or instance.
        name: Table name; defaults to the record's class name.
        options: DDL formatting options; defaults to SchemaOptions().

    Returns:
        The table schema.

    Raises:
        SchemaError: If the record cannot be mapped to a table.
    """
    if options is None:
        options = SchemaOptions()

    info = describe_record(record)
    table_name = name or info.name
    if options.keep_reserved_prefix:
        table_name = RESERVED_PREFIX + table_name

    schema = TableSchema(
        name=table_name,
        columns=info.columns,
        indices=info.indices,
        options=options,
    )
    logger.debug(
        "Built schema for %s: table %s, %d columns, %d indices",
        info.name, table_name, len(schema.columns), len(schema.indices),
    )
    return schema


def build_schema(
    record: Any, name: str = "", options: SchemaOptions | None = None
) -> str:
    """Return the DDL creating a table (and its indices) for a record type.

    Example::

        @dataclass
        class Point:
            A: int8 = 0

        build_schema(Point)
        # 'begin transaction; create table if not exists Point (A int8); commit;'
    """
    return str(table_schema(record, name, options))


def must_schema(
    record: Any, name: str = "", options: SchemaOptions | None = None
) -> str:
    """Like build_schema, but any error terminates the process."""
    try:
        return build_schema(record, name, options)
    except SchemaError as e:
        logger.critical("Cannot build schema: %s", e)
        raise SystemExit(f"Cannot build schema: {e}") from e
