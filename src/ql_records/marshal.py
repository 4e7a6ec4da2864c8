"""Conversion between record instances and row value lists."""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, Sequence

from ql_records.errors import InputShapeError, SchemaError
from ql_records.introspection import FieldDescriptor, describe_record

logger = logging.getLogger(__name__)


def _require_instance(record: Any) -> None:
    if isinstance(record, type) or not dataclasses.is_dataclass(record):
        raise InputShapeError(
            f"Expected a dataclass instance, got {type(record).__name__}"
        )


def _column_value(descriptor: FieldDescriptor, value: Any) -> Any:
    """Normalize a field value; None stays None."""
    if value is None:
        return None
    return descriptor.column_type.normalize(value)


def marshal(record: Any) -> list[Any]:
    """Return the column values of a record instance.

    The values are in the column order of the record type's table schema.
    Optional fields holding None produce None. The record is not modified.

    Raises:
        InputShapeError: If record is not a dataclass instance, has no
            eligible fields, or holds a value that does not fit its column.
        UnsupportedTypeError: If an eligible field's type has no column type.
    """
    _require_instance(record)
    info = describe_record(record)
    values = [
        _column_value(f, getattr(record, f.source_name))
        for f in info.columns
    ]
    logger.debug("Marshaled %s into %d values", info.name, len(values))
    return values


def must_marshal(record: Any) -> list[Any]:
    """Like marshal, but any error terminates the process."""
    try:
        return marshal(record)
    except SchemaError as e:
        logger.critical("Cannot marshal record: %s", e)
        raise SystemExit(f"Cannot marshal record: {e}") from e


def unmarshal(record: Any, values: Sequence[Any]) -> None:
    """Assign a row's values to a record instance in column order.

    If the record type has an ``ID`` identifier alias, the row may carry one
    extra leading value (as selected by ``SELECT id(), * FROM ...``), which
    is assigned to ``ID``.

    Raises:
        InputShapeError: If record is not a dataclass instance, the row length
            does not match, or a non-optional field would receive None.
    """
    _require_instance(record)
    info = describe_record(record)
    columns = info.columns
    alias = info.identifier_alias

    assignments: list[tuple[FieldDescriptor, Any]] = []
    if alias is not None and len(values) == len(columns) + 1:
        assignments.append((alias, values[0]))
        values = values[1:]
    if len(values) != len(columns):
        raise InputShapeError(
            f"Record type '{info.name}' has {len(columns)} columns, got {len(values)} values"
        )
    assignments.extend(zip(columns, values))

    normalized = []
    for descriptor, value in assignments:
        if value is None and not descriptor.nullable:
            raise InputShapeError(
                f"Field '{descriptor.source_name}' of '{info.name}' is not optional"
            )
        normalized.append((descriptor.source_name, _column_value(descriptor, value)))

    for source_name, value in normalized:
        setattr(record, source_name, value)
