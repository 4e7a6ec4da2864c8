"""Field introspection shared by schema synthesis and marshaling.

Both :mod:`ql_records.schema` and :mod:`ql_records.marshal` walk a record's
fields through :func:`describe_record`, so the column list of a table and
the value list of a row line up position by position.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any, get_type_hints

from ql_records.errors import DirectiveConflictError, InputShapeError, UnsupportedTypeError
from ql_records.parsing import parse_tag
from ql_records.types import ColumnType, map_type

# Key of the tag string in a dataclass field's metadata
TAG_KEY = "ql"

# Field name treated as the record's intrinsic row identifier
ID_FIELD = "ID"

# Index expression of the intrinsic row identifier
ID_EXPRESSION = "id()"


def column(tag: str = "", **kwargs: Any) -> Any:
    """Declare a dataclass field carrying a ql tag.

    Accepts the same keyword arguments as :func:`dataclasses.field`::

        @dataclass
        class Department:
            ID: int = column("index xID", default=0)
            Name: str = column("uindex xName", default="")
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[TAG_KEY] = tag
    return field(metadata=metadata, **kwargs)


@dataclass(frozen=True)
class IndexDirective:
    """An index to create on a table."""

    index_name: str
    unique: bool
    on_expression: str


@dataclass
class FieldDescriptor:
    """An eligible record field and the column it maps to."""

    source_name: str
    column_name: str
    column_type: ColumnType
    nullable: bool = False
    is_identifier_alias: bool = False
    index_directives: list[IndexDirective] = field(default_factory=list)


@dataclass
class RecordInfo:
    """Eligible fields of a record type, in declaration order."""

    name: str
    record_type: type
    fields: list[FieldDescriptor] = field(default_factory=list)

    @property
    def columns(self) -> list[FieldDescriptor]:
        """Return the fields that produce a table column."""
        return [f for f in self.fields if not f.is_identifier_alias]

    @property
    def indices(self) -> list[IndexDirective]:
        """Return all index directives in field declaration order."""
        return [d for f in self.fields for d in f.index_directives]

    @property
    def identifier_alias(self) -> FieldDescriptor | None:
        """Return the field standing in for the row identifier, if any."""
        for f in self.fields:
            if f.is_identifier_alias:
                return f
        return None


def record_type_of(record: Any) -> type:
    """Return the dataclass type of a record instance or record type.

    Raises:
        InputShapeError: If record is neither a dataclass nor an instance of one.
    """
    if record is None:
        raise InputShapeError("Record must not be None")
    if not dataclasses.is_dataclass(record):
        raise InputShapeError(
            f"Expected a dataclass or dataclass instance, got {type(record).__name__}"
        )
    return record if isinstance(record, type) else type(record)


def describe_record(record: Any) -> RecordInfo:
    """Walk a record's fields and derive its column descriptors.

    Fields are visited in declaration order. Fields whose names start with an
    underscore and fields tagged ``-`` are skipped. A field named ``ID`` that
    maps to a non-nullable ``int64`` and has no ``name`` directive becomes the
    identifier alias: it yields no column and its index targets ``id()``.

    Args:
        record: A dataclass type or instance.

    Returns:
        The record's name and eligible fields.

    Raises:
        InputShapeError: If record is not a dataclass or has no eligible fields.
        UnsupportedTypeError: If an eligible field's type has no column type
            or an annotation cannot be resolved.
        DirectiveSyntaxError: If a field tag cannot be parsed.
        DirectiveConflictError: If a field has both index kinds or an index
            name is used twice.
    """
    record_type = record_type_of(record)
    try:
        hints = get_type_hints(record_type)
    except NameError as e:
        raise UnsupportedTypeError(
            f"Cannot resolve field types of '{record_type.__name__}': {e}"
        ) from e
    info = RecordInfo(name=record_type.__name__, record_type=record_type)
    index_owners: dict[str, str] = {}

    for f in dataclasses.fields(record_type):
        if f.name.startswith("_"):
            continue

        directives = parse_tag(f.metadata.get(TAG_KEY))
        if directives.exclude:
            continue

        mapping = map_type(hints.get(f.name, f.type))
        is_alias = (
            f.name == ID_FIELD
            and mapping.column_type is ColumnType.INT64
            and not mapping.nullable
            and directives.name is None
        )
        column_name = directives.name or f.name
        on_expression = ID_EXPRESSION if is_alias else column_name

        descriptor = FieldDescriptor(
            source_name=f.name,
            column_name=column_name,
            column_type=mapping.column_type,
            nullable=mapping.nullable,
            is_identifier_alias=is_alias,
        )
        for index_name, unique in (
            (directives.index, False),
            (directives.unique_index, True),
        ):
            if index_name is None:
                continue
            if index_name in index_owners:
                raise DirectiveConflictError(
                    f"Index '{index_name}' on field '{f.name}' already defined "
                    f"on field '{index_owners[index_name]}'"
                )
            index_owners[index_name] = f.name
            descriptor.index_directives.append(
                IndexDirective(index_name=index_name, unique=unique, on_expression=on_expression)
            )

        info.fields.append(descriptor)

    if not info.columns:
        raise InputShapeError(f"Record type '{info.name}' has no eligible fields")

    return info
