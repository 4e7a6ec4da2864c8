"""ql_records - Derive QL table schemas and row values from dataclasses."""

from ql_records.errors import (
    DirectiveConflictError,
    DirectiveSyntaxError,
    InputShapeError,
    SchemaError,
    UnsupportedTypeError,
)
from ql_records.introspection import (
    FieldDescriptor,
    IndexDirective,
    RecordInfo,
    column,
    describe_record,
)
from ql_records.marshal import marshal, must_marshal, unmarshal
from ql_records.parsing import TagDirectives, TagParser, parse_tag
from ql_records.schema import (
    SchemaOptions,
    TableSchema,
    build_schema,
    must_schema,
    table_schema,
)
from ql_records.types import (
    BigInt,
    ColumnMapping,
    ColumnType,
    complex64,
    complex128,
    float32,
    float64,
    int8,
    int16,
    int32,
    int64,
    map_type,
    uint,
    uint8,
    uint16,
    uint32,
    uint64,
)

__all__ = [
    # Main API
    "build_schema",
    "must_schema",
    "table_schema",
    "marshal",
    "must_marshal",
    "unmarshal",
    "describe_record",
    "column",
    "SchemaOptions",
    "TableSchema",
    "RecordInfo",
    "FieldDescriptor",
    "IndexDirective",
    # Tags
    "TagDirectives",
    "TagParser",
    "parse_tag",
    # Types
    "ColumnType",
    "ColumnMapping",
    "map_type",
    "BigInt",
    "int8",
    "int16",
    "int32",
    "int64",
    "uint",
    "uint8",
    "uint16",
    "uint32",
    "uint64",
    "float32",
    "float64",
    "complex64",
    "complex128",
    # Errors
    "SchemaError",
    "InputShapeError",
    "UnsupportedTypeError",
    "DirectiveConflictError",
    "DirectiveSyntaxError",
]

__version__ = "0.1.0"
