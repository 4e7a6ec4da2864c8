"""Native field types and their QL column type mapping."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from fractions import Fraction
from types import NoneType, UnionType
from typing import Any, NewType, Union, get_args, get_origin

from ql_records.errors import InputShapeError, UnsupportedTypeError

# Fixed-width scalar annotations. At runtime values are plain ints, floats
# and complexes; the annotation selects the column width.
int8 = NewType("int8", int)
int16 = NewType("int16", int)
int32 = NewType("int32", int)
int64 = NewType("int64", int)
uint = NewType("uint", int)  # platform-width unsigned
uint8 = NewType("uint8", int)
uint16 = NewType("uint16", int)
uint32 = NewType("uint32", int)
uint64 = NewType("uint64", int)
float32 = NewType("float32", float)
float64 = NewType("float64", float)
complex64 = NewType("complex64", complex)
complex128 = NewType("complex128", complex)

# Arbitrary-precision integer column, as opposed to plain int (int64).
BigInt = NewType("BigInt", int)


def _to_float32(value: Any) -> float:
    try:
        return struct.unpack("<f", struct.pack("<f", float(value)))[0]
    except OverflowError as e:
        raise InputShapeError(f"Value {value!r} out of range for float32") from e


def _to_complex64(value: Any) -> complex:
    value = complex(value)
    return complex(_to_float32(value.real), _to_float32(value.imag))


class ColumnType(Enum):
    """Column type tokens understood by the QL engine."""

    BOOL = "bool"
    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    UINT8 = "uint8"
    UINT16 = "uint16"
    UINT32 = "uint32"
    UINT64 = "uint64"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    COMPLEX64 = "complex64"
    COMPLEX128 = "complex128"
    BLOB = "blob"
    BIG_INT = "bigInt"
    BIG_RAT = "bigRat"
    STRING = "string"
    TIME = "time"
    DURATION = "duration"

    def normalize(self, value: Any) -> Any:
        """Return value in the canonical Python form for this column type.

        Only widening conversions are applied (int to float, bytearray to
        bytes, ...); values of another kind are rejected.

        Raises:
            InputShapeError: If value has the wrong type or is out of range
                for a fixed-width integer column.
        """
        if not isinstance(value, _VALUE_TYPES[self]) or (
            isinstance(value, bool) and self is not ColumnType.BOOL
        ):
            raise InputShapeError(
                f"{type(value).__name__} value {value!r} does not fit a {self.value} column"
            )
        bounds = _INTEGER_BOUNDS.get(self)
        if bounds is not None and not bounds[0] <= value <= bounds[1]:
            raise InputShapeError(f"Value {value} out of range for a {self.value} column")
        converter = _NORMALIZERS.get(self)
        if converter is None:
            return value
        return converter(value)


_NUMBER = (int, float)

# Python value types accepted by each column type
_VALUE_TYPES: dict[ColumnType, tuple[type, ...]] = {
    ColumnType.BOOL: (bool,),
    ColumnType.INT8: (int,),
    ColumnType.INT16: (int,),
    ColumnType.INT32: (int,),
    ColumnType.INT64: (int,),
    ColumnType.UINT8: (int,),
    ColumnType.UINT16: (int,),
    ColumnType.UINT32: (int,),
    ColumnType.UINT64: (int,),
    ColumnType.FLOAT32: _NUMBER,
    ColumnType.FLOAT64: _NUMBER,
    ColumnType.COMPLEX64: _NUMBER + (complex,),
    ColumnType.COMPLEX128: _NUMBER + (complex,),
    ColumnType.BLOB: (bytes, bytearray),
    ColumnType.BIG_INT: (int,),
    ColumnType.BIG_RAT: (int, Fraction),
    ColumnType.STRING: (str,),
    ColumnType.TIME: (datetime,),
    ColumnType.DURATION: (timedelta,),
}

# Inclusive value range of the fixed-width integer columns
_INTEGER_BOUNDS: dict[ColumnType, tuple[int, int]] = {
    ColumnType.INT8: (-(2**7), 2**7 - 1),
    ColumnType.INT16: (-(2**15), 2**15 - 1),
    ColumnType.INT32: (-(2**31), 2**31 - 1),
    ColumnType.INT64: (-(2**63), 2**63 - 1),
    ColumnType.UINT8: (0, 2**8 - 1),
    ColumnType.UINT16: (0, 2**16 - 1),
    ColumnType.UINT32: (0, 2**32 - 1),
    ColumnType.UINT64: (0, 2**64 - 1),
}

_NORMALIZERS = {
    ColumnType.BOOL: bool,
    ColumnType.INT8: int,
    ColumnType.INT16: int,
    ColumnType.INT32: int,
    ColumnType.INT64: int,
    ColumnType.UINT8: int,
    ColumnType.UINT16: int,
    ColumnType.UINT32: int,
    ColumnType.UINT64: int,
    ColumnType.FLOAT32: _to_float32,
    ColumnType.FLOAT64: float,
    ColumnType.COMPLEX64: _to_complex64,
    ColumnType.COMPLEX128: complex,
    ColumnType.BLOB: bytes,
    ColumnType.BIG_INT: int,
    ColumnType.BIG_RAT: Fraction,
}


# Mapping from field annotations to column types. Lookup is by identity, so
# user-defined NewTypes and subclasses are not matched.
NATIVE_COLUMN_TYPES: dict[Any, ColumnType] = {
    bool: ColumnType.BOOL,
    int8: ColumnType.INT8,
    int16: ColumnType.INT16,
    int32: ColumnType.INT32,
    int64: ColumnType.INT64,
    int: ColumnType.INT64,
    uint8: ColumnType.UINT8,
    uint16: ColumnType.UINT16,
    uint32: ColumnType.UINT32,
    uint64: ColumnType.UINT64,
    uint: ColumnType.UINT64,
    float32: ColumnType.FLOAT32,
    float64: ColumnType.FLOAT64,
    float: ColumnType.FLOAT64,
    complex64: ColumnType.COMPLEX64,
    complex128: ColumnType.COMPLEX128,
    complex: ColumnType.COMPLEX128,
    bytes: ColumnType.BLOB,
    BigInt: ColumnType.BIG_INT,
    Fraction: ColumnType.BIG_RAT,
    str: ColumnType.STRING,
    datetime: ColumnType.TIME,
    timedelta: ColumnType.DURATION,
}


@dataclass(frozen=True)
class ColumnMapping:
    """Result of mapping a field annotation to a column."""

    column_type: ColumnType
    nullable: bool = False


def unwrap_optional(annotation: Any) -> tuple[Any, bool]:
    """Split ``Optional[T]`` / ``T | None`` into ``(T, True)``.

    Any other annotation is returned unchanged with ``False``.
    """
    if get_origin(annotation) in (Union, UnionType):
        args = get_args(annotation)
        if len(args) == 2 and NoneType in args:
            inner = args[0] if args[1] is NoneType else args[1]
            return inner, True
    return annotation, False


def map_type(annotation: Any) -> ColumnMapping:
    """Map a field annotation to its column type.

    Raises:
        UnsupportedTypeError: If the annotation has no column type.
    """
    inner, nullable = unwrap_optional(annotation)
    try:
        column_type = NATIVE_COLUMN_TYPES.get(inner)
    except TypeError:
        # unhashable annotation
        column_type = None
    if column_type is None:
        raise UnsupportedTypeError(f"Unsupported field type: {annotation!r}")
    return ColumnMapping(column_type=column_type, nullable=nullable)


def is_supported(annotation: Any) -> bool:
    """Check whether an annotation maps to a column type."""
    try:
        map_type(annotation)
    except UnsupportedTypeError:
        return False
    return True
