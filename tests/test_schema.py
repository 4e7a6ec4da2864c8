"""Tests for DDL synthesis."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from fractions import Fraction
from typing import Optional

import pytest

from ql_records.errors import (
    DirectiveConflictError,
    DirectiveSyntaxError,
    InputShapeError,
    SchemaError,
    UnsupportedTypeError,
)
from ql_records.introspection import column
from ql_records.schema import SchemaOptions, TableSchema, build_schema, must_schema, table_schema
from ql_records.types import (
    BigInt,
    complex64,
    float32,
    int8,
    int16,
    int32,
    int64,
    uint,
    uint8,
    uint16,
    uint32,
    uint64,
)


@dataclass
class testSchema:
    _a: int8 = 0
    ID: int64 = 0
    A: int8 = 0
    _b: int = 0
    B: int = column("-", default=0)


@dataclass
class testSchema2:
    pass


@dataclass
class testSchema3:
    _a: int8 = 0
    ID: uint64 = 0
    A: int8 = 0
    _b: int = 0
    B: int = column("-", default=0)
    _c: bool = False
    C: bool = column("name cc", default=False)


@dataclass
class testSchema4:
    _a: int8 = 0
    ID: int64 = column("name id", default=0)
    A: int8 = 0
    _b: int = 0
    B: int = column("-", default=0)
    _c: bool = False
    C: bool = column("name cc", default=False)


@dataclass
class testSchema5:
    I: int = column("index x,uindex u", default=0)


@dataclass
class testSchema6:
    A: str = column("index x", default="")


@dataclass
class testSchema7:
    A: int = 0
    B: str = column("uindex x", default="")
    C: bool = False


@dataclass
class testSchema8:
    A: bool = False
    B: int = 0
    C: int8 = 0
    D: int16 = 0
    E: int32 = 0
    F: int64 = 0
    G: uint = 0
    H: uint8 = 0
    I: uint16 = 0
    J: uint32 = 0
    K: uint64 = 0
    L: float32 = 0.0
    M: float = 0.0
    N: complex64 = 0j
    O: complex = 0j
    P: bytes = b""
    Q: BigInt = 0
    R: Fraction = field(default_factory=Fraction)
    S: str = ""
    T: datetime = datetime(1, 1, 1)
    U: timedelta = field(default_factory=timedelta)
    PA: Optional[bool] = None
    PB: Optional[int] = None
    PC: Optional[int8] = None
    PD: Optional[int16] = None
    PE: Optional[int32] = None
    PF: Optional[int64] = None
    PG: Optional[uint] = None
    PH: Optional[uint8] = None
    PI: Optional[uint16] = None
    PJ: Optional[uint32] = None
    PK: Optional[uint64] = None
    PL: Optional[float32] = None
    PM: Optional[float] = None
    PN: Optional[complex64] = None
    PO: Optional[complex] = None
    PP: Optional[bytes] = None
    PQ: Optional[BigInt] = None
    PR: Optional[Fraction] = None
    PS: Optional[str] = None
    PT: Optional[datetime] = None
    PU: Optional[timedelta] = None


@dataclass
class testSchema9:
    _i: int = 0
    ID: int64 = column("index xID", default=0)
    Other: str = column("-", default="")
    DepartmentName: str = column("uindex xDepartmentName", default="")


@dataclass
class department:
    _a: int = 0
    ID: int64 = column("index xID", default=0)
    Other: str = column("-", default="")
    DepartmentName: str = column("name Name, uindex xName", default="")
    _m: bool = False
    HQ: int = 0
    _z: str = ""


@dataclass
class Unsupported:
    A: int = 0
    B: set = field(default_factory=set)


@dataclass
class UnknownTag:
    A: int = 0
    B: str = column("foo bar", default="")


TESTSCHEMA8_COLUMNS = (
    "A bool, B int64, C int8, D int16, E int32, F int64, G uint64, H uint8, "
    "I uint16, J uint32, K uint64, L float32, M float64, N complex64, "
    "O complex128, P blob, Q bigInt, R bigRat, S string, T time, U duration, "
    "PA bool, PB int64, PC int8, PD int16, PE int32, PF int64, PG uint64, "
    "PH uint8, PI uint16, PJ uint32, PK uint64, PL float32, PM float64, "
    "PN complex64, PO complex128, PP blob, PQ bigInt, PR bigRat, PS string, "
    "PT time, PU duration"
)


class TestOptions:
    """Tests for every combination of the formatting options."""

    @pytest.mark.parametrize(
        "no_transaction, no_if_not_exists, keep_prefix, expected",
        [
            (False, False, False, "begin transaction; create table if not exists testSchema (A int8); commit;"),
            (False, False, True, "begin transaction; create table if not exists ql_testSchema (A int8); commit;"),
            (False, True, False, "begin transaction; create table testSchema (A int8); commit;"),
            (False, True, True, "begin transaction; create table ql_testSchema (A int8); commit;"),
            (True, False, False, "create table if not exists testSchema (A int8)"),
            (True, False, True, "create table if not exists ql_testSchema (A int8)"),
            (True, True, False, "create table testSchema (A int8)"),
            (True, True, True, "create table ql_testSchema (A int8)"),
        ],
    )
    def test_combinations(self, no_transaction, no_if_not_exists, keep_prefix, expected):
        options = SchemaOptions(
            keep_reserved_prefix=keep_prefix,
            no_if_not_exists=no_if_not_exists,
            no_transaction=no_transaction,
        )
        assert build_schema(testSchema(), "", options) == expected

    def test_none_means_defaults(self):
        """Test that options=None equals SchemaOptions()."""
        assert build_schema(testSchema()) == build_schema(testSchema(), "", SchemaOptions())

    def test_explicit_name(self):
        """Test that an explicit table name replaces the class name."""
        assert build_schema(testSchema, "points") == (
            "begin transaction; create table if not exists points (A int8); commit;"
        )

    def test_explicit_name_with_prefix(self):
        """Test that the reserved prefix also applies to explicit names."""
        options = SchemaOptions(keep_reserved_prefix=True, no_transaction=True)
        assert build_schema(testSchema, "points", options) == (
            "create table if not exists ql_points (A int8)"
        )


class TestBuildSchema:
    """Tests for build_schema on various record types."""

    @pytest.mark.parametrize("value", [None, 42, "testSchema", testSchema2(), testSchema2])
    def test_input_shape(self, value):
        """Test that non-records and empty records are rejected."""
        with pytest.raises(InputShapeError):
            build_schema(value)

    def test_unsigned_id(self):
        """Test that a uint64 ID is kept as a column."""
        assert build_schema(testSchema3()) == (
            "begin transaction; create table if not exists testSchema3 "
            "(ID uint64, A int8, cc bool); commit;"
        )

    def test_renamed_id(self):
        """Test that a renamed int64 ID is kept as a column."""
        assert build_schema(testSchema4()) == (
            "begin transaction; create table if not exists testSchema4 "
            "(id int64, A int8, cc bool); commit;"
        )

    def test_index_and_uindex_conflict(self):
        """Test that index plus uindex on one field fails."""
        with pytest.raises(DirectiveConflictError):
            build_schema(testSchema5())

    def test_index_without_transaction(self):
        """Test bare statements are separated by '; '."""
        options = SchemaOptions(no_transaction=True, no_if_not_exists=True)
        assert build_schema(testSchema6(), "", options) == (
            "create table testSchema6 (A string); create index x on testSchema6 (A)"
        )

    def test_unique_index(self):
        """Test a unique index following the table statement."""
        options = SchemaOptions(no_if_not_exists=True)
        assert build_schema(testSchema7(), "", options) == (
            "begin transaction; create table testSchema7 (A int64, B string, C bool); "
            "create unique index x on testSchema7 (B); commit;"
        )

    def test_all_types(self):
        """Test the full scalar table, plain and optional."""
        expected = (
            f"begin transaction; create table if not exists testSchema8 ({TESTSCHEMA8_COLUMNS}); commit;"
        )
        assert build_schema(testSchema8()) == expected
        assert build_schema(testSchema8) == expected

    def test_identifier_index(self):
        """Test that an index on ID targets id()."""
        assert build_schema(testSchema9()) == (
            "begin transaction; "
            "create table if not exists testSchema9 (DepartmentName string); "
            "create index if not exists xID on testSchema9 (id()); "
            "create unique index if not exists xDepartmentName on testSchema9 (DepartmentName); "
            "commit;"
        )

    def test_unsupported_type(self):
        """Test that unsupported field types fail the whole schema."""
        with pytest.raises(UnsupportedTypeError):
            build_schema(Unsupported)

    def test_unknown_directive(self):
        """Test that an unknown tag keyword fails with a syntax error."""
        with pytest.raises(DirectiveSyntaxError, match="Unknown directive 'foo'"):
            build_schema(UnknownTag)

    def test_deterministic(self):
        """Test that repeated synthesis is byte-identical."""
        assert build_schema(testSchema8) == build_schema(testSchema8)
        assert build_schema(department) == build_schema(department())

    def test_errors_share_base(self):
        """Test that all failures derive from SchemaError."""
        for record in (None, testSchema5, Unsupported):
            with pytest.raises(SchemaError):
                build_schema(record)


class TestTableSchema:
    """Tests for the TableSchema object."""

    def test_fields(self):
        schema = table_schema(department)

        assert isinstance(schema, TableSchema)
        assert schema.name == "department"
        assert [c.column_name for c in schema.columns] == ["Name", "HQ"]
        assert [i.index_name for i in schema.indices] == ["xID", "xName"]

    def test_statements(self):
        schema = table_schema(department)

        assert schema.statements() == [
            "create table if not exists department (Name string, HQ int64)",
            "create index if not exists xID on department (id())",
            "create unique index if not exists xName on department (Name)",
        ]

    def test_pretty(self):
        """Test the upper-case, one statement per line rendering."""
        schema = table_schema(department)

        assert schema.pretty() == (
            "BEGIN TRANSACTION;\n"
            "\tCREATE TABLE IF NOT EXISTS department (Name string, HQ int64);\n"
            "\tCREATE INDEX IF NOT EXISTS xID ON department (id());\n"
            "\tCREATE UNIQUE INDEX IF NOT EXISTS xName ON department (Name);\n"
            "COMMIT;"
        )

    def test_pretty_without_transaction(self):
        options = SchemaOptions(no_transaction=True, no_if_not_exists=True)
        schema = table_schema(testSchema6, "", options)

        assert schema.pretty() == (
            "CREATE TABLE testSchema6 (A string);\n"
            "CREATE INDEX x ON testSchema6 (A);"
        )

    def test_pretty_keeps_identifier_case(self):
        """Test that names spelled like keywords are not upper-cased."""
        schema = table_schema(testSchema6, "on")
        assert "CREATE INDEX IF NOT EXISTS x ON on (A);" in schema.pretty()


class TestMustSchema:
    """Tests for must_schema."""

    def test_success(self):
        assert must_schema(testSchema) == build_schema(testSchema)

    def test_failure_exits(self):
        """Test that errors terminate the process."""
        with pytest.raises(SystemExit):
            must_schema(testSchema5)
