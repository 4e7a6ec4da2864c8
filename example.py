"""Example usage of the ql_records library."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ql_records import column, int64, marshal, table_schema


# Define a record type; tags control column names, exclusion and indices
@dataclass
class Department:
    ID: int64 = column("index xID", default=0)
    Other: str = column("-", default="")
    DepartmentName: str = column("name Name, uindex xName", default="")
    HQ: int = 0
    Opened: Optional[datetime] = None
    _cache: dict = None  # private fields are ignored


schema = table_schema(Department)

print("DDL:")
print(schema)
print()
print(schema.pretty())
print()

departments = [
    Department(DepartmentName="Research", HQ=1, Opened=datetime(2014, 1, 2)),
    Department(DepartmentName="Sales", HQ=2),
]

print("Rows:")
for department in departments:
    print(marshal(department))
