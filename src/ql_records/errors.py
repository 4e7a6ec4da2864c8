"""Exceptions raised while deriving schemas and marshaling records."""


class SchemaError(Exception):
    """Base class for all ql_records errors."""


class InputShapeError(SchemaError, TypeError):
    """The value is not a record, or the record has no eligible fields."""


class UnsupportedTypeError(SchemaError, TypeError):
    """A field's annotation has no entry in the column type table."""


class DirectiveConflictError(SchemaError, ValueError):
    """Field directives contradict each other or collide across fields."""


class DirectiveSyntaxError(SchemaError, SyntaxError):
    """A field's ql tag cannot be parsed."""
