"""Parsing module for the ql field tag language."""

from ql_records.parsing.tag_parser import (
    Directive,
    TagDirectives,
    TagParser,
    parse_tag,
)

__all__ = [
    "Directive",
    "TagDirectives",
    "TagParser",
    "parse_tag",
]
