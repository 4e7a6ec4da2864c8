"""Parser for ql field tags.

A tag is a comma separated list of directives::

    tag       : "-" | directive ("," directive)*
    directive : "name" ident | "index" ident | "uindex" ident
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any

import ply.yacc as yacc

from ql_records.errors import DirectiveConflictError, DirectiveSyntaxError
from ql_records.parsing.tag_lexer import TagLexer


@dataclass(frozen=True)
class Directive:
    """A single parsed directive before validation."""

    keyword: str
    argument: str | None = None


@dataclass(frozen=True)
class TagDirectives:
    """Validated directive set of one field."""

    exclude: bool = False
    name: str | None = None
    index: str | None = None
    unique_index: str | None = None


EXCLUDE = Directive(keyword="-")

# Directive keywords accepted in a tag
KEYWORDS = frozenset(TagLexer.reserved)


class TagParser:
    """Parser for ql tag strings."""

    tokens = TagLexer.tokens

    def __init__(self) -> None:
        self.lexer = TagLexer()
        self.lexer.build()
        self.parser: yacc.LRParser = None  # type: ignore

    def p_tag_exclude(self, p: yacc.YaccProduction) -> None:
        """tag : EXCLUDE"""
        p[0] = [EXCLUDE]

    def p_tag_directives(self, p: yacc.YaccProduction) -> None:
        """tag : directive_list"""
        p[0] = p[1]

    def p_directive_list_single(self, p: yacc.YaccProduction) -> None:
        """directive_list : directive"""
        p[0] = [p[1]]

    def p_directive_list_multiple(self, p: yacc.YaccProduction) -> None:
        """directive_list : directive_list COMMA directive"""
        p[0] = p[1] + [p[3]]

    def p_directive(self, p: yacc.YaccProduction) -> None:
        """directive : NAME ident
                     | INDEX ident
                     | UINDEX ident"""
        p[0] = Directive(keyword=p[1], argument=p[2])

    def p_directive_unknown(self, p: yacc.YaccProduction) -> None:
        """directive : IDENTIFIER ident"""
        p[0] = Directive(keyword=p[1], argument=p[2])

    def p_ident(self, p: yacc.YaccProduction) -> None:
        """ident : IDENTIFIER
                 | NAME
                 | INDEX
                 | UINDEX"""
        p[0] = p[1]

    def p_error(self, p: yacc.YaccProduction) -> None:
        if p:
            raise DirectiveSyntaxError(f"Syntax error at '{p.value}' (position {p.lexpos})")
        else:
            raise DirectiveSyntaxError("Syntax error at end of tag")

    def build(self, **kwargs: Any) -> None:
        """Build the parser."""
        self.parser = yacc.yacc(module=self, **kwargs)

    def parse_directives(self, data: str) -> list[Directive]:
        """Parse a tag into its raw directive list."""
        if self.parser is None:
            self.build(debug=False, write_tables=False)

        if not data.strip():
            return []
        directives = self.parser.parse(data, lexer=self.lexer.lexer)
        if directives is None:
            raise DirectiveSyntaxError(f"Cannot parse tag '{data}'")
        return directives

    def parse(self, data: str) -> TagDirectives:
        """Parse a tag and return its validated directive set."""
        return self._resolve_directives(self.parse_directives(data))

    def _resolve_directives(self, directives: list[Directive]) -> TagDirectives:
        """Fold a directive list into a TagDirectives, rejecting repeats."""
        if directives == [EXCLUDE]:
            return TagDirectives(exclude=True)

        seen: dict[str, str] = {}
        for directive in directives:
            if directive.keyword not in KEYWORDS:
                raise DirectiveSyntaxError(f"Unknown directive '{directive.keyword}'")
            if directive.keyword in seen:
                raise DirectiveConflictError(
                    f"Directive '{directive.keyword}' given more than once"
                )
            seen[directive.keyword] = directive.argument

        if "index" in seen and "uindex" in seen:
            raise DirectiveConflictError(
                f"Field cannot have both index '{seen['index']}' "
                f"and unique index '{seen['uindex']}'"
            )

        return TagDirectives(
            name=seen.get("name"),
            index=seen.get("index"),
            unique_index=seen.get("uindex"),
        )


_parser: TagParser | None = None
_parser_lock = threading.Lock()


def parse_tag(tag: str | None) -> TagDirectives:
    """Parse a field tag using a shared parser.

    An empty or missing tag yields the default directive set.

    Raises:
        DirectiveSyntaxError: If the tag cannot be parsed.
        DirectiveConflictError: If the tag's directives contradict each other.
    """
    global _parser
    if not tag or not tag.strip():
        return TagDirectives()
    with _parser_lock:
        if _parser is None:
            _parser = TagParser()
        return _parser.parse(tag)
