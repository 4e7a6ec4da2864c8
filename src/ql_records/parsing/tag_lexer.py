"""Lexer for ql field tags."""

import ply.lex as lex

from ql_records.errors import DirectiveSyntaxError


class TagLexer:
    """Lexer for tokenizing ql tag strings such as ``name Name, uindex xName``."""

    # Directive keywords
    reserved = {
        "name": "NAME",
        "index": "INDEX",
        "uindex": "UINDEX",
    }

    # Token list
    tokens = [
        "IDENTIFIER",
        "COMMA",
        "EXCLUDE",
    ] + list(reserved.values())

    # Simple tokens
    t_COMMA = r","
    t_EXCLUDE = r"-"

    # Ignored characters
    t_ignore = " \t"

    def __init__(self) -> None:
        self.lexer: lex.LexToken = None  # type: ignore

    def t_IDENTIFIER(self, t: lex.LexToken) -> lex.LexToken:
        r"[a-zA-Z_][a-zA-Z0-9_]*"
        t.type = self.reserved.get(t.value, "IDENTIFIER")
        return t

    def t_error(self, t: lex.LexToken) -> None:
        raise DirectiveSyntaxError(
            f"Illegal character '{t.value[0]}' at position {t.lexpos}"
        )

    def build(self, **kwargs) -> None:  # type: ignore
        """Build the lexer."""
        self.lexer = lex.lex(module=self, **kwargs)

    def input(self, data: str) -> None:
        """Set the input string to tokenize."""
        self.lexer.input(data)

    def token(self) -> lex.LexToken | None:
        """Return the next token."""
        return self.lexer.token()

    def tokenize(self, data: str) -> list[lex.LexToken]:
        """Tokenize the input and return all tokens."""
        self.input(data)
        tokens = []
        while True:
            tok = self.token()
            if tok is None:
                break
            tokens.append(tok)
        return tokens
