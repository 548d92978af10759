"""Lexer for the filter expression language."""

import ply.lex as lex

from typed_rows.errors import FilterSyntaxError


class FilterLexer:
    """Lexer for tokenizing filter expressions such as ``(a = 1 || a = 2) && b != x``."""

    tokens = [
        "LPAREN",
        "RPAREN",
        "AND",
        "OR",
        "NE",
        "LE",
        "GE",
        "EQ",
        "LT",
        "GT",
        "STRING",
        "WORD",
    ]

    # Ignored characters (spaces, tabs, and newlines)
    t_ignore = " \t\r\n"

    # Function rules are tried in definition order, so two-character
    # operators come before their one-character prefixes.

    def t_LPAREN(self, t: lex.LexToken) -> lex.LexToken:
        r"\("
        return t

    def t_RPAREN(self, t: lex.LexToken) -> lex.LexToken:
        r"\)"
        return t

    def t_AND(self, t: lex.LexToken) -> lex.LexToken:
        r"&&"
        return t

    def t_OR(self, t: lex.LexToken) -> lex.LexToken:
        r"\|\|"
        return t

    def t_NE(self, t: lex.LexToken) -> lex.LexToken:
        r"!="
        return t

    def t_LE(self, t: lex.LexToken) -> lex.LexToken:
        r"<="
        return t

    def t_GE(self, t: lex.LexToken) -> lex.LexToken:
        r">="
        return t

    def t_EQ(self, t: lex.LexToken) -> lex.LexToken:
        r"="
        return t

    def t_LT(self, t: lex.LexToken) -> lex.LexToken:
        r"<"
        return t

    def t_GT(self, t: lex.LexToken) -> lex.LexToken:
        r">"
        return t

    def t_STRING(self, t: lex.LexToken) -> lex.LexToken:
        r"'[^']*'|\"[^\"]*\""
        t.value = t.value[1:-1]
        return t

    def t_WORD(self, t: lex.LexToken) -> lex.LexToken:
        r"[^\s()&|=!<>'\"]+"
        return t

    def t_error(self, t: lex.LexToken) -> None:
        raise FilterSyntaxError(f"Illegal character '{t.value[0]}'", t.lexpos)

    def __init__(self) -> None:
        self.lexer: lex.Lexer = None  # type: ignore

    def build(self, **kwargs) -> None:  # type: ignore
        """Build the lexer."""
        kwargs.setdefault("errorlog", lex.NullLogger())
        self.lexer = lex.lex(module=self, **kwargs)

    def tokenize(self, data: str) -> list[lex.LexToken]:
        """Tokenize the input and return all tokens.

        Each call works on a clone of the built lexer, so one FilterLexer
        can be shared between threads.
        """
        if self.lexer is None:
            self.build()
        lexer = self.lexer.clone()
        lexer.input(data)
        tokens = []
        while True:
            tok = lexer.token()
            if tok is None:
                break
            tokens.append(tok)
        return tokens
