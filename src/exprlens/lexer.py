"""Expression lexer — converts source text into a flat token stream."""

from __future__ import annotations

from exprlens.tokens import Span, Token, TokenType, is_digit, is_letter

# Display glyphs accepted as operators; each maps to a single character so
# offsets in the normalized text match the original input.
_GLYPHS = {"×": "*", "·": "*", "÷": "/"}

_SINGLE_CHAR: dict[str, TokenType] = {
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.MULTIPLY,
    "/": TokenType.DIVIDE,
    "^": TokenType.POWER,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
}


class Lexer:
    """Tokenize an expression string into a list of Token objects.

    Never fails: characters that start no token are skipped.
    """

    def __init__(self, source: str) -> None:
        for glyph, ascii_op in _GLYPHS.items():
            source = source.replace(glyph, ascii_op)
        self._source = source
        self._pos = 0
        self._tokens: list[Token] = []

    def tokenize(self) -> list[Token]:
        """Tokenize the full source and return the token list."""
        while self._pos < len(self._source):
            self._skip_ws()
            if self._pos >= len(self._source):
                break

            ch = self._peek()
            if is_digit(ch) or (ch == "." and is_digit(self._peek(1))):
                self._lex_number()
            elif is_letter(ch):
                self._lex_variable()
            elif ch in _SINGLE_CHAR:
                start = self._pos
                self._pos += 1
                self._emit(_SINGLE_CHAR[ch], ch, start)
            else:
                self._pos += 1

        self._emit(TokenType.EOF, "", self._pos)
        return self._tokens

    # ------------------------------------------------------------------
    # Position helpers
    # ------------------------------------------------------------------

    def _peek(self, offset: int = 0) -> str:
        idx = self._pos + offset
        if idx < len(self._source):
            return self._source[idx]
        return ""

    def _emit(
        self,
        tt: TokenType,
        value: str,
        start: int,
        numeric_value: float | None = None,
    ) -> Token:
        tok = Token(tt, value, Span(start, self._pos), numeric_value)
        self._tokens.append(tok)
        return tok

    def _skip_ws(self) -> None:
        while self._pos < len(self._source) and self._peek().isspace():
            self._pos += 1

    # ------------------------------------------------------------------
    # Literals
    # ------------------------------------------------------------------

    def _read_digits(self) -> None:
        while is_digit(self._peek()):
            self._pos += 1

    def _lex_number(self) -> None:
        start = self._pos
        self._read_digits()
        if self._peek() == "." and is_digit(self._peek(1)):
            self._pos += 1
            self._read_digits()
        text = self._source[start : self._pos]
        self._emit(TokenType.NUMBER, text, start, float(text))

        # "3x": coefficient followed directly by a variable
        if is_letter(self._peek()):
            self._emit(TokenType.MULTIPLY, "*", self._pos)

    def _lex_variable(self) -> None:
        start = self._pos
        while is_letter(self._peek()):
            self._pos += 1
        # Subscript digits: x1, x2
        self._read_digits()
        self._emit(TokenType.VARIABLE, self._source[start : self._pos], start)


def tokenize(source: str) -> list[Token]:
    """Convenience function: tokenize source text and return token list."""
    return Lexer(source).tokenize()
