"""Expression parser — converts a token stream into an AST."""

from __future__ import annotations

from dataclasses import replace

from exprlens.ast import Binary, Node, Number, Power, Unary, Variable
from exprlens.errors import ParseError
from exprlens.lexer import tokenize
from exprlens.tokens import Span, Token, TokenType

# Exponent used when '^' is not followed by a number literal
_DEFAULT_EXPONENT = 2.0


class Parser:
    """Recursive descent parser for expression token streams."""

    def __init__(self, tokens: list[Token], source: str) -> None:
        self._tokens = tokens
        self._source = source
        self._pos = 0

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def _peek(self) -> Token:
        return self._tokens[self._pos]

    def _at_eof(self) -> bool:
        return self._peek().type == TokenType.EOF

    def _check(self, tt: TokenType) -> bool:
        return not self._at_eof() and self._peek().type == tt

    def _advance(self) -> Token:
        tok = self._tokens[self._pos]
        if tok.type != TokenType.EOF:
            self._pos += 1
        return tok

    def _match(self, *types: TokenType) -> Token | None:
        for tt in types:
            if self._check(tt):
                return self._advance()
        return None

    def _expect(self, tt: TokenType, message: str) -> Token:
        if self._check(tt):
            return self._advance()
        raise self._error(message)

    # ------------------------------------------------------------------
    # Grammar
    # ------------------------------------------------------------------

    def parse(self) -> Node:
        node = self._parse_expression()
        if not self._at_eof():
            raise self._error(f"Unexpected token: {self._peek().value}")
        return node

    def _parse_expression(self) -> Node:
        left = self._parse_term()
        while op := self._match(TokenType.PLUS, TokenType.MINUS):
            right = self._parse_term()
            left = Binary(op.value, left, right, _join(left, right))
        return left

    def _parse_term(self) -> Node:
        left = self._parse_factor()
        while op := self._match(TokenType.MULTIPLY, TokenType.DIVIDE):
            right = self._parse_factor()
            symbol = "*" if op.type == TokenType.MULTIPLY else "/"
            left = Binary(symbol, left, right, _join(left, right))
        return left

    def _parse_factor(self) -> Node:
        minus = self._match(TokenType.MINUS)
        if minus is not None:
            operand = self._parse_factor()
            return Unary(operand, Span(minus.span.start, _end(operand)))
        return self._parse_power()

    def _parse_power(self) -> Node:
        base = self._parse_atom()
        if self._match(TokenType.POWER) is None:
            return base

        sign = 1.0
        if self._match(TokenType.MINUS) is not None:
            sign = -1.0
        exp_tok = self._match(TokenType.NUMBER)
        if exp_tok is None:
            return Power(base, _DEFAULT_EXPONENT, base.span)

        assert exp_tok.numeric_value is not None
        return Power(base, sign * exp_tok.numeric_value, Span(_start(base), exp_tok.span.end))

    def _parse_atom(self) -> Node:
        tok = self._match(TokenType.NUMBER)
        if tok is not None:
            assert tok.numeric_value is not None
            return Number(tok.numeric_value, tok.span)

        tok = self._match(TokenType.VARIABLE)
        if tok is not None:
            return Variable(tok.value, 1.0, tok.span)

        lparen = self._match(TokenType.LPAREN)
        if lparen is not None:
            expr = self._parse_expression()
            rparen = self._expect(TokenType.RPAREN, "Expected ')' after expression")
            # The group's span includes its parentheses
            return replace(expr, span=Span(lparen.span.start, rparen.span.end))

        tok = self._peek()
        raise self._error(f"Unexpected token: {tok.value or 'end of input'}")

    def _error(self, message: str) -> ParseError:
        return ParseError(message, self._peek().span.start, self._source)


def _start(node: Node) -> int:
    return node.span.start if node.span is not None else 0


def _end(node: Node) -> int:
    return node.span.end if node.span is not None else 0


def _join(left: Node, right: Node) -> Span:
    return Span(_start(left), _end(right))


def parse(source: str) -> Node:
    """Convenience function: parse source text and return an AST."""
    tokens = tokenize(source)
    return Parser(tokens, source).parse()


def try_parse(source: str) -> Node | None:
    """Parse source text, returning None instead of raising ParseError."""
    try:
        return parse(source)
    except ParseError:
        return None
