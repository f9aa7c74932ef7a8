"""Token types, data structures, and character classification helpers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class TokenType(Enum):
    NUMBER = auto()  # [0-9]+(.[0-9]+)?
    VARIABLE = auto()  # letters followed by optional subscript digits

    # Operators (single-character)
    PLUS = auto()  # +
    MINUS = auto()  # -
    MULTIPLY = auto()  # * (also × and ·, or implicit)
    DIVIDE = auto()  # / (also ÷)
    POWER = auto()  # ^

    LPAREN = auto()  # (
    RPAREN = auto()  # )

    EOF = auto()


@dataclass(frozen=True, slots=True)
class Span:
    """Half-open character range [start, end) into the source string."""

    start: int
    end: int

    def overlaps(self, other: Span) -> bool:
        return self.start < other.end and other.start < self.end

    @property
    def is_empty(self) -> bool:
        return self.start == self.end


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexer token with its literal text and source span."""

    type: TokenType
    value: str
    span: Span
    numeric_value: float | None = None


def is_digit(ch: str) -> bool:
    """Return True if ch is an ASCII decimal digit."""
    return ch != "" and ch in "0123456789"


def is_letter(ch: str) -> bool:
    """Return True if ch is an ASCII letter."""
    return ch.isascii() and ch.isalpha()
