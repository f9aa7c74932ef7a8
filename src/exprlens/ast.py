"""AST node and simplification-opportunity types for parsed expressions.

Grammar:
    Expression  -> Term (('+' | '-') Term)*
    Term        -> Factor (('*' | '/') Factor)*
    Factor      -> '-' Factor | Power
    Power       -> Atom ('^' number)?
    Atom        -> number | variable | '(' Expression ')'
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, TypeAlias

from exprlens.tokens import Span

BinaryOp: TypeAlias = Literal["+", "-", "*", "/"]


@dataclass(frozen=True, slots=True)
class Number:
    """Numeric literal."""

    value: float
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class Variable:
    """Named variable; `coefficient` is 3 for a pre-folded 3x."""

    name: str
    coefficient: float = 1.0
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class Binary:
    """Binary arithmetic operation."""

    op: BinaryOp
    left: Node
    right: Node
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class Unary:
    """Negation."""

    operand: Node
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class Power:
    """Base raised to a literal exponent."""

    base: Node
    exponent: float
    span: Span | None = None


Node: TypeAlias = Number | Variable | Binary | Unary | Power


def is_additive(node: Node) -> bool:
    return isinstance(node, Binary) and node.op in ("+", "-")


def is_multiplicative(node: Node) -> bool:
    return isinstance(node, Binary) and node.op in ("*", "/")


def is_fraction(node: Node) -> bool:
    return isinstance(node, Binary) and node.op == "/"


# ---------------------------------------------------------------------------
# Simplification opportunities
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CommonFactor:
    """A factor shared by literals in a numerator and a denominator."""

    factor: int
    numerator_spans: tuple[Span, ...]
    denominator_spans: tuple[Span, ...]


@dataclass(frozen=True, slots=True)
class LikeTerms:
    """Additive terms with the same variable and exponent (variable None for constants)."""

    variable: str | None
    exponent: float
    spans: tuple[Span, ...]


@dataclass(frozen=True, slots=True)
class ReducibleFraction:
    """A literal-over-literal fraction whose parts share a divisor."""

    gcd: int
    numerator_span: Span
    denominator_span: Span


Opportunity: TypeAlias = CommonFactor | LikeTerms | ReducibleFraction
