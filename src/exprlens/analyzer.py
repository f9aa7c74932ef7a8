"""Static analysis — finds simplification opportunities to highlight.

Three kinds are reported:

* common factors shared by the literals of a numerator and a denominator,
* like terms in an additive chain (same variable and exponent),
* literal-over-literal fractions that can be reduced.

Every opportunity carries the spans of the source text it was derived from.
Nothing here raises; a missing tree yields no opportunities.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum, auto
from functools import reduce

from exprlens.ast import (
    Binary,
    CommonFactor,
    LikeTerms,
    Node,
    Number,
    Opportunity,
    Power,
    ReducibleFraction,
    Unary,
    Variable,
)
from exprlens.render import format_exact
from exprlens.tokens import Span


class Part(Enum):
    """Which displayed source string a span belongs to."""

    NUMERATOR = auto()
    DENOMINATOR = auto()
    EXPRESSION = auto()


def gcd_all(values: list[int]) -> int:
    """GCD of all values; 1 for an empty list."""
    if not values:
        return 1
    return reduce(math.gcd, values)


def _as_int(value: float) -> int | None:
    """Absolute integral value, or None for non-integral literals."""
    if not float(value).is_integer():
        return None
    return abs(int(value))


# ---------------------------------------------------------------------------
# Common factors (numerator vs. denominator)
# ---------------------------------------------------------------------------


def _collect_literals(node: Node) -> list[Number]:
    """Every numeric literal in the tree; variables are never treated as numeric."""
    found: list[Number] = []

    def walk(n: Node) -> None:
        if isinstance(n, Number):
            found.append(n)
        elif isinstance(n, Binary):
            walk(n.left)
            walk(n.right)
        elif isinstance(n, Unary):
            walk(n.operand)
        elif isinstance(n, Power):
            walk(n.base)

    walk(node)
    return found


def _divisible(literals: list[Number], factor: int) -> list[Number]:
    result = []
    for lit in literals:
        value = _as_int(lit.value)
        if value is not None and value % factor == 0:
            result.append(lit)
    return result


def _spans(nodes: list[Number]) -> tuple[Span, ...]:
    return tuple(n.span for n in nodes if n.span is not None)


def find_common_factors(numerator: Node, denominator: Node) -> list[CommonFactor]:
    """Factors shared between the literals of two independently parsed trees."""
    num_lits = _collect_literals(numerator)
    den_lits = _collect_literals(denominator)

    num_values = [v for v in map(_as_int, (n.value for n in num_lits)) if v]
    den_values = [v for v in map(_as_int, (n.value for n in den_lits)) if v]
    if not num_values or not den_values:
        return []

    found: list[CommonFactor] = []

    common = gcd_all(num_values + den_values)
    if common > 1:
        num_hits = _divisible(num_lits, common)
        den_hits = _divisible(den_lits, common)
        if num_hits and den_hits:
            found.append(CommonFactor(common, _spans(num_hits), _spans(den_hits)))

    # Narrower factors scoped to a single denominator literal
    for den in den_lits:
        factor = _as_int(den.value)
        if factor is None or factor <= 1:
            continue
        num_hits = _divisible(num_lits, factor)
        if not num_hits:
            continue
        if any(op.factor == factor for op in found):
            continue
        den_spans = (den.span,) if den.span is not None else ()
        found.append(CommonFactor(factor, _spans(num_hits), den_spans))

    return found


# ---------------------------------------------------------------------------
# Like terms
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class _Term:
    variable: str | None
    exponent: float
    sign: int
    span: Span | None


def _additive_terms(node: Node, sign: int = 1) -> list[tuple[Node, int]]:
    """Flatten a +/- chain into its terms, each with its accumulated sign."""
    if isinstance(node, Binary) and node.op in ("+", "-"):
        right_sign = -sign if node.op == "-" else sign
        return _additive_terms(node.left, sign) + _additive_terms(node.right, right_sign)
    return [(node, sign)]


def _signature(node: Node, sign: int = 1) -> _Term:
    """Reduce a term to its (variable, exponent) signature."""
    variable: str | None = None
    exponent = 1.0

    def walk(n: Node) -> None:
        nonlocal variable, exponent, sign
        if isinstance(n, Variable):
            variable = n.name
        elif isinstance(n, Unary):
            sign = -sign
            walk(n.operand)
        elif isinstance(n, Power):
            walk(n.base)
            exponent = n.exponent
        elif isinstance(n, Binary) and n.op == "*":
            walk(n.left)
            walk(n.right)
        elif isinstance(n, Binary) and n.op == "/":
            # Only the dividend contributes to the signature
            walk(n.left)

    walk(node)
    return _Term(variable, exponent, sign, node.span)


def _terms(node: Node) -> list[_Term]:
    return [_signature(term, sign) for term, sign in _additive_terms(node)]


def find_like_terms(node: Node) -> list[LikeTerms]:
    """Group additive terms by signature; report groups with more than one term."""
    groups: dict[tuple[str | None, float], list[_Term]] = {}
    for term in _terms(node):
        groups.setdefault((term.variable, term.exponent), []).append(term)

    found = []
    for (variable, exponent), terms in groups.items():
        if len(terms) > 1:
            spans = tuple(t.span for t in terms if t.span is not None)
            found.append(LikeTerms(variable, exponent, spans))
    return found


# ---------------------------------------------------------------------------
# Reducible fractions
# ---------------------------------------------------------------------------


def find_reducible_fractions(node: Node) -> list[ReducibleFraction]:
    """Every literal-over-literal division anywhere in the tree with a GCD above 1."""
    found: list[ReducibleFraction] = []

    def walk(n: Node) -> None:
        if isinstance(n, Binary):
            if n.op == "/" and isinstance(n.left, Number) and isinstance(n.right, Number):
                _check_fraction(n.left, n.right, found)
            walk(n.left)
            walk(n.right)
        elif isinstance(n, Unary):
            walk(n.operand)
        elif isinstance(n, Power):
            walk(n.base)

    walk(node)
    return found


def _check_fraction(num: Number, den: Number, found: list[ReducibleFraction]) -> None:
    num_val = _as_int(num.value)
    den_val = _as_int(den.value)
    if num_val is None or not den_val:
        return
    if num.span is None or den.span is None:
        return
    g = math.gcd(num_val, den_val)
    if g > 1:
        found.append(ReducibleFraction(g, num.span, den.span))


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------


def analyze_expression(node: Node | None) -> list[Opportunity]:
    """Like terms and reducible fractions within one expression."""
    if node is None:
        return []
    opportunities: list[Opportunity] = []
    opportunities.extend(find_like_terms(node))
    opportunities.extend(find_reducible_fractions(node))
    return opportunities


def analyze_fraction(numerator: Node | None, denominator: Node | None) -> list[Opportunity]:
    """Common factors across a displayed fraction, plus each side on its own."""
    opportunities: list[Opportunity] = []
    if numerator is not None and denominator is not None:
        opportunities.extend(find_common_factors(numerator, denominator))
    opportunities.extend(analyze_expression(numerator))
    opportunities.extend(analyze_expression(denominator))
    return opportunities


# ---------------------------------------------------------------------------
# Highlight queries
# ---------------------------------------------------------------------------


def _matches(opp: Opportunity, span: Span, part: Part) -> bool:
    if isinstance(opp, CommonFactor):
        spans = opp.denominator_spans if part == Part.DENOMINATOR else opp.numerator_spans
        return any(s.overlaps(span) for s in spans)
    if isinstance(opp, LikeTerms):
        return any(s.overlaps(span) for s in opp.spans)
    if isinstance(opp, ReducibleFraction):
        if part == Part.NUMERATOR:
            return opp.numerator_span.overlaps(span)
        if part == Part.DENOMINATOR:
            return opp.denominator_span.overlaps(span)
    return False


def is_span_highlighted(span: Span, opportunities: list[Opportunity], part: Part) -> bool:
    """True if any opportunity highlights text overlapping span."""
    return any(_matches(opp, span, part) for opp in opportunities)


def opportunities_at(
    span: Span, opportunities: list[Opportunity], part: Part
) -> list[Opportunity]:
    """The opportunities that highlight text overlapping span."""
    return [opp for opp in opportunities if _matches(opp, span, part)]


def describe(opp: Opportunity) -> str:
    """One-line description of an opportunity."""
    if isinstance(opp, CommonFactor):
        return f"numerator and denominator share the factor {opp.factor}"
    if isinstance(opp, LikeTerms):
        if opp.variable is None:
            return "constant terms can be combined"
        power = opp.variable
        if opp.exponent != 1:
            power = f"{opp.variable}^{format_exact(opp.exponent)}"
        return f"like terms in {power} can be combined"
    return f"fraction can be reduced by {opp.gcd}"
