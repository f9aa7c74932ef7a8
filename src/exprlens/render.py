"""Display rendering — AST to text, and the editor's token view."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from exprlens.ast import Binary, BinaryOp, Node, Number, Power, Unary, Variable
from exprlens.tokens import Span, Token, TokenType

_PRECEDENCE: dict[str, int] = {"+": 1, "-": 1, "*": 2, "/": 2}

_OP_GLYPHS: dict[str, str] = {"+": "+", "-": "-", "*": "×", "/": "÷"}


def format_number(value: float) -> str:
    """Integral values without decimals, others to two places with trailing zeros stripped."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.2f}".rstrip("0").rstrip(".")


def format_exact(value: float) -> str:
    """Integral values without decimals, others at full precision."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def ast_to_string(node: Node) -> str:
    """Pretty-print a tree with minimal parentheses and display operator glyphs."""
    if isinstance(node, Number):
        return format_number(node.value)

    if isinstance(node, Variable):
        if node.coefficient == 1:
            return node.name
        if node.coefficient == -1:
            return f"-{node.name}"
        return f"{format_number(node.coefficient)}{node.name}"

    if isinstance(node, Unary):
        operand = ast_to_string(node.operand)
        if isinstance(node.operand, Binary):
            return f"-({operand})"
        return f"-{operand}"

    if isinstance(node, Power):
        base = ast_to_string(node.base)
        if _signed_base(node.base):
            base = f"({base})"
        return f"{base}^{format_exact(node.exponent)}"

    if isinstance(node, Binary):
        left = ast_to_string(node.left)
        right = ast_to_string(node.right)
        if _needs_parens(node.left, node.op, right_side=False):
            left = f"({left})"
        if _needs_parens(node.right, node.op, right_side=True):
            right = f"({right})"
        return f"{left} {_OP_GLYPHS[node.op]} {right}"

    raise TypeError(f"unknown node type: {type(node).__name__}")


def _signed_base(base: Node) -> bool:
    # -2^0.5 reads back as -(2^0.5)
    if isinstance(base, (Binary, Unary)):
        return True
    if isinstance(base, Number):
        return base.value < 0
    if isinstance(base, Variable):
        return base.coefficient != 1
    return False


def _needs_parens(child: Node, parent_op: BinaryOp, *, right_side: bool) -> bool:
    if not isinstance(child, Binary):
        return False
    parent_prec = _PRECEDENCE[parent_op]
    child_prec = _PRECEDENCE[child.op]
    if child_prec < parent_prec:
        return True
    # a - (b - c) and a / (b / c) keep their grouping
    return right_side and parent_op in ("-", "/") and child_prec == parent_prec


# ---------------------------------------------------------------------------
# Token view
# ---------------------------------------------------------------------------

DisplayKind = Literal["number", "variable", "operator", "power", "paren"]

_DISPLAY_KINDS: dict[TokenType, DisplayKind] = {
    TokenType.NUMBER: "number",
    TokenType.VARIABLE: "variable",
    TokenType.PLUS: "operator",
    TokenType.MINUS: "operator",
    TokenType.MULTIPLY: "operator",
    TokenType.DIVIDE: "operator",
    TokenType.POWER: "power",
    TokenType.LPAREN: "paren",
    TokenType.RPAREN: "paren",
}


@dataclass(frozen=True, slots=True)
class DisplayToken:
    """A token as an editor shows it."""

    kind: DisplayKind
    value: str
    span: Span
    numeric_value: float | None = None


def display_tokens(tokens: list[Token]) -> list[DisplayToken]:
    """Drop EOF and implicit multiplications, map operators to display glyphs."""
    result: list[DisplayToken] = []
    for tok in tokens:
        kind = _DISPLAY_KINDS.get(tok.type)
        if kind is None:
            continue
        if tok.type == TokenType.MULTIPLY and tok.span.is_empty:
            continue
        value = _OP_GLYPHS.get(tok.value, tok.value) if kind == "operator" else tok.value
        result.append(DisplayToken(kind, value, tok.span, tok.numeric_value))
    return result
