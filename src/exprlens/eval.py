"""Constant-folding evaluator and algebraic simplifier."""

from __future__ import annotations

import math
from dataclasses import dataclass

from exprlens.ast import Binary, BinaryOp, Node, Number, Power, Unary, Variable


@dataclass(frozen=True, slots=True)
class Value:
    """The expression folded to a number."""

    value: float


@dataclass(frozen=True, slots=True)
class Symbolic:
    """The expression could not be folded (variables, division by zero, overflow)."""

    node: Node


EvalResult = Value | Symbolic


def evaluate(node: Node) -> EvalResult:
    """Fold a tree to a number where every leaf is numeric."""
    if isinstance(node, Number):
        # Literals too large for a float read as inf
        if not math.isfinite(node.value):
            return Symbolic(node)
        return Value(node.value)

    if isinstance(node, Variable):
        return Symbolic(node)

    if isinstance(node, Unary):
        operand = evaluate(node.operand)
        if isinstance(operand, Value):
            return Value(-operand.value)
        return Symbolic(node)

    if isinstance(node, Power):
        base = evaluate(node.base)
        if isinstance(base, Value):
            result = _pow(base.value, node.exponent)
            if result is not None:
                return Value(result)
        return Symbolic(node)

    if isinstance(node, Binary):
        left = evaluate(node.left)
        right = evaluate(node.right)
        if isinstance(left, Value) and isinstance(right, Value):
            result = _apply(node.op, left.value, right.value)
            if result is not None:
                return Value(result)
        return Symbolic(node)

    raise TypeError(f"unknown node type: {type(node).__name__}")


def try_evaluate(node: Node) -> float | None:
    """Return the folded value of node, or None if it stays symbolic."""
    result = evaluate(node)
    if isinstance(result, Value):
        return result.value
    return None


def simplify(node: Node) -> Node:
    """Fold constants and drop identity operations, returning a new tree."""
    value = try_evaluate(node)
    if value is not None:
        return Number(value, node.span)

    if isinstance(node, Unary):
        operand = simplify(node.operand)
        folded = try_evaluate(operand)
        if folded is not None:
            return Number(-folded, node.span)
        return Unary(operand, node.span)

    if isinstance(node, Power):
        base = simplify(node.base)
        folded = try_evaluate(base)
        if folded is not None:
            result = _pow(folded, node.exponent)
            if result is not None:
                return Number(result, node.span)
        return Power(base, node.exponent, node.span)

    if isinstance(node, Binary):
        return _simplify_binary(node)

    return node


def _simplify_binary(node: Binary) -> Node:
    left = simplify(node.left)
    right = simplify(node.right)
    lval = try_evaluate(left)
    rval = try_evaluate(right)

    if lval is not None and rval is not None:
        result = _apply(node.op, lval, rval)
        if result is not None:
            return Number(result, node.span)
        return Binary(node.op, left, right, node.span)

    if node.op == "+":
        if lval == 0:
            return right
        if rval == 0:
            return left
    elif node.op == "-":
        if rval == 0:
            return left
    elif node.op == "*":
        if lval == 1:
            return right
        if rval == 1:
            return left
        if lval == 0 or rval == 0:
            return Number(0.0, node.span)
    elif node.op == "/":
        if rval == 1:
            return left

    return Binary(node.op, left, right, node.span)


# ---------------------------------------------------------------------------
# Arithmetic
# ---------------------------------------------------------------------------


def _apply(op: BinaryOp, a: float, b: float) -> float | None:
    if op == "+":
        result = a + b
    elif op == "-":
        result = a - b
    elif op == "*":
        result = a * b
    else:
        if b == 0:
            return None
        result = a / b
    return result if math.isfinite(result) else None


def _pow(base: float, exponent: float) -> float | None:
    try:
        result = math.pow(base, exponent)
    except (OverflowError, ValueError):
        # 0^-n, negative base with a fractional exponent, overflow
        return None
    return result if math.isfinite(result) else None
