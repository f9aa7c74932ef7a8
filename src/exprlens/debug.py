"""--debug AST dump to stderr."""

from __future__ import annotations

import sys
from typing import TextIO

from exprlens.ast import Binary, Node, Number, Power, Unary, Variable
from exprlens.render import format_exact
from exprlens.tokens import Span


def dump_ast(node: Node, *, file: TextIO | None = None) -> None:
    """Print a human-readable AST tree to *file* (default: stderr)."""
    _dump_node(node, 0, file if file is not None else sys.stderr)


def _indent(depth: int) -> str:
    return "  " * depth


def _span(span: Span | None) -> str:
    if span is None:
        return ""
    return f"  [{span.start}:{span.end}]"


def _dump_node(node: Node, depth: int, f: TextIO) -> None:
    pad = _indent(depth)
    if isinstance(node, Number):
        f.write(f"{pad}Number {format_exact(node.value)}{_span(node.span)}\n")
    elif isinstance(node, Variable):
        coeff = "" if node.coefficient == 1 else f" coefficient={format_exact(node.coefficient)}"
        f.write(f"{pad}Variable {node.name}{coeff}{_span(node.span)}\n")
    elif isinstance(node, Unary):
        f.write(f"{pad}Unary -{_span(node.span)}\n")
        _dump_node(node.operand, depth + 1, f)
    elif isinstance(node, Power):
        f.write(f"{pad}Power ^{format_exact(node.exponent)}{_span(node.span)}\n")
        _dump_node(node.base, depth + 1, f)
    elif isinstance(node, Binary):
        f.write(f"{pad}Binary {node.op}{_span(node.span)}\n")
        _dump_node(node.left, depth + 1, f)
        _dump_node(node.right, depth + 1, f)
