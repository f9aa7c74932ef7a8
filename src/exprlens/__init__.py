"""Algebraic expression engine: parse, evaluate, simplify, and find simplification hints."""

from __future__ import annotations

__version__ = "0.1.0"


def evaluate_string(source: str) -> float | None:
    """Parse and fold source to a number; None if unparsable or symbolic."""
    from exprlens.eval import try_evaluate
    from exprlens.parser import try_parse

    node = try_parse(source)
    if node is None:
        return None
    return try_evaluate(node)


def simplify_string(source: str) -> str:
    """Parse, simplify, and pretty-print source; unparsable input is returned unchanged."""
    from exprlens.eval import simplify
    from exprlens.parser import try_parse
    from exprlens.render import ast_to_string

    node = try_parse(source)
    if node is None:
        return source
    return ast_to_string(simplify(node))
