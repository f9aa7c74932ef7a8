"""Command-line interface for exprlens."""

from __future__ import annotations

import argparse
import json
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from exprlens.ast import CommonFactor, LikeTerms, Node, Opportunity
from exprlens.errors import ParseError
from exprlens.tokens import Span

MODES = ("evaluate", "simplify", "analyze", "tokens")


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    expressions: list[str]
    denominator: str | None
    mode: str
    json: bool
    debug: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="exprlens",
        description="Evaluate, simplify, and analyze algebraic expressions",
    )
    p.add_argument("expressions", nargs="*", metavar="EXPR", help="Expression to process")
    p.add_argument(
        "-f",
        "--file",
        metavar="FILE",
        help="Read expressions from FILE, one per line",
    )
    p.add_argument(
        "--over",
        metavar="DENOMINATOR",
        help="Analyze each expression as a numerator over DENOMINATOR",
    )
    p.add_argument(
        "-m",
        "--mode",
        choices=MODES,
        default=None,
        help="What to do with each expression (default: simplify)",
    )
    p.add_argument("--json", action="store_true", default=None, help="Print one JSON object per expression")
    p.add_argument(
        "--config",
        metavar="FILE",
        help="Config file (default: auto-discover exprlens.toml)",
    )
    p.add_argument("--debug", action="store_true", help="Dump AST to stderr")
    return p


def load_config(config_path: Path | None, base_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else base_dir / "exprlens.toml"

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def read_expressions(path: Path) -> list[str]:
    """Non-blank lines of an expression file."""
    text = path.read_text(encoding="utf-8")
    return [line.strip() for line in text.splitlines() if line.strip()]


def resolve_options(args: argparse.Namespace, base_dir: Path | None = None) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: config file < CLI flags.
    """
    config_path = Path(args.config) if args.config else None
    config = load_config(config_path, base_dir if base_dir is not None else Path("."))

    mode = "simplify"
    as_json = False
    cfg_output = config.get("output")
    if isinstance(cfg_output, dict):
        cfg_mode = cfg_output.get("mode")
        if cfg_mode is not None:
            if cfg_mode not in MODES:
                raise argparse.ArgumentTypeError(f"invalid mode in config: {cfg_mode}")
            mode = cfg_mode
        cfg_json = cfg_output.get("json")
        if isinstance(cfg_json, bool):
            as_json = cfg_json
    if args.mode is not None:
        mode = args.mode
    if args.json is not None:
        as_json = args.json

    expressions = list(args.expressions)
    if args.file:
        expressions.extend(read_expressions(Path(args.file)))

    return CliOptions(
        expressions=expressions,
        denominator=args.over,
        mode=mode,
        json=as_json,
        debug=args.debug,
    )


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


def _span_list(span: Span) -> list[int]:
    return [span.start, span.end]


def opportunity_to_dict(opp: Opportunity) -> dict[str, Any]:
    """JSON-ready form of an opportunity."""
    if isinstance(opp, CommonFactor):
        return {
            "kind": "common-factor",
            "factor": opp.factor,
            "numerator_spans": [_span_list(s) for s in opp.numerator_spans],
            "denominator_spans": [_span_list(s) for s in opp.denominator_spans],
        }
    if isinstance(opp, LikeTerms):
        return {
            "kind": "like-terms",
            "variable": opp.variable,
            "exponent": opp.exponent,
            "spans": [_span_list(s) for s in opp.spans],
        }
    return {
        "kind": "reducible-fraction",
        "gcd": opp.gcd,
        "numerator_span": _span_list(opp.numerator_span),
        "denominator_span": _span_list(opp.denominator_span),
    }


def _excerpts(source: str, spans: tuple[Span, ...]) -> str:
    return ", ".join(source[s.start : s.end] for s in spans)


def _opportunity_line(opp: Opportunity, source: str, denominator: str | None) -> str:
    from exprlens.analyzer import describe

    if isinstance(opp, CommonFactor):
        num = _excerpts(source, opp.numerator_spans)
        den = _excerpts(denominator or "", opp.denominator_spans)
        return f"{describe(opp)}: {num} / {den}"
    if isinstance(opp, LikeTerms):
        return f"{describe(opp)}: {_excerpts(source, opp.spans)}"
    num = source[opp.numerator_span.start : opp.numerator_span.end]
    den = source[opp.denominator_span.start : opp.denominator_span.end]
    return f"{describe(opp)}: {num}/{den}"


def process_expression(
    source: str,
    options: CliOptions,
    denominator: Node | None = None,
) -> str:
    """Run one expression through the selected mode and return the output text."""
    from exprlens.analyzer import analyze_expression, analyze_fraction
    from exprlens.debug import dump_ast
    from exprlens.eval import Value, evaluate, simplify
    from exprlens.lexer import tokenize
    from exprlens.parser import parse
    from exprlens.render import ast_to_string, display_tokens, format_exact

    if options.mode == "tokens":
        tokens = display_tokens(tokenize(source))
        if options.json:
            return json.dumps(
                {
                    "input": source,
                    "tokens": [
                        {"kind": t.kind, "value": t.value, "span": _span_list(t.span)}
                        for t in tokens
                    ],
                },
                ensure_ascii=False,
            )
        return "\n".join(f"{t.kind:<8} {t.value}  [{t.span.start}:{t.span.end}]" for t in tokens)

    node = parse(source)
    if options.debug:
        dump_ast(node)

    if options.mode == "evaluate":
        result = evaluate(node)
        if isinstance(result, Value):
            if options.json:
                return json.dumps({"input": source, "value": result.value})
            return format_exact(result.value)
        text = ast_to_string(result.node)
        if options.json:
            return json.dumps({"input": source, "value": None, "result": text}, ensure_ascii=False)
        return text

    if options.mode == "analyze":
        if denominator is not None:
            opportunities = analyze_fraction(node, denominator)
        else:
            opportunities = analyze_expression(node)
        if options.json:
            return json.dumps(
                {
                    "input": source,
                    "opportunities": [opportunity_to_dict(o) for o in opportunities],
                },
                ensure_ascii=False,
            )
        if not opportunities:
            return "no simplification opportunities"
        return "\n".join(
            _opportunity_line(o, source, options.denominator) for o in opportunities
        )

    text = ast_to_string(simplify(node))
    if options.json:
        return json.dumps({"input": source, "result": text}, ensure_ascii=False)
    return text


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    from exprlens.parser import parse

    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = resolve_options(args)
    except argparse.ArgumentTypeError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except (OSError, tomllib.TOMLDecodeError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    denominator: Node | None = None
    if options.denominator is not None and options.mode == "analyze":
        try:
            denominator = parse(options.denominator)
        except ParseError as exc:
            print(exc.format("<denominator>"), file=sys.stderr)
            return 1

    status = 0
    for source in options.expressions:
        try:
            output = process_expression(source, options, denominator)
        except ParseError as exc:
            print(exc.format("<expr>"), file=sys.stderr)
            status = 1
            continue
        sys.stdout.write(output + "\n")

    return status
