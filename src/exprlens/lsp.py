"""Minimal LSP server for expression files — diagnostics only.

Each non-blank line is an independent expression.
"""

from __future__ import annotations

from lsprotocol.types import (
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_OPEN,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidOpenTextDocumentParams,
    Position,
    PublishDiagnosticsParams,
    Range,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer

from exprlens import __version__
from exprlens.analyzer import analyze_expression, describe
from exprlens.ast import LikeTerms, Opportunity, ReducibleFraction
from exprlens.errors import ParseError
from exprlens.parser import parse
from exprlens.tokens import Span

server = LanguageServer(
    "exprlens-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full
)


def _utf16_offset(text: str, index: int) -> int:
    """Code-point offset in text converted to LSP's default UTF-16 units."""
    # Offsets past the end of the line (errors at end of input) keep their overhang
    overhang = max(index - len(text), 0)
    return len(text[:index].encode("utf-16-le")) // 2 + overhang


def _range(line: int, text: str, span: Span) -> Range:
    return Range(
        start=Position(line=line, character=_utf16_offset(text, span.start)),
        end=Position(line=line, character=_utf16_offset(text, span.end)),
    )


def _highlight_spans(opp: Opportunity) -> list[Span]:
    if isinstance(opp, LikeTerms):
        return list(opp.spans)
    if isinstance(opp, ReducibleFraction):
        return [Span(opp.numerator_span.start, opp.denominator_span.end)]
    # Common factors need a numerator/denominator pair; lines are single expressions
    return []


def _line_diagnostics(line_no: int, text: str) -> list[Diagnostic]:
    try:
        node = parse(text)
    except ParseError as exc:
        return [
            Diagnostic(
                range=_range(line_no, text, Span(exc.position, exc.position + 1)),
                message=exc.message,
                severity=DiagnosticSeverity.Error,
                source="exprlens",
            )
        ]

    diagnostics: list[Diagnostic] = []
    for opp in analyze_expression(node):
        message = describe(opp)
        for span in _highlight_spans(opp):
            diagnostics.append(
                Diagnostic(
                    range=_range(line_no, text, span),
                    message=message,
                    severity=DiagnosticSeverity.Information,
                    source="exprlens",
                )
            )
    return diagnostics


def _validate(ls: LanguageServer, uri: str) -> None:
    """Parse and analyze every line, then publish diagnostics."""
    doc = ls.workspace.get_text_document(uri)
    diagnostics: list[Diagnostic] = []

    for line_no, text in enumerate(doc.source.splitlines()):
        if text.strip():
            diagnostics.extend(_line_diagnostics(line_no, text))

    ls.text_document_publish_diagnostics(
        PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
    )


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: LanguageServer, params: DidOpenTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: LanguageServer, params: DidChangeTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


def main() -> None:
    server.start_io()
