"""Tests for the LSP server: diagnostic generation."""

from __future__ import annotations

import pytest
from lsprotocol.types import (
    DiagnosticSeverity,
    PublishDiagnosticsParams,
    TextDocumentItem,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer
from pygls.workspace import Workspace

from exprlens.ast import CommonFactor
from exprlens.lsp import _highlight_spans, _validate
from exprlens.tokens import Span


@pytest.fixture
def lsp_env():
    """Create a LanguageServer with an initialized workspace and captured diagnostics."""
    ls = LanguageServer("test", "v0", text_document_sync_kind=TextDocumentSyncKind.Full)
    ws = Workspace(None)
    ls.protocol._workspace = ws

    published: list[PublishDiagnosticsParams] = []
    ls.text_document_publish_diagnostics = lambda params: published.append(params)

    def put(source: str, uri: str = "file:///test.expr") -> None:
        ws.put_text_document(
            TextDocumentItem(uri=uri, language_id="exprlens", version=0, text=source)
        )

    return ls, published, put


# ---------------------------------------------------------------------------
# Parse errors → Error severity
# ---------------------------------------------------------------------------


class TestParseErrors:
    def test_doubled_operator(self, lsp_env) -> None:
        ls, published, put = lsp_env
        put("3 + + 5")
        _validate(ls, "file:///test.expr")

        assert len(published) == 1
        diags = published[0].diagnostics
        assert len(diags) == 1
        d = diags[0]
        assert d.severity == DiagnosticSeverity.Error
        assert d.message == "Unexpected token: +"
        assert d.source == "exprlens"
        assert d.range.start.line == 0
        assert d.range.start.character == 4
        assert d.range.end.character == 5

    def test_unclosed_paren(self, lsp_env) -> None:
        ls, published, put = lsp_env
        put("(1 + 2")
        _validate(ls, "file:///test.expr")

        diags = published[0].diagnostics
        assert len(diags) == 1
        assert "')'" in diags[0].message
        assert diags[0].range.start.character == 6
        assert diags[0].range.end.character == 7


# ---------------------------------------------------------------------------
# Opportunities → Information severity
# ---------------------------------------------------------------------------


class TestOpportunities:
    def test_like_terms_one_per_span(self, lsp_env) -> None:
        ls, published, put = lsp_env
        put("3x + 2x")
        _validate(ls, "file:///test.expr")

        diags = published[0].diagnostics
        assert len(diags) == 2
        assert all(d.severity == DiagnosticSeverity.Information for d in diags)
        assert all(d.message == "like terms in x can be combined" for d in diags)
        assert [(d.range.start.character, d.range.end.character) for d in diags] == [
            (0, 2),
            (5, 7),
        ]

    def test_common_factor_has_no_single_line_highlight(self) -> None:
        assert _highlight_spans(CommonFactor(2, (Span(0, 1),), (Span(0, 1),))) == []

    def test_ranges_in_utf16_units(self, lsp_env) -> None:
        ls, published, put = lsp_env
        put("\U0001F600" + "3x + 2x")
        _validate(ls, "file:///test.expr")

        diags = published[0].diagnostics
        assert [(d.range.start.character, d.range.end.character) for d in diags] == [
            (2, 4),
            (7, 9),
        ]

    def test_reducible_fraction_on_second_line(self, lsp_env) -> None:
        ls, published, put = lsp_env
        put("x\n6 / 4")
        _validate(ls, "file:///test.expr")

        diags = published[0].diagnostics
        assert len(diags) == 1
        d = diags[0]
        assert d.message == "fraction can be reduced by 2"
        assert d.range.start.line == 1
        assert d.range.start.character == 0
        assert d.range.end.line == 1
        assert d.range.end.character == 5


# ---------------------------------------------------------------------------
# Clean document → empty diagnostics
# ---------------------------------------------------------------------------


class TestCleanDocument:
    def test_nothing_to_report(self, lsp_env) -> None:
        ls, published, put = lsp_env
        put("x + y\n2 * z")
        _validate(ls, "file:///test.expr")

        assert len(published) == 1
        assert published[0].diagnostics == []

    def test_blank_lines_skipped(self, lsp_env) -> None:
        ls, published, put = lsp_env
        put("\n   \n")
        _validate(ls, "file:///test.expr")

        assert published[0].diagnostics == []

    def test_mixed_lines(self, lsp_env) -> None:
        ls, published, put = lsp_env
        put("1 +\n\nx + x")
        _validate(ls, "file:///test.expr")

        diags = published[0].diagnostics
        assert diags[0].severity == DiagnosticSeverity.Error
        assert diags[0].range.start.line == 0
        assert [d.range.start.line for d in diags[1:]] == [2, 2]
