"""
Tests for the language server's diagnostics and symbol index.
"""
from lsprotocol.types import DiagnosticSeverity, DocumentSymbolParams, SymbolKind, TextDocumentIdentifier

from craftlang.runner import check_source
from craftlang.server import (
    document_symbols,
    extract_symbols,
    lang_server,
    to_document_symbol,
    to_lsp_diagnostics,
)


SOURCE = (
    "class Base:\n"
    "    function greet():\n"
    "        return \"base\"\n"
    "class Derived :: Base:\n"
    "    function greet() :: string:\n"
    "        return \"derived\"\n"
    "function add(a, b) :: number:\n"
    "    return a + b\n"
    "set answer to 42\n"
    "set answer to 43\n"
)


def test_syntax_error_becomes_zero_based_diagnostic():
    _, reporter = check_source("print 1\nprint (2")
    diagnostics = to_lsp_diagnostics(reporter)
    assert len(diagnostics) == 1
    assert diagnostics[0].range.start.line == 1
    assert diagnostics[0].severity == DiagnosticSeverity.Error
    assert "Expect ')' after expression." in diagnostics[0].message


def test_resolver_errors_are_published():
    _, reporter = check_source("print 1\n\nreturn 2\n")
    diagnostics = to_lsp_diagnostics(reporter)
    assert [d.message for d in diagnostics] == [
        "Error at 'return': Cannot return from top-level code."
    ]
    assert diagnostics[0].range.start.line == 2


def test_lexer_errors_are_published():
    _, reporter = check_source("print 1 @\n")
    messages = [d.message for d in to_lsp_diagnostics(reporter)]
    assert "Unexpected character '@'." in messages


def test_symbols_and_signatures():
    statements, reporter = check_source(SOURCE)
    assert not reporter.had_error
    symbols = extract_symbols("file:///demo.craft", statements)
    assert [s.name for s in symbols] == ["Base", "Derived", "add", "answer"]
    base, derived, add, answer = symbols
    assert base.kind == SymbolKind.Class
    assert [m.name for m in base.children] == ["greet"]
    assert derived.detail == "class Derived :: Base"
    assert derived.line == 3
    assert derived.children[0].detail == "function greet() :: string"
    assert add.detail == "function add(a, b) :: number"
    assert answer.kind == SymbolKind.Variable
    assert answer.line == 8


def test_document_symbol_nests_methods():
    statements, _ = check_source(SOURCE)
    base = extract_symbols("file:///demo.craft", statements)[0]
    symbol = to_document_symbol(base)
    assert symbol.kind == SymbolKind.Class
    assert [child.name for child in symbol.children] == ["greet"]
    assert symbol.range.start.line == 0


def test_update_index_tracks_documents():
    uri = "file:///indexed.craft"
    diagnostics = lang_server.update_index(uri, SOURCE)
    assert diagnostics == []
    assert lang_server.global_symbols["add"][0].uri == uri
    assert len(lang_server.global_symbols["greet"]) == 2

    result = document_symbols(
        lang_server, DocumentSymbolParams(text_document=TextDocumentIdentifier(uri=uri))
    )
    assert [s.name for s in result] == ["Base", "Derived", "add", "answer"]

    diagnostics = lang_server.update_index(uri, "function add(:\n")
    assert diagnostics
    assert "add" not in lang_server.global_symbols
