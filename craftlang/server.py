"""
CraftLang Language Server entry point.

This server provides basic language features for CraftLang source files
using `pygls`. It reuses the lexer, parser and resolver (never the
interpreter) to publish diagnostics and to build a symbol index supporting
definition lookup, hover information and document symbols.


File: server.py
Version: 0.1.0
License: MIT
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from lsprotocol.types import (
    TEXT_DOCUMENT_DEFINITION,
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_OPEN,
    TEXT_DOCUMENT_DOCUMENT_SYMBOL,
    TEXT_DOCUMENT_HOVER,
    DefinitionParams,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidOpenTextDocumentParams,
    DocumentSymbol,
    DocumentSymbolParams,
    Hover,
    HoverParams,
    Location,
    MarkupContent,
    MarkupKind,
    MessageType,
    Position,
    Range,
    SymbolKind,
)
from pygls.server import LanguageServer

from craftlang.ast_nodes import Class, Function, Stmt, Var
from craftlang.diagnostics import Reporter, RUNTIME
from craftlang.runner import check_source

SOURCE_SUFFIX = ".craft"


@dataclass
class CraftSymbol:
    """Represents a top-level symbol (or a method) in a CraftLang file."""

    name: str
    kind: SymbolKind
    uri: str
    line: int
    detail: str
    children: List["CraftSymbol"] = field(default_factory=list)

    @property
    def range(self) -> Range:
        return Range(Position(self.line, 0), Position(self.line, len(self.name)))


def function_signature(function: Function) -> str:
    """Render ``function name(a, b) :: type`` for hover text."""
    params = ", ".join(param.lexeme for param in function.params)
    signature = f"function {function.name.lexeme}({params})"
    if function.return_type is not None:
        signature += f" :: {function.return_type.lexeme}"
    return signature


def extract_symbols(uri: str, statements: List[Stmt]) -> List[CraftSymbol]:
    """
    Extract top-level classes, functions and variables from parsed statements.

    LSP lines are zero-based; token lines are one-based.
    """
    symbols: List[CraftSymbol] = []
    seen_vars = set()
    for node in statements:
        if isinstance(node, Class):
            detail = f"class {node.name.lexeme}"
            if node.superclass is not None:
                detail += f" :: {node.superclass.name.lexeme}"
            methods = [
                CraftSymbol(
                    method.name.lexeme,
                    SymbolKind.Constructor if method.name.lexeme == "init" else SymbolKind.Method,
                    uri,
                    method.name.line - 1,
                    function_signature(method),
                )
                for method in node.methods
            ]
            symbols.append(
                CraftSymbol(node.name.lexeme, SymbolKind.Class, uri, node.name.line - 1, detail, methods)
            )
        elif isinstance(node, Function):
            symbols.append(
                CraftSymbol(
                    node.name.lexeme, SymbolKind.Function, uri, node.name.line - 1,
                    function_signature(node),
                )
            )
        elif isinstance(node, Var) and node.name.lexeme not in seen_vars:
            seen_vars.add(node.name.lexeme)
            symbols.append(
                CraftSymbol(
                    node.name.lexeme, SymbolKind.Variable, uri, node.name.line - 1,
                    f"set {node.name.lexeme}",
                )
            )
    return symbols


def to_lsp_diagnostics(reporter: Reporter) -> List[Diagnostic]:
    """Convert compile-time diagnostics to LSP diagnostics covering their line."""
    result: List[Diagnostic] = []
    for diagnostic in reporter:
        if diagnostic.kind == RUNTIME:
            continue
        line = max((diagnostic.line or 1) - 1, 0)
        message = diagnostic.message
        if diagnostic.where:
            message = f"Error{diagnostic.where}: {message}"
        result.append(
            Diagnostic(
                range=Range(Position(line, 0), Position(line + 1, 0)),
                message=message,
                severity=DiagnosticSeverity.Error,
                source="craftlang",
            )
        )
    return result


class CraftLanguageServer(LanguageServer):
    """Language server for CraftLang source files."""

    def __init__(self) -> None:
        super().__init__("craft-ls", "v0.1")
        self.symbols_by_uri: Dict[str, List[CraftSymbol]] = {}
        self.global_symbols: Dict[str, List[CraftSymbol]] = {}
        self.indexed_workspace = False

    def _index_workspace(self) -> None:
        """Check all `.craft` files under the current workspace."""
        root = self.workspace.root_path
        if not root:
            self.indexed_workspace = True
            return
        for path in Path(root).rglob(f"*{SOURCE_SUFFIX}"):
            uri = path.as_uri()
            if uri in self.symbols_by_uri:
                continue
            try:
                text = path.read_text(encoding="utf-8")
            except OSError as e:
                self.show_message_log(f"Failed to index {path}: {e}", MessageType.Warning)
                continue
            self.update_index(uri, text)
        self.indexed_workspace = True

    def update_index(self, uri: str, text: str) -> List[Diagnostic]:
        """
        Check ``text``, update the symbol index for ``uri`` and return the
        diagnostics to publish.
        """
        statements, reporter = check_source(text)
        self.symbols_by_uri[uri] = extract_symbols(uri, statements)
        self._rebuild_global_index()
        return to_lsp_diagnostics(reporter)

    def _rebuild_global_index(self) -> None:
        self.global_symbols.clear()
        for syms in self.symbols_by_uri.values():
            for sym in syms:
                self.global_symbols.setdefault(sym.name, []).append(sym)
                for child in sym.children:
                    self.global_symbols.setdefault(child.name, []).append(child)

    def lookup(self, word: str) -> Optional[CraftSymbol]:
        """Return the first indexed symbol named ``word``."""
        if not self.indexed_workspace:
            self._index_workspace()
        matches = self.global_symbols.get(word)
        if not matches:
            return None
        return matches[0]


lang_server = CraftLanguageServer()


@lang_server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: CraftLanguageServer, params: DidOpenTextDocumentParams) -> None:
    """Check and index a document when it is opened."""
    uri = params.text_document.uri
    ls.publish_diagnostics(uri, ls.update_index(uri, params.text_document.text))


@lang_server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: CraftLanguageServer, params: DidChangeTextDocumentParams) -> None:
    """Re-check and re-index a document when it changes."""
    uri = params.text_document.uri
    doc = ls.workspace.get_text_document(uri)
    ls.publish_diagnostics(uri, ls.update_index(uri, doc.source))


@lang_server.feature(TEXT_DOCUMENT_DEFINITION)
def definition(ls: CraftLanguageServer, params: DefinitionParams):
    """Return the definition location for the symbol under the cursor."""
    doc = ls.workspace.get_text_document(params.text_document.uri)
    word = doc.word_at_position(params.position)
    if not word:
        return None
    sym = ls.lookup(word)
    if sym is None:
        return None
    return Location(uri=sym.uri, range=sym.range)


@lang_server.feature(TEXT_DOCUMENT_HOVER)
def hover(ls: CraftLanguageServer, params: HoverParams) -> Optional[Hover]:
    """Return hover information for the symbol under the cursor."""
    doc = ls.workspace.get_text_document(params.text_document.uri)
    word = doc.word_at_position(params.position)
    if not word:
        return None
    sym = ls.lookup(word)
    if sym is None:
        return None
    contents = MarkupContent(kind=MarkupKind.PlainText, value=sym.detail)
    return Hover(contents=contents)


def to_document_symbol(sym: CraftSymbol) -> DocumentSymbol:
    """Convert an indexed symbol (and its methods) to an LSP document symbol."""
    return DocumentSymbol(
        name=sym.name,
        kind=sym.kind,
        range=sym.range,
        selection_range=sym.range,
        detail=sym.detail,
        children=[to_document_symbol(child) for child in sym.children] or None,
    )


@lang_server.feature(TEXT_DOCUMENT_DOCUMENT_SYMBOL)
def document_symbols(ls: CraftLanguageServer, params: DocumentSymbolParams):
    """Return top-level symbols for the given document."""
    symbols = ls.symbols_by_uri.get(params.text_document.uri, [])
    return [to_document_symbol(sym) for sym in symbols]


def main() -> None:
    """Start the language server."""
    lang_server.start_io()


if __name__ == "__main__":
    main()
