from __future__ import annotations

"""
A minimal pygls-based Language Server for klisp.

Features:
- Text synchronization (the pygls workspace keeps document text current)
- Diagnostics: reader errors at their exact position, unmatched parens, unmatched quotes
- Hover: primitive and special-form signatures, the pre-bound `table`, locally defined symbols
- Completion: primitives, special forms, `table`, locals
- Signature Help: for primitives and special forms
- Document Symbols: from indexer

Note: We avoid evaluating the buffer. We build a static index per document.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from lsprotocol import types
from pygls.lsp.server import LanguageServer

from klisp import __version__
from klisp_lsp.indexer import (
    BUILTIN_SIGNATURES,
    PREBOUND_SYMBOLS,
    SPECIAL_FORM_SIGNATURES,
    DocumentIndex,
    build_index,
    diagnostics_for,
    extract_callee_name,
    extract_word_at,
    get_line_prefix,
)

logger = logging.getLogger(__name__)

SOURCE = "klisp-ls"
SIGNATURES: Dict[str, str] = {**SPECIAL_FORM_SIGNATURES, **BUILTIN_SIGNATURES}


@dataclass
class DocumentState:
    text: str
    index: DocumentIndex


class KlispLanguageServer(LanguageServer):
    CMD_NAME = "klisp-ls"

    def __init__(self):
        super().__init__(self.CMD_NAME, f"v{__version__}")
        self.documents: Dict[str, DocumentState] = {}

    def refresh(self, uri: str) -> DocumentState:
        text = self.workspace.get_text_document(uri).source
        state = DocumentState(text=text, index=build_index(text))
        self.documents[uri] = state
        return state


ls = KlispLanguageServer()


# --- Text sync ---
@ls.feature(types.TEXT_DOCUMENT_DID_OPEN)
def did_open(server: KlispLanguageServer, params: types.DidOpenTextDocumentParams):
    uri = params.text_document.uri
    _publish_diagnostics(server, uri, server.refresh(uri))


@ls.feature(types.TEXT_DOCUMENT_DID_CHANGE)
def did_change(server: KlispLanguageServer, params: types.DidChangeTextDocumentParams):
    uri = params.text_document.uri
    _publish_diagnostics(server, uri, server.refresh(uri))


@ls.feature(types.TEXT_DOCUMENT_DID_CLOSE)
def did_close(server: KlispLanguageServer, params: types.DidCloseTextDocumentParams):
    uri = params.text_document.uri
    server.documents.pop(uri, None)
    server.text_document_publish_diagnostics(
        types.PublishDiagnosticsParams(uri=uri, diagnostics=[])
    )


# --- Diagnostics ---
def _mk_range(line: int, col: int, length: int = 1) -> types.Range:
    return types.Range(
        start=types.Position(line=line, character=col),
        end=types.Position(line=line, character=col + length),
    )


def _publish_diagnostics(server: KlispLanguageServer, uri: str, state: DocumentState):
    diags: List[types.Diagnostic] = []

    for info in diagnostics_for(state.text):
        diags.append(
            types.Diagnostic(
                range=_mk_range(info.line, info.col),
                message=info.message,
                severity=types.DiagnosticSeverity.Error,
                source=SOURCE,
            )
        )

    if state.index.paren_balance != 0:
        diags.append(
            types.Diagnostic(
                range=_mk_range(0, 0),
                message="Unmatched parentheses detected",
                severity=types.DiagnosticSeverity.Warning,
                source=SOURCE,
            )
        )

    if state.index.has_unmatched_quote:
        diags.append(
            types.Diagnostic(
                range=_mk_range(0, 0),
                message="Unmatched quote detected",
                severity=types.DiagnosticSeverity.Warning,
                source=SOURCE,
            )
        )

    logger.debug("Publishing %d diagnostic(s) for %s", len(diags), uri)
    server.text_document_publish_diagnostics(
        types.PublishDiagnosticsParams(uri=uri, diagnostics=diags)
    )


# --- Hover ---
@ls.feature(types.TEXT_DOCUMENT_HOVER)
def on_hover(server: KlispLanguageServer, params: types.HoverParams) -> Optional[types.Hover]:
    state = server.documents.get(params.text_document.uri)
    if not state:
        return None

    word, _ = extract_word_at(state.text, params.position.line, params.position.character)
    if not word:
        return None

    if word in SIGNATURES:
        contents = SIGNATURES[word]
    elif word in PREBOUND_SYMBOLS:
        contents = PREBOUND_SYMBOLS[word]
    elif word in state.index.symbols:
        sdef = state.index.symbols[word]
        contents = f"{word}: {sdef.kind} (defined at {sdef.line+1}:{sdef.col+1})"
    else:
        return None
    return types.Hover(
        contents=types.MarkupContent(kind=types.MarkupKind.PlainText, value=contents)
    )


# --- Completion ---
@ls.feature(
    types.TEXT_DOCUMENT_COMPLETION,
    types.CompletionOptions(trigger_characters=["("]),
)
def on_completion(server: KlispLanguageServer, params: types.CompletionParams) -> types.CompletionList:
    state = server.documents.get(params.text_document.uri)
    items: List[types.CompletionItem] = []

    for name, sig in SPECIAL_FORM_SIGNATURES.items():
        items.append(types.CompletionItem(label=name, kind=types.CompletionItemKind.Keyword, detail=sig))
    for name, sig in BUILTIN_SIGNATURES.items():
        items.append(types.CompletionItem(label=name, kind=types.CompletionItemKind.Function, detail=sig))
    for name in PREBOUND_SYMBOLS:
        items.append(types.CompletionItem(label=name, kind=types.CompletionItemKind.Variable))
    if state:
        for name, sdef in state.index.symbols.items():
            kind = types.CompletionItemKind.Function if sdef.kind == 'function' else types.CompletionItemKind.Variable
            items.append(types.CompletionItem(label=name, kind=kind))

    return types.CompletionList(is_incomplete=False, items=items)


# --- Signature Help ---
@ls.feature(
    types.TEXT_DOCUMENT_SIGNATURE_HELP,
    types.SignatureHelpOptions(trigger_characters=["(", " "]),
)
def on_signature_help(server: KlispLanguageServer, params: types.SignatureHelpParams) -> Optional[types.SignatureHelp]:
    state = server.documents.get(params.text_document.uri)
    if not state:
        return None

    prefix = get_line_prefix(state.text, params.position.line, params.position.character)
    callee = extract_callee_name(prefix)
    label = SIGNATURES.get(callee) if callee else None
    if not label:
        return None

    # "(name a b)" -> parameters a, b
    params_list = label.strip("()").split()[1:]
    parameters = [types.ParameterInformation(label=p) for p in params_list]
    return types.SignatureHelp(
        signatures=[types.SignatureInformation(label=label, parameters=parameters)],
        active_signature=0,
        active_parameter=0,
    )


# --- Document Symbols ---
@ls.feature(types.TEXT_DOCUMENT_DOCUMENT_SYMBOL)
def on_document_symbols(server: KlispLanguageServer, params: types.DocumentSymbolParams) -> Optional[List[types.DocumentSymbol]]:
    state = server.documents.get(params.text_document.uri)
    if not state:
        return None
    symbols: List[types.DocumentSymbol] = []
    for name, sdef in state.index.symbols.items():
        rng = _mk_range(sdef.line, sdef.col, len(name))
        symbols.append(
            types.DocumentSymbol(
                name=name,
                kind=types.SymbolKind.Function if sdef.kind == 'function' else types.SymbolKind.Variable,
                range=rng,
                selection_range=rng,
            )
        )
    return symbols


def main() -> None:
    # Run the language server over stdio
    ls.start_io()


if __name__ == "__main__":
    main()
