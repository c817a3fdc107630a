#!/usr/bin/env python3
"""W++ Language Server.

Publishes scanner diagnostics, document symbols and semantic tokens for
.wpp files. Rule settings may be passed as initialization options, e.g.
{"preset": "minimal", "check_unused_variables": true}.
"""

import sys
import logging

from lsprotocol import types as lsp
from pygls.lsp.server import LanguageServer

from src.compiler.rules import RuleError, RuleSet
from src.devex.lsp.diagnostics import AnalysisResult, compute_diagnostics
from src.devex.lsp.symbols import get_document_symbols
from src.devex.lsp.semantic_tokens import get_semantic_tokens, LEGEND

logging.basicConfig(level=logging.INFO, stream=sys.stderr)
logger = logging.getLogger("wpp-lsp")

server = LanguageServer("wpp-lsp", "0.1.0")

# Cache: uri -> AnalysisResult (latest scan)
_analysis_cache: dict[str, AnalysisResult] = {}

_rules = RuleSet()


def configure_rules(options) -> RuleSet:
    """Apply initialization options; invalid settings keep the defaults."""
    global _rules
    try:
        _rules = RuleSet.from_options(options if isinstance(options, dict) else None)
    except RuleError as e:
        logger.warning("Ignoring rule settings: %s", e)
        _rules = RuleSet()
    return _rules


def _validate_document(uri: str, source: str):
    """Scan the document and publish diagnostics."""
    result = compute_diagnostics(uri, source, _rules)
    _analysis_cache[uri] = result
    server.text_document_publish_diagnostics(
        lsp.PublishDiagnosticsParams(uri=uri, diagnostics=result.diagnostics)
    )


@server.feature(lsp.INITIALIZE)
def initialize(params: lsp.InitializeParams):
    rules = configure_rules(params.initialization_options)
    logger.info("Using rules: %s", rules)


@server.feature(lsp.TEXT_DOCUMENT_DID_OPEN)
def did_open(params: lsp.DidOpenTextDocumentParams):
    _validate_document(
        params.text_document.uri,
        params.text_document.text,
    )


@server.feature(lsp.TEXT_DOCUMENT_DID_CHANGE)
def did_change(params: lsp.DidChangeTextDocumentParams):
    doc = server.workspace.get_text_document(params.text_document.uri)
    _validate_document(params.text_document.uri, doc.source)


@server.feature(lsp.TEXT_DOCUMENT_DID_SAVE)
def did_save(params: lsp.DidSaveTextDocumentParams):
    doc = server.workspace.get_text_document(params.text_document.uri)
    _validate_document(params.text_document.uri, doc.source)


@server.feature(lsp.TEXT_DOCUMENT_DID_CLOSE)
def did_close(params: lsp.DidCloseTextDocumentParams):
    uri = params.text_document.uri
    _analysis_cache.pop(uri, None)
    server.text_document_publish_diagnostics(
        lsp.PublishDiagnosticsParams(uri=uri, diagnostics=[])
    )


@server.feature(lsp.TEXT_DOCUMENT_DOCUMENT_SYMBOL)
def document_symbol(params: lsp.DocumentSymbolParams):
    result = _analysis_cache.get(params.text_document.uri)
    if result:
        return get_document_symbols(result)
    return []


@server.feature(
    lsp.TEXT_DOCUMENT_SEMANTIC_TOKENS_FULL,
    lsp.SemanticTokensOptions(legend=LEGEND, full=True),
)
def semantic_tokens_full(params: lsp.SemanticTokensParams):
    result = _analysis_cache.get(params.text_document.uri)
    if result:
        return get_semantic_tokens(result)
    return None


def main():
    server.start_io()


if __name__ == "__main__":
    main()
