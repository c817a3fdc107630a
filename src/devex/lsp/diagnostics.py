"""Diagnostic computation for W++ documents.

Runs the scan pipeline (lexer -> symbol table -> analyzer) on source text
and converts its diagnostics into LSP Diagnostic objects.
"""

import os
from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import urlparse, unquote

from lsprotocol import types as lsp

from src.compiler.diagnostics import Diagnostic, Severity
from src.compiler.rules import RuleSet
from src.compiler.scanner import ScanResult, scan
from src.compiler.tokens import Token

_SEVERITY = {
    Severity.ERROR: lsp.DiagnosticSeverity.Error,
    Severity.WARNING: lsp.DiagnosticSeverity.Warning,
}


@dataclass
class AnalysisResult:
    """Cached result of scanning a document."""

    uri: str
    source: str
    diagnostics: list[lsp.Diagnostic] = field(default_factory=list)
    scan: Optional[ScanResult] = None

    @property
    def tokens(self) -> list[Token]:
        return list(self.scan.tokens) if self.scan else []


def uri_to_path(uri: str) -> str:
    """Convert file:// URI to filesystem path."""
    parsed = urlparse(uri)
    return unquote(parsed.path)


def _make_diagnostic(
    line: int,
    col: int,
    length: int,
    message: str,
    severity: lsp.DiagnosticSeverity = lsp.DiagnosticSeverity.Error,
    code: Optional[str] = None,
    source: str = "wpp",
) -> lsp.Diagnostic:
    """Create an LSP Diagnostic.

    The scanner uses 1-based line/col; LSP uses 0-based.
    """
    line_0 = max(0, line - 1)
    col_0 = max(0, col - 1)
    return lsp.Diagnostic(
        range=lsp.Range(
            start=lsp.Position(line=line_0, character=col_0),
            end=lsp.Position(line=line_0, character=col_0 + max(1, length)),
        ),
        message=message,
        severity=severity,
        code=code,
        source=source,
    )


def _anchor(tokens: tuple[Token, ...], line: int) -> tuple[int, int]:
    """(col, length) of the first token on a physical line."""
    for tok in tokens:
        if tok.physical_line == line:
            return tok.col, len(tok.value)
    return 1, 1


def to_lsp_diagnostic(diag: Diagnostic, tokens: tuple[Token, ...]) -> lsp.Diagnostic:
    # line-less diagnostics (missing main) go on the first line
    line = diag.line if diag.line is not None else 1
    col, length = _anchor(tokens, line)
    return _make_diagnostic(line, col, length, diag.message,
                            severity=_SEVERITY[diag.severity],
                            code=diag.category.value)


def compute_diagnostics(uri: str, source: str,
                        rules: Optional[RuleSet] = None) -> AnalysisResult:
    """Run the scan pipeline and return diagnostics."""
    result = AnalysisResult(uri=uri, source=source)
    filename = os.path.basename(uri_to_path(uri))
    scanned = scan(source, rules, filename)
    result.scan = scanned
    result.diagnostics = [to_lsp_diagnostic(d, scanned.tokens) for d in scanned.diagnostics]
    return result
