"""The scan pipeline: lexer, symbol table builder and analyzer in one pass.

`scan()` builds fresh state for every call and hands back a frozen
ScanResult only once all three stages have finished, so callers never
observe a half-built result.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .analyzer import Analyzer, FunctionSignature, StatementRecord
from .diagnostics import Category, Diagnostic
from .lexer import Lexer
from .rules import RuleSet
from .symbols import SymbolTableEntry, build_symbol_table
from .tokens import Token, TokenKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScanResult:
    tokens: tuple[Token, ...]
    symbols: dict[str, SymbolTableEntry]
    diagnostics: tuple[Diagnostic, ...]
    statements: tuple[StatementRecord, ...] = ()
    functions: dict[str, FunctionSignature] = field(default_factory=dict)
    # logical line -> physical lines of each reassembled declaration
    line_map: dict[int, list[int]] = field(default_factory=dict)

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.is_error]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if not d.is_error]

    def token_rows(self) -> list[tuple[str, str, int]]:
        return [tok.row() for tok in self.tokens]

    def symbol_rows(self) -> list[tuple]:
        return [entry.row() for entry in self.symbols.values()]

    def diagnostic_rows(self) -> list[tuple[int | str, str]]:
        return [diag.row() for diag in self.diagnostics]


def scan(source: str, rules: RuleSet | None = None,
         filename: str = "<stdin>") -> ScanResult:
    rules = rules or RuleSet()
    lexer = Lexer(source, filename)
    tokens = lexer.tokenize()
    symbols = build_symbol_table(tokens)
    program = Analyzer(rules).analyze(tokens)

    diagnostics: list[Diagnostic] = []
    if rules.report_lexical_anomalies:
        diagnostics.extend(
            Diagnostic(tok.line, Category.LEXICAL, f"Unrecognized token '{tok.value}'")
            for tok in lexer.anomalies)
    diagnostics.extend(program.diagnostics)

    logger.debug("%s: %d tokens, %d symbols, %d diagnostics",
                 filename, len(tokens), len(symbols), len(diagnostics))
    return ScanResult(
        tokens=tuple(tokens),
        symbols=symbols,
        diagnostics=tuple(diagnostics),
        statements=tuple(program.statements),
        functions=program.functions,
        line_map=lexer.line_map,
    )


@dataclass
class TokenSummary:
    lexeme: str
    kind: TokenKind
    count: int = 0
    lines: list[int] = field(default_factory=list)

    def row(self) -> tuple[str, str, int, str]:
        return (self.lexeme, self.kind.label, self.count,
                ", ".join(str(n) for n in self.lines))


def summarize_tokens(tokens) -> list[TokenSummary]:
    """Occurrence count and distinct lines per (lexeme, kind), in first-seen order."""
    summary: dict[tuple[str, TokenKind], TokenSummary] = {}
    for tok in tokens:
        key = (tok.value, tok.kind)
        entry = summary.get(key)
        if entry is None:
            entry = summary[key] = TokenSummary(tok.value, tok.kind)
        entry.count += 1
        if not entry.lines or entry.lines[-1] != tok.line:
            entry.lines.append(tok.line)
    return list(summary.values())
