"""Document symbol provider for W++.

Turns the scanner's symbol table into DocumentSymbols for the Outline view.
The table is flat, so the outline is too.
"""

from __future__ import annotations
from typing import Optional

from lsprotocol import types as lsp

from src.compiler.symbols import Dimension, SymbolKind, SymbolTableEntry
from src.compiler.tokens import TokenKind

from src.devex.lsp.diagnostics import AnalysisResult


def _pos(line: int, col: int) -> lsp.Position:
    """Convert 1-based scanner position to 0-based LSP position."""
    return lsp.Position(line=max(0, line - 1), character=max(0, col - 1))


def _find_closing_brace(source_lines: list[str], start_line: int) -> Optional[int]:
    """Find the line of the closing brace matching the first opening brace at or after start_line."""
    depth = 0
    found_open = False
    for i in range(start_line, len(source_lines)):
        for ch in source_lines[i]:
            if ch == '{':
                depth += 1
                found_open = True
            elif ch == '}':
                depth -= 1
                if found_open and depth == 0:
                    return i
            elif ch == ';' and not found_open:
                # prototype
                return None
    return None


def _name_col(result: AnalysisResult, name: str, line: int) -> int:
    for tok in result.tokens:
        if tok.kind is TokenKind.IDENTIFIER and tok.value == name and tok.line == line:
            return tok.col
    return 1


def _symbol_kind(entry: SymbolTableEntry) -> lsp.SymbolKind:
    if entry.kind is SymbolKind.FUNCTION:
        return lsp.SymbolKind.Function
    if entry.dimension is Dimension.ARRAY:
        return lsp.SymbolKind.Array
    return lsp.SymbolKind.Variable


def _detail(result: AnalysisResult, entry: SymbolTableEntry) -> str:
    if entry.kind is SymbolKind.FUNCTION and entry.identifier in result.scan.functions:
        return str(result.scan.functions[entry.identifier])
    if entry.dimension is Dimension.ARRAY:
        return f"{entry.declared_type}[]"
    return entry.declared_type


def get_document_symbols(result: AnalysisResult) -> list[lsp.DocumentSymbol]:
    if result.scan is None:
        return []
    source_lines = result.source.split('\n')
    symbols: list[lsp.DocumentSymbol] = []
    for entry in result.scan.symbols.values():
        if entry.kind is SymbolKind.STREAM or entry.line_declared is None:
            continue
        line = entry.line_declared
        col = _name_col(result, entry.identifier, line)
        start = _pos(line, col)
        selection = lsp.Range(
            start=start,
            end=lsp.Position(line=start.line, character=start.character + len(entry.identifier)),
        )

        end_line = start.line
        if entry.kind is SymbolKind.FUNCTION:
            closing = _find_closing_brace(source_lines, start.line)
            if closing is not None:
                end_line = closing
        end_col = len(source_lines[end_line]) if end_line < len(source_lines) else 0
        symbols.append(lsp.DocumentSymbol(
            name=entry.identifier,
            kind=_symbol_kind(entry),
            detail=_detail(result, entry),
            range=lsp.Range(start=lsp.Position(line=start.line, character=0),
                            end=lsp.Position(line=end_line, character=end_col)),
            selection_range=selection,
        ))
    return symbols
