"""Semantic tokens provider for W++.

Colors come straight from the scanner: token kinds decide most of it, the
function table tells calls from variable reads, and a type keyword in front
of an identifier marks a declaration.
"""

from __future__ import annotations
from typing import Optional

from lsprotocol import types as lsp

from src.compiler.tokens import STREAM_NAMES, TYPE_KEYWORDS, Token, TokenKind

from src.devex.lsp.diagnostics import AnalysisResult


# LSP Semantic Token Types (order matters: index is the type ID)
TOKEN_TYPES = [
    "keyword",        # 0
    "type",           # 1 - type keywords
    "function",       # 2
    "variable",       # 3
    "string",         # 4 - string and char literals
    "number",         # 5
    "operator",       # 6
]

# LSP Semantic Token Modifiers (bit flags)
TOKEN_MODIFIERS = [
    "declaration",    # 0
    "defaultLibrary", # 1 - built-in stream names
]

_TYPE_INDEX = {name: i for i, name in enumerate(TOKEN_TYPES)}
_MOD_INDEX = {name: i for i, name in enumerate(TOKEN_MODIFIERS)}

LEGEND = lsp.SemanticTokensLegend(
    token_types=TOKEN_TYPES,
    token_modifiers=TOKEN_MODIFIERS,
)

_KIND_TYPES = {
    TokenKind.OPERATOR: "operator",
    TokenKind.INT_LITERAL: "number",
    TokenKind.FLOAT_LITERAL: "number",
    TokenKind.STRING_LITERAL: "string",
    TokenKind.CHAR_LITERAL: "string",
}


def _mod_bits(*modifiers: str) -> int:
    """Compute modifier bitmask from modifier names."""
    bits = 0
    for m in modifiers:
        if m in _MOD_INDEX:
            bits |= (1 << _MOD_INDEX[m])
    return bits


class SemanticTokenCollector:
    """Walks the token list to assign semantic token types."""

    def __init__(self, result: AnalysisResult):
        self.tokens = result.tokens
        self.function_names: set[str] = set(result.scan.functions) if result.scan else set()
        # Raw semantic tokens: [(line, col, length, type_index, modifier_bits)]
        self.raw_tokens: list[tuple[int, int, int, int, int]] = []

    def collect(self) -> list[int]:
        for i, tok in enumerate(self.tokens):
            self._classify_token(tok, self.tokens[i - 1] if i else None)
        return self._encode()

    def _classify_token(self, tok: Token, prev: Optional[Token]):
        modifiers: tuple[str, ...] = ()
        if tok.kind is TokenKind.KEYWORD:
            type_name = "type" if tok.value in TYPE_KEYWORDS else "keyword"
        elif tok.kind is TokenKind.IDENTIFIER:
            type_name = "function" if tok.value in self.function_names else "variable"
            if tok.value in STREAM_NAMES:
                modifiers = ("defaultLibrary",)
            elif prev is not None and prev.kind is TokenKind.KEYWORD and prev.value in TYPE_KEYWORDS:
                modifiers = ("declaration",)
        elif tok.kind in _KIND_TYPES:
            type_name = _KIND_TYPES[tok.kind]
        else:
            return
        self.raw_tokens.append((tok.physical_line, tok.col, len(tok.value),
                                _TYPE_INDEX[type_name], _mod_bits(*modifiers)))

    def _encode(self) -> list[int]:
        """Encode raw tokens into LSP delta-encoded format.

        LSP requires tokens sorted by position, then encoded as deltas:
        [deltaLine, deltaStartChar, length, tokenType, tokenModifiers]
        """
        self.raw_tokens.sort(key=lambda t: (t[0], t[1]))

        data: list[int] = []
        prev_line = 0
        prev_col = 0

        for line, col, length, type_idx, mod_bits in self.raw_tokens:
            # Convert from 1-based to 0-based
            lsp_line = line - 1
            lsp_col = col - 1

            delta_line = lsp_line - prev_line
            if delta_line == 0:
                delta_col = lsp_col - prev_col
            else:
                delta_col = lsp_col

            data.extend([delta_line, delta_col, length, type_idx, mod_bits])
            prev_line = lsp_line
            prev_col = lsp_col

        return data


def get_semantic_tokens(result: AnalysisResult) -> Optional[lsp.SemanticTokens]:
    """Compute semantic tokens for the entire document."""
    if not result.tokens:
        return None
    data = SemanticTokenCollector(result).collect()
    if not data:
        return None
    return lsp.SemanticTokens(data=data)
