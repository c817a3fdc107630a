"""Symbol table: identifier metadata derived from the token stream.

This is a flat, name-keyed view for display. Scoping is the analyzer's
business; here the first declaration of a name wins its declaration line
and later declarations only refresh type information.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .diagnostics import NO_LINE
from .tokens import (
    BOOL_KEYWORDS, STREAM_NAMES, TYPE_KEYWORDS, Token, TokenKind, size_of,
)

ADDRESS_BASE = 0x1000
ADDRESS_STEP = 0x10


class SymbolKind(Enum):
    VARIABLE = "variable"
    FUNCTION = "function"
    STREAM = "stream"


class Dimension(Enum):
    SCALAR = "Scalar"
    ARRAY = "Array"


@dataclass
class SymbolTableEntry:
    identifier: str
    kind: SymbolKind
    declared_type: str
    address: str
    literal_value: str | None = None
    dimension: Dimension = Dimension.SCALAR
    line_declared: int | None = None
    line_first_used: int | None = None

    @property
    def size_bytes(self) -> int:
        return size_of(self.declared_type)

    def row(self) -> tuple:
        return (
            self.identifier,
            self.kind.value,
            self.declared_type,
            self.literal_value if self.literal_value is not None else NO_LINE,
            self.size_bytes,
            self.dimension.value,
            self.line_declared if self.line_declared is not None else NO_LINE,
            self.line_first_used if self.line_first_used is not None else NO_LINE,
            self.address,
        )


class SymbolTableBuilder:
    def __init__(self, tokens: list[Token]):
        self.tokens = tokens
        self.table: dict[str, SymbolTableEntry] = {}
        self._next_address = ADDRESS_BASE
        for name, type_name in STREAM_NAMES.items():
            self._new_entry(name, SymbolKind.STREAM, type_name)

    def build(self) -> dict[str, SymbolTableEntry]:
        decl_type: str | None = None
        for i, tok in enumerate(self.tokens):
            if tok.kind is TokenKind.KEYWORD and tok.value in TYPE_KEYWORDS:
                decl_type = tok.value
                continue
            if tok.kind is TokenKind.SEPARATOR:
                if tok.value in (';', '(', ')', '{', '}'):
                    decl_type = None
                continue
            if tok.kind is not TokenKind.IDENTIFIER:
                continue

            prev = self.tokens[i - 1] if i > 0 else None
            nxt = self._at(i + 1)
            declares = decl_type is not None and prev is not None and (
                (prev.kind is TokenKind.KEYWORD and prev.value in TYPE_KEYWORDS)
                or (prev.kind is TokenKind.SEPARATOR and prev.value == ','))
            if declares:
                is_function = nxt is not None and nxt.is_value('(')
                self._declare(tok, decl_type, is_function)
            else:
                self._use(tok)

            entry = self.table.get(tok.value)
            if entry is None:
                continue
            if nxt is not None and nxt.is_value('['):
                entry.dimension = Dimension.ARRAY
            value = self._at(i + 2)
            if nxt is not None and nxt.is_value('=') and value is not None and (
                    value.kind.is_literal
                    or (value.kind is TokenKind.KEYWORD and value.value in BOOL_KEYWORDS)):
                entry.literal_value = value.value
        return self.table

    def _at(self, index: int) -> Token | None:
        if index < len(self.tokens):
            return self.tokens[index]
        return None

    def _new_entry(self, name: str, kind: SymbolKind, type_name: str) -> SymbolTableEntry:
        entry = SymbolTableEntry(name, kind, type_name, f"0x{self._next_address:08x}")
        self._next_address += ADDRESS_STEP
        self.table[name] = entry
        return entry

    def _declare(self, tok: Token, type_name: str, is_function: bool):
        kind = SymbolKind.FUNCTION if is_function else SymbolKind.VARIABLE
        entry = self.table.get(tok.value)
        if entry is None:
            entry = self._new_entry(tok.value, kind, type_name)
        elif entry.kind is SymbolKind.STREAM:
            return
        else:
            entry.kind = kind
            entry.declared_type = type_name
        if entry.line_declared is None:
            entry.line_declared = tok.line

    def _use(self, tok: Token):
        entry = self.table.get(tok.value)
        if entry is not None and entry.line_first_used is None:
            entry.line_first_used = tok.line


def build_symbol_table(tokens: list[Token]) -> dict[str, SymbolTableEntry]:
    return SymbolTableBuilder(tokens).build()
