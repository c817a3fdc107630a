"""Token definitions for the W++ language.

TokenKind is decided once by the lexer; everything downstream compares
kinds, never re-tests strings against the keyword/operator tables.
"""

from enum import Enum
from dataclasses import dataclass


class TokenKind(Enum):
    KEYWORD = "Keyword"
    IDENTIFIER = "Identifier"
    OPERATOR = "Operator"
    SEPARATOR = "Separator"
    INT_LITERAL = "Literal (Int)"
    FLOAT_LITERAL = "Literal (Float)"
    STRING_LITERAL = "Literal (String)"
    CHAR_LITERAL = "Literal (Char)"
    UNKNOWN = "Unknown"

    @property
    def label(self) -> str:
        return self.value

    @property
    def is_literal(self) -> bool:
        return self in LITERAL_KINDS


LITERAL_KINDS = frozenset({
    TokenKind.INT_LITERAL, TokenKind.FLOAT_LITERAL,
    TokenKind.STRING_LITERAL, TokenKind.CHAR_LITERAL,
})


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    value: str
    line: int
    col: int = 1
    # Differs from `line` only for tokens of a reassembled declaration
    physical_line: int = 0

    def __post_init__(self):
        if not self.physical_line:
            object.__setattr__(self, "physical_line", self.line)

    def is_value(self, value: str) -> bool:
        return self.value == value and self.kind in (
            TokenKind.OPERATOR, TokenKind.SEPARATOR, TokenKind.KEYWORD)

    def row(self) -> tuple[str, str, int]:
        return (self.kind.label, self.value, self.line)

    def __repr__(self):
        return f"Token({self.kind.name}, {self.value!r}, {self.line}:{self.col})"


# Types that open a declaration
TYPE_KEYWORDS: frozenset[str] = frozenset({
    "int", "float", "double", "char", "bool", "string", "void",
})

KEYWORDS: frozenset[str] = TYPE_KEYWORDS | frozenset({
    "class", "namespace", "public", "private", "protected", "static",
    "virtual", "const", "constexpr", "if", "else", "switch", "case", "for",
    "while", "do", "return", "break", "continue", "new", "delete", "sizeof",
    "typedef", "using", "struct", "union", "enum", "nullptr", "true", "false",
})

BOOL_KEYWORDS: frozenset[str] = frozenset({"true", "false"})

# Keywords that begin a statement; expressions never run past one
STATEMENT_KEYWORDS: frozenset[str] = TYPE_KEYWORDS | frozenset({
    "if", "else", "for", "while", "return",
})

OPERATORS: frozenset[str] = frozenset({
    "=", "+", "-", "*", "/", "%", "++", "--", "==", "!=", "<", "<=", ">",
    ">=", "&&", "||", "!", "&", "|", "^", "~", "<<", ">>", "+=", "-=", "*=",
    "/=", "%=", "&=", "|=", "^=", "<<=", ">>=", "->", "::", "?", ":",
})

SEPARATORS: frozenset[str] = frozenset({"(", ")", "{", "}", "[", "]", ";", ","})

COMPARISON_OPERATORS: frozenset[str] = frozenset({"==", "!=", "<", ">", "<=", ">="})

LOGICAL_OPERATORS: frozenset[str] = frozenset({"&&", "||", "!"})

ASSIGNMENT_OPERATORS: frozenset[str] = frozenset({
    "=", "+=", "-=", "*=", "/=", "%=", "&=", "|=", "^=", "<<=", ">>=",
})

UPDATE_OPERATORS: frozenset[str] = ASSIGNMENT_OPERATORS | frozenset({"++", "--"})

# Built-in stream names: identifiers that never need a declaration
STREAM_NAMES: dict[str, str] = {
    "cout": "ostream",
    "endl": "manip",
}

TYPE_SIZES: dict[str, int] = {
    "int": 4,
    "float": 4,
    "double": 8,
    "char": 1,
    "bool": 1,
}


def size_of(type_name: str) -> int:
    return TYPE_SIZES.get(type_name, 0)
