"""Diagnostics produced by a scan.

Diagnostics are data, never exceptions: every stage appends to a
DiagnosticList and the pass keeps going.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"


class Category(Enum):
    LEXICAL = "Lexical Anomaly"
    DECLARATION = "Declaration Error"
    SYNTAX = "Syntax Error"
    SEMANTIC = "Semantic Error"
    WARNING = "Warning"

    @property
    def severity(self) -> Severity:
        if self in (Category.LEXICAL, Category.WARNING):
            return Severity.WARNING
        return Severity.ERROR


NO_LINE = "N/A"


@dataclass(frozen=True)
class Diagnostic:
    line: int | None
    category: Category
    message: str

    @property
    def severity(self) -> Severity:
        return self.category.severity

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR

    def format(self) -> str:
        if self.line is None:
            return f"{self.category.value}: {self.message}"
        return f"{self.category.value} at Line {self.line}: {self.message}"

    def row(self) -> tuple[int | str, str]:
        return (NO_LINE if self.line is None else self.line, self.format())

    def __str__(self):
        return self.format()


class DiagnosticList:
    """Ordered, append-only collection of diagnostics for one pass."""

    def __init__(self):
        self.items: list[Diagnostic] = []

    def add(self, category: Category, message: str, line: int | None = None) -> Diagnostic:
        diag = Diagnostic(line, category, message)
        self.items.append(diag)
        return diag

    def error(self, message: str, line: int | None = None) -> Diagnostic:
        return self.add(Category.SYNTAX, message, line)

    def semantic(self, message: str, line: int | None = None) -> Diagnostic:
        return self.add(Category.SEMANTIC, message, line)

    def declaration(self, message: str, line: int | None = None) -> Diagnostic:
        return self.add(Category.DECLARATION, message, line)

    def warning(self, message: str, line: int | None = None) -> Diagnostic:
        return self.add(Category.WARNING, message, line)

    def __iter__(self):
        return iter(self.items)

    def __len__(self):
        return len(self.items)
