"""Analyzer assembly: combines all analysis mixins into the final Analyzer class."""

from .core import (
    AnalyzerBase, AnalyzedProgram, FunctionSignature, Scope, ScopeError,
    ScopeStack, StatementKind, StatementRecord, VariableInfo,
)
from .functions import FunctionsMixin
from .statements import StatementsMixin
from .expressions import ExpressionsMixin
from .validation import NO_MAIN_MESSAGE, ValidationMixin


class Analyzer(
    ValidationMixin,
    ExpressionsMixin,
    StatementsMixin,
    FunctionsMixin,
    AnalyzerBase,
):
    """Syntax and semantic analyzer for W++ token streams."""
    pass


def analyze(tokens, rules=None) -> AnalyzedProgram:
    return Analyzer(rules).analyze(tokens)


__all__ = [
    "Analyzer", "AnalyzedProgram", "FunctionSignature", "NO_MAIN_MESSAGE",
    "Scope", "ScopeError", "ScopeStack", "StatementKind", "StatementRecord",
    "VariableInfo", "analyze",
]
