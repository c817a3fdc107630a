from .analyzer import (
    Analyzer as Analyzer,
    AnalyzedProgram as AnalyzedProgram,
    FunctionSignature as FunctionSignature,
    NO_MAIN_MESSAGE as NO_MAIN_MESSAGE,
    ScopeError as ScopeError,
    ScopeStack as ScopeStack,
    StatementKind as StatementKind,
    StatementRecord as StatementRecord,
    analyze as analyze,
)
