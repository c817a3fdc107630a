"""Analyzer core: data structures, scope management, and the pass driver."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

from ..diagnostics import Diagnostic, DiagnosticList
from ..rules import RuleSet
from ..tokens import STREAM_NAMES, TYPE_KEYWORDS, Token, TokenKind

logger = logging.getLogger(__name__)


class ScopeError(Exception):
    pass


@dataclass
class VariableInfo:
    name: str
    type: str
    line: int
    is_array: bool = False
    # parameters are visible like variables but never reported as unused
    tracked: bool = True
    uses: int = 0


@dataclass
class Scope:
    symbols: dict[str, VariableInfo] = field(default_factory=dict)

    @property
    def names(self) -> set[str]:
        return set(self.symbols)

    def define(self, info: VariableInfo):
        self.symbols[info.name] = info

    def __contains__(self, name: str) -> bool:
        return name in self.symbols


class ScopeStack:
    """Owned stack of scopes; index 0 is the global scope and is never popped."""

    def __init__(self):
        self._scopes: list[Scope] = [Scope()]

    @property
    def depth(self) -> int:
        return len(self._scopes)

    @property
    def current(self) -> Scope:
        return self._scopes[-1]

    @property
    def global_scope(self) -> Scope:
        return self._scopes[0]

    def push(self) -> Scope:
        scope = Scope()
        self._scopes.append(scope)
        return scope

    def pop(self) -> Scope:
        if len(self._scopes) == 1:
            raise ScopeError("Cannot pop the global scope")
        return self._scopes.pop()

    def declare(self, info: VariableInfo):
        self.current.define(info)

    def declared_in_current(self, name: str) -> bool:
        return name in self.current

    def lookup(self, name: str) -> VariableInfo | None:
        for scope in reversed(self._scopes):
            if name in scope:
                return scope.symbols[name]
        return None


@dataclass
class FunctionSignature:
    name: str
    return_type: str
    param_types: list[str] = field(default_factory=list)
    line: int = 0
    has_body: bool = False

    @property
    def param_count(self) -> int:
        return len(self.param_types)

    def __str__(self):
        return f"{self.return_type} {self.name}({', '.join(self.param_types)})"


class StatementKind(Enum):
    FUNCTION = "Function Declaration"
    DECLARATION = "Variable Declaration"
    INITIALIZATION = "Variable Initialization"
    ASSIGNMENT = "Assignment Statement"
    INCREMENT = "Increment/Decrement"
    IF = "If Statement"
    FOR = "For Loop"
    WHILE = "While Loop"
    CALL = "Function Call"
    RETURN = "Return Statement"
    OUTPUT = "Output Statement"
    BLOCK = "Block"


@dataclass(frozen=True)
class StatementRecord:
    line: int
    kind: StatementKind
    detail: str = ""

    def format(self) -> str:
        if self.detail:
            return f"Line {self.line}: {self.kind.value} - {self.detail}"
        return f"Line {self.line}: {self.kind.value}"


@dataclass
class AnalyzedProgram:
    diagnostics: list[Diagnostic]
    functions: dict[str, FunctionSignature]
    statements: list[StatementRecord]
    variables: list[VariableInfo]
    main_line: int | None = None

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.is_error]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if not d.is_error]


class AnalyzerBase:
    def __init__(self, rules: RuleSet | None = None):
        self.rules = rules or RuleSet()
        self._reset([])

    def _reset(self, tokens: list[Token]):
        self.tokens = tokens
        self.pos = 0
        last_line = tokens[-1].line if tokens else 1
        self._eof = Token(TokenKind.UNKNOWN, "", last_line)
        self.diagnostics = DiagnosticList()
        self.scopes = ScopeStack()
        self.functions: dict[str, FunctionSignature] = {}
        self.variables: list[VariableInfo] = []
        self.statements: list[StatementRecord] = []
        self.current_function: FunctionSignature | None = None
        self.block_depth = 0
        self.call_depth = 0
        self.main_line: int | None = None
        self.main_valid = False
        self._nesting_reported = False
        self._call_nesting_reported = False

    def analyze(self, tokens: list[Token]) -> AnalyzedProgram:
        self._reset(list(tokens))
        while not self._at_end():
            start = self.pos
            self._analyze_statement()
            if self.pos == start:
                # every handler consumes at least one token; never stall
                self._advance()
        self._finish()
        logger.debug("analyzed %d tokens: %d statements, %d diagnostics",
                     len(self.tokens), len(self.statements), len(self.diagnostics))
        return AnalyzedProgram(
            diagnostics=list(self.diagnostics),
            functions=dict(self.functions),
            statements=list(self.statements),
            variables=list(self.variables),
            main_line=self.main_line,
        )

    # ---- Token helpers ----

    def _peek(self, offset: int = 0) -> Token:
        pos = self.pos + offset
        if pos < len(self.tokens):
            return self.tokens[pos]
        return self._eof

    def _advance(self) -> Token:
        if self.pos >= len(self.tokens):
            return self._eof
        tok = self.tokens[self.pos]
        self.pos += 1
        return tok

    def _at_end(self) -> bool:
        return self.pos >= len(self.tokens)

    def _check(self, value: str) -> bool:
        return self._peek().is_value(value)

    def _check_keyword(self, value: str) -> bool:
        tok = self._peek()
        return tok.kind is TokenKind.KEYWORD and tok.value == value

    def _is_type(self, tok: Token) -> bool:
        return tok.kind is TokenKind.KEYWORD and tok.value in TYPE_KEYWORDS

    def _at_block_boundary(self) -> bool:
        return self._at_end() or self._check('{') or self._check('}')

    def _last_line(self) -> int:
        if self.pos > 0:
            return self.tokens[min(self.pos, len(self.tokens)) - 1].line
        return self._eof.line

    def _expect_semicolon(self, what: str, line: int) -> bool:
        if self._check(';'):
            self._advance()
            return True
        self._error(f"Missing semicolon after {what}", line)
        return False

    # ---- Diagnostics ----

    def _error(self, msg: str, line: int | None):
        self.diagnostics.error(msg, line)

    def _semantic(self, msg: str, line: int | None):
        self.diagnostics.semantic(msg, line)

    def _declaration(self, msg: str, line: int | None):
        self.diagnostics.declaration(msg, line)

    def _warning(self, msg: str, line: int | None):
        self.diagnostics.warning(msg, line)

    def _record(self, kind: StatementKind, line: int, detail: str = ""):
        self.statements.append(StatementRecord(line, kind, detail))

    # ---- Scopes ----

    def _push_scope(self):
        self.scopes.push()

    def _pop_scope(self):
        self.scopes.pop()

    def _declare_variable(self, name: str, type_name: str, line: int,
                          is_array: bool = False) -> VariableInfo | None:
        if type_name == "void":
            self._declaration(f"Variable '{name}' cannot have type 'void'", line)
            return None
        if self.scopes.declared_in_current(name):
            self._declaration(f"Variable '{name}' already declared in this scope", line)
            return None
        if name in self.functions:
            self._declaration(f"Variable '{name}' conflicts with function name", line)
            return None
        info = VariableInfo(name, type_name, line, is_array)
        self.scopes.declare(info)
        self.variables.append(info)
        return info

    def _use_variable(self, tok: Token) -> VariableInfo | None:
        """Resolve an identifier read; reports a use before declaration."""
        info = self.scopes.lookup(tok.value)
        if info is not None:
            info.uses += 1
            return info
        if tok.value in STREAM_NAMES or tok.value in self.functions:
            return None
        self._semantic(f"Variable '{tok.value}' used before declaration", tok.line)
        return None
