"""Expression checking over a flat token run.

No tree is built: the walk tracks bracket balance and whether an operand
or an operator is due next, which is enough to catch consecutive or
trailing operators, and collects operand types for compatibility checks.
"""

from dataclasses import dataclass, field

from ..tokens import (
    BOOL_KEYWORDS, COMPARISON_OPERATORS, LOGICAL_OPERATORS, STATEMENT_KEYWORDS,
    Token, TokenKind,
)

UNARY_OPERATORS = frozenset({"-", "+", "!", "~", "++", "--"})

LITERAL_TYPES = {
    TokenKind.INT_LITERAL: "int",
    TokenKind.FLOAT_LITERAL: "float",
    TokenKind.STRING_LITERAL: "string",
    TokenKind.CHAR_LITERAL: "char",
}

_CLOSERS = {')': '(', ']': '['}
_NAMES = {'(': "parenthesis", '[': "bracket", ')': "parenthesis", ']': "bracket"}


@dataclass
class ExprInfo:
    tokens: list[Token] = field(default_factory=list)
    # (type, lexeme) for each operand outside subscripts and call arguments
    operands: list[tuple[str, str]] = field(default_factory=list)
    has_comparison: bool = False
    has_logical: bool = False

    @property
    def empty(self) -> bool:
        return not self.tokens

    @property
    def is_boolean(self) -> bool:
        return self.has_comparison or self.has_logical

    @property
    def text(self) -> str:
        return " ".join(t.value for t in self.tokens)


class ExpressionsMixin:

    def _expression_stops(self, tok: Token, depth: int, closer: str | None) -> bool:
        if self._at_end():
            return True
        if tok.kind is TokenKind.KEYWORD and tok.value in STATEMENT_KEYWORDS:
            return True
        if tok.kind is not TokenKind.SEPARATOR:
            return False
        if tok.value in (';', '{', '}'):
            return True
        return depth == 0 and tok.value in (',', closer)

    def _analyze_expression(self, line: int, expected: str | None,
                            closer: str | None = None) -> ExprInfo:
        """Consume one expression; stops before `;`, a brace, a statement
        keyword, a top-level `,` or `closer`. Reports structural problems
        and, when `expected` is known, operand type mismatches."""
        info = ExprInfo()
        stack: list[str] = []
        expect_operand = True
        last_op: Token | None = None

        while True:
            tok = self._peek()
            if self._expression_stops(tok, len(stack), closer):
                break

            if tok.kind is TokenKind.SEPARATOR:
                if tok.value in ('(', '['):
                    if tok.value == '[' and expect_operand:
                        self._error("Unexpected '[' in expression", line)
                    stack.append(tok.value)
                    expect_operand = True
                    last_op = None
                elif tok.value in _CLOSERS:
                    if not stack:
                        self._error(f"Unmatched closing {_NAMES[tok.value]} '{tok.value}'", line)
                    elif stack[-1] != _CLOSERS[tok.value]:
                        self._error(
                            f"Mismatched '{tok.value}' closes '{stack[-1]}' in expression", line)
                        stack.pop()
                    else:
                        stack.pop()
                    if last_op is not None:
                        self._error(f"Missing operand after '{last_op.value}'", line)
                    elif expect_operand and info.tokens and info.tokens[-1].value in _CLOSERS.values():
                        empty = "parentheses" if tok.value == ')' else "brackets"
                        self._error(f"Empty {empty} in expression", line)
                    expect_operand = False
                    last_op = None
                else:
                    # ',' inside parentheses
                    expect_operand = True
                    last_op = tok
                info.tokens.append(self._advance())
                continue

            if tok.kind is TokenKind.OPERATOR:
                if expect_operand:
                    if tok.value in UNARY_OPERATORS:
                        if tok.value == '!':
                            info.has_logical = True
                    elif last_op is not None:
                        self._error(
                            f"Consecutive operators '{last_op.value}' and '{tok.value}'", line)
                    else:
                        self._error(f"Expression cannot start with operator '{tok.value}'", line)
                    last_op = tok
                elif tok.value in ('++', '--'):
                    pass  # postfix
                else:
                    if tok.value in COMPARISON_OPERATORS:
                        info.has_comparison = True
                    elif tok.value in LOGICAL_OPERATORS:
                        info.has_logical = True
                    expect_operand = True
                    last_op = tok
                info.tokens.append(self._advance())
                continue

            # Operand
            if not expect_operand:
                prev = info.tokens[-1].value if info.tokens else ""
                self._error(f"Missing operator between '{prev}' and '{tok.value}'", line)
            in_subscript = '[' in stack
            self._advance()
            info.tokens.append(tok)
            operand_type = self._operand_type(tok, line, info)
            if operand_type is not None and not in_subscript:
                info.operands.append((operand_type, tok.value))
            expect_operand = False
            last_op = None

        # an unclosed '(' in a condition is reported by the caller as a missing ')'
        if stack and closer != ')':
            self._error(f"Unmatched opening {_NAMES[stack[-1]]} '{stack[-1]}'", line)
        if last_op is not None:
            self._error(f"Expression cannot end with operator '{last_op.value}'", line)

        if expected is not None and not info.empty:
            self._check_expression_type(info, expected, line)
        return info

    def _operand_type(self, tok: Token, line: int, info: ExprInfo) -> str | None:
        if tok.kind in LITERAL_TYPES:
            return LITERAL_TYPES[tok.kind]
        if tok.kind is TokenKind.KEYWORD:
            return "bool" if tok.value in BOOL_KEYWORDS else None
        if tok.kind is not TokenKind.IDENTIFIER:
            return None
        if self._check('('):
            call_start = self.pos
            signature = self._analyze_call(tok, line)
            info.tokens.extend(self.tokens[call_start:self.pos])
            return signature.return_type if signature else None
        var = self._use_variable(tok)
        return var.type if var else None

    def _check_expression_type(self, info: ExprInfo, expected: str, line: int):
        if not self.rules.check_types or expected == "void":
            return
        if info.is_boolean:
            if expected in ("string", "char"):
                self._semantic(
                    f"Type mismatch: boolean expression cannot be used as '{expected}'", line)
            return
        for actual, lexeme in info.operands:
            if not self._types_compatible(expected, actual):
                self._semantic(
                    f"Type mismatch: expected '{expected}' but found {actual} '{lexeme}'", line)
                return
