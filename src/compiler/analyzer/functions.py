"""Function declarations, parameter lists, `main` validation and returns."""

from ..tokens import TokenKind
from .core import FunctionSignature, StatementKind, VariableInfo

MAIN_PARAMS = ["int", "char[]"]


class FunctionsMixin:

    def _is_function_declaration(self) -> bool:
        return (self._is_type(self._peek())
                and self._peek(1).kind is TokenKind.IDENTIFIER
                and self._peek(2).is_value('('))

    def _analyze_function_declaration(self):
        type_tok = self._advance()
        name_tok = self._advance()
        self._advance()  # (
        line = type_tok.line
        name = name_tok.value
        is_main = name == "main"

        if self.current_function is not None or self.block_depth > 0:
            self._declaration(f"Function '{name}' cannot be defined inside another block", line)

        params = self._analyze_parameters(name, line, is_main)
        has_body = self._check('{')
        sig = FunctionSignature(
            name=name,
            return_type=type_tok.value,
            param_types=[p.type + ("[]" if p.is_array else "") for p in params],
            line=line,
            has_body=has_body,
        )

        if is_main:
            self._register_main(sig)
        else:
            self._register_function(sig)

        if has_body:
            self._record(StatementKind.FUNCTION, line, f"Definition of {sig}")
            self._analyze_function_body(sig, params)
        elif self._check(';'):
            self._advance()
            self._record(StatementKind.FUNCTION, line, f"Prototype of {sig}")
        else:
            self._error(f"Expected '{{' or ';' after declaration of function '{name}'", line)

    def _analyze_function_body(self, sig: FunctionSignature, params: list[VariableInfo]):
        prev_function = self.current_function
        self.current_function = sig
        self._push_scope()
        for param in params:
            self.scopes.declare(param)
        self._analyze_block(new_scope=False)
        self._pop_scope()
        self.current_function = prev_function

    def _analyze_parameters(self, fname: str, line: int, is_main: bool) -> list[VariableInfo]:
        """Parse `type name [ '[]' ], ...` up to and including ')'."""
        params: list[VariableInfo] = []
        if self._check(')'):
            self._advance()
            return params
        if is_main and self._check_keyword("void") and self._peek(1).is_value(')'):
            self._advance()
            self._advance()
            return params

        while True:
            type_tok = self._peek()
            if not self._is_type(type_tok):
                self._error(f"Expected parameter type in declaration of '{fname}'", line)
                self._skip_parameters()
                return params
            self._advance()
            name_tok = self._peek()
            if name_tok.kind is not TokenKind.IDENTIFIER:
                self._error(f"Expected parameter name after '{type_tok.value}'", line)
                self._skip_parameters()
                return params
            self._advance()

            is_array = False
            if self._check('['):
                self._advance()
                is_array = True
                if self._check(']'):
                    self._advance()
                else:
                    self._error("Expected ']' in array parameter", line)

            if type_tok.value == "void":
                self._declaration(f"Parameter '{name_tok.value}' cannot have type 'void'", line)
            if any(p.name == name_tok.value for p in params):
                self._declaration(
                    f"Parameter '{name_tok.value}' shadows another parameter in the same list",
                    line)
            else:
                params.append(VariableInfo(name_tok.value, type_tok.value, line,
                                           is_array=is_array, tracked=False))

            if self._check(','):
                self._advance()
                continue
            if self._check(')'):
                self._advance()
            else:
                self._error(f"Missing closing parenthesis in parameter list of '{fname}'", line)
            return params

    def _skip_parameters(self):
        while not self._at_block_boundary() and not self._check(';'):
            if self._advance().is_value(')'):
                return

    # ---- Registration ----

    def _register_function(self, sig: FunctionSignature):
        existing = self.functions.get(sig.name)
        if existing is None:
            if self.scopes.lookup(sig.name) is not None:
                self._declaration(f"Function '{sig.name}' conflicts with variable name", sig.line)
            self.functions[sig.name] = sig
            return

        if existing.has_body and sig.has_body:
            self._declaration(
                f"Function '{sig.name}' already defined at Line {existing.line}", sig.line)
        elif (existing.param_types != sig.param_types
              or existing.return_type != sig.return_type):
            self._declaration(
                f"Declaration of '{sig}' conflicts with previous declaration at Line {existing.line}",
                sig.line)
        elif sig.has_body:
            self.functions[sig.name] = sig

    def _register_main(self, sig: FunctionSignature):
        if self.main_line is not None:
            self._semantic(
                f"Duplicate 'main' function declaration; previous at Line {self.main_line}",
                sig.line)
            return
        self.main_line = sig.line
        self.functions[sig.name] = sig
        if not self.rules.strict_main:
            self.main_valid = True
            return

        valid = True
        if sig.return_type != "int":
            self._semantic(f"'main' must return 'int', not '{sig.return_type}'", sig.line)
            valid = False
        if sig.param_types and sig.param_types != MAIN_PARAMS:
            self._semantic(
                "Invalid parameters for 'main'; expected '()' or '(int argc, char argv[])'",
                sig.line)
            valid = False
        if not sig.has_body:
            self._semantic("'main' must have a body, not only a prototype", sig.line)
            valid = False
        elif self._peek(1).is_value('}'):
            self._semantic("'main' must have a non-empty body", sig.line)
            valid = False
        self.main_valid = valid

    # ---- Return ----

    def _analyze_return(self):
        line = self._advance().line
        fn = self.current_function
        if fn is None:
            self._error("Return statement outside of function", line)
            self._analyze_expression(line, None)
            self._expect_semicolon("return statement", line)
            return

        expected = None if fn.name == "main" else fn.return_type
        info = self._analyze_expression(line, expected)
        if fn.return_type == "void":
            if not info.empty:
                self._semantic(
                    f"Function '{fn.name}' has return type 'void' but returns a value", line)
        elif info.empty:
            self._semantic(
                f"Function '{fn.name}' must return a value of type '{fn.return_type}'", line)
        elif fn.name == "main" and self.rules.strict_main and not _is_int_literal(info.tokens):
            self._semantic("'main' must return an integer literal", line)

        self._expect_semicolon("return statement", line)
        self._record(StatementKind.RETURN, line, info.text)


def _is_int_literal(tokens) -> bool:
    if len(tokens) == 2 and tokens[0].value in ('-', '+'):
        tokens = tokens[1:]
    return len(tokens) == 1 and tokens[0].kind is TokenKind.INT_LITERAL
