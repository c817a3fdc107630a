"""Call validation, type compatibility, and end-of-pass checks."""

from ..tokens import Token
from .core import FunctionSignature, StatementKind
from .expressions import ExprInfo

NO_MAIN_MESSAGE = (
    "No valid 'main' function found - program must define "
    "'int main()' or 'int main(int argc, char argv[])'"
)

# expected type -> narrower types it accepts
WIDENING = {
    "float": {"int"},
    "double": {"int", "float"},
}


class ValidationMixin:

    def _types_compatible(self, expected: str, actual: str) -> bool:
        return expected == actual or actual in WIDENING.get(expected, ())

    def _analyze_call_statement(self):
        name_tok = self._advance()
        line = name_tok.line
        self._analyze_call(name_tok, line)
        self._expect_semicolon("function call", line)
        self._record(StatementKind.CALL, line, f"Call to '{name_tok.value}'")

    def _analyze_call(self, name_tok: Token, line: int) -> FunctionSignature | None:
        """Check `( args )` after an already consumed callee name."""
        name = name_tok.value
        self._advance()  # (
        if self.call_depth >= self.rules.max_nesting_depth:
            if not self._call_nesting_reported:
                self._error(
                    f"Calls nested deeper than {self.rules.max_nesting_depth} levels are not analyzed",
                    line)
                self._call_nesting_reported = True
            self._skip_arguments()
            return None
        self.call_depth += 1
        args = self._collect_arguments(name, line)
        self.call_depth -= 1

        sig = self.functions.get(name)
        if sig is None:
            if self.scopes.lookup(name) is not None:
                self._semantic(f"'{name}' is not a function", line)
            else:
                self._semantic(f"Function '{name}' called before declaration", line)
            return None

        if self.rules.check_argument_arity and len(args) != sig.param_count:
            self._semantic(
                f"Function '{name}' expects {sig.param_count} arguments "
                f"but {len(args)} were provided", line)
        elif self.rules.check_types:
            for index, (arg, param_type) in enumerate(zip(args, sig.param_types), 1):
                self._check_argument_type(name, index, arg, param_type, line)
        return sig

    def _collect_arguments(self, name: str, line: int) -> list[ExprInfo]:
        args: list[ExprInfo] = []
        if self._check(')'):
            self._advance()
            return args
        while True:
            info = self._analyze_expression(line, None, closer=')')
            if info.empty:
                self._error(f"Expected argument in call to '{name}'", line)
            else:
                args.append(info)
            if self._check(','):
                self._advance()
                continue
            if self._check(')'):
                self._advance()
            else:
                self._error(f"Missing closing parenthesis in call to '{name}'", line)
            return args

    def _skip_arguments(self):
        """Skip to the `)` matching one already consumed; stops before `;` or a brace."""
        depth = 1
        while not self._at_block_boundary() and not self._check(';'):
            tok = self._advance()
            if tok.is_value('('):
                depth += 1
            elif tok.is_value(')'):
                depth -= 1
                if depth == 0:
                    return

    def _check_argument_type(self, name: str, index: int, arg: ExprInfo,
                             param_type: str, line: int):
        if param_type.endswith("[]") or arg.is_boolean:
            return
        for actual, lexeme in arg.operands:
            if not self._types_compatible(param_type, actual):
                self._semantic(
                    f"Argument {index} of '{name}' expects '{param_type}' "
                    f"but found {actual} '{lexeme}'", line)
                return

    # ---- End of pass ----

    def _finish(self):
        if not self.main_valid:
            self._semantic(NO_MAIN_MESSAGE, None)
        if self.rules.check_unused_variables:
            for var in self.variables:
                if var.tracked and var.uses == 0:
                    self._warning(f"Variable '{var.name}' declared but never used", var.line)
