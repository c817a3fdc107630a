"""Statement analysis: dispatch, blocks, declarations, assignments, control flow."""

from ..tokens import (
    ASSIGNMENT_OPERATORS, TokenKind,
    UPDATE_OPERATORS,
)
from .core import ScopeError, StatementKind


class StatementsMixin:

    def _analyze_statement(self):
        tok = self._peek()
        where = "in block" if self.block_depth else "in global scope"

        if self._is_function_declaration():
            self._analyze_function_declaration()
        elif self._is_type(tok):
            self._analyze_variable_declaration()
        elif tok.kind is TokenKind.IDENTIFIER:
            self._analyze_identifier_statement()
        elif tok.kind is TokenKind.KEYWORD:
            if tok.value == "if":
                self._analyze_if()
            elif tok.value == "for":
                self._analyze_for()
            elif tok.value == "while":
                self._analyze_while()
            elif tok.value == "return":
                self._analyze_return()
            elif tok.value == "else":
                self._error("'else' without a matching 'if'", tok.line)
                self._advance()
            else:
                self._error(f"Unexpected token '{tok.value}' {where}", tok.line)
                self._advance()
        elif tok.kind is TokenKind.SEPARATOR:
            if tok.value == "{":
                self._record(StatementKind.BLOCK, tok.line)
                self._analyze_block()
            elif tok.value == "}":
                self._analyze_stray_close(tok)
            elif tok.value == ";":
                self._error(f"Stray semicolon {where}", tok.line)
                self._advance()
            else:
                self._error(f"Unexpected token '{tok.value}' {where}", tok.line)
                self._advance()
        elif tok.kind is TokenKind.OPERATOR:
            self._error(f"Unexpected operator '{tok.value}' {where}", tok.line)
            self._advance()
        else:
            self._error(f"Unexpected token '{tok.value}' {where}", tok.line)
            self._advance()

    def _analyze_identifier_statement(self):
        tok = self._peek()
        nxt = self._peek(1)
        if nxt.is_value('[') or (nxt.kind is TokenKind.OPERATOR and nxt.value in ASSIGNMENT_OPERATORS):
            self._analyze_assignment()
        elif nxt.is_value('++') or nxt.is_value('--'):
            self._analyze_increment()
        elif nxt.is_value('('):
            self._analyze_call_statement()
        elif tok.value == "cout" and nxt.is_value('<<') and self.rules.stream_statements:
            self._analyze_output()
        elif nxt.kind is TokenKind.OPERATOR:
            self._error(
                f"Invalid operator '{nxt.value}' after identifier '{tok.value}'", tok.line)
            self._skip_statement()
        else:
            self._error(f"Unexpected identifier '{tok.value}' in statement", tok.line)
            self._advance()

    # ---- Blocks ----

    def _analyze_block(self, new_scope: bool = True):
        """Analyze `{ ... }` at the cursor."""
        open_tok = self._advance()  # {
        if self.block_depth >= self.rules.max_nesting_depth:
            if not self._nesting_reported:
                self._error(
                    f"Blocks nested deeper than {self.rules.max_nesting_depth} levels are not analyzed",
                    open_tok.line)
                self._nesting_reported = True
            self._skip_block()
            return

        self.block_depth += 1
        if new_scope:
            self._push_scope()
        while not self._at_end() and not self._check('}'):
            start = self.pos
            self._analyze_statement()
            if self.pos == start:
                self._advance()
        if self._check('}'):
            self._advance()
        else:
            self._error("Missing closing brace '}'", self._last_line())
        if new_scope:
            self._pop_scope()
        self.block_depth -= 1

    def _skip_statement(self):
        """Resynchronize after a malformed statement: past the next ';' or up to a brace."""
        self._advance()
        while not self._at_block_boundary():
            if self._advance().is_value(';'):
                return

    def _skip_block(self):
        """Skip to the brace matching one already consumed, without analysis."""
        depth = 1
        while not self._at_end() and depth:
            tok = self._advance()
            if tok.is_value('{'):
                depth += 1
            elif tok.is_value('}'):
                depth -= 1

    def _analyze_stray_close(self, tok):
        self._advance()
        try:
            self._pop_scope()
        except ScopeError:
            self._error("Unmatched closing brace '}'", tok.line)

    # ---- Declarations ----

    def _analyze_variable_declaration(self, record: bool = True):
        type_tok = self._advance()
        line = type_tok.line
        type_name = type_tok.value
        names: list[str] = []
        initialized: list[str] = []

        while True:
            name_tok = self._peek()
            if name_tok.kind is not TokenKind.IDENTIFIER:
                self._error("Expected identifier after data type", line)
                if self._check(';'):
                    self._advance()
                return
            self._advance()
            names.append(name_tok.value)

            is_array = self._check('[')
            if is_array:
                self._analyze_subscript(line, "size")
            self._declare_variable(name_tok.value, type_name, line, is_array)

            if self._check('='):
                self._advance()
                initialized.append(name_tok.value)
                if is_array:
                    self._error("Array initialization not supported in this context", line)
                    self._skip_initializer()
                else:
                    info = self._analyze_expression(line, type_name)
                    if info.empty:
                        self._error("Expected value after '=' in variable initialization", line)

            if self._check(','):
                self._advance()
                continue
            break

        self._expect_semicolon("variable declaration", line)
        if record:
            if initialized:
                self._record(StatementKind.INITIALIZATION, line,
                             f"Initialized {', '.join(initialized)} of type {type_name}")
            else:
                self._record(StatementKind.DECLARATION, line,
                             f"Declared {len(names)} variable(s) of type {type_name}")

    def _analyze_subscript(self, line: int, what: str):
        """Analyze `[ expr ]` for an array size or index."""
        self._advance()  # [
        info = self._analyze_expression(line, None, closer=']')
        if info.empty:
            self._error(f"Expected array {what} after '['", line)
        elif any(t.kind in (TokenKind.STRING_LITERAL, TokenKind.CHAR_LITERAL,
                            TokenKind.FLOAT_LITERAL) for t in info.tokens):
            self._error(f"Array {what} must be an integer", line)
        if self._check(']'):
            self._advance()
        else:
            self._error(f"Expected ']' after array {what}", line)

    def _skip_initializer(self):
        """Skip tokens up to the terminating ';', stepping over `{...}` lists."""
        depth = 0
        while not self._at_end():
            tok = self._peek()
            if tok.is_value('{'):
                depth += 1
            elif tok.is_value('}'):
                if depth == 0:
                    return
                depth -= 1
            elif tok.is_value(';') and depth == 0:
                return
            self._advance()

    # ---- Assignments ----

    def _analyze_assignment(self, record: bool = True):
        target = self._advance()
        line = target.line
        var = self._use_variable(target)
        if self._check('['):
            self._analyze_subscript(line, "index")

        op = self._peek()
        if op.is_value('++') or op.is_value('--'):
            self._advance()
            self._expect_semicolon("increment/decrement", line)
            if record:
                self._record(StatementKind.INCREMENT, line, f"{target.value}{op.value}")
            return
        if op.kind is not TokenKind.OPERATOR or op.value not in ASSIGNMENT_OPERATORS:
            self._error("Expected '=' in assignment", line)
            return

        self._advance()
        expected = var.type if var is not None else None
        info = self._analyze_expression(line, expected)
        if info.empty:
            self._error(f"Expected value after '{op.value}' in assignment", line)
        self._expect_semicolon("assignment", line)
        if record:
            self._record(StatementKind.ASSIGNMENT, line,
                         f"Assignment to variable '{target.value}'")

    def _analyze_increment(self):
        target = self._advance()
        op = self._advance()
        self._use_variable(target)
        self._expect_semicolon("increment/decrement", target.line)
        self._record(StatementKind.INCREMENT, target.line, f"{target.value}{op.value}")

    # ---- Control flow ----

    def _analyze_condition(self, keyword: str, line: int) -> str | None:
        """Analyze `( condition )`; returns the condition text, or None without '('."""
        statement = "if statement" if keyword == "if" else f"{keyword} loop"
        if not self._check('('):
            self._error(f"Missing opening parenthesis in {statement}", line)
            return None
        self._advance()
        info = self._analyze_expression(line, None, closer=')')
        if not self._check(')'):
            self._error(f"Missing closing parenthesis in {statement}", line)
        else:
            self._advance()
            if info.empty:
                self._error(f"Empty condition in {statement}", line)
            elif self.rules.require_comparison_in_conditions and not info.has_comparison:
                self._error(
                    f"No comparison operator in {keyword} condition; expected boolean expression",
                    line)
        return info.text

    def _analyze_if(self):
        keyword = self._advance()
        while True:
            line = keyword.line
            condition = self._analyze_condition("if", line)
            if condition is None:
                return
            self._record(StatementKind.IF, line, f"Condition: {condition}")
            if self._check('{'):
                self._analyze_block()
            else:
                self._error("Expected '{' after if condition", line)

            if not self._check_keyword("else"):
                return
            else_tok = self._advance()
            if self._check_keyword("if"):
                keyword = self._advance()
                continue
            if self._check('{'):
                self._analyze_block()
            else:
                self._error("Expected '{' or 'if' after 'else'", else_tok.line)
            return

    def _analyze_while(self):
        line = self._advance().line
        condition = self._analyze_condition("while", line)
        if condition is None:
            return
        self._record(StatementKind.WHILE, line, f"Condition: {condition}")
        if self._check('{'):
            self._analyze_block()
        else:
            self._error("Expected '{' after while loop", line)

    def _analyze_for(self):
        line = self._advance().line
        if not self._check('('):
            self._error("Missing opening parenthesis in for loop", line)
            return
        self._advance()
        self._push_scope()
        self._record(StatementKind.FOR, line)

        self._analyze_for_init(line)

        info = self._analyze_expression(line, None, closer=')')
        if self._check(';'):
            self._advance()
        else:
            self._error("Missing semicolon in for loop condition", line)
        if self.rules.require_comparison_in_conditions:
            if info.empty:
                self._error("Empty condition in for loop", line)
            elif not info.has_comparison:
                self._error(
                    "No comparison operator in for condition; expected boolean expression", line)

        update = self._analyze_expression(line, None, closer=')')
        if not update.empty and not any(
                t.kind is TokenKind.OPERATOR and t.value in UPDATE_OPERATORS
                for t in update.tokens):
            self._error("Invalid increment clause in for loop", line)

        if self._check(')'):
            self._advance()
            if self._check('{'):
                self._analyze_block()
            else:
                self._error("Expected '{' after for loop", line)
        else:
            self._error("Missing closing parenthesis in for loop", line)
        self._pop_scope()

    def _analyze_for_init(self, line: int):
        tok = self._peek()
        if tok.is_value(';'):
            self._advance()
        elif self._is_type(tok):
            self._analyze_variable_declaration(record=False)
        elif tok.kind is TokenKind.IDENTIFIER and (
                self._peek(1).is_value('[')
                or (self._peek(1).kind is TokenKind.OPERATOR
                    and self._peek(1).value in ASSIGNMENT_OPERATORS)):
            self._analyze_assignment(record=False)
        else:
            self._error("Invalid initialization in for loop", line)
            while not self._at_end() and not self._check(';') and not self._check(')') \
                    and not self._at_block_boundary():
                self._advance()
            if not self._expect_semicolon_quietly():
                self._error("Missing semicolon in for loop initialization", line)

    def _expect_semicolon_quietly(self) -> bool:
        if self._check(';'):
            self._advance()
            return True
        return False

    # ---- Output ----

    def _analyze_output(self):
        line = self._advance().line  # cout
        self._advance()  # <<
        info = self._analyze_expression(line, None)
        if info.empty:
            self._error("Expected expression after '<<' in cout statement", line)
        self._expect_semicolon("cout statement", line)
        self._record(StatementKind.OUTPUT, line, f"Output of {self._count_output_items(info)} item(s)")

    @staticmethod
    def _count_output_items(info) -> int:
        if info.empty:
            return 0
        items, depth = 1, 0
        for tok in info.tokens:
            if tok.value in ('(', '['):
                depth += 1
            elif tok.value in (')', ']'):
                depth -= 1
            elif depth == 0 and tok.is_value('<<'):
                items += 1
        return items
