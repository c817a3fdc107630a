"""Tests for the scan pipeline and its published result rows."""

import dataclasses

import pytest

from src.compiler.diagnostics import Category, DiagnosticList
from src.compiler.rules import RuleSet
from src.compiler.scanner import scan, summarize_tokens
from src.compiler.tokens import TokenKind

NO_MAIN_ROW = (
    "N/A",
    "Semantic Error: No valid 'main' function found - program must define "
    "'int main()' or 'int main(int argc, char argv[])'",
)


class TestRows:
    def test_declaration_only(self):
        result = scan("int x = 5;")
        assert result.token_rows() == [
            ("Keyword", "int", 1),
            ("Identifier", "x", 1),
            ("Operator", "=", 1),
            ("Literal (Int)", "5", 1),
            ("Separator", ";", 1),
        ]
        assert ("x", "variable", "int", "5", 4, "Scalar", 1, "N/A", "0x00001020") \
            in result.symbol_rows()
        assert result.diagnostic_rows() == [
            NO_MAIN_ROW,
            (1, "Warning at Line 1: Variable 'x' declared but never used"),
        ]

    def test_empty_source(self):
        result = scan("")
        assert result.tokens == ()
        assert set(result.symbols) == {"cout", "endl"}
        assert result.diagnostic_rows() == [NO_MAIN_ROW]

    def test_valid_program(self):
        result = scan("int main() {\n    cout << \"hi\" << endl;\n    return 0;\n}\n")
        assert result.diagnostics == ()
        assert result.errors == []
        assert "main" in result.functions

    def test_line_map(self):
        result = scan("int main() {\n    int a,\n        b;\n    a = b;\n    return 0;\n}")
        assert result.line_map == {2: [2, 3]}
        assert result.diagnostics == ()


class TestLexicalAnomalies:
    def test_reported_first(self):
        result = scan("int main() {\n    return 0;\n}\n$")
        first = result.diagnostics[0]
        assert first.category is Category.LEXICAL
        assert first.line == 4
        assert first.message == "Unrecognized token '$'"
        assert not first.is_error
        assert any("Unexpected token '$' in global scope" in d.message for d in result.errors)

    def test_rule_off(self):
        result = scan("int main() {\n    return 0;\n}\n$", RuleSet(report_lexical_anomalies=False))
        assert all(d.category is not Category.LEXICAL for d in result.diagnostics)


class TestResult:
    def test_frozen(self):
        result = scan("int main() { return 0; }")
        with pytest.raises(dataclasses.FrozenInstanceError):
            result.tokens = ()

    def test_fresh_state_per_scan(self):
        source = "int main() {\n    int x = 1;\n    return y;\n}"
        assert scan(source) == scan(source)

    def test_errors_and_warnings(self):
        result = scan("int main() {\n    int x = 1;\n    return y;\n}")
        assert [d.message for d in result.errors] == [
            "Variable 'y' used before declaration",
            "'main' must return an integer literal",
        ]
        assert [d.message for d in result.warnings] == [
            "Variable 'x' declared but never used",
        ]


class TestSummary:
    def test_counts_and_lines(self):
        result = scan("int a = 1;\nint b = a;\nb = a + 1;")
        summary = {(s.lexeme, s.kind): s for s in summarize_tokens(result.tokens)}
        a = summary[("a", TokenKind.IDENTIFIER)]
        assert a.count == 3
        assert a.lines == [1, 2, 3]
        assert summary[("int", TokenKind.KEYWORD)].count == 2
        assert summary[("1", TokenKind.INT_LITERAL)].row() == ("1", "Literal (Int)", 2, "1, 3")

    def test_first_seen_order(self):
        entries = summarize_tokens(scan("x = y;").tokens)
        assert [e.lexeme for e in entries] == ["x", "=", "y", ";"]


class TestDiagnosticList:
    def test_helpers_set_category_and_keep_order(self):
        diagnostics = DiagnosticList()
        diagnostics.error("a", 1)
        diagnostics.semantic("b", None)
        diagnostics.declaration("c", 3)
        diagnostics.warning("d", 4)
        assert [(d.category, d.line) for d in diagnostics] == [
            (Category.SYNTAX, 1),
            (Category.SEMANTIC, None),
            (Category.DECLARATION, 3),
            (Category.WARNING, 4),
        ]
        assert len(diagnostics) == 4
