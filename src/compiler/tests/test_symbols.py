"""Tests for the symbol table builder."""

from src.compiler.lexer import tokenize
from src.compiler.symbols import Dimension, SymbolKind, build_symbol_table


def table(source: str):
    return build_symbol_table(tokenize(source))


class TestStreams:
    def test_preseeded(self):
        t = table("")
        assert set(t) == {"cout", "endl"}
        assert t["cout"].kind is SymbolKind.STREAM
        assert t["cout"].declared_type == "ostream"

    def test_stream_use_recorded(self):
        t = table("int main() {\n cout << endl;\n}")
        assert t["cout"].line_first_used == 2
        assert t["cout"].line_declared is None


class TestDeclarations:
    def test_scalar_with_literal(self):
        entry = table("int x = 5;")["x"]
        assert entry.kind is SymbolKind.VARIABLE
        assert entry.declared_type == "int"
        assert entry.size_bytes == 4
        assert entry.literal_value == "5"
        assert entry.dimension is Dimension.SCALAR
        assert entry.line_declared == 1
        assert entry.line_first_used is None

    def test_row(self):
        assert table("int x = 5;")["x"].row() == (
            "x", "variable", "int", "5", 4, "Scalar", 1, "N/A", "0x00001020")

    def test_sizes(self):
        t = table("double d; char c; bool b; string s; float f;")
        assert t["d"].size_bytes == 8
        assert t["c"].size_bytes == 1
        assert t["b"].size_bytes == 1
        assert t["s"].size_bytes == 0
        assert t["f"].size_bytes == 4

    def test_comma_list(self):
        t = table("int a, b, c;")
        assert {t[n].declared_type for n in "abc"} == {"int"}

    def test_array(self):
        assert table("int arr[10];")["arr"].dimension is Dimension.ARRAY

    def test_function_and_params(self):
        t = table("int add(int a, int b) { return a + b; }")
        assert t["add"].kind is SymbolKind.FUNCTION
        assert t["a"].kind is SymbolKind.VARIABLE
        assert t["b"].line_declared == 1
        assert t["a"].line_first_used == 1

    def test_first_declaration_line_wins(self):
        t = table("int x;\n{\nfloat x;\n}")
        assert t["x"].line_declared == 1
        assert t["x"].declared_type == "float"

    def test_bool_literal_value(self):
        assert table("bool ok = true;")["ok"].literal_value == "true"


class TestUses:
    def test_first_use_line(self):
        t = table("int x;\n\nx = 3;\nx = 4;")
        assert t["x"].line_first_used == 3
        assert t["x"].literal_value == "4"

    def test_call_arguments_are_uses(self):
        t = table("int a;\nint b;\nf(a, b);")
        assert t["a"].line_first_used == 3
        assert t["b"].line_first_used == 3
        assert t["b"].line_declared == 2

    def test_undeclared_use_has_no_entry(self):
        assert "ghost" not in table("ghost = 1;")


class TestAddresses:
    def test_sequential_and_unique(self):
        t = table("int a; int b;")
        addresses = [e.address for e in t.values()]
        assert addresses == ["0x00001000", "0x00001010", "0x00001020", "0x00001030"]

    def test_deterministic(self):
        assert table("int a; int b;") == table("int a; int b;")
