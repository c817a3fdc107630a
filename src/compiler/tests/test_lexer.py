"""Tests for the W++ lexer."""

from src.compiler.lexer import Lexer, tokenize
from src.compiler.lexer_classify import classify_quoted, classify_word
from src.compiler.tokens import TokenKind


def kinds(source: str) -> list[TokenKind]:
    return [t.kind for t in tokenize(source)]


def values(source: str) -> list[str]:
    return [t.value for t in tokenize(source)]


class TestBasicTokens:
    def test_declaration(self):
        toks = tokenize("int x = 5;")
        assert [(t.kind, t.value) for t in toks] == [
            (TokenKind.KEYWORD, "int"),
            (TokenKind.IDENTIFIER, "x"),
            (TokenKind.OPERATOR, "="),
            (TokenKind.INT_LITERAL, "5"),
            (TokenKind.SEPARATOR, ";"),
        ]
        assert all(t.line == 1 for t in toks)

    def test_rows(self):
        assert [t.row() for t in tokenize("x;")] == [
            ("Identifier", "x", 1), ("Separator", ";", 1)]

    def test_whitespace_never_emitted(self):
        assert values("  a\t+\tb  ") == ["a", "+", "b"]

    def test_no_spaces_needed(self):
        assert values("a=b+c;") == ["a", "=", "b", "+", "c", ";"]

    def test_columns(self):
        toks = tokenize("int  x;")
        assert [t.col for t in toks] == [1, 6, 7]

    def test_empty_source(self):
        assert tokenize("") == []

    def test_keywords(self):
        assert kinds("while return true") == [TokenKind.KEYWORD] * 3

    def test_cout_is_identifier(self):
        assert kinds("cout endl") == [TokenKind.IDENTIFIER, TokenKind.IDENTIFIER]


class TestLiterals:
    def test_float(self):
        assert kinds("3.14") == [TokenKind.FLOAT_LITERAL]

    def test_malformed_number(self):
        assert kinds("1.2.3") == [TokenKind.UNKNOWN]
        assert kinds("12ab") == [TokenKind.UNKNOWN]

    def test_string(self):
        toks = tokenize('string s = "hello world";')
        assert toks[3].kind is TokenKind.STRING_LITERAL
        assert toks[3].value == '"hello world"'

    def test_escaped_quote_in_string(self):
        toks = tokenize(r'"a\"b";')
        assert toks[0].value == r'"a\"b"'
        assert toks[0].kind is TokenKind.STRING_LITERAL
        assert toks[1].value == ";"

    def test_char(self):
        assert kinds("'a'") == [TokenKind.CHAR_LITERAL]
        assert kinds(r"'\n'") == [TokenKind.CHAR_LITERAL]

    def test_bad_char(self):
        assert kinds("'ab'") == [TokenKind.UNKNOWN]

    def test_unterminated_string(self):
        toks = tokenize('x = "abc')
        assert toks[-1].kind is TokenKind.UNKNOWN
        assert toks[-1].value == '"abc'

    def test_classify_helpers(self):
        assert classify_word("_tmp1") is TokenKind.IDENTIFIER
        assert classify_word("1x") is TokenKind.UNKNOWN
        assert classify_quoted('""') is TokenKind.STRING_LITERAL
        assert classify_quoted("''") is TokenKind.UNKNOWN


class TestOperators:
    def test_maximal_munch(self):
        assert values("a<<=b") == ["a", "<<=", "b"]
        assert values("a==b") == ["a", "==", "b"]
        assert values("a<=b") == ["a", "<=", "b"]
        assert values("i++;") == ["i", "++", ";"]
        assert values("a&&b||c") == ["a", "&&", "b", "||", "c"]

    def test_single_char_fallback(self):
        assert values("a=-b") == ["a", "=", "-", "b"]

    def test_separators(self):
        assert kinds("(){}[];,") == [TokenKind.SEPARATOR] * 8


class TestComments:
    def test_line_comment(self):
        assert values("int x; // trailing note") == ["int", "x", ";"]

    def test_block_comment_inline(self):
        assert values("int /* hidden */ x;") == ["int", "x", ";"]

    def test_block_comment_spans_lines(self):
        toks = tokenize("int a; /* start\nstill comment\nend */ int b;")
        assert [t.value for t in toks] == ["int", "a", ";", "int", "b", ";"]
        assert toks[3].line == 3

    def test_comment_markers_inside_string(self):
        toks = tokenize('string u = "http://x/*y*/";')
        assert toks[3].value == '"http://x/*y*/"'

    def test_unclosed_block_comment(self):
        assert values("int a;\n/* never closed\nint b;") == ["int", "a", ";"]


class TestLines:
    def test_line_numbers(self):
        toks = tokenize("int a;\n\nint b;")
        assert [t.line for t in toks] == [1, 1, 1, 3, 3, 3]

    def test_crlf(self):
        toks = tokenize("int a;\r\nint b;\r\n")
        assert values("int a;\r\nint b;\r\n") == ["int", "a", ";", "int", "b", ";"]
        assert toks[-1].line == 2

    def test_multiline_declaration(self):
        lexer = Lexer("int a,\n    b,\n    c;\nint d;")
        toks = lexer.tokenize()
        b = next(t for t in toks if t.value == "b")
        c = next(t for t in toks if t.value == "c")
        d = next(t for t in toks if t.value == "d")
        assert b.line == 1 and b.physical_line == 2
        assert c.line == 1 and c.physical_line == 3
        assert d.line == 4
        assert lexer.line_map == {1: [1, 2, 3]}

    def test_multiline_initializer(self):
        toks = tokenize("int x =\n  5;")
        assert [t.line for t in toks] == [1, 1, 1, 1, 1]

    def test_function_header_not_reassembled(self):
        lexer = Lexer("int main()\n{\nreturn 0;\n}")
        toks = lexer.tokenize()
        assert lexer.line_map == {}
        assert [t.line for t in toks if t.value == "return"] == [3]

    def test_brace_abandons_declaration(self):
        lexer = Lexer("int x\n{\ny = 1;\n}")
        toks = lexer.tokenize()
        assert [t.line for t in toks if t.value == "y"] == [3]


class TestAnomalies:
    def test_unknown_symbol(self):
        lexer = Lexer("int $;")
        toks = lexer.tokenize()
        assert toks[1].kind is TokenKind.UNKNOWN
        assert lexer.anomalies == [toks[1]]

    def test_lexer_is_total(self):
        source = "@#$ \"unterminated\n'x /* \\ `~ 9.9.9 }{)(\r\n\x00"
        toks = tokenize(source)
        assert toks
