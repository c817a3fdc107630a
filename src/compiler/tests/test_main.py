"""Tests for the wpp command-line front end."""

import pytest

from src.compiler.main import _format_error, main

VALID = "int main() {\n    int x = 1;\n    cout << x;\n    return 0;\n}\n"


def run(tmp_path, source: str, *flags: str):
    path = tmp_path / "prog.wpp"
    path.write_text(source)
    main([str(path), *flags])


class TestExitStatus:
    def test_valid_program(self, tmp_path, capsys):
        run(tmp_path, VALID)
        assert capsys.readouterr().err == ""

    def test_errors_exit_1(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc:
            run(tmp_path, "int main() {\n    y = 1;\n    return 0;\n}\n")
        assert exc.value.code == 1
        err = capsys.readouterr().err
        assert "error: Semantic Error at Line 2: Variable 'y' used before declaration" in err
        assert " --> prog.wpp:2:5" in err
        assert "1 error(s), 0 warning(s)" in err

    def test_warnings_only(self, tmp_path, capsys):
        run(tmp_path, "int main() {\n    int x = 1;\n    return 0;\n}\n")
        assert "warning: Warning at Line 2" in capsys.readouterr().err

    def test_missing_file(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc:
            main([str(tmp_path / "nope.wpp")])
        assert exc.value.code == 1
        assert "not found" in capsys.readouterr().err

    def test_rule_flags(self, tmp_path, capsys):
        source = "int main() {\n    int x = 1;\n    if (x) {\n        x = 2;\n    }\n    return 0;\n}\n"
        with pytest.raises(SystemExit):
            run(tmp_path, source)
        capsys.readouterr()
        run(tmp_path, source, "--no-condition-check")
        assert capsys.readouterr().err == ""

    def test_minimal_preset(self, tmp_path, capsys):
        run(tmp_path, "void main() {\n}\n", "--rules", "minimal")
        assert capsys.readouterr().err == ""

    def test_nesting_limit_flag(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc:
            run(tmp_path, VALID, "--max-nesting", "5000")
        assert exc.value.code == 2
        assert "max_nesting_depth must be an integer between 1 and 100" in capsys.readouterr().err


class TestEmit:
    def test_tokens(self, tmp_path, capsys):
        run(tmp_path, VALID, "--emit-tokens")
        out = capsys.readouterr().out
        assert out.splitlines()[0].split() == ["Kind", "Lexeme", "Line"]
        assert "Keyword" in out and "Separator" in out

    def test_line_map(self, tmp_path, capsys):
        source = "int main() {\n    int a,\n        b;\n    a = b;\n    return 0;\n}\n"
        run(tmp_path, source, "--emit-tokens")
        assert "# line 2 spans physical lines 2, 3" in capsys.readouterr().out

    def test_symbols(self, tmp_path, capsys):
        run(tmp_path, VALID, "--emit-symbols")
        out = capsys.readouterr().out
        assert out.startswith("Identifier")
        assert "0x00001000" in out

    def test_summary_and_report(self, tmp_path, capsys):
        run(tmp_path, VALID, "--emit-summary", "--emit-report")
        out = capsys.readouterr().out
        assert "Line 3: Output Statement - Output of 1 item(s)" in out
        assert "Count" in out


class TestFormatError:
    def test_caret(self):
        text = _format_error("int x\n  y = 1;", "a.wpp", "boom", 2, 3)
        assert text.splitlines() == [
            "error: boom",
            "  --> a.wpp:2:3",
            "   |",
            " 2 |   y = 1;",
            "   |   ^",
        ]

    def test_no_line(self):
        assert _format_error("", "a.wpp", "no main", 0, 0) == "error: no main\n --> a.wpp"
