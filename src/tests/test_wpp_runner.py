"""Pytest runner for the W++ sample programs.

test_*.wpp files must scan without any diagnostics. error_*.wpp files list
every diagnostic they produce in `// expect: ` header lines, formatted the
way the report prints them.
"""

import glob
import os

import pytest

from src.compiler.scanner import scan

WPP_TEST_DIR = os.path.join(os.path.dirname(__file__), "wpp")
EXPECT_PREFIX = "// expect: "


def get_wpp_files(prefix: str):
    pattern = os.path.join(WPP_TEST_DIR, f"{prefix}_*.wpp")
    return [os.path.basename(f) for f in sorted(glob.glob(pattern))]


def read(wpp_file: str) -> str:
    with open(os.path.join(WPP_TEST_DIR, wpp_file), "r") as f:
        return f.read()


@pytest.mark.parametrize("wpp_file", get_wpp_files("test"))
def test_valid_program(wpp_file):
    result = scan(read(wpp_file), filename=wpp_file)
    assert result.diagnostics == (), "\n".join(d.format() for d in result.diagnostics)


@pytest.mark.parametrize("wpp_file", get_wpp_files("error"))
def test_error_program(wpp_file):
    source = read(wpp_file)
    expected = [line[len(EXPECT_PREFIX):].rstrip()
                for line in source.splitlines() if line.startswith(EXPECT_PREFIX)]
    assert expected, f"{wpp_file} has no expectations"
    result = scan(source, filename=wpp_file)
    assert sorted(d.format() for d in result.diagnostics) == sorted(expected)
