#!/usr/bin/env python3
"""wpp: scan a W++ source file and report tokens, symbols and diagnostics.

Usage: python main.py <input.wpp> [--emit-tokens] [--emit-symbols] [--rules minimal]
"""

import sys
import os
import argparse
import logging

from .diagnostics import Diagnostic, Severity
from .rules import PRESETS, RuleError, RuleSet
from .scanner import ScanResult, scan, summarize_tokens

SYMBOL_HEADER = ("Identifier", "Kind", "Type", "Value", "Size", "Dimension",
                 "Declared", "First Use", "Address")


def _format_error(source: str, filename: str, message: str,
                  line: int, col: int, label: str = "error") -> str:
    """Format a diagnostic with source context and caret."""
    lines = source.split('\n')
    if line < 1 or line > len(lines):
        return f"{label}: {message}\n --> {filename}"
    source_line = lines[line - 1].rstrip('\r')
    width = len(str(line))
    pad = " " * width
    caret_offset = max(col - 1, 0)
    caret = " " * caret_offset + "^"
    return (
        f"{label}: {message}\n"
        f" {pad}--> {filename}:{line}:{col}\n"
        f" {pad} |\n"
        f" {line} | {source_line}\n"
        f" {pad} | {caret}"
    )


def _diagnostic_col(result: ScanResult, line: int) -> int:
    """Column of the first token on a line, or 1."""
    for tok in result.tokens:
        if tok.physical_line == line:
            return tok.col
    return 1


def format_diagnostic(result: ScanResult, diag: Diagnostic, source: str, filename: str) -> str:
    label = "error" if diag.severity is Severity.ERROR else "warning"
    if diag.line is None:
        return _format_error(source, filename, diag.format(), 0, 0, label)
    col = _diagnostic_col(result, diag.line)
    return _format_error(source, filename, diag.format(), diag.line, col, label)


def _print_table(header: tuple, rows: list[tuple]):
    cells = [tuple(str(c) for c in header)] + [tuple(str(c) for c in row) for row in rows]
    widths = [max(len(row[i]) for row in cells) for i in range(len(header))]
    for row in cells:
        print("  ".join(c.ljust(w) for c, w in zip(row, widths)).rstrip())


def _rules_from_args(args) -> RuleSet:
    options: dict = {"preset": args.rules}
    if args.no_unused_check:
        options["check_unused_variables"] = False
    if args.no_arity_check:
        options["check_argument_arity"] = False
    if args.no_condition_check:
        options["require_comparison_in_conditions"] = False
    if args.no_type_check:
        options["check_types"] = False
    if args.no_streams:
        options["stream_statements"] = False
    if args.max_nesting is not None:
        options["max_nesting_depth"] = args.max_nesting
    return RuleSet.from_options(options)


def build_argparser() -> argparse.ArgumentParser:
    argparser = argparse.ArgumentParser(description="W++ lexical, syntax and semantic scanner")
    argparser.add_argument("input", help="Input .wpp file")
    argparser.add_argument("--emit-tokens", action="store_true", help="Print token stream")
    argparser.add_argument("--emit-symbols", action="store_true", help="Print symbol table")
    argparser.add_argument("--emit-summary", action="store_true",
                           help="Print token occurrence counts")
    argparser.add_argument("--emit-report", action="store_true",
                           help="Print one line per recognized statement")
    argparser.add_argument("--rules", choices=sorted(PRESETS), default="extended",
                           help="Rule preset (default: extended)")
    argparser.add_argument("--no-unused-check", action="store_true",
                           help="Don't warn about unused variables")
    argparser.add_argument("--no-arity-check", action="store_true",
                           help="Don't check call argument counts")
    argparser.add_argument("--no-condition-check", action="store_true",
                           help="Don't require a comparison in conditions")
    argparser.add_argument("--no-type-check", action="store_true",
                           help="Don't check operand and argument types")
    argparser.add_argument("--no-streams", action="store_true",
                           help="Don't accept 'cout << ...' statements")
    argparser.add_argument("--max-nesting", type=int, default=None,
                           help="Deepest block and call nesting that is analyzed (1-100)")
    argparser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return argparser


def main(argv=None):
    argparser = build_argparser()
    args = argparser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        stream=sys.stderr)

    try:
        rules = _rules_from_args(args)
    except RuleError as e:
        argparser.error(str(e))

    # Read input
    try:
        with open(args.input, "r", encoding="utf-8") as f:
            source = f.read()
    except FileNotFoundError:
        print(f"Error: File '{args.input}' not found", file=sys.stderr)
        sys.exit(1)
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error: Cannot read '{args.input}': {e}", file=sys.stderr)
        sys.exit(1)

    filename = os.path.basename(args.input)
    result = scan(source, rules, filename)

    if args.emit_tokens:
        _print_table(("Kind", "Lexeme", "Line"), result.token_rows())
        for logical, physical in sorted(result.line_map.items()):
            print(f"# line {logical} spans physical lines {', '.join(map(str, physical))}")
    if args.emit_symbols:
        _print_table(SYMBOL_HEADER, result.symbol_rows())
    if args.emit_summary:
        _print_table(("Lexeme", "Kind", "Count", "Lines"),
                     [entry.row() for entry in summarize_tokens(result.tokens)])
    if args.emit_report:
        for record in result.statements:
            print(record.format())

    for diag in result.diagnostics:
        print(format_diagnostic(result, diag, source, filename), file=sys.stderr)

    errors = result.errors
    if errors:
        print(f"{len(errors)} error(s), {len(result.warnings)} warning(s)", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
