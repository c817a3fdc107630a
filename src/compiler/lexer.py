"""Lexer for the W++ language.

Works line by line over the unmodified buffer so that line numbers always
refer to what the user sees. Comments are blanked out (block comments may
span lines), literals are read with explicit quote tracking, operators use
a longest-match trie. Declarations left open at the end of a line are
reassembled with the following lines under the first line's number.

The lexer is total: anything it cannot classify becomes an UNKNOWN token.
"""

import logging

from .lexer_classify import classify_quoted, classify_word
from .tokens import OPERATORS, SEPARATORS, TYPE_KEYWORDS, Token, TokenKind

logger = logging.getLogger(__name__)


class Lexer:
    def __init__(self, source: str, filename: str = "<stdin>"):
        self.source = source
        self.filename = filename
        self.tokens: list[Token] = []
        self.anomalies: list[Token] = []
        # logical line -> physical lines, for reassembled declarations only
        self.line_map: dict[int, list[int]] = {}

        self.text = ""
        self.pos = 0
        self._in_block_comment = False
        self._pending_decl: int | None = None

        table = {op: TokenKind.OPERATOR for op in OPERATORS}
        table.update({sep: TokenKind.SEPARATOR for sep in SEPARATORS})
        self._op_trie = _build_trie(table)

    def tokenize(self) -> list[Token]:
        lines = self.source.split('\n')
        for index, raw in enumerate(lines):
            if raw.endswith('\r'):
                raw = raw[:-1]
            line_no = index + 1
            found = self._scan_line(self._strip_comments(raw))
            self._place(found, line_no)
        logger.debug("%s: %d lines, %d tokens, %d unknown",
                     self.filename, len(lines), len(self.tokens), len(self.anomalies))
        return self.tokens

    # --- Comments ---

    def _strip_comments(self, line: str) -> str:
        """Blank out comment text; the block-comment state carries over lines."""
        out: list[str] = []
        quote = None
        i = 0
        n = len(line)
        while i < n:
            ch = line[i]
            nxt = line[i + 1] if i + 1 < n else ''
            if self._in_block_comment:
                if ch == '*' and nxt == '/':
                    self._in_block_comment = False
                    out.append('  ')
                    i += 2
                else:
                    out.append(' ')
                    i += 1
            elif quote:
                out.append(ch)
                if ch == '\\' and nxt:
                    out.append(nxt)
                    i += 2
                    continue
                if ch == quote:
                    quote = None
                i += 1
            elif ch == '"' or ch == "'":
                quote = ch
                out.append(ch)
                i += 1
            elif ch == '/' and nxt == '/':
                break
            elif ch == '/' and nxt == '*':
                self._in_block_comment = True
                out.append('  ')
                i += 2
            else:
                out.append(ch)
                i += 1
        return ''.join(out)

    # --- Scanning ---

    def _scan_line(self, text: str) -> list[tuple[TokenKind, str, int]]:
        self.text = text
        self.pos = 0
        found: list[tuple[TokenKind, str, int]] = []
        word_start = None

        def flush(end: int):
            nonlocal word_start
            if word_start is not None:
                word = text[word_start:end]
                found.append((classify_word(word), word, word_start + 1))
                word_start = None

        while self.pos < len(text):
            ch = text[self.pos]
            if ch == '"' or ch == "'":
                flush(self.pos)
                found.append(self._read_quoted(ch))
            elif ch.isspace():
                flush(self.pos)
                self.pos += 1
            else:
                start = self.pos
                match = self._match_operator()
                if match is not None:
                    flush(start)
                    found.append(match)
                else:
                    if word_start is None:
                        word_start = self.pos
                    self.pos += 1
        flush(self.pos)
        return found

    def _read_quoted(self, quote: str) -> tuple[TokenKind, str, int]:
        start = self.pos
        self.pos += 1
        while self.pos < len(self.text):
            ch = self.text[self.pos]
            if ch == '\\':
                self.pos += 2
                continue
            self.pos += 1
            if ch == quote:
                value = self.text[start:self.pos]
                return (classify_quoted(value), value, start + 1)
        # Unterminated: the rest of the line is one unknown lexeme
        self.pos = len(self.text)
        return (TokenKind.UNKNOWN, self.text[start:], start + 1)

    def _match_operator(self) -> tuple[TokenKind, str, int] | None:
        """Longest operator/separator spelling at the cursor; advances past it."""
        node = self._op_trie
        best_kind = None
        best_len = 0
        i = 0
        while self.pos + i < len(self.text):
            ch = self.text[self.pos + i]
            if ch not in node:
                break
            node = node[ch]
            i += 1
            if '' in node:  # terminal marker
                best_kind = node['']
                best_len = i
        if best_kind is None:
            return None
        col = self.pos + 1
        value = self.text[self.pos:self.pos + best_len]
        self.pos += best_len
        return (best_kind, value, col)

    # --- Line placement and declaration reassembly ---

    def _place(self, found: list[tuple[TokenKind, str, int]], line_no: int):
        if not found:
            return
        pending = self._pending_decl
        if pending is None and _opens_declaration(found):
            self._pending_decl = line_no
        for kind, value, col in found:
            line = line_no
            if pending is not None:
                if kind is TokenKind.SEPARATOR and value in ('{', '}'):
                    pending = self._pending_decl = None
                else:
                    line = pending
                    if kind is TokenKind.SEPARATOR and value == ';':
                        pending = self._pending_decl = None
            if line != line_no:
                mapped = self.line_map.setdefault(line, [line])
                if mapped[-1] != line_no:
                    mapped.append(line_no)
            self._emit(kind, value, line, col, line_no)

    def _emit(self, kind: TokenKind, value: str, line: int, col: int, physical_line: int):
        token = Token(kind, value, line, col, physical_line)
        self.tokens.append(token)
        if kind is TokenKind.UNKNOWN:
            self.anomalies.append(token)


def _opens_declaration(found: list[tuple[TokenKind, str, int]]) -> bool:
    """True for a type-led line that is not finished and not a function header."""
    first_kind, first_value, _ = found[0]
    if first_kind is not TokenKind.KEYWORD or first_value not in TYPE_KEYWORDS:
        return False
    for kind, value, _ in found:
        if kind is TokenKind.SEPARATOR and value in (';', '{', '}'):
            return False
    if (len(found) >= 3 and found[1][0] is TokenKind.IDENTIFIER
            and found[2][1] == '('):
        return False
    return True


def tokenize(source: str, filename: str = "<stdin>") -> list[Token]:
    return Lexer(source, filename).tokenize()


def _build_trie(table: dict[str, TokenKind]) -> dict:
    """Build a trie from operator strings for longest-match tokenization.

    Each node is a dict mapping character -> child node.
    Terminal nodes have '' -> TokenKind entry.
    """
    root: dict = {}
    for op, kind in table.items():
        node = root
        for ch in op:
            if ch not in node:
                node[ch] = {}
            node = node[ch]
        node[''] = kind  # terminal marker
    return root
