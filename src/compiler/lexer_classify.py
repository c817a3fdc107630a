"""Token classification: words and quoted literals to TokenKind.

Character-class rules only; the lexer calls these once per lexeme.
"""

from .tokens import KEYWORDS, TokenKind


def _is_ident_start(ch: str) -> bool:
    return ch == '_' or ('a' <= ch <= 'z') or ('A' <= ch <= 'Z')


def _is_ident_char(ch: str) -> bool:
    return _is_ident_start(ch) or ('0' <= ch <= '9')


def _is_digits(text: str) -> bool:
    return bool(text) and all('0' <= ch <= '9' for ch in text)


def is_identifier(word: str) -> bool:
    return bool(word) and _is_ident_start(word[0]) and all(_is_ident_char(c) for c in word[1:])


def classify_word(word: str) -> TokenKind:
    """Classify an unquoted run of non-operator, non-space characters."""
    if word in KEYWORDS:
        return TokenKind.KEYWORD
    if is_identifier(word):
        return TokenKind.IDENTIFIER
    if _is_digits(word):
        return TokenKind.INT_LITERAL
    whole, dot, frac = word.partition('.')
    if dot and _is_digits(whole) and _is_digits(frac):
        return TokenKind.FLOAT_LITERAL
    return TokenKind.UNKNOWN


def classify_quoted(value: str) -> TokenKind:
    """Classify a closed quoted span, quotes included."""
    if len(value) >= 2 and value[0] == '"' and value[-1] == '"':
        return TokenKind.STRING_LITERAL
    if value[:1] == "'" and value[-1:] == "'":
        if len(value) == 3 and value[1] != '\\':
            return TokenKind.CHAR_LITERAL
        if len(value) == 4 and value[1] == '\\':
            return TokenKind.CHAR_LITERAL
    return TokenKind.UNKNOWN
