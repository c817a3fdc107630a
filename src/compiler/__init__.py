"""W++ scanner package: lexer, symbol table and analyzer."""

from .lexer import Lexer as Lexer, tokenize as tokenize
from .analyzer import Analyzer as Analyzer
from .rules import RuleSet as RuleSet, RuleError as RuleError
from .scanner import (
    ScanResult as ScanResult,
    scan as scan,
    summarize_tokens as summarize_tokens,
)
