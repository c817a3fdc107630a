#!/usr/bin/env python3
"""wpp: a lexical, syntax and semantic scanner for the W++ teaching language.

Thin entry point that delegates to src.compiler.main.
"""

from src.compiler.main import main

if __name__ == "__main__":
    main()
