"""Rule-set configuration for the analyzer.

One engine, parameterized: the minimal rule set reproduces the plain
structural checks, the extended one (the default) adds usage tracking,
arity and type checks, output statements and strict `main` validation.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any, Mapping


class RuleError(ValueError):
    pass


# blocks and nested calls are analyzed recursively; deeper input is skipped
MAX_NESTING_LIMIT = 100


@dataclass(frozen=True)
class RuleSet:
    check_unused_variables: bool = True
    check_argument_arity: bool = True
    require_comparison_in_conditions: bool = True
    check_types: bool = True
    strict_main: bool = True
    stream_statements: bool = True
    report_lexical_anomalies: bool = True
    max_nesting_depth: int = 64

    def __post_init__(self):
        depth = self.max_nesting_depth
        if isinstance(depth, bool) or not isinstance(depth, int) \
                or not 1 <= depth <= MAX_NESTING_LIMIT:
            raise RuleError(
                f"max_nesting_depth must be an integer between 1 and {MAX_NESTING_LIMIT}")

    @classmethod
    def extended(cls) -> RuleSet:
        return cls()

    @classmethod
    def minimal(cls) -> RuleSet:
        return cls(
            check_unused_variables=False,
            check_argument_arity=False,
            check_types=False,
            strict_main=False,
            stream_statements=False,
            report_lexical_anomalies=False,
        )

    @classmethod
    def from_options(cls, options: Mapping[str, Any] | None) -> RuleSet:
        """Build a rule set from a mapping such as LSP initialization options.

        An optional "preset" key ("minimal" or "extended") picks the base;
        every other key must name a rule.
        """
        options = dict(options or {})
        preset = options.pop("preset", "extended")
        if preset not in PRESETS:
            raise RuleError(f"Unknown rule preset '{preset}'")
        base = PRESETS[preset]()
        known = {f.name: f for f in fields(cls)}
        overrides = {}
        for key, value in options.items():
            if key not in known:
                raise RuleError(f"Unknown rule '{key}'")
            if key != "max_nesting_depth" and not isinstance(value, bool):
                raise RuleError(f"Rule '{key}' expects true or false")
            overrides[key] = value
        return replace(base, **overrides)


PRESETS = {
    "minimal": RuleSet.minimal,
    "extended": RuleSet.extended,
}
