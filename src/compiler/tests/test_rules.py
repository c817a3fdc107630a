"""Tests for rule-set configuration."""

import pytest

from src.compiler.rules import MAX_NESTING_LIMIT, RuleError, RuleSet


class TestPresets:
    def test_extended_is_default(self):
        assert RuleSet.extended() == RuleSet()

    def test_minimal(self):
        rules = RuleSet.minimal()
        assert not rules.check_unused_variables
        assert not rules.check_argument_arity
        assert not rules.strict_main
        assert rules.require_comparison_in_conditions


class TestFromOptions:
    def test_none(self):
        assert RuleSet.from_options(None) == RuleSet()

    def test_preset_with_override(self):
        rules = RuleSet.from_options({"preset": "minimal", "check_unused_variables": True})
        assert rules.check_unused_variables
        assert not rules.strict_main

    def test_nesting_depth(self):
        assert RuleSet.from_options({"max_nesting_depth": 8}).max_nesting_depth == 8

    def test_nesting_limit_is_inclusive(self):
        rules = RuleSet.from_options({"max_nesting_depth": MAX_NESTING_LIMIT})
        assert rules.max_nesting_depth == MAX_NESTING_LIMIT

    def test_constructor_checks_nesting_depth(self):
        with pytest.raises(RuleError):
            RuleSet(max_nesting_depth=MAX_NESTING_LIMIT + 1)

    @pytest.mark.parametrize("options, message", [
        ({"preset": "strict"}, "Unknown rule preset 'strict'"),
        ({"check_everything": True}, "Unknown rule 'check_everything'"),
        ({"check_types": "yes"}, "Rule 'check_types' expects true or false"),
        ({"max_nesting_depth": 0}, "max_nesting_depth must be an integer between 1 and 100"),
        ({"max_nesting_depth": True}, "max_nesting_depth must be an integer between 1 and 100"),
        ({"max_nesting_depth": 5000}, "max_nesting_depth must be an integer between 1 and 100"),
        ({"max_nesting_depth": "8"}, "max_nesting_depth must be an integer between 1 and 100"),
    ])
    def test_invalid(self, options, message):
        with pytest.raises(RuleError, match=message):
            RuleSet.from_options(options)

    def test_input_not_mutated(self):
        options = {"preset": "minimal"}
        RuleSet.from_options(options)
        assert options == {"preset": "minimal"}
