"""Tests for raw rule normalization."""

import pytest

from eslint_config_snapshot.exceptions import InvalidRuleConfigError
from eslint_config_snapshot.extract import normalize_rule_entry, normalize_rules


class TestNormalizeRuleEntry:
    def test_bare_numeric_severity(self):
        """A bare number becomes a one-element entry."""
        assert normalize_rule_entry(2) == ["error"]

    def test_bare_named_severity(self):
        """A bare severity name is kept."""
        assert normalize_rule_entry("warn") == ["warn"]

    def test_array_without_options(self):
        """A severity-only array keeps no options."""
        assert normalize_rule_entry([0]) == ["off"]

    def test_single_option_stored_as_is(self):
        """One option is stored directly after the severity."""
        assert normalize_rule_entry([2, "always"]) == ["error", "always"]

    def test_option_object_canonicalized(self):
        """Option objects get sorted keys."""
        variant = normalize_rule_entry(["warn", {"b": 1, "a": 2}])
        assert variant == ["warn", {"a": 2, "b": 1}]
        assert list(variant[1]) == ["a", "b"]

    def test_several_options_become_one_list(self):
        """Two or more options are wrapped in a single list."""
        assert normalize_rule_entry([1, "always", {"null": "ignore"}]) == [
            "warn",
            ["always", {"null": "ignore"}],
        ]

    def test_empty_array_rejected(self):
        """An empty array has no severity."""
        with pytest.raises(InvalidRuleConfigError):
            normalize_rule_entry([])

    def test_unknown_severity_rejected(self):
        """Unknown severity names are rejected."""
        with pytest.raises(InvalidRuleConfigError):
            normalize_rule_entry(["fatal"])


class TestNormalizeRules:
    def test_keys_sorted(self):
        """Rules come back sorted by name."""
        rules = normalize_rules({"semi": 2, "eqeqeq": [1, "smart"], "camelcase": "off"})
        assert list(rules) == ["camelcase", "eqeqeq", "semi"]
        assert rules["eqeqeq"] == ["warn", "smart"]

    def test_error_names_the_rule(self):
        """A bad entry reports which rule it belongs to."""
        with pytest.raises(InvalidRuleConfigError) as exc_info:
            normalize_rules({"semi": 7})
        assert exc_info.value.rule == "semi"
        assert "semi" in str(exc_info.value)
