"""Extraction layer: rule queries against the linter and their normalization."""

from .eslint import EslintLocator, EslintRuleQuery, parse_print_config
from .normalize import RuleVariant, normalize_rule_entry, normalize_rules
from .query import RuleObservation, RuleQuery, observe_file

__all__ = [
    "EslintLocator",
    "EslintRuleQuery",
    "RuleObservation",
    "RuleQuery",
    "RuleVariant",
    "normalize_rule_entry",
    "normalize_rules",
    "observe_file",
    "parse_print_config",
]
