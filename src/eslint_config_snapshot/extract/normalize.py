"""Normalize raw ESLint rule configurations into rule variants.

ESLint reports a rule either as a bare severity (``2``, ``"warn"``) or as an
array whose first element is the severity followed by option values. A
variant is always ``[severity]`` or ``[severity, options]``: a single option
value is stored as-is, several values are stored as one list.
"""

from typing import Any, Dict, List, Mapping

from ..core import canonicalize_json, normalize_severity
from ..exceptions import InvalidRuleConfigError

RuleVariant = List[Any]


def normalize_rule_entry(raw: Any) -> RuleVariant:
    if isinstance(raw, (list, tuple)):
        if len(raw) == 0:
            raise InvalidRuleConfigError("Rule configuration array cannot be empty")

        severity = normalize_severity(raw[0])
        rest = [canonicalize_json(item) for item in raw[1:]]

        if not rest:
            return [severity]
        if len(rest) == 1:
            return [severity, rest[0]]
        return [severity, rest]

    return [normalize_severity(raw)]


def normalize_rules(rules: Mapping[str, Any]) -> Dict[str, RuleVariant]:
    """Normalize every rule of one observation; keys come back sorted."""
    normalized: Dict[str, RuleVariant] = {}
    for rule_name in sorted(rules):
        try:
            normalized[rule_name] = normalize_rule_entry(rules[rule_name])
        except InvalidRuleConfigError as e:
            raise InvalidRuleConfigError(e.reason, rule=rule_name) from e
    return normalized
