"""The rule query seam between the pipeline and a concrete linter integration.

The pipeline only ever asks one question: which rules are effective for this
file in this workspace? Any backend (subprocess, in-process API, test fake)
answers it by implementing :class:`RuleQuery`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Mapping, Protocol, runtime_checkable

from ..exceptions import InvalidRuleConfigError
from .normalize import RuleVariant, normalize_rules

RuleObservation = Dict[str, RuleVariant]


@runtime_checkable
class RuleQuery(Protocol):
    """Resolves raw effective rules for one file.

    Implementations return ``{rule_name: raw_config}`` where ``raw_config`` is
    a severity (``0/1/2`` or ``"off"/"warn"/"error"``) or a list starting with
    one. They raise ``RuleQueryRecoverableError`` when only this file cannot
    be answered and ``RuleQueryFatalError`` when the workspace cannot be
    answered at all.
    """

    def resolve_effective_rules(self, workspace_abs: Path, file_abs: Path) -> Mapping[str, Any]:
        ...


def observe_file(query: RuleQuery, workspace_abs: Path, file_abs: Path) -> RuleObservation:
    """Run one query and normalize its answer into rule variants."""
    raw = query.resolve_effective_rules(workspace_abs, file_abs)
    try:
        return normalize_rules(raw)
    except InvalidRuleConfigError as e:
        raise InvalidRuleConfigError(e.reason, workspace=str(workspace_abs), file=str(file_abs)) from e
