"""Rule query exceptions raised while asking the linter for effective rules.

Recoverable errors drop a single observation. Fatal errors abort the run, or
demote to a workspace skip when the caller runs in tolerant mode.
"""

from typing import List, Optional, Sequence, Tuple

from .base import SnapshotterError


class RuleQueryError(SnapshotterError):
    """Base class for rule query failures."""

    def __init__(self, workspace: str, reason: str, file: Optional[str] = None):
        details = {"workspace": workspace}
        if file is not None:
            details["file"] = file
        super().__init__(reason, details=details)
        self.workspace = workspace
        self.file = file
        self.reason = reason


class RuleQueryRecoverableError(RuleQueryError):
    """The file yielded no usable config (ignored file, empty or non-JSON output)."""

    pass


class RuleQueryFatalError(RuleQueryError):
    """The linter cannot answer for this workspace at all."""

    pass


class InvalidRuleConfigError(RuleQueryFatalError):
    """A raw rule configuration could not be normalized."""

    def __init__(self, reason: str, rule: Optional[str] = None, workspace: str = "", file: Optional[str] = None):
        if rule is not None:
            reason = f"{reason} (rule {rule})"
        super().__init__(workspace, reason, file=file)
        self.rule = rule


class WorkspaceExtractionError(RuleQueryFatalError):
    """Every sampled file of a workspace failed."""

    def __init__(self, workspace: str, last_error: Optional[str] = None):
        reason = f"Unable to extract ESLint config for workspace {workspace}"
        if last_error:
            reason = f"{reason}. Last error: {last_error}"
        super().__init__(workspace, reason)
        self.last_error = last_error


class NoSnapshotsError(SnapshotterError):
    """No group produced a snapshot although workspaces were discovered."""

    def __init__(self, skipped: Sequence[Tuple[str, str]] = ()):
        self.skipped: List[Tuple[str, str]] = list(skipped)
        message = "Unable to extract ESLint config from any discovered workspace"
        if self.skipped:
            names = ", ".join(workspace for workspace, _reason in self.skipped)
            message = f"{message}; skipped: {names}"
        super().__init__(message)
