"""Tests for the exception hierarchy."""

from pathlib import Path

import pytest

from eslint_config_snapshot.exceptions import (
    ConfigFileError,
    ConfigurationError,
    EmptyGroupsError,
    GroupingError,
    InvalidConfigError,
    InvalidRuleConfigError,
    NoSnapshotsError,
    RuleQueryError,
    RuleQueryFatalError,
    RuleQueryRecoverableError,
    SnapshotFormatError,
    SnapshotterError,
    UnmatchedWorkspacesError,
    WorkspaceExtractionError,
)


class TestSnapshotterError:
    def test_message_only(self):
        """Without details the message is the whole string."""
        error = SnapshotterError("Something failed")
        assert str(error) == "Something failed"
        assert error.details == {}

    def test_details_are_appended(self):
        """Details follow the message as key=value pairs."""
        error = SnapshotterError("Something failed", details={"path": "a.json"})
        assert str(error) == "Something failed (path=a.json)"


class TestHierarchy:
    @pytest.mark.parametrize(
        "error,parent",
        [
            (InvalidConfigError("k", 1, "bad"), ConfigurationError),
            (ConfigFileError(Path("x.toml"), "bad"), ConfigurationError),
            (UnmatchedWorkspacesError(["a"]), GroupingError),
            (EmptyGroupsError(["g"]), GroupingError),
            (RuleQueryRecoverableError("ws", "ignored"), RuleQueryError),
            (InvalidRuleConfigError("bad severity"), RuleQueryFatalError),
            (WorkspaceExtractionError("ws"), RuleQueryFatalError),
            (NoSnapshotsError(), SnapshotterError),
            (SnapshotFormatError("bad"), SnapshotterError),
        ],
    )
    def test_parents(self, error, parent):
        """Every error sits under its family and the root error."""
        assert isinstance(error, parent)
        assert isinstance(error, SnapshotterError)

    def test_recoverable_is_not_fatal(self):
        """Recoverable and fatal query errors are disjoint."""
        assert not isinstance(RuleQueryRecoverableError("ws", "x"), RuleQueryFatalError)


class TestMessages:
    def test_grouping_errors_list_everything(self):
        """Grouping errors name every offender."""
        assert str(UnmatchedWorkspacesError(["apps/x", "tools/y"])) == "Unmatched workspaces: apps/x, tools/y"
        assert str(EmptyGroupsError(["apps"])) == "Empty groups are not allowed: apps"

    def test_rule_query_error_details(self):
        """Query errors carry workspace and file in details."""
        error = RuleQueryFatalError("packages/a", "eslint missing", file="src/index.ts")
        assert error.reason == "eslint missing"
        assert error.details == {"workspace": "packages/a", "file": "src/index.ts"}

    def test_invalid_rule_config_names_rule(self):
        """The rule name is added to the reason."""
        error = InvalidRuleConfigError("Invalid severity 7", rule="semi")
        assert error.rule == "semi"
        assert error.reason == "Invalid severity 7 (rule semi)"

    def test_workspace_extraction_last_error(self):
        """The last file error is quoted in the reason."""
        error = WorkspaceExtractionError("packages/a", "Empty ESLint print-config output")
        assert error.reason == (
            "Unable to extract ESLint config for workspace packages/a. "
            "Last error: Empty ESLint print-config output"
        )
        assert WorkspaceExtractionError("packages/a").last_error is None

    def test_no_snapshots_lists_skipped(self):
        """The skipped workspaces are listed."""
        error = NoSnapshotsError([("packages/a", "x"), ("packages/b", "y")])
        assert error.message.endswith("skipped: packages/a, packages/b")

    def test_snapshot_format_error(self):
        """Format errors keep the reason and the path."""
        error = SnapshotFormatError("missing key: rules", path=Path("default.json"))
        assert error.details == {"reason": "missing key: rules", "path": "default.json"}
        assert "Malformed snapshot" in str(error)

    def test_invalid_config_error(self):
        """The offending key and reason are kept."""
        error = InvalidConfigError("sampling.max_files_per_workspace", 0, "must be at least 1")
        assert error.key == "sampling.max_files_per_workspace"
        assert error.details["reason"] == "must be at least 1"
