"""Tests for the eslint --print-config backend (node itself is never spawned)."""

import json
import subprocess
import sys
from pathlib import Path

import pytest

from conftest import write_files

from eslint_config_snapshot.exceptions import RuleQueryFatalError, RuleQueryRecoverableError
from eslint_config_snapshot.extract import EslintLocator, EslintRuleQuery, RuleQuery, parse_print_config

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="shell script stands in for node")

WORKSPACE = Path("/repo/packages/a")
FILE = WORKSPACE / "src" / "index.ts"


def _install_eslint(root: Path, version="9.1.0"):
    write_files(
        root,
        {
            "node_modules/eslint/package.json": json.dumps(
                {"name": "eslint", "version": version, "bin": {"eslint": "./bin/eslint.js"}}
            ),
            "node_modules/eslint/bin/eslint.js": "",
        },
    )


def _fake_node(root: Path, body: str, mode=0o755) -> Path:
    """Shell script standing in for node; ignores its arguments."""
    script = root / "fake-node"
    script.write_text(f"#!/bin/sh\n{body}\n", encoding="utf-8")
    script.chmod(mode)
    return script


class TestParsePrintConfig:
    def test_returns_rules(self):
        """Only the rules object of the printed config is returned."""
        stdout = json.dumps({"rules": {"semi": [2], "eqeqeq": ["warn", "smart"]}, "language": "js"})
        assert parse_print_config(0, stdout, "", WORKSPACE, FILE) == {"semi": [2], "eqeqeq": ["warn", "smart"]}

    def test_config_without_rules(self):
        """A config with no rules yields an empty mapping."""
        assert parse_print_config(0, "{}", "", WORKSPACE, FILE) == {}

    @pytest.mark.parametrize("stdout", ["", "   \n", "undefined", "not json", "[1, 2]"])
    def test_unusable_output_is_recoverable(self, stdout):
        """Blank, undefined or non-object output skips the file."""
        with pytest.raises(RuleQueryRecoverableError):
            parse_print_config(0, stdout, "", WORKSPACE, FILE)

    @pytest.mark.parametrize(
        "stderr",
        [
            "File ignored because of a matching ignore pattern. Use --no-ignore to override.",
            "File ignored by default.",
        ],
    )
    def test_ignored_file_is_recoverable(self, stderr):
        """Ignored files are recoverable and name the file."""
        with pytest.raises(RuleQueryRecoverableError) as exc_info:
            parse_print_config(2, "", stderr, WORKSPACE, FILE)
        assert exc_info.value.file == str(FILE)

    def test_other_failures_are_fatal(self):
        """Any other non-zero exit is fatal for the workspace."""
        with pytest.raises(RuleQueryFatalError) as exc_info:
            parse_print_config(2, "", "Oops! Something went wrong!", WORKSPACE, FILE)
        assert exc_info.value.reason.startswith("Failed to run eslint --print-config")
        assert exc_info.value.workspace == str(WORKSPACE)


class TestEslintLocator:
    def test_finds_nearest_installation(self, tmp_path):
        """The closest node_modules/eslint up the tree is used."""
        _install_eslint(tmp_path)
        workspace = tmp_path / "packages" / "a"
        workspace.mkdir(parents=True)
        locator = EslintLocator()
        assert locator.resolve_bin(workspace) == (tmp_path / "node_modules/eslint/bin/eslint.js").resolve()
        assert locator.resolve_version(workspace) == "9.1.0"

    def test_workspace_installation_wins(self, tmp_path):
        """A workspace-local ESLint shadows the root one."""
        _install_eslint(tmp_path, version="8.57.1")
        workspace = tmp_path / "packages" / "a"
        _install_eslint(workspace, version="9.2.0")
        assert EslintLocator().resolve_version(workspace) == "9.2.0"

    def test_missing_installation(self, tmp_path):
        """No reachable ESLint is fatal and its version is unknown."""
        locator = EslintLocator()
        with pytest.raises(RuleQueryFatalError) as exc_info:
            locator.resolve_bin(tmp_path)
        assert "Unable to resolve eslint from workspace" in exc_info.value.reason
        assert locator.resolve_version(tmp_path) == "unknown"


class TestEslintRuleQuery:
    def test_satisfies_protocol(self):
        """The backend is a RuleQuery."""
        assert isinstance(EslintRuleQuery(), RuleQuery)

    def test_runs_print_config(self, tmp_path, monkeypatch):
        """node runs the ESLint bin with --print-config inside the workspace."""
        _install_eslint(tmp_path)
        calls = []

        def fake_run(command, **kwargs):
            calls.append((command, kwargs))
            return subprocess.CompletedProcess(command, 0, stdout='{"rules": {"semi": "error"}}', stderr="")

        monkeypatch.setattr("eslint_config_snapshot.extract.eslint.subprocess.run", fake_run)
        query = EslintRuleQuery(node_binary="node18", timeout_seconds=5)
        file_abs = tmp_path / "index.js"

        assert query.resolve_effective_rules(tmp_path, file_abs) == {"semi": "error"}
        command, kwargs = calls[0]
        assert command[0] == "node18"
        assert command[2:] == ["--print-config", str(file_abs)]
        assert kwargs["cwd"] == str(tmp_path)
        assert kwargs["timeout"] == 5

    def test_missing_node_is_fatal(self, tmp_path, monkeypatch):
        """A missing node binary is fatal."""
        _install_eslint(tmp_path)

        def fake_run(command, **kwargs):
            raise FileNotFoundError(command[0])

        monkeypatch.setattr("eslint_config_snapshot.extract.eslint.subprocess.run", fake_run)
        with pytest.raises(RuleQueryFatalError):
            EslintRuleQuery().resolve_effective_rules(tmp_path, tmp_path / "index.js")

    def test_timeout_is_fatal(self, tmp_path, monkeypatch):
        """A hung process is fatal once the timeout expires."""
        _install_eslint(tmp_path)

        def fake_run(command, **kwargs):
            raise subprocess.TimeoutExpired(command, kwargs["timeout"])

        monkeypatch.setattr("eslint_config_snapshot.extract.eslint.subprocess.run", fake_run)
        with pytest.raises(RuleQueryFatalError) as exc_info:
            EslintRuleQuery(timeout_seconds=1).resolve_effective_rules(tmp_path, tmp_path / "index.js")
        assert "timed out" in exc_info.value.reason

    @posix_only
    def test_unrunnable_node_is_fatal(self, tmp_path):
        """A node binary without execute permission is fatal, not a raw OSError."""
        _install_eslint(tmp_path)
        node = _fake_node(tmp_path, "echo '{}'", mode=0o644)

        with pytest.raises(RuleQueryFatalError) as exc_info:
            EslintRuleQuery(node_binary=str(node)).resolve_effective_rules(tmp_path, tmp_path / "index.js")
        assert exc_info.value.reason.startswith("Unable to run Node.js executable")

    @posix_only
    def test_undecodable_output_is_recoverable(self, tmp_path):
        """Output that is not UTF-8 is treated as unusable output."""
        _install_eslint(tmp_path)
        node = _fake_node(tmp_path, r"printf '\377\376{}'")

        with pytest.raises(RuleQueryRecoverableError):
            EslintRuleQuery(node_binary=str(node)).resolve_effective_rules(tmp_path, tmp_path / "index.js")

    @posix_only
    def test_script_output_is_parsed(self, tmp_path):
        """Output of a real child process is parsed."""
        _install_eslint(tmp_path)
        node = _fake_node(tmp_path, """echo '{"rules": {"curly": ["warn", "multi"]}}'""")

        rules = EslintRuleQuery(node_binary=str(node)).resolve_effective_rules(tmp_path, tmp_path / "index.js")
        assert rules == {"curly": ["warn", "multi"]}
