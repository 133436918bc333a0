"""Shared test fixtures for eslint-config-snapshot tests."""

import json
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

import pytest

from eslint_config_snapshot.exceptions import RuleQueryError


def pytest_addoption(parser):
    """Add --run-slow option for slow tests."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="run slow tests",
    )


def pytest_configure(config):
    """Configure slow marker."""
    config.addinivalue_line("markers", "slow: mark test as slow to run")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is given."""
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


Answer = Union[Mapping[str, Any], RuleQueryError, Callable[[str], Any]]


class FakeRuleQuery:
    """RuleQuery answering from a table keyed by root-relative workspace path.

    An answer is a rules mapping, an exception instance to raise, or a
    callable receiving the workspace-relative file path and returning either.
    Every call is recorded as ``(workspace, file)``.
    """

    def __init__(self, root: Path, answers: Dict[str, Answer]):
        self.root = root.resolve()
        self.answers = answers
        self.calls: List[tuple] = []

    def resolve_effective_rules(self, workspace_abs: Path, file_abs: Path) -> Mapping[str, Any]:
        workspace = workspace_abs.resolve().relative_to(self.root).as_posix() or "."
        file_rel = file_abs.resolve().relative_to(workspace_abs.resolve()).as_posix()
        self.calls.append((workspace, file_rel))

        answer = self.answers[workspace]
        if callable(answer):
            answer = answer(file_rel)
        if isinstance(answer, Exception):
            raise answer
        return answer


def write_files(root: Path, files: Dict[str, str]) -> None:
    for rel, content in files.items():
        target = root / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")


def make_monorepo(root: Path, workspaces: List[str], extra_files: Optional[Dict[str, str]] = None) -> Path:
    """npm-style monorepo: root package.json listing ``workspaces``, one index.ts each."""
    files = {"package.json": json.dumps({"name": "root", "private": True, "workspaces": workspaces})}
    for workspace in workspaces:
        files[f"{workspace}/package.json"] = json.dumps({"name": workspace.replace("/", "-")})
        files[f"{workspace}/src/index.ts"] = "export {}\n"
    files.update(extra_files or {})
    write_files(root, files)
    return root


@pytest.fixture
def monorepo(tmp_path):
    """Two workspaces, packages/a and packages/b, each with one source file."""
    return make_monorepo(tmp_path, ["packages/a", "packages/b"])


@pytest.fixture
def scenario_rules():
    """Rule answers of the reference two-workspace scenario."""
    return {
        "packages/a": {"eqeqeq": ["error", "always"], "no-console": [1]},
        "packages/b": {"eqeqeq": [2, "always"], "no-debugger": "off"},
    }
