"""Tests for workspace discovery from package-manager metadata."""

import json

from conftest import write_files

from eslint_config_snapshot.config import WorkspaceInput
from eslint_config_snapshot.workspace import discover_workspaces
from eslint_config_snapshot.workspace.discovery import read_workspace_globs


class TestReadWorkspaceGlobs:
    def test_package_json_array(self, tmp_path):
        """The workspaces array in package.json is read."""
        write_files(tmp_path, {"package.json": json.dumps({"workspaces": ["packages/*", "apps/*"]})})
        assert read_workspace_globs(tmp_path) == ["packages/*", "apps/*"]

    def test_package_json_packages_object(self, tmp_path):
        """The workspaces.packages form is read."""
        write_files(tmp_path, {"package.json": json.dumps({"workspaces": {"packages": ["libs/*"]}})})
        assert read_workspace_globs(tmp_path) == ["libs/*"]

    def test_pnpm_workspace_yaml(self, tmp_path):
        """pnpm-workspace.yaml packages are read, negations included."""
        write_files(tmp_path, {"pnpm-workspace.yaml": "packages:\n  - 'packages/*'\n  - '!packages/internal'\n"})
        assert read_workspace_globs(tmp_path) == ["packages/*", "!packages/internal"]

    def test_nothing_declared(self, tmp_path):
        """No metadata gives no globs."""
        assert read_workspace_globs(tmp_path) == []


class TestDiscoverWorkspaces:
    def test_finds_directories_with_package_json(self, tmp_path):
        """Only matched directories holding package.json count; node_modules is skipped."""
        write_files(
            tmp_path,
            {
                "package.json": json.dumps({"workspaces": ["packages/*"]}),
                "packages/b/package.json": "{}",
                "packages/a/package.json": "{}",
                "packages/no-manifest/index.js": "",
                "packages/a/node_modules/dep/package.json": "{}",
            },
        )
        discovery = discover_workspaces(tmp_path)
        assert discovery.root_abs == tmp_path.resolve()
        assert discovery.workspaces_rel == ["packages/a", "packages/b"]

    def test_negated_globs(self, tmp_path):
        """Negated globs remove workspaces."""
        write_files(
            tmp_path,
            {
                "pnpm-workspace.yaml": "packages:\n  - 'packages/*'\n  - '!packages/internal'\n",
                "packages/a/package.json": "{}",
                "packages/internal/package.json": "{}",
            },
        )
        assert discover_workspaces(tmp_path).workspaces_rel == ["packages/a"]

    def test_single_package_repo_is_root(self, tmp_path):
        """A repository without workspaces is its own workspace."""
        write_files(tmp_path, {"package.json": json.dumps({"name": "solo"})})
        assert discover_workspaces(tmp_path).workspaces_rel == ["."]

    def test_manual_mode(self, tmp_path):
        """Manual workspaces are normalized and sorted without duplicates."""
        workspace_input = WorkspaceInput(mode="manual", workspaces=("b", "a/", "a"))
        discovery = discover_workspaces(tmp_path, workspace_input)
        assert discovery.workspaces_rel == ["a", "b"]
        assert discovery.root_abs == tmp_path.resolve()

    def test_manual_mode_with_root(self, tmp_path):
        """Manual mode resolves an explicit root against the working directory."""
        (tmp_path / "repo").mkdir()
        workspace_input = WorkspaceInput(mode="manual", root="repo", workspaces=("x",))
        assert discover_workspaces(tmp_path, workspace_input).root_abs == (tmp_path / "repo").resolve()
