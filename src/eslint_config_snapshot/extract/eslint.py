"""ESLint backend: ``eslint --print-config`` run with the workspace's own ESLint.

ESLint is resolved the way Node resolves packages: the nearest
``node_modules/eslint`` walking up from the workspace directory. Resolution
results are memoized per locator instance, never in module state.
"""

from __future__ import annotations

import json
import subprocess
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from ..exceptions import RuleQueryFatalError, RuleQueryRecoverableError
from ..logging_config import get_logger

logger = get_logger(__name__)

_IGNORED_FILE_MARKERS = (
    "File ignored because of a matching ignore pattern",
    "File ignored by default",
)


class EslintLocator:
    """Finds the ESLint package serving a workspace, with a per-instance cache."""

    def __init__(self) -> None:
        self._package_dirs: Dict[Path, Optional[Path]] = {}

    def package_dir(self, workspace_abs: Path) -> Optional[Path]:
        workspace_abs = workspace_abs.resolve()
        if workspace_abs not in self._package_dirs:
            self._package_dirs[workspace_abs] = self._search(workspace_abs)
        return self._package_dirs[workspace_abs]

    def resolve_bin(self, workspace_abs: Path) -> Path:
        """Absolute path of the ESLint CLI script for ``workspace_abs``.

        Raises:
            RuleQueryFatalError: If no ESLint installation is reachable
        """
        package_dir = self.package_dir(workspace_abs)
        if package_dir is not None:
            manifest = _read_manifest(package_dir)
            bin_path = package_dir / _bin_entry(manifest.get("bin"))
            if bin_path.is_file():
                return bin_path
        raise RuleQueryFatalError(
            str(workspace_abs), f"Unable to resolve eslint from workspace: {workspace_abs}"
        )

    def resolve_version(self, workspace_abs: Path) -> str:
        package_dir = self.package_dir(workspace_abs)
        if package_dir is None:
            return "unknown"
        version = _read_manifest(package_dir).get("version")
        return version if isinstance(version, str) and version else "unknown"

    @staticmethod
    def _search(start: Path) -> Optional[Path]:
        for directory in (start, *start.parents):
            candidate = directory / "node_modules" / "eslint"
            if (candidate / "package.json").is_file():
                return candidate
        return None


class EslintRuleQuery:
    """RuleQuery backed by ``node <eslint> --print-config <file>``."""

    def __init__(
        self,
        node_binary: str = "node",
        timeout_seconds: float = 60.0,
        locator: Optional[EslintLocator] = None,
    ):
        self.node_binary = node_binary
        self.timeout_seconds = timeout_seconds
        self.locator = locator or EslintLocator()

    def resolve_effective_rules(self, workspace_abs: Path, file_abs: Path) -> Mapping[str, Any]:
        eslint_bin = self.locator.resolve_bin(workspace_abs)
        command = [self.node_binary, str(eslint_bin), "--print-config", str(file_abs)]
        logger.debug("spawn: cwd=%s cmd=%s", workspace_abs, command)

        try:
            proc = subprocess.run(
                command,
                cwd=str(workspace_abs),
                capture_output=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout_seconds,
            )
        except FileNotFoundError as e:
            raise RuleQueryFatalError(
                str(workspace_abs), f"Node.js executable not found: {self.node_binary}", file=str(file_abs)
            ) from e
        except OSError as e:
            raise RuleQueryFatalError(
                str(workspace_abs),
                f"Unable to run Node.js executable {self.node_binary}: {e.strerror or e}",
                file=str(file_abs),
            ) from e
        except subprocess.TimeoutExpired as e:
            raise RuleQueryFatalError(
                str(workspace_abs),
                f"eslint --print-config timed out after {self.timeout_seconds}s",
                file=str(file_abs),
            ) from e

        return parse_print_config(proc.returncode, proc.stdout, proc.stderr, workspace_abs, file_abs)


def parse_print_config(
    returncode: int,
    stdout: str,
    stderr: str,
    workspace_abs: Path,
    file_abs: Path,
) -> Mapping[str, Any]:
    """Classify one ``--print-config`` outcome and return its raw rules."""
    workspace, file = str(workspace_abs), str(file_abs)

    if returncode != 0:
        message = stderr.strip()
        logger.debug("print-config failed: status=%s stderr=%s", returncode, message)
        if any(marker in message for marker in _IGNORED_FILE_MARKERS):
            raise RuleQueryRecoverableError(workspace, f"File ignored by ESLint: {file}", file=file)
        raise RuleQueryFatalError(workspace, f"Failed to run eslint --print-config for {file}", file=file)

    output = stdout.strip()
    if not output or output == "undefined":
        raise RuleQueryRecoverableError(workspace, f"Empty ESLint print-config output for {file}", file=file)

    try:
        parsed = json.loads(output)
    except ValueError as e:
        raise RuleQueryRecoverableError(
            workspace, f"Invalid JSON from eslint --print-config for {file}", file=file
        ) from e

    if not isinstance(parsed, dict):
        raise RuleQueryRecoverableError(workspace, f"Empty ESLint print-config output for {file}", file=file)
    rules = parsed.get("rules") or {}
    if not isinstance(rules, dict):
        raise RuleQueryRecoverableError(workspace, f"Invalid rules object for {file}", file=file)
    return rules


def _read_manifest(package_dir: Path) -> Dict[str, Any]:
    try:
        data = json.loads((package_dir / "package.json").read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def _bin_entry(bin_field: Any) -> str:
    if isinstance(bin_field, str):
        return bin_field
    if isinstance(bin_field, dict) and isinstance(bin_field.get("eslint"), str):
        return bin_field["eslint"]
    return "bin/eslint.js"
