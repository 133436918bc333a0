"""Workspace discovery from package-manager metadata.

Reads workspace globs from ``package.json`` (``workspaces`` array or
``workspaces.packages``) and from ``pnpm-workspace.yaml``. Every directory
matched by a glob that holds a ``package.json`` is a workspace. Without any
declaration the repository root ``.`` is the only workspace.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional

import yaml

from ..config import WorkspaceInput
from ..core import normalize_path, sort_unique
from ..logging_config import get_logger
from .patterns import matches_any

logger = get_logger(__name__)

_SKIP_DIRS = frozenset({"node_modules", ".git", ".hg", ".svn"})


@dataclass
class WorkspaceDiscovery:
    """Repository root and its sorted, root-relative workspaces."""

    root_abs: Path
    workspaces_rel: List[str] = field(default_factory=list)


def discover_workspaces(cwd: Path, workspace_input: Optional[WorkspaceInput] = None) -> WorkspaceDiscovery:
    workspace_input = workspace_input or WorkspaceInput()
    cwd = cwd.resolve()

    if workspace_input.mode == "manual":
        root = (cwd / workspace_input.root).resolve() if workspace_input.root else cwd
        return WorkspaceDiscovery(root_abs=root, workspaces_rel=sort_unique(workspace_input.workspaces))

    globs = read_workspace_globs(cwd)
    if not globs:
        logger.debug("no workspace declarations under %s; using the root", cwd)
        return WorkspaceDiscovery(root_abs=cwd, workspaces_rel=["."])

    found = _find_package_dirs(cwd, globs)
    logger.debug("workspace globs=%s found=%d", globs, len(found))
    return WorkspaceDiscovery(root_abs=cwd, workspaces_rel=found or ["."])


def read_workspace_globs(root: Path) -> List[str]:
    """Workspace globs declared by package.json and pnpm-workspace.yaml."""
    globs: List[str] = []

    package_json = _load_json(root / "package.json")
    if isinstance(package_json, dict):
        globs.extend(_extract_package_json_globs(package_json))

    pnpm_file = root / "pnpm-workspace.yaml"
    if pnpm_file.is_file():
        try:
            document = yaml.safe_load(pnpm_file.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as e:
            logger.warning("Ignoring unreadable %s: %s", pnpm_file, e)
            document = None
        if isinstance(document, dict) and isinstance(document.get("packages"), list):
            globs.extend(entry for entry in document["packages"] if isinstance(entry, str))

    return [normalize_path(entry) for entry in globs]


def _extract_package_json_globs(package_json: dict) -> List[str]:
    workspaces = package_json.get("workspaces")
    if isinstance(workspaces, list):
        return [entry for entry in workspaces if isinstance(entry, str)]
    if isinstance(workspaces, dict) and isinstance(workspaces.get("packages"), list):
        return [entry for entry in workspaces["packages"] if isinstance(entry, str)]
    return []


def _find_package_dirs(root: Path, globs: List[str]) -> List[str]:
    positives = [entry for entry in globs if not entry.startswith("!")]
    negatives = [entry[1:] for entry in globs if entry.startswith("!")]
    found: List[str] = []

    if "." in positives and (root / "package.json").is_file():
        found.append(".")

    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(name for name in dirnames if name not in _SKIP_DIRS)
        rel = normalize_path(os.path.relpath(dirpath, root))
        if rel == "." or "package.json" not in filenames:
            continue
        if matches_any(rel, positives) and not matches_any(rel, negatives):
            found.append(rel)

    return sort_unique(found)


def _load_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return None
    except (OSError, ValueError) as e:
        logger.warning("Ignoring unreadable %s: %s", path, e)
        return None
