"""Configuration loading and management for eslint-config-snapshot.

Configuration is discovered in the project root. The first file found wins:
    1. .eslint-config-snapshot.toml
    2. eslint-config-snapshot.toml
    3. .eslint-config-snapshotrc.json / .eslint-config-snapshotrc (JSON)
    4. the "eslint-config-snapshot" key of package.json
    5. [tool.eslint-config-snapshot] in pyproject.toml

Each section of the file is merged over the built-in defaults, then
ESLINT_CONFIG_SNAPSHOT_* environment variables are applied. Keys may be
written in snake_case or camelCase.

Example:
    >>> config = load_config(Path("."))
    >>> config.sampling.max_files_per_workspace
    10
"""

from __future__ import annotations

import json
import os
import re
import tomllib
from dataclasses import asdict, dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Literal, Mapping, Optional, Sequence, Tuple

from .exceptions import ConfigFileError, InvalidConfigError

GroupingMode = Literal["match", "standalone"]
ConflictPolicyName = Literal["surface-all", "highest-severity"]
WorkspaceMode = Literal["discover", "manual"]

CONFIG_KEY = "eslint-config-snapshot"
ENV_PREFIX = "ESLINT_CONFIG_SNAPSHOT_"

SEARCH_PLACES = (
    ".eslint-config-snapshot.toml",
    "eslint-config-snapshot.toml",
    ".eslint-config-snapshotrc.json",
    ".eslint-config-snapshotrc",
    "package.json",
    "pyproject.toml",
)

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])")


@dataclass(frozen=True)
class GroupDefinition:
    """A named group and its ordered match patterns (``!`` prefix excludes)."""

    name: str
    match: Tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("group name must not be empty")
        if not self.match:
            raise ValueError(f"group '{self.name}' needs at least one match pattern")


DEFAULT_GROUPS = (GroupDefinition(name="default", match=("**/*",)),)


@dataclass(frozen=True)
class WorkspaceInput:
    """Where the workspace list comes from.

    Attributes:
        mode: "discover" reads package.json / pnpm-workspace.yaml,
              "manual" uses ``workspaces`` verbatim
        root: Repository root for manual mode (relative to the project dir)
        workspaces: Root-relative workspace paths for manual mode
    """

    mode: WorkspaceMode = "discover"
    root: Optional[str] = None
    workspaces: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.mode not in ("discover", "manual"):
            raise ValueError(f"workspace_input.mode must be 'discover' or 'manual', got '{self.mode}'")
        if self.mode == "manual" and not self.workspaces:
            raise ValueError("workspace_input.workspaces is required in manual mode")


@dataclass(frozen=True)
class GroupingConfig:
    mode: GroupingMode = "match"
    groups: Optional[Tuple[GroupDefinition, ...]] = None
    allow_empty_groups: bool = False

    def __post_init__(self) -> None:
        if self.mode not in ("match", "standalone"):
            raise ValueError(f"grouping.mode must be 'match' or 'standalone', got '{self.mode}'")
        if self.groups is not None:
            names = [group.name for group in self.groups]
            duplicates = sorted({name for name in names if names.count(name) > 1})
            if duplicates:
                raise ValueError(f"duplicate group names: {', '.join(duplicates)}")

    @property
    def effective_groups(self) -> Tuple[GroupDefinition, ...]:
        return self.groups if self.groups is not None else DEFAULT_GROUPS


@dataclass(frozen=True)
class SamplingConfig:
    """File sampling parameters.

    Attributes:
        max_files_per_workspace: Upper bound on files queried per workspace
        include_globs: Workspace-relative globs selecting candidate files
        exclude_globs: Globs removing candidates (and pruning directories)
        token_hints: Ordered token priority groups; earlier groups outrank
                     later ones. None uses the built-in table.
    """

    max_files_per_workspace: int = 10
    include_globs: Tuple[str, ...] = ("**/*.{js,jsx,ts,tsx,cjs,mjs}",)
    exclude_globs: Tuple[str, ...] = ("**/node_modules/**", "**/dist/**")
    token_hints: Optional[Tuple[Tuple[str, ...], ...]] = None

    def __post_init__(self) -> None:
        if self.max_files_per_workspace < 1:
            raise ValueError("sampling.max_files_per_workspace must be at least 1")
        if not self.include_globs:
            raise ValueError("sampling.include_globs must not be empty")


@dataclass(frozen=True)
class ExtractionConfig:
    """Linter invocation parameters.

    Attributes:
        timeout_seconds: Timeout for a single ``eslint --print-config`` call
        workers: Parallel rule queries per workspace (None = auto-detect)
        node_binary: Node.js executable used to run the workspace's ESLint
    """

    timeout_seconds: float = 60.0
    workers: Optional[int] = None
    node_binary: str = "node"

    def __post_init__(self) -> None:
        if self.timeout_seconds <= 0:
            raise ValueError("extraction.timeout_seconds must be positive")
        if self.workers is not None and self.workers < 1:
            raise ValueError("extraction.workers must be at least 1")


@dataclass(frozen=True)
class AggregationConfig:
    """How distinct variants of one rule are reduced within a group.

    Attributes:
        conflict_policy: "surface-all" keeps every distinct variant,
                         "highest-severity" keeps the strongest severity only
    """

    conflict_policy: ConflictPolicyName = "surface-all"

    def __post_init__(self) -> None:
        if self.conflict_policy not in ("surface-all", "highest-severity"):
            raise ValueError(
                "aggregation.conflict_policy must be 'surface-all' or 'highest-severity', "
                f"got '{self.conflict_policy}'"
            )


@dataclass(frozen=True)
class SnapshotConfig:
    """Resolved configuration consumed by the pipeline."""

    workspace_input: WorkspaceInput = field(default_factory=WorkspaceInput)
    grouping: GroupingConfig = field(default_factory=GroupingConfig)
    sampling: SamplingConfig = field(default_factory=SamplingConfig)
    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)
    aggregation: AggregationConfig = field(default_factory=AggregationConfig)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["grouping"]["groups"] = [
            {"name": group.name, "match": list(group.match)} for group in self.grouping.effective_groups
        ]
        return _lists(data)


DEFAULT_CONFIG = SnapshotConfig()


def find_config_path(cwd: Path) -> Optional[Tuple[Path, SnapshotConfig]]:
    """Search ``cwd`` for a configuration source.

    Returns:
        (path, config) for the first source found, or None.

    Raises:
        ConfigFileError: If a candidate file exists but cannot be parsed
        InvalidConfigError: If the configuration values are invalid
    """
    for name in SEARCH_PLACES:
        candidate = cwd / name
        if not candidate.is_file():
            continue
        raw = _read_config_source(candidate)
        if raw is None:
            continue
        return candidate, build_config(raw)
    return None


def load_config(cwd: Path, config_file: Optional[Path] = None) -> SnapshotConfig:
    """Load configuration with auto-discovery, defaults and env overrides.

    Args:
        cwd: Project directory searched for configuration files
        config_file: Explicit file, bypassing discovery

    Returns:
        Validated SnapshotConfig instance
    """
    if config_file is not None:
        if not config_file.is_file():
            raise ConfigFileError(config_file, "file not found")
        raw = _read_config_source(config_file)
        if raw is None:
            raise ConfigFileError(config_file, f"no '{CONFIG_KEY}' section")
        config = build_config(raw)
    else:
        found = find_config_path(cwd)
        config = found[1] if found is not None else DEFAULT_CONFIG

    return apply_env_overrides(config, os.environ)


def build_config(raw: Mapping[str, Any]) -> SnapshotConfig:
    """Merge a raw mapping over the defaults and validate it."""
    data = _snake_keys(raw)
    unknown = sorted(set(data) - {"workspace_input", "grouping", "sampling", "extraction", "aggregation"})
    if unknown:
        raise InvalidConfigError(unknown[0], data[unknown[0]], "unknown configuration section")

    try:
        workspace_input = _merge_section(
            DEFAULT_CONFIG.workspace_input, data.get("workspace_input"), "workspace_input", _coerce_workspace_input
        )
        grouping = _merge_section(DEFAULT_CONFIG.grouping, data.get("grouping"), "grouping", _coerce_grouping)
        sampling = _merge_section(DEFAULT_CONFIG.sampling, data.get("sampling"), "sampling", _coerce_sampling)
        extraction = _merge_section(DEFAULT_CONFIG.extraction, data.get("extraction"), "extraction", dict)
        aggregation = _merge_section(DEFAULT_CONFIG.aggregation, data.get("aggregation"), "aggregation", dict)
    except ValueError as e:
        raise InvalidConfigError("config", dict(raw), str(e)) from e

    return SnapshotConfig(
        workspace_input=workspace_input,
        grouping=grouping,
        sampling=sampling,
        extraction=extraction,
        aggregation=aggregation,
    )


def apply_env_overrides(config: SnapshotConfig, environ: Mapping[str, str]) -> SnapshotConfig:
    """Apply ESLINT_CONFIG_SNAPSHOT_* environment variables.

    Supported variables:
        ESLINT_CONFIG_SNAPSHOT_MAX_FILES_PER_WORKSPACE: int
        ESLINT_CONFIG_SNAPSHOT_ALLOW_EMPTY_GROUPS: bool (true/false/1/0)
        ESLINT_CONFIG_SNAPSHOT_WORKERS: int
        ESLINT_CONFIG_SNAPSHOT_TIMEOUT_SECONDS: float
        ESLINT_CONFIG_SNAPSHOT_CONFLICT_POLICY: surface-all | highest-severity
    """
    sampling_overrides: Dict[str, Any] = {}
    grouping_overrides: Dict[str, Any] = {}
    extraction_overrides: Dict[str, Any] = {}
    aggregation_overrides: Dict[str, Any] = {}

    value = environ.get(f"{ENV_PREFIX}MAX_FILES_PER_WORKSPACE")
    if value is not None:
        sampling_overrides["max_files_per_workspace"] = _parse_env(value, int, "MAX_FILES_PER_WORKSPACE")
    value = environ.get(f"{ENV_PREFIX}ALLOW_EMPTY_GROUPS")
    if value is not None:
        grouping_overrides["allow_empty_groups"] = _parse_bool(value, "ALLOW_EMPTY_GROUPS")
    value = environ.get(f"{ENV_PREFIX}WORKERS")
    if value is not None:
        extraction_overrides["workers"] = _parse_env(value, int, "WORKERS")
    value = environ.get(f"{ENV_PREFIX}TIMEOUT_SECONDS")
    if value is not None:
        extraction_overrides["timeout_seconds"] = _parse_env(value, float, "TIMEOUT_SECONDS")
    value = environ.get(f"{ENV_PREFIX}CONFLICT_POLICY")
    if value is not None:
        aggregation_overrides["conflict_policy"] = value.strip().lower()

    if not (sampling_overrides or grouping_overrides or extraction_overrides or aggregation_overrides):
        return config

    try:
        return replace(
            config,
            sampling=replace(config.sampling, **sampling_overrides),
            grouping=replace(config.grouping, **grouping_overrides),
            extraction=replace(config.extraction, **extraction_overrides),
            aggregation=replace(config.aggregation, **aggregation_overrides),
        )
    except ValueError as e:
        raise InvalidConfigError("environment", ENV_PREFIX + "*", str(e)) from e


def config_scaffold(preset: str = "minimal") -> str:
    """TOML text written by ``init``."""
    if preset == "minimal":
        return (
            "# eslint-config-snapshot configuration\n"
            "# Built-in defaults apply to every key left out.\n"
            "\n"
            "[sampling]\n"
            "max_files_per_workspace = 10\n"
        )
    if preset != "full":
        raise InvalidConfigError("preset", preset, "expected 'minimal' or 'full'")

    hints = ", ".join(f'"{token}"' for token in _SCAFFOLD_TOKEN_HINTS)
    return (
        "# eslint-config-snapshot configuration\n"
        "\n"
        "[workspace_input]\n"
        'mode = "discover"\n'
        "\n"
        "[grouping]\n"
        'mode = "match"\n'
        "allow_empty_groups = false\n"
        "\n"
        "[[grouping.groups]]\n"
        'name = "default"\n'
        'match = ["**/*"]\n'
        "\n"
        "[sampling]\n"
        "max_files_per_workspace = 10\n"
        'include_globs = ["**/*.{js,jsx,ts,tsx,cjs,mjs}"]\n'
        'exclude_globs = ["**/node_modules/**", "**/dist/**"]\n'
        f"token_hints = [{hints}]\n"
        "\n"
        "[extraction]\n"
        "timeout_seconds = 60\n"
        "\n"
        "[aggregation]\n"
        'conflict_policy = "surface-all"\n'
    )


_SCAFFOLD_TOKEN_HINTS = (
    "chunk", "conf", "config", "container", "controller", "helpers", "mock", "mocks",
    "presentation", "repository", "route", "routes", "schema", "setup", "spec", "stories",
    "style", "styles", "test", "type", "types", "utils", "view", "views",
)


# ── Private helpers ──────────────────────────────────────────────────


def _read_config_source(path: Path) -> Optional[Dict[str, Any]]:
    """Return the raw config mapping held by ``path``, or None if it holds none."""
    try:
        if path.suffix == ".toml":
            with open(path, "rb") as f:
                document = tomllib.load(f)
        else:
            document = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise ConfigFileError(path, str(e)) from e

    if path.name == "package.json":
        section = document.get(CONFIG_KEY) if isinstance(document, dict) else None
    elif path.name == "pyproject.toml":
        section = document.get("tool", {}).get(CONFIG_KEY)
    else:
        section = document

    if section is None:
        return None
    if not isinstance(section, dict):
        raise ConfigFileError(path, "expected a table/object at the top level")
    return section


def _merge_section(default: Any, raw: Any, name: str, coerce) -> Any:
    if raw is None:
        return default
    if not isinstance(raw, dict):
        raise InvalidConfigError(name, raw, "expected a table/object")
    known = set(type(default).__dataclass_fields__)
    unknown = sorted(set(raw) - known)
    if unknown:
        raise InvalidConfigError(f"{name}.{unknown[0]}", raw[unknown[0]], "unknown key")
    return replace(default, **coerce(raw))


def _coerce_workspace_input(raw: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(raw)
    if "workspaces" in out:
        out["workspaces"] = tuple(_string_list(out["workspaces"], "workspace_input.workspaces"))
    return out


def _coerce_grouping(raw: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(raw)
    if out.get("groups") is not None:
        groups = []
        for entry in out["groups"]:
            if not isinstance(entry, dict) or set(_snake_keys(entry)) - {"name", "match"}:
                raise ValueError(f"invalid group definition: {entry!r}")
            groups.append(
                GroupDefinition(
                    name=str(entry.get("name", "")),
                    match=tuple(_string_list(entry.get("match", []), "grouping.groups.match")),
                )
            )
        out["groups"] = tuple(groups)
    return out


def _coerce_sampling(raw: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(raw)
    for key in ("include_globs", "exclude_globs"):
        if key in out:
            out[key] = tuple(_string_list(out[key], f"sampling.{key}"))
    hints = out.get("token_hints")
    if isinstance(hints, (list, tuple)) and not hints:
        # empty means the built-in table
        out["token_hints"] = None
    elif hints is not None:
        if isinstance(hints, (list, tuple)) and all(isinstance(group, (list, tuple)) for group in hints):
            out["token_hints"] = tuple(tuple(_string_list(group, "sampling.token_hints")) for group in hints)
        else:
            # a flat list is a single priority group
            out["token_hints"] = (tuple(_string_list(hints, "sampling.token_hints")),)
    return out


def _string_list(value: Any, key: str) -> Sequence[str]:
    if isinstance(value, str) or not isinstance(value, (list, tuple)):
        raise ValueError(f"{key} must be a list of strings")
    if not all(isinstance(item, str) for item in value):
        raise ValueError(f"{key} must be a list of strings")
    return value


def _snake_keys(raw: Mapping[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for key, value in raw.items():
        snake = _CAMEL_BOUNDARY.sub(r"_\1", key).lower()
        out[snake] = _snake_keys(value) if isinstance(value, dict) else value
    return out


def _lists(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: _lists(entry) for key, entry in value.items()}
    if isinstance(value, (list, tuple)):
        return [_lists(entry) for entry in value]
    return value


def _parse_env(value: str, kind, name: str) -> Any:
    try:
        return kind(value)
    except ValueError as e:
        raise InvalidConfigError(f"{ENV_PREFIX}{name}", value, str(e)) from e


def _parse_bool(value: str, name: str) -> bool:
    lower = value.lower()
    if lower in ("true", "1", "yes", "on"):
        return True
    if lower in ("false", "0", "no", "off"):
        return False
    raise InvalidConfigError(f"{ENV_PREFIX}{name}", value, "expected true/false")
