"""Pipeline: workspaces to groups to samples to rule queries to snapshots.

Groups and workspaces are independent of each other; the only blocking work
is the rule query per sampled file, which runs on a bounded thread pool.
Results are consumed in sample order so the output never depends on
scheduling.
"""

from __future__ import annotations

import os
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple

from .config import SnapshotConfig
from .diff import SnapshotDiff, diff_snapshots, has_diff
from .exceptions import (
    NoSnapshotsError,
    RuleQueryError,
    RuleQueryFatalError,
    RuleQueryRecoverableError,
    WorkspaceExtractionError,
)
from .extract import EslintLocator, RuleObservation, RuleQuery, observe_file
from .logging_config import get_logger
from .sampling import collect_candidate_files, sample_workspace_files
from .snapshot import ConflictPolicy, Snapshot, aggregate_rules, build_snapshot, empty_snapshot
from .workspace import GroupAssignment, WorkspaceDiscovery, discover_workspaces, resolve_groups

logger = get_logger(__name__)


@dataclass
class SkippedWorkspace:
    """A workspace left out of its group in tolerant mode, with the reason."""

    group_id: str
    workspace: str
    reason: str


@dataclass
class SnapshotRun:
    """Everything one computation produced."""

    snapshots: Dict[str, Snapshot] = field(default_factory=dict)
    discovered_workspaces: List[str] = field(default_factory=list)
    skipped_workspaces: List[SkippedWorkspace] = field(default_factory=list)


@dataclass
class GroupChange:
    group_id: str
    diff: SnapshotDiff


def resolve_workspace_assignments(
    cwd: Path, config: SnapshotConfig
) -> Tuple[WorkspaceDiscovery, List[GroupAssignment]]:
    """Discover workspaces and assign each one to a group.

    Raises:
        UnmatchedWorkspacesError: A workspace matched no group
        EmptyGroupsError: A group matched nothing and empty groups are not allowed
    """
    discovery = discover_workspaces(cwd, config.workspace_input)
    assignments = resolve_groups(discovery.workspaces_rel, config.grouping)
    logger.debug(
        "root=%s groups=%d workspaces=%d",
        discovery.root_abs,
        len(assignments),
        len(discovery.workspaces_rel),
    )
    return discovery, assignments


def compute_current_snapshots(
    cwd: Path,
    config: SnapshotConfig,
    rule_query: RuleQuery,
    tolerant: bool = False,
    workers: Optional[int] = None,
    policy: Optional[ConflictPolicy] = None,
) -> SnapshotRun:
    """Build a fresh snapshot for every non-empty group.

    Args:
        cwd: Project directory
        config: Resolved configuration
        rule_query: Backend answering effective rules per file
        tolerant: Skip workspaces whose rule queries fail fatally instead of aborting
        workers: Parallel rule queries per workspace (None = config, then CPU count)
        policy: Conflict policy for rules with several distinct variants
                (None = ``config.aggregation.conflict_policy``)

    Returns:
        SnapshotRun with snapshots keyed by group id

    Raises:
        RuleQueryFatalError: A workspace could not be queried and ``tolerant`` is off
        NoSnapshotsError: Workspaces existed but no group produced a snapshot
    """
    started = time.monotonic()
    discovery, assignments = resolve_workspace_assignments(cwd, config)
    pool_size = workers or config.extraction.workers or min(32, (os.cpu_count() or 1) + 4)
    policy = policy or ConflictPolicy(config.aggregation.conflict_policy)
    run = SnapshotRun(discovered_workspaces=list(discovery.workspaces_rel))

    for group in assignments:
        if not group.workspaces:
            logger.debug("group=%s has no workspaces; no snapshot", group.name)
            continue

        observations: List[RuleObservation] = []
        members: List[str] = []

        for workspace_rel in group.workspaces:
            workspace_abs = (discovery.root_abs / workspace_rel).resolve()
            try:
                extracted = _extract_workspace(workspace_abs, workspace_rel, config, rule_query, pool_size)
            except RuleQueryFatalError as e:
                if not tolerant:
                    raise
                logger.debug("group=%s workspace=%s skipped reason=%s", group.name, workspace_rel, e.reason)
                run.skipped_workspaces.append(
                    SkippedWorkspace(group_id=group.name, workspace=workspace_rel, reason=e.reason)
                )
                continue
            observations.extend(extracted)
            members.append(workspace_rel)

        if not members:
            logger.debug("group=%s skipped: every workspace failed", group.name)
            continue

        rules = aggregate_rules(observations, policy)
        run.snapshots[group.name] = build_snapshot(group.name, members, rules)
        logger.debug("group=%s workspaces=%d rules=%d", group.name, len(members), len(rules))

    if not run.snapshots and discovery.workspaces_rel and run.skipped_workspaces:
        raise NoSnapshotsError([(s.workspace, s.reason) for s in run.skipped_workspaces])

    logger.debug("computed %d snapshot(s) in %.2fs", len(run.snapshots), time.monotonic() - started)
    return run


def _extract_workspace(
    workspace_abs: Path,
    workspace_rel: str,
    config: SnapshotConfig,
    rule_query: RuleQuery,
    pool_size: int,
) -> List[RuleObservation]:
    """Sample one workspace and query every sampled file.

    Recoverable failures drop a single observation. A workspace with no
    candidate files yields no observations; one whose every sampled file
    failed raises ``WorkspaceExtractionError``.
    """
    sampling = config.sampling
    candidates = collect_candidate_files(workspace_abs, sampling.include_globs, sampling.exclude_globs)
    sampled = sample_workspace_files(candidates, sampling.max_files_per_workspace, sampling.token_hints)
    logger.debug("workspace=%s candidates=%d sampled=%s", workspace_rel, len(candidates), sampled)
    if not sampled:
        return []

    files_abs = [workspace_abs / rel for rel in sampled]

    def _query(file_abs: Path):
        try:
            return observe_file(rule_query, workspace_abs, file_abs)
        except RuleQueryError as e:
            return e

    if len(files_abs) == 1 or pool_size <= 1:
        results = [_query(file_abs) for file_abs in files_abs]
    else:
        with ThreadPoolExecutor(max_workers=min(pool_size, len(files_abs))) as executor:
            results = list(executor.map(_query, files_abs))

    observations: List[RuleObservation] = []
    last_error: Optional[str] = None
    for result in results:
        if isinstance(result, RuleQueryRecoverableError):
            last_error = result.reason
            continue
        if isinstance(result, RuleQueryError):
            raise result
        observations.append(result)

    logger.debug(
        "workspace=%s extracted=%d failed=%d", workspace_rel, len(observations), len(results) - len(observations)
    )
    if not observations:
        raise WorkspaceExtractionError(workspace_rel, last_error)
    return observations


def compare_snapshot_maps(
    stored: Mapping[str, Snapshot], current: Mapping[str, Snapshot]
) -> List[GroupChange]:
    """Diff every group known on either side; only groups with drift are returned."""
    group_ids = sorted(set(stored) | set(current))
    changes: List[GroupChange] = []

    for group_id in group_ids:
        before = stored.get(group_id) or empty_snapshot(group_id)
        after = current.get(group_id) or empty_snapshot(group_id)
        diff = diff_snapshots(before, after)
        if has_diff(diff):
            changes.append(GroupChange(group_id=group_id, diff=diff))

    logger.debug("groups compared=%d changed=%d", len(group_ids), len(changes))
    return changes


def resolve_group_eslint_versions(
    cwd: Path, config: SnapshotConfig, locator: Optional[EslintLocator] = None
) -> Dict[str, List[str]]:
    """Distinct ESLint versions serving each group's workspaces."""
    locator = locator or EslintLocator()
    discovery, assignments = resolve_workspace_assignments(cwd, config)
    versions: Dict[str, List[str]] = {}
    for group in assignments:
        found = {locator.resolve_version(discovery.root_abs / rel) for rel in group.workspaces}
        versions[group.name] = sorted(found)
    return versions
