"""Deterministic selection of representative files per workspace.

Querying the linter for every file of a large monorepo is far too slow, yet
tests, sources and config files often carry different overrides. The sampler
keeps a bounded subset that still covers as many path roles as possible:

  1. Candidates at or under the cap are returned unchanged.
  2. One file per distinct primary token, code files first.
  3. Remaining slots are filled by index-distributed picks (first, middle,
     last, then evenly spaced), code files first.

No randomness and no timestamps are involved: identical candidate sets always
yield identical samples.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Set

from ..core import normalize_path, sort_unique
from ..logging_config import get_logger
from ..workspace.patterns import matches_any
from .tokens import create_token_priority_map, primary_token

logger = get_logger(__name__)

CODE_PREFERRED_EXTENSIONS = frozenset({"ts", "tsx", "js", "jsx", "cjs", "mjs"})

_ALWAYS_SKIPPED_DIRS = frozenset({".git", ".hg", ".svn"})


def collect_candidate_files(
    workspace_abs: Path,
    include_globs: Sequence[str],
    exclude_globs: Sequence[str],
) -> List[str]:
    """Workspace-relative files matching the include globs and none of the excludes.

    Directories matched by an exclude glob ending in ``/**`` are pruned
    without being walked.
    """
    prune_globs = [pattern[:-3] for pattern in exclude_globs if pattern.endswith("/**")]
    found: List[str] = []

    for dirpath, dirnames, filenames in os.walk(workspace_abs):
        rel_dir = os.path.relpath(dirpath, workspace_abs)
        kept = []
        for name in dirnames:
            if name in _ALWAYS_SKIPPED_DIRS:
                continue
            rel = normalize_path(os.path.join(rel_dir, name)) if rel_dir != "." else name
            if matches_any(rel, prune_globs):
                continue
            kept.append(name)
        dirnames[:] = kept

        for name in filenames:
            rel = normalize_path(os.path.join(rel_dir, name)) if rel_dir != "." else name
            if matches_any(rel, include_globs) and not matches_any(rel, exclude_globs):
                found.append(rel)

    return sort_unique(found)


def sample_workspace_files(
    candidates: Sequence[str],
    max_files: int,
    token_hints: Optional[Sequence[Sequence[str]]] = None,
) -> List[str]:
    """Select at most ``max_files`` representative paths from ``candidates``.

    Args:
        candidates: Workspace-relative candidate paths (any order)
        max_files: Sample cap
        token_hints: Ordered token priority groups (None = built-in table)

    Returns:
        Sorted unique subset of ``candidates``.
    """
    files = sort_unique(candidates)
    if len(files) <= max_files:
        return files
    return _select_distributed(files, max_files, token_hints)


def is_preferred_for_sampling(path: str) -> bool:
    return _extension(path) in CODE_PREFERRED_EXTENSIONS


def _extension(path: str) -> str:
    last_dot = path.rfind(".")
    if last_dot == -1 or last_dot == len(path) - 1:
        return ""
    return path[last_dot + 1 :].lower()


def _select_distributed(files: List[str], count: int, token_hints) -> List[str]:
    priorities = create_token_priority_map(token_hints)
    selected: List[str] = []
    selected_set: Set[str] = set()

    preferred = [path for path in files if is_preferred_for_sampling(path)]
    other = [path for path in files if not is_preferred_for_sampling(path)]

    _append_token_representatives(preferred, priorities, selected, selected_set, count)
    _append_token_representatives(other, priorities, selected, selected_set, count)

    if len(selected) >= count:
        return sort_unique(selected)[:count]

    remaining = [path for path in files if path not in selected_set]
    needed = count - len(selected)
    preferred_remaining = [path for path in remaining if is_preferred_for_sampling(path)]
    other_remaining = [path for path in remaining if not is_preferred_for_sampling(path)]

    preferred_picked = pick_uniformly(preferred_remaining, needed)
    still_needed = needed - len(preferred_picked)
    fallback_picked = pick_uniformly(other_remaining, still_needed) if still_needed > 0 else []

    logger.debug(
        "token picks=%d uniform picks=%d",
        len(selected),
        len(preferred_picked) + len(fallback_picked),
    )
    return sort_unique(selected + preferred_picked + fallback_picked)[:count]


def _append_token_representatives(
    files: List[str],
    priorities: Dict[str, int],
    selected: List[str],
    selected_set: Set[str],
    count: int,
) -> None:
    if len(selected) >= count or not files:
        return

    token_files: Dict[str, List[str]] = {}
    token_first_index: Dict[str, int] = {}
    for index, path in enumerate(files):
        token = primary_token(path, priorities)
        if not token:
            continue
        token_first_index.setdefault(token, index)
        token_files.setdefault(token, []).append(path)

    unranked = float("inf")
    ordered = sorted(
        token_files,
        key=lambda token: (priorities.get(token, unranked), token_first_index[token], token),
    )

    for token in ordered:
        if len(selected) >= count:
            break
        first = token_files[token][0]
        if first in selected_set:
            continue
        selected.append(first)
        selected_set.add(first)


def pick_uniformly(files: Sequence[str], count: int) -> List[str]:
    """Pick ``count`` files spread evenly over ``files``."""
    if count <= 0 or not files:
        return []
    if len(files) <= count:
        return list(files)
    if count == 1:
        return [files[0]]

    picked: List[str] = []
    used: Set[int] = set()

    if count >= 3:
        for anchor in (0, (len(files) - 1) // 2, len(files) - 1):
            if len(picked) >= count or anchor in used:
                continue
            used.add(anchor)
            picked.append(files[anchor])

    for candidate in distributed_indices(len(files), count):
        if len(picked) >= count:
            break
        index = _next_free_index(candidate, used, len(files))
        if index in used:
            continue
        used.add(index)
        picked.append(files[index])

    for index in range(len(files)):
        if len(picked) >= count:
            break
        if index in used:
            continue
        used.add(index)
        picked.append(files[index])

    return picked


def distributed_indices(length: int, count: int) -> List[int]:
    """``count`` indices evenly spaced over ``[0, length - 1]``, halves rounded up."""
    if length <= 0 or count <= 0:
        return []
    if count == 1:
        return [0]
    span = length - 1
    steps = count - 1
    # floor(i * span / steps + 0.5) in integer arithmetic
    return [(2 * index * span + steps) // (2 * steps) for index in range(count)]


def _next_free_index(candidate: int, used: Set[int], size: int) -> int:
    if candidate not in used:
        return candidate
    for delta in range(1, size):
        forward = candidate + delta
        if forward < size and forward not in used:
            return forward
        backward = candidate - delta
        if backward >= 0 and backward not in used:
            return backward
    return candidate
