"""Sampling layer: bounded, role-diverse file selection per workspace."""

from .sampler import (
    CODE_PREFERRED_EXTENSIONS,
    collect_candidate_files,
    distributed_indices,
    pick_uniformly,
    sample_workspace_files,
)
from .tokens import DEFAULT_TOKEN_GROUPS, create_token_priority_map, normalize_token, primary_token

__all__ = [
    "CODE_PREFERRED_EXTENSIONS",
    "DEFAULT_TOKEN_GROUPS",
    "collect_candidate_files",
    "create_token_priority_map",
    "distributed_indices",
    "normalize_token",
    "pick_uniformly",
    "primary_token",
    "sample_workspace_files",
]
