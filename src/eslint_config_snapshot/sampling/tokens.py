"""Path tokens used to pick role-diverse sample files.

A file's *primary token* names the role its path suggests (``controller``,
``route``, ``test``, ...). Tokens come from the basename first, then from the
directory segments nearest to the file. The priority table is plain data: an
ordered list of token groups where earlier groups outrank later ones.
"""

from __future__ import annotations

import re
from typing import Dict, List, Optional, Sequence

GENERIC_TOKENS = frozenset({"src", "index", "main", "test", "spec", "package", "packages", "lib", "dist"})

DEFAULT_TOKEN_GROUPS: List[List[str]] = [
    [
        "chunk", "conf", "config", "container", "controller", "helpers", "mock", "mocks",
        "presentation", "repository", "route", "routes", "schema", "setup", "spec", "stories",
        "style", "styles", "test", "type", "types", "utils", "view", "views",
    ],
    [
        "adapter", "api", "apis", "builder", "client", "component", "components", "constants",
        "context", "core", "dto", "entity", "entry", "env", "factory", "fetcher", "handler",
        "hook", "hooks", "init", "integration", "interceptor", "interface", "layout", "layouts",
        "listener", "logger", "manager", "mapper", "meta", "middleware", "model", "module",
        "normalizer", "options", "page", "pages", "parser", "plugin", "provider", "registry",
        "resolver", "router", "runtime", "serializer", "server", "service", "settings", "shared",
        "slice", "state", "store", "subscriber", "theme", "tracker", "transform", "unit",
        "validator",
    ],
    [
        "base", "bundle", "common", "compiler", "contract", "definition", "definitions",
        "deserializer", "event", "events", "fixture", "fixtures", "guard", "internal", "loader",
        "publisher", "reducer", "stub", "stubs", "tests", "util",
    ],
]

_CAMEL_BOUNDARY = re.compile(r"([a-z])([A-Z])")
_DELIMITERS = re.compile(r"[_\-.]+")
_EXTENSION = re.compile(r"\.[^.]+$")


def normalize_token(token: str) -> str:
    """Singularize plural suffixes: ``factories`` -> ``factory``, ``routes`` -> ``route``."""
    if token.endswith("ies") and len(token) > 3:
        return token[:-3] + "y"
    if token.endswith("s") and len(token) > 3:
        return token[:-1]
    return token


def tokenize_path_part(part: str, strip_extension: bool) -> List[str]:
    if strip_extension:
        part = _EXTENSION.sub("", part)
    expanded = _DELIMITERS.sub(" ", _CAMEL_BOUNDARY.sub(r"\1 \2", part)).lower()
    return expanded.split()


def normalize_token_groups(hints: Optional[Sequence[Sequence[str]]]) -> List[List[str]]:
    if not hints:
        return [list(group) for group in DEFAULT_TOKEN_GROUPS]
    return [[token for token in group if token.strip()] for group in hints]


def create_token_priority_map(hints: Optional[Sequence[Sequence[str]]] = None) -> Dict[str, int]:
    """Map each normalized token to its group priority (1 is highest)."""
    priorities: Dict[str, int] = {}
    for index, group in enumerate(normalize_token_groups(hints)):
        for token in group:
            # a later group repeating a token overrides it, as a map literal would
            priorities[normalize_token(token)] = index + 1
    return priorities


def primary_token(path: str, priorities: Dict[str, int]) -> Optional[str]:
    """The highest-priority known token of ``path``, else its first non-generic token."""
    parts = [entry for entry in path.split("/") if entry]
    if not parts:
        return None

    basename_tokens = tokenize_path_part(parts[-1], strip_extension=True)
    directory_tokens: List[str] = []
    for directory in parts[:-1]:
        directory_tokens.extend(tokenize_path_part(directory, strip_extension=False))
    directory_tokens.reverse()

    tokens = [token for token in basename_tokens + directory_tokens if len(token) > 1]

    best: Optional[str] = None
    best_priority = None
    for token in tokens:
        normalized = normalize_token(token)
        priority = priorities.get(normalized)
        if priority is None:
            continue
        if best_priority is None or priority < best_priority:
            best_priority = priority
            best = normalized
    if best is not None:
        return best

    return next((token for token in tokens if token not in GENERIC_TOKENS), None)
