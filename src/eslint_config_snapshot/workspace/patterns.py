"""Glob matching for workspace paths and sampled files.

Patterns follow the globstar dialect used by JavaScript tooling:

- ``*`` matches any run of characters inside one path segment
- ``**`` as a whole segment matches zero or more segments
- ``?`` matches one character, ``[abc]`` / ``[!abc]`` are character classes
- ``{a,b}`` expands to alternatives (nested groups allowed)

Dotfiles are matched like any other name. Each pattern is compiled once to an
anchored regular expression.

Example:
    >>> matches_any("packages/app/src/index.ts", ["**/*.{ts,tsx}"])
    True
    >>> matches_any("packages/legacy", ["packages/*"])
    True
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Iterable, List, Pattern

_GLOBSTAR_MID = object()
_GLOBSTAR_END = object()


def expand_braces(pattern: str) -> List[str]:
    """Expand ``{a,b}`` groups into alternatives, recursively."""
    start = pattern.find("{")
    if start == -1:
        return [pattern]

    depth = 0
    end = -1
    splits: List[int] = []
    for index in range(start, len(pattern)):
        char = pattern[index]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                end = index
                break
        elif char == "," and depth == 1:
            splits.append(index)

    if end == -1:
        return [pattern]

    before = pattern[:start]
    after = pattern[end + 1 :]
    if not splits:
        # "{a}" is not an alternative group; keep braces literal
        literal = pattern[start : end + 1]
        return [before + literal + rest for rest in expand_braces(after)]

    bounds = [start] + splits + [end]
    out: List[str] = []
    for left, right in zip(bounds, bounds[1:]):
        alternative = pattern[left + 1 : right]
        out.extend(expand_braces(f"{before}{alternative}{after}"))
    return out


def _translate_segment(segment: str) -> str:
    out = []
    index = 0
    while index < len(segment):
        char = segment[index]
        if char == "*":
            out.append("[^/]*")
        elif char == "?":
            out.append("[^/]")
        elif char == "[":
            close = segment.find("]", index + 1)
            if close == -1:
                out.append(re.escape(char))
            else:
                body = segment[index + 1 : close]
                if body.startswith("!"):
                    body = "^" + body[1:]
                body = body.replace("\\", "\\\\")
                out.append(f"[{body}]")
                index = close
        else:
            out.append(re.escape(char))
        index += 1
    return "".join(out)


def _translate(pattern: str) -> str:
    if pattern.startswith("./"):
        pattern = pattern[2:]
    parts = pattern.split("/")
    pieces = []
    for index, part in enumerate(parts):
        if part == "**":
            pieces.append(_GLOBSTAR_END if index == len(parts) - 1 else _GLOBSTAR_MID)
        else:
            pieces.append(_translate_segment(part))

    regex = ""
    for index, piece in enumerate(pieces):
        is_last = index == len(pieces) - 1
        if piece is _GLOBSTAR_MID:
            regex += "(?:[^/]*/)*"
        elif piece is _GLOBSTAR_END:
            if regex.endswith("/"):
                regex = regex[:-1] + "(?:/.*)?"
            else:
                regex += ".*"
        else:
            regex += piece if is_last else piece + "/"
    return regex


@lru_cache(maxsize=512)
def compile_glob(pattern: str) -> Pattern[str]:
    """Compile one glob (braces included) into an anchored regex."""
    alternatives = [_translate(expanded) for expanded in expand_braces(pattern)]
    return re.compile("^(?:" + "|".join(alternatives) + ")$")


def matches(path: str, pattern: str) -> bool:
    return compile_glob(pattern).match(path) is not None


def matches_any(path: str, patterns: Iterable[str]) -> bool:
    return any(matches(path, pattern) for pattern in patterns)


__all__ = ["compile_glob", "expand_braces", "matches", "matches_any"]
