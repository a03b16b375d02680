"""Glob metacharacter handling for output patterns."""

from __future__ import annotations

import re

# Characters with a special meaning in output glob patterns.
GLOB_CHARS = frozenset("*?[]{}")

_ESCAPE_RE = re.compile(r"([*?\[\]{}\\])")
_UNESCAPE_RE = re.compile(r"\\(.)")


def escape(path: str) -> str:
    """Backslash-escape glob metacharacters so `path` matches only itself."""
    return _ESCAPE_RE.sub(r"\\\1", path)


def unescape(pattern: str) -> str:
    """Inverse of `escape()`."""
    return _UNESCAPE_RE.sub(r"\1", pattern)


def is_glob_pattern(pattern: str) -> bool:
    """True if `pattern` contains an unescaped glob metacharacter."""
    escaped = False
    for char in pattern:
        if escaped:
            escaped = False
        elif char == "\\":
            escaped = True
        elif char in GLOB_CHARS:
            return True
    return False
