"""
Test work-dir-relative paths against the resolved patterns of one output.

This is the predicate side of output collection: whatever walks the working
directory passes each candidate path here and keeps the ones that match.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable, Sequence
from pathlib import PurePosixPath

import pathspec

from outparams import globs
from outparams.file_param import FileMatchOptions


class _Pattern:
    """One output pattern. Literal patterns name exactly one path."""

    recursive = False

    def __init__(self, pattern: str) -> None:
        self.source = pattern
        self.literal = globs.unescape(pattern).strip("/")

    def matches(self, path: str, include_hidden: bool) -> bool:
        return path == self.literal

    def path_type(self, options: FileMatchOptions) -> str:
        if options.path_type:
            return options.path_type
        return "file" if self.recursive else "any"


class _GlobPattern(_Pattern):
    """A wildcard pattern, compiled once into a `PathSpec`."""

    def __init__(self, pattern: str) -> None:
        self.source = pattern
        self.recursive = "**" in pattern
        self.parts = PurePosixPath(pattern).parts
        # Anchored at the work dir, so a leading `!` or `#` stays literal
        line = "/" + pattern.lstrip("/")
        self.spec = pathspec.PathSpec.from_lines("gitignore", [line])

    def matches(self, path: str, include_hidden: bool) -> bool:
        parts = PurePosixPath(path).parts
        # Gitignore patterns also match below a matched directory; globs do not
        if not self.recursive and len(parts) != len(self.parts):
            return False
        if not include_hidden and not self._hidden_allowed(parts):
            return False
        return self.spec.match_file(path)

    def _hidden_allowed(self, parts: tuple[str, ...]) -> bool:
        """Dot names only match a pattern component that itself starts with a dot."""
        for i, part in enumerate(parts):
            if not part.startswith("."):
                continue
            if self.recursive or not self.parts[i].startswith("."):
                return False
        return True


def _compile(pattern: str) -> _Pattern:
    if globs.is_glob_pattern(pattern):
        return _GlobPattern(pattern)
    return _Pattern(pattern)


class OutputMatcher:
    """
    Matches candidate paths, relative to the process working directory,
    against the patterns returned by `FileCheckpointParam.get_file_patterns()`.

    Literal patterns match exactly one path. Wildcard patterns follow glob
    rules: `*` and `?` stay within one path component, `**` crosses them, and
    names starting with a dot only match when `include_hidden` is set.
    """

    def __init__(
        self,
        patterns: Sequence[str],
        options: FileMatchOptions | None = None,
        inputs: Collection[str] = (),
    ) -> None:
        self.options = options if options is not None else FileMatchOptions()
        self._patterns = [_compile(p) for p in patterns]
        self._inputs = frozenset(inputs)

    def matches(self, path: str, is_dir: bool = False) -> bool:
        """True if `path` is an output of this parameter."""
        path = path.strip("/")
        if not path:
            return False
        if self.options.max_depth is not None:
            if len(PurePosixPath(path).parts) > self.options.max_depth + 1:
                return False
        if not self.options.include_inputs and path in self._inputs:
            return False
        for pattern in self._patterns:
            if not pattern.matches(path, self.options.include_hidden):
                continue
            kind = pattern.path_type(self.options)
            if (kind == "file" and is_dir) or (kind == "dir" and not is_dir):
                continue
            return True
        return False

    def filter(self, paths: Iterable[str], dirs: Collection[str] = ()) -> list[str]:
        """The matching `paths`, in input order. `dirs` lists which ones are directories."""
        return [p for p in paths if self.matches(p, is_dir=p in dirs)]
