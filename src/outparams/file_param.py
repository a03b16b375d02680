"""
Output file parameters: resolve a declared output specification into the
glob patterns the process working directory is searched with.

A specification is one of:

- a literal pattern, e.g. `"*.bam"` or `"a.txt:b.txt"`;
- a template string, e.g. `"${sample_id}.bam"`, rendered against the context;
- a resolver function, called with the context scope at run time;
- a variable reference, stored as a resolver returning the variable's value,
  or its name when the context has no such variable.

Every resolved pattern goes through relativization, which rejects any
absolute path outside the working directory.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, replace
from pathlib import PurePath
from typing import TYPE_CHECKING, Any, Union

from outparams import globs
from outparams.context import ContextScope, TemplateString, VarRef
from outparams.errors import (
    InvalidConfigurationError,
    MissingBindingError,
    MissingNameError,
    MissingVariableError,
    OutOfScopeError,
)
from outparams.params import BaseOutParam, OptionalParam

if TYPE_CHECKING:
    from outparams.checkpoints import CheckpointsList

log = logging.getLogger(__name__)

PATH_TYPES = ("file", "dir", "any")

Resolver = Callable[[ContextScope], Any]


def check_path_type(value: str | None) -> str | None:
    if value is not None and value not in PATH_TYPES:
        raise InvalidConfigurationError(
            f"Invalid output path type: {value!r} (expected one of {', '.join(PATH_TYPES)})"
        )
    return value


@dataclass
class FileMatchOptions:
    """
    How the patterns of one output are split and later matched.

    Only `separator_char` and `glob` affect pattern resolution; the other
    fields are read by whatever walks the working directory.
    """

    separator_char: str = ":"
    # When true, `*` also matches files whose name starts with a dot
    include_hidden: bool = False
    include_inputs: bool = False
    path_type: str | None = None
    max_depth: int | None = None
    follow_links: bool = True
    glob: bool = True

    def __post_init__(self) -> None:
        check_path_type(self.path_type)


@dataclass(frozen=True)
class LiteralSpec:
    pattern: str


@dataclass(frozen=True)
class TemplateSpec:
    template: TemplateString


@dataclass(frozen=True)
class ResolverSpec:
    resolver: Resolver


OutputSpec = Union[LiteralSpec, TemplateSpec, ResolverSpec]


def var_ref_resolver(ref: VarRef) -> Resolver:
    """Resolver returning the referenced variable, or its name when undefined."""

    def resolve(scope: ContextScope) -> Any:
        return scope[ref.name] if ref.name in scope else ref.name

    return resolve


# DSL option names accepted by `set_options()`, mapped to setter methods.
_OPTION_SETTERS: dict[str, str] = {
    "separator_char": "separator_char",
    "separatorChar": "separator_char",
    "include_inputs": "include_inputs",
    "includeInputs": "include_inputs",
    "include_hidden": "include_hidden",
    "includeHidden": "include_hidden",
    "hidden": "hidden",
    "type": "type",
    "max_depth": "max_depth",
    "maxDepth": "max_depth",
    "follow_links": "follow_links",
    "followLinks": "follow_links",
    "glob": "glob",
    "optional": "optional",
}


class FileCheckpointParam(BaseOutParam, OptionalParam):
    """
    A process output declared as one or more file patterns.

    Configuration setters return the parameter itself so declarations chain::

        param = FileCheckpointParam(outputs).bind(VarRef("sample_id")).hidden(True)
        param.get_file_patterns({"sample_id": "S1.bam"}, work_dir)  # ["S1.bam"]
    """

    def __init__(
        self,
        owner: CheckpointsList | None = None,
        index: int | None = None,
        *,
        defaults: FileMatchOptions | None = None,
    ) -> None:
        super().__init__(owner, index)
        self.options = replace(defaults) if defaults is not None else FileMatchOptions()
        self._spec: OutputSpec | None = None

    @property
    def spec(self) -> OutputSpec | None:
        return self._spec

    @property
    def is_dynamic(self) -> bool:
        """True when the patterns depend on the context, i.e. are computed at run time."""
        return isinstance(self._spec, (ResolverSpec, TemplateSpec))

    def bind(self, obj: Any) -> FileCheckpointParam:
        if isinstance(obj, TemplateString):
            self._spec = TemplateSpec(obj)
        elif isinstance(obj, VarRef):
            self._name_obj = obj.name
            self._spec = ResolverSpec(var_ref_resolver(obj))
        elif callable(obj):
            self._spec = ResolverSpec(obj)
        else:
            self._spec = LiteralSpec(str(obj))
        self._bind_obj = obj
        return self

    # Configuration setters

    def separator_char(self, value: str) -> FileCheckpointParam:
        self.options.separator_char = value
        return self

    def include_inputs(self, flag: bool) -> FileCheckpointParam:
        self.options.include_inputs = flag
        return self

    def include_hidden(self, flag: bool) -> FileCheckpointParam:
        self.options.include_hidden = flag
        return self

    def hidden(self, flag: bool) -> FileCheckpointParam:
        return self.include_hidden(flag)

    def type(self, value: str) -> FileCheckpointParam:
        self.options.path_type = check_path_type(value)
        return self

    def max_depth(self, value: int) -> FileCheckpointParam:
        self.options.max_depth = value
        return self

    def follow_links(self, flag: bool) -> FileCheckpointParam:
        self.options.follow_links = flag
        return self

    def glob(self, flag: bool) -> FileCheckpointParam:
        self.options.glob = flag
        return self

    def set_options(self, opts: Mapping[str, Any]) -> FileCheckpointParam:
        """Apply a DSL option map, e.g. `{"hidden": True, "maxDepth": 2}`."""
        for key, value in opts.items():
            setter = _OPTION_SETTERS.get(key) or _OPTION_SETTERS.get(key.replace("-", "_"))
            if setter is None:
                raise InvalidConfigurationError(f"Unknown output file option: {key!r}")
            getattr(self, setter)(value)
        return self

    @property
    def name(self) -> str | None:
        """Only a variable reference names a file output; other kinds are anonymous."""
        if self._spec is None:
            raise MissingBindingError(f"Output file parameter at index {self._index} is not bound")
        return self._name_obj

    def _lazy_init(self) -> None:
        if self._spec is None:
            raise MissingBindingError(f"Output file parameter at index {self._index} is not bound")

    def get_file_patterns(self, context: Mapping[str, Any], work_dir: str | PurePath) -> list[str]:
        """
        Resolve the specification against `context` into patterns relative to
        `work_dir`, in declaration order.

        Raises:
            OutOfScopeError: A resolved absolute path is outside `work_dir`.
            MissingNameError: A resolved path is `work_dir` itself.
            MissingVariableError: The context lacks a variable a resolver reads,
                or one a template references and this parameter has a name.
                Anonymous templates yield no patterns.
        """
        work_dir = PurePath(work_dir)
        entry = self._resolve_entry(context)
        if not entry:
            return []

        if isinstance(entry, PurePath):
            return [self.relativize_path(entry, work_dir)]

        # a collection of files
        if isinstance(entry, Sequence) and not isinstance(entry, (str, bytes)):
            return [self.relativize(str(item), work_dir) for item in entry]

        name_string = str(entry)
        separator = self.options.separator_char
        if separator and separator in name_string:
            parts = name_string.split(separator)
            # drop trailing empty segments
            while parts and not parts[-1]:
                parts.pop()
            return [self.relativize(part, work_dir) for part in parts]

        return [self.relativize(name_string, work_dir)]

    def _resolve_entry(self, context: Mapping[str, Any]) -> Any:
        spec = self._spec
        if spec is None:
            return None
        if isinstance(spec, LiteralSpec):
            return spec.pattern
        if isinstance(spec, TemplateSpec):
            try:
                return spec.template.render(context)
            except MissingVariableError as e:
                if self._name_obj is not None:
                    raise
                log.debug("Output %s yields no patterns: %s", self._describe(), e)
                return None
        if isinstance(spec, ResolverSpec):
            return spec.resolver(ContextScope(context))
        raise AssertionError(f"Unexpected output spec: {spec!r}")

    def relativize(self, path: str, work_dir: PurePath) -> str:
        """Make a string pattern relative to `work_dir`. Relative patterns pass unchanged."""
        if not path.startswith("/"):
            return path

        root = str(work_dir).rstrip("/")
        if not path.startswith(root):
            raise OutOfScopeError(path, work_dir)

        if len(path) - len(root) < 2:
            raise MissingNameError(path)

        # `/work/ab12x/f` shares the prefix of `/work/ab12` but is a sibling
        if path[len(root)] != "/":
            raise OutOfScopeError(path, work_dir)

        return path[len(root) + 1 :]

    def relativize_path(self, path: PurePath, work_dir: PurePath) -> str:
        """
        Make a path relative to `work_dir`. Path values name concrete files, so
        the result is glob-escaped unless `glob` is off.
        """
        if not path.is_absolute():
            return self._escape(str(path))

        if not path.is_relative_to(work_dir):
            raise OutOfScopeError(path, work_dir)

        if len(path.parts) == len(work_dir.parts):
            raise MissingNameError(path)

        return self._escape(str(path.relative_to(work_dir)))

    def _escape(self, path: str) -> str:
        return globs.escape(path) if self.options.glob else path

    def _describe(self) -> str:
        spec = self._spec
        if isinstance(spec, TemplateSpec):
            return f"`{spec.template.text}`"
        return f"#{self._index}"

    def __repr__(self) -> str:
        return f"FileCheckpointParam(index={self._index}, spec={self._spec!r})"
