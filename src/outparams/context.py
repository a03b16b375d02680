"""
Values a process declaration can bind, and the scope they are resolved in.

- `VarRef` names a variable of the process context (e.g. `sample_id`).
- `TemplateString` is a string with embedded `$name` or `${name.attr}`
  references, rendered against the context at run time.
- `ContextScope` is the read-only view of the context handed to resolver
  functions. Missing variables raise `MissingVariableError`.
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from outparams.errors import MissingVariableError

# `$$` is a literal dollar, `$name` a plain reference, `${a.b}` a dotted one.
_REF_PATTERN = re.compile(
    r"\$(?:(?P<escaped>\$)"
    r"|\{(?P<braced>[A-Za-z_]\w*(?:\.[A-Za-z_]\w*)*)\}"
    r"|(?P<named>[A-Za-z_]\w*))"
)


@dataclass(frozen=True)
class VarRef:
    """Reference to a context variable by name."""

    name: str

    def __str__(self) -> str:
        return self.name


def lookup(context: Mapping[str, Any], ref: str) -> Any:
    """
    Look up a possibly dotted reference (`sample.id`) in `context`. The first
    segment is a context key; later segments are mapping keys or attributes.
    """
    head, *rest = ref.split(".")
    if head not in context:
        raise MissingVariableError(head)
    value = context[head]
    for attr in rest:
        if isinstance(value, Mapping) and attr in value:
            value = value[attr]
        elif hasattr(value, attr):
            value = getattr(value, attr)
        else:
            raise MissingVariableError(ref)
    return value


def render_value(value: Any) -> str:
    """Multi-valued entries render blank separated, as a shell would see them."""
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        return " ".join(str(item) for item in value)
    return str(value)


@dataclass(frozen=True)
class TemplateString:
    """
    A string with embedded variable references, kept as literal segments
    interleaved with references: `strings[0] refs[0] strings[1] ... strings[-1]`.
    """

    strings: tuple[str, ...]
    refs: tuple[str, ...]

    def __post_init__(self) -> None:
        if len(self.strings) != len(self.refs) + 1:
            raise ValueError("A template needs exactly one more string segment than refs")

    @classmethod
    def parse(cls, text: str) -> TemplateString:
        strings: list[str] = []
        refs: list[str] = []
        current: list[str] = []
        pos = 0
        for match in _REF_PATTERN.finditer(text):
            current.append(text[pos : match.start()])
            pos = match.end()
            if match.group("escaped"):
                current.append("$")
                continue
            strings.append("".join(current))
            current = []
            refs.append(match.group("braced") or match.group("named"))
        current.append(text[pos:])
        strings.append("".join(current))
        return cls(tuple(strings), tuple(refs))

    @staticmethod
    def has_refs(text: str) -> bool:
        """True if `text` contains at least one variable reference."""
        return any(not m.group("escaped") for m in _REF_PATTERN.finditer(text))

    @property
    def text(self) -> str:
        """The template source, with references in braced form."""
        parts = [self.strings[0].replace("$", "$$")]
        for ref, segment in zip(self.refs, self.strings[1:]):
            parts.append("${" + ref + "}")
            parts.append(segment.replace("$", "$$"))
        return "".join(parts)

    def render(self, context: Mapping[str, Any]) -> str:
        """Substitute every reference from `context`."""
        parts = [self.strings[0]]
        for ref, segment in zip(self.refs, self.strings[1:]):
            parts.append(render_value(lookup(context, ref)))
            parts.append(segment)
        return "".join(parts)

    def __str__(self) -> str:
        return self.text


class ContextScope(Mapping[str, Any]):
    """
    Read-only evaluation scope passed to resolver functions. Variables are
    reachable both as items (`scope["x"]`) and attributes (`scope.x`).
    """

    __slots__ = ("_context",)

    def __init__(self, context: Mapping[str, Any]) -> None:
        object.__setattr__(self, "_context", context)

    def __getitem__(self, name: str) -> Any:
        try:
            return self._context[name]
        except KeyError:
            raise MissingVariableError(name) from None

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return self[name]

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("ContextScope is read-only")

    def __iter__(self) -> Iterator[str]:
        return iter(self._context)

    def __len__(self) -> int:
        return len(self._context)

    def __contains__(self, name: object) -> bool:
        return name in self._context

    def __repr__(self) -> str:
        return f"ContextScope({dict(self._context)!r})"
