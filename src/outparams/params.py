"""
Base model shared by every parameter a process declares.

A parameter is declared in two phases: the front-end constructs it and binds
values to it, then `lazy_init()` finalizes it the first time its name is
needed. Construction with an owner `CheckpointsList` appends the parameter to
it and takes the next declaration index.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from outparams.context import TemplateString, VarRef
from outparams.errors import InvalidDeclarationError, MissingBindingError

if TYPE_CHECKING:
    from outparams.checkpoints import CheckpointsList

# Prefix of synthesized names, which are never shown to users.
INTERNAL_NAME_PREFIX = "__$"


@runtime_checkable
class CheckpointParam(Protocol):
    """What `CheckpointsList` requires from its members."""

    @property
    def name(self) -> str | None: ...

    @property
    def index(self) -> int: ...


class BaseParam(ABC):
    """Identity and lazy finalization common to all declared parameters."""

    def __init__(self, owner: CheckpointsList | None = None, index: int | None = None) -> None:
        if index is None:
            index = len(owner) if owner is not None else 0
        self._index = index
        self._initialized = False
        if owner is not None:
            owner.append(self)

    @property
    def index(self) -> int:
        return self._index

    @property
    def initialized(self) -> bool:
        return self._initialized

    def lazy_init(self) -> None:
        """Run `_lazy_init()` once, before first meaningful use."""
        if self._initialized:
            return
        self._lazy_init()
        self._initialized = True

    def _lazy_init(self) -> None:
        pass

    @property
    @abstractmethod
    def name(self) -> str | None: ...


class BaseOutParam(BaseParam):
    """
    An output declared by a process.

    `bind()` sets the declared value. `into()` sets an explicit target, which
    takes precedence; without one the bound value becomes the target, which
    only works for values that can name an output by themselves.
    """

    def __init__(self, owner: CheckpointsList | None = None, index: int | None = None) -> None:
        self.singleton = False
        self._bind_obj: Any = None
        self._into_obj: Any = None
        self._name_obj: str | None = None
        super().__init__(owner, index)

    def bind(self, obj: Any) -> BaseOutParam:
        self._bind_obj = obj
        return self

    def into(self, obj: Any) -> BaseOutParam:
        self._into_obj = obj
        return self

    @property
    def target(self) -> Any:
        """The effective binding, once finalized."""
        self.lazy_init()
        return self._into_obj

    def _lazy_init(self) -> None:
        if self._into_obj is not None:
            return
        bind_obj = self._bind_obj
        if bind_obj is None or isinstance(bind_obj, TemplateString) or callable(bind_obj):
            raise MissingBindingError(
                f"Missing output binding for {type(self).__name__} at index {self._index}"
            )
        self._into_obj = bind_obj

    @property
    def name(self) -> str | None:
        if self._name_obj is not None:
            return self._name_obj
        self._name_obj = resolve_name(self.target)
        return self._name_obj


def resolve_name(obj: Any) -> str:
    """Derive a parameter name from the kind of its bound value."""
    if isinstance(obj, VarRef):
        return obj.name
    if isinstance(obj, str):
        return obj
    if callable(obj):
        return f"{INTERNAL_NAME_PREFIX}dyn{id(obj):x}"
    raise InvalidDeclarationError(f"Not a valid output parameter name: {obj!r}")


class OptionalParam:
    """Capability of outputs the process is allowed not to produce."""

    _optional: bool = False

    @property
    def is_optional(self) -> bool:
        return self._optional

    def optional(self, flag: bool = True) -> Any:
        self._optional = flag
        return self


class ValueCheckpointParam(BaseOutParam, OptionalParam):
    """An output carrying a context value rather than files."""


class DefaultCheckpointParam(BaseOutParam):
    """The implicit output of a process declaring none: its standard output."""

    def __init__(self, owner: CheckpointsList | None = None, index: int | None = None) -> None:
        super().__init__(owner, index)
        self.bind("-")
