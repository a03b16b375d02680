"""Ordered collection of the output parameters declared by one process."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Protocol, TypeVar, overload, runtime_checkable

from outparams.errors import FrozenCheckpointsError
from outparams.params import CheckpointParam

_P = TypeVar("_P", bound=CheckpointParam)


@runtime_checkable
class SupportsSingleton(Protocol):
    singleton: bool


class CheckpointsList:
    """
    Declared outputs of a process, in declaration order. Order matters: it is
    the order outputs are matched in.

    The list is filled while the process is declared and frozen before it runs.
    """

    def __init__(self) -> None:
        self._target: list[CheckpointParam] = []
        self._frozen = False

    def append(self, param: CheckpointParam) -> None:
        if self._frozen:
            raise FrozenCheckpointsError("Cannot declare an output once the process has started")
        self._target.append(param)

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __len__(self) -> int:
        return len(self._target)

    def __iter__(self) -> Iterator[CheckpointParam]:
        return iter(self._target)

    @overload
    def __getitem__(self, index: int) -> CheckpointParam: ...

    @overload
    def __getitem__(self, index: slice) -> list[CheckpointParam]: ...

    def __getitem__(self, index: int | slice) -> CheckpointParam | list[CheckpointParam]:
        return self._target[index]

    @property
    def names(self) -> list[str | None]:
        return [param.name for param in self._target]

    def of_type(self, *classes: type[_P]) -> list[_P]:
        """Members whose exact class is one of `classes`. Subclasses do not match."""
        return [param for param in self._target if type(param) in classes]  # type: ignore[misc]

    def set_singleton(self, value: bool) -> None:
        for param in self._target:
            if isinstance(param, SupportsSingleton):
                param.singleton = value

    def __repr__(self) -> str:
        return f"CheckpointsList({self._target!r})"
