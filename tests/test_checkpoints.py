"""Tests for the ordered collection of declared outputs."""

from __future__ import annotations

import pytest

from outparams import (
    CheckpointsList,
    DefaultCheckpointParam,
    FileCheckpointParam,
    FrozenCheckpointsError,
    ValueCheckpointParam,
    VarRef,
)


class _BareParam:
    """A member with a name and an index but no singleton flag."""

    def __init__(self, name: str | None, index: int) -> None:
        self.name = name
        self.index = index


def test_of_type_preserves_order() -> None:
    outputs = CheckpointsList()
    first = FileCheckpointParam(outputs).bind("a.txt")
    ValueCheckpointParam(outputs).bind("v")
    third = FileCheckpointParam(outputs).bind("b.txt")
    assert outputs.of_type(FileCheckpointParam) == [first, third]


def test_of_type_multiple_classes() -> None:
    outputs = CheckpointsList()
    file_param = FileCheckpointParam(outputs).bind("a.txt")
    value_param = ValueCheckpointParam(outputs).bind("v")
    DefaultCheckpointParam(outputs)
    assert outputs.of_type(ValueCheckpointParam, FileCheckpointParam) == [file_param, value_param]


def test_of_type_is_exact() -> None:
    class SubFileParam(FileCheckpointParam):
        pass

    outputs = CheckpointsList()
    SubFileParam(outputs).bind("a.txt")
    plain = FileCheckpointParam(outputs).bind("b.txt")
    assert outputs.of_type(FileCheckpointParam) == [plain]
    assert outputs.of_type() == []


def test_names_keep_none() -> None:
    outputs = CheckpointsList()
    FileCheckpointParam(outputs).bind("a.txt")
    FileCheckpointParam(outputs).bind(VarRef("sample"))
    ValueCheckpointParam(outputs).bind("v")
    DefaultCheckpointParam(outputs)
    assert outputs.names == [None, "sample", "v", "-"]


def test_set_singleton_round_trip() -> None:
    outputs = CheckpointsList()
    file_param = FileCheckpointParam(outputs).bind("a.txt")
    value_param = ValueCheckpointParam(outputs).bind("v")
    bare = _BareParam("bare", 2)
    outputs.append(bare)

    outputs.set_singleton(True)
    assert file_param.singleton is True
    assert value_param.singleton is True
    assert not hasattr(bare, "singleton")

    outputs.set_singleton(False)
    assert file_param.singleton is False
    assert value_param.singleton is False
    assert not hasattr(bare, "singleton")
    assert bare.name == "bare"


def test_sequence_operations() -> None:
    outputs = CheckpointsList()
    assert len(outputs) == 0
    a = FileCheckpointParam(outputs).bind("a.txt")
    b = FileCheckpointParam(outputs).bind("b.txt")
    assert len(outputs) == 2
    assert outputs[0] is a
    assert outputs[-1] is b
    assert outputs[0:1] == [a]
    assert [p.index for p in outputs] == [0, 1]


def test_freeze_rejects_new_params() -> None:
    outputs = CheckpointsList()
    FileCheckpointParam(outputs).bind("a.txt")
    outputs.freeze()
    assert outputs.frozen
    with pytest.raises(FrozenCheckpointsError):
        FileCheckpointParam(outputs)
    assert len(outputs) == 1


def test_resolve_all_file_outputs() -> None:
    outputs = CheckpointsList()
    FileCheckpointParam(outputs).bind("/work/ab12/output.txt")
    ValueCheckpointParam(outputs).bind("v")
    FileCheckpointParam(outputs).bind(VarRef("sample_id"))
    outputs.freeze()

    context = {"sample_id": "S1.bam"}
    patterns = [p.get_file_patterns(context, "/work/ab12") for p in outputs.of_type(FileCheckpointParam)]
    assert patterns == [["output.txt"], ["S1.bam"]]
