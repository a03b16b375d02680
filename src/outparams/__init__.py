"""
Declared process outputs and their resolution into file patterns.

Usage::

    from outparams import CheckpointsList, FileCheckpointParam, VarRef

    outputs = CheckpointsList()
    FileCheckpointParam(outputs).bind("/work/ab12/output.txt")
    FileCheckpointParam(outputs).bind(VarRef("sample_id"))
    for param in outputs.of_type(FileCheckpointParam):
        param.get_file_patterns({"sample_id": "S1.bam"}, "/work/ab12")
"""

from outparams.checkpoints import CheckpointsList
from outparams.context import ContextScope, TemplateString, VarRef
from outparams.errors import (
    FrozenCheckpointsError,
    IllegalFileError,
    InvalidConfigurationError,
    InvalidDeclarationError,
    MissingBindingError,
    MissingNameError,
    MissingVariableError,
    OutOfScopeError,
    OutParamsError,
)
from outparams.file_param import FileCheckpointParam, FileMatchOptions
from outparams.matching import OutputMatcher
from outparams.params import (
    BaseOutParam,
    BaseParam,
    CheckpointParam,
    DefaultCheckpointParam,
    ValueCheckpointParam,
)

__all__ = [
    "BaseOutParam",
    "BaseParam",
    "CheckpointParam",
    "CheckpointsList",
    "ContextScope",
    "DefaultCheckpointParam",
    "FileCheckpointParam",
    "FileMatchOptions",
    "FrozenCheckpointsError",
    "IllegalFileError",
    "InvalidConfigurationError",
    "InvalidDeclarationError",
    "MissingBindingError",
    "MissingNameError",
    "MissingVariableError",
    "OutOfScopeError",
    "OutParamsError",
    "OutputMatcher",
    "TemplateString",
    "ValueCheckpointParam",
    "VarRef",
]
