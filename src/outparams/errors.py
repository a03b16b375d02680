"""Exceptions raised while declaring and resolving process output parameters."""

from __future__ import annotations


class OutParamsError(Exception):
    """Base exception for all outparams errors."""


class MissingBindingError(OutParamsError):
    """A parameter reached finalization without any usable bound value."""


class InvalidDeclarationError(OutParamsError):
    """The bound value is of a kind that cannot yield a parameter name."""


class InvalidConfigurationError(OutParamsError, ValueError):
    """An option was given a value outside its allowed set."""


class IllegalFileError(OutParamsError):
    """A resolved output path is not a valid work-dir-relative path."""


class OutOfScopeError(IllegalFileError):
    """A resolved output path lies outside the process working directory."""

    def __init__(self, path: object, work_dir: object):
        self.path = path
        self.work_dir = work_dir
        super().__init__(f"File `{path}` is out of the scope of process working dir: {work_dir}")


class MissingNameError(IllegalFileError):
    """A resolved output path names the working directory itself."""

    def __init__(self, path: object):
        self.path = path
        super().__init__(f"Missing output file name: `{path}`")


class MissingVariableError(OutParamsError, KeyError):
    """A template or resolver referenced a variable absent from the context."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"No such variable: {name}")

    def __str__(self) -> str:
        # KeyError would quote the message
        return str(self.args[0])


class FrozenCheckpointsError(OutParamsError):
    """A parameter was added to a collection after the process started."""
