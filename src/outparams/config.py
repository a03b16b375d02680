"""
TOML config for output option defaults.

The first of `.outparams.toml`, `outparams.toml` or a `pyproject.toml` with a
`[tool.outparams]` table, walking up from the current directory, supplies the
defaults of new output file parameters. Keys are the kebab-case option names:

    separator-char = ","
    include-hidden = true
    type = "file"
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, TypeVar

from outparams.file_param import FileMatchOptions, check_path_type

if sys.version_info >= (3, 11):
    import tomllib  # pyright: ignore[reportUnreachable]
else:
    import tomli as tomllib  # type: ignore[no-redef]  # pyright: ignore[reportUnreachable]

log = logging.getLogger(__name__)


@dataclass
class OutParamsConfig:
    """
    Option defaults read from a config file. A field is `None` when the file
    does not set it, so an explicit value equal to the built-in default still
    overrides.
    """

    separator_char: str | None = None
    include_hidden: bool | None = None
    include_inputs: bool | None = None
    path_type: str | None = None
    max_depth: int | None = None
    follow_links: bool | None = None
    glob: bool | None = None

    def __post_init__(self) -> None:
        check_path_type(self.path_type)

    def settings(self) -> dict[str, Any]:
        """The fields the config file sets."""
        return {
            f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None
        }

    def file_defaults(self) -> FileMatchOptions:
        return replace(FileMatchOptions(), **self.settings())


_CONFIG_FILENAMES = (".outparams.toml", "outparams.toml", "pyproject.toml")

# TOML key -> field; `type` follows the output declaration option name.
_CONFIG_KEYS: dict[str, str] = {
    "type" if f.name == "path_type" else f.name.replace("_", "-"): f.name
    for f in fields(OutParamsConfig)
}


def _config_table(path: Path) -> dict[str, Any] | None:
    """The outparams settings in a TOML file, or `None` if the file has none."""
    data = tomllib.loads(path.read_text())
    if path.name == "pyproject.toml":
        return data.get("tool", {}).get("outparams")
    return data


def find_config_file(start_dir: Path) -> Path | None:
    """
    Nearest config file at or above `start_dir`. A `pyproject.toml` only
    counts when it has a `[tool.outparams]` table.
    """
    start = start_dir.resolve()
    for directory in (start, *start.parents):
        for filename in _CONFIG_FILENAMES:
            candidate = directory / filename
            if not candidate.is_file():
                continue
            if filename == "pyproject.toml":
                try:
                    if _config_table(candidate) is None:
                        continue
                except tomllib.TOMLDecodeError:
                    continue
            log.debug("Using config file %s", candidate)
            return candidate
    return None


def load_config(config_path: Path) -> OutParamsConfig:
    """
    Read a config file. A malformed file logs a warning and yields an empty
    config; unknown keys are warned about and skipped.

    Raises:
        InvalidConfigurationError: `type` is not one of file, dir or any.
    """
    try:
        table = _config_table(config_path) or {}
    except tomllib.TOMLDecodeError as e:
        log.warning("Ignoring malformed config file %s: %s", config_path, e)
        return OutParamsConfig()

    values: dict[str, Any] = {}
    for key, value in table.items():
        if key in _CONFIG_KEYS:
            values[_CONFIG_KEYS[key]] = value
        else:
            log.warning("Ignoring unrecognized config key: %s", key)
    return OutParamsConfig(**values)


_T = TypeVar("_T")


def merge_cli_with_config(
    cli_opts: _T, config: OutParamsConfig | None, explicit_flags: set[str]
) -> _T:
    """
    Apply config settings to parsed CLI options, except those given as explicit
    flags. Precedence: explicit CLI flags > config file > built-in defaults.
    """
    if config is not None:
        for name, value in config.settings().items():
            if name not in explicit_flags:
                setattr(cli_opts, name, value)
    return cli_opts
