#!/usr/bin/env python3
"""
outparams: Resolve process output declarations into work-dir-relative patterns

Common usage:
  outparams -w /work/ab12 '/work/ab12/output.txt'
  outparams 'a.txt:b.txt'
  outparams -D sample_id=S1 '${sample_id}.bam'
  outparams -D sample_id=S1.bam --ref sample_id

Specs containing `$name` or `${name}` are templates rendered against the
variables given with -D; other specs are literal patterns.
"""

from __future__ import annotations

import argparse
import importlib.metadata
import json
import logging
import sys
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from outparams.checkpoints import CheckpointsList
from outparams.config import find_config_file, load_config, merge_cli_with_config
from outparams.context import TemplateString, VarRef
from outparams.errors import OutParamsError
from outparams.file_param import PATH_TYPES, FileCheckpointParam, FileMatchOptions

log = logging.getLogger(__name__)


@dataclass
class Options:
    """Command-line options for the outparams tool."""

    specs: list[str]
    refs: list[str]
    defines: list[str]
    work_dir: str | None
    json: bool
    verbose: bool
    version: bool
    # Output file options
    separator_char: str
    glob: bool
    include_hidden: bool
    include_inputs: bool
    path_type: str | None
    max_depth: int | None
    follow_links: bool

    def file_options(self) -> FileMatchOptions:
        return FileMatchOptions(
            separator_char=self.separator_char,
            include_hidden=self.include_hidden,
            include_inputs=self.include_inputs,
            path_type=self.path_type,
            max_depth=self.max_depth,
            follow_links=self.follow_links,
            glob=self.glob,
        )


def _parse_args(args: list[str] | None = None) -> tuple[Options, set[str]]:
    """
    Parse command-line arguments.

    Returns a tuple of (options, explicit_flags) where `explicit_flags` tracks
    which flags the user explicitly passed (for config merge precedence).
    """
    module_doc = __doc__ or ""
    doc_parts = module_doc.split("\n\n")
    description = doc_parts[0]
    epilog = "\n\n".join(doc_parts[1:])

    parser = argparse.ArgumentParser(
        prog="outparams",
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "specs",
        nargs="*",
        type=str,
        default=[],
        help="Output declarations: literal patterns or templates",
    )
    parser.add_argument(
        "--ref",
        action="append",
        default=[],
        dest="refs",
        metavar="NAME",
        help="Declare an output named by a context variable. Can be repeated",
    )
    parser.add_argument(
        "-D",
        "--define",
        action="append",
        default=[],
        dest="defines",
        metavar="NAME=VALUE",
        help="Set a context variable. Can be repeated",
    )
    parser.add_argument(
        "-w",
        "--work-dir",
        type=str,
        default=None,
        dest="work_dir",
        help="Process working directory (default: current directory)",
    )
    parser.add_argument(
        "--separator",
        type=str,
        default=":",
        dest="separator_char",
        help="Character separating multiple patterns in one spec (default: %(default)s)",
    )
    parser.add_argument(
        "--no-glob",
        action="store_true",
        dest="no_glob",
        help="Do not glob-escape static path values",
    )
    parser.add_argument(
        "--hidden",
        action="store_true",
        dest="include_hidden",
        help="Let wildcards match names starting with a dot",
    )
    parser.add_argument(
        "--include-inputs",
        action="store_true",
        dest="include_inputs",
        help="Let patterns match the process input files",
    )
    parser.add_argument(
        "--type",
        type=str,
        choices=list(PATH_TYPES),
        default=None,
        dest="path_type",
        help="Kind of path to collect",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=None,
        dest="max_depth",
        metavar="N",
        help="Maximum number of directory levels to visit",
    )
    parser.add_argument(
        "--no-follow-links",
        action="store_true",
        dest="no_follow_links",
        help="Treat symbolic links as files instead of following them",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print outputs, patterns and options as JSON",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version information and exit",
    )
    opts = parser.parse_args(args)

    # Re-parse with sentinel defaults to detect which flags were actually supplied.
    _SENTINEL = object()
    _tracked_flags: dict[str, str] = {
        # argparse dest name -> Options field name
        "separator_char": "separator_char",
        "no_glob": "glob",
        "include_hidden": "include_hidden",
        "include_inputs": "include_inputs",
        "path_type": "path_type",
        "max_depth": "max_depth",
        "no_follow_links": "follow_links",
    }
    sentinel_parser = argparse.ArgumentParser(add_help=False)
    sentinel_parser.add_argument("--separator", dest="separator_char", default=_SENTINEL)
    sentinel_parser.add_argument("--no-glob", dest="no_glob", action="store_true", default=_SENTINEL)
    sentinel_parser.add_argument(
        "--hidden", dest="include_hidden", action="store_true", default=_SENTINEL
    )
    sentinel_parser.add_argument(
        "--include-inputs", dest="include_inputs", action="store_true", default=_SENTINEL
    )
    sentinel_parser.add_argument("--type", dest="path_type", default=_SENTINEL)
    sentinel_parser.add_argument("--max-depth", dest="max_depth", default=_SENTINEL)
    sentinel_parser.add_argument(
        "--no-follow-links", dest="no_follow_links", action="store_true", default=_SENTINEL
    )
    sentinel_opts, _ = sentinel_parser.parse_known_args(args if args is not None else sys.argv[1:])

    explicit_flags: set[str] = set()
    for dest_name, field_name in _tracked_flags.items():
        if getattr(sentinel_opts, dest_name, _SENTINEL) is not _SENTINEL:
            explicit_flags.add(field_name)

    return (
        Options(
            specs=opts.specs,
            refs=opts.refs,
            defines=opts.defines,
            work_dir=opts.work_dir,
            json=opts.json,
            verbose=opts.verbose,
            version=opts.version,
            separator_char=opts.separator_char,
            glob=not opts.no_glob,
            include_hidden=opts.include_hidden,
            include_inputs=opts.include_inputs,
            path_type=opts.path_type,
            max_depth=opts.max_depth,
            follow_links=not opts.no_follow_links,
        ),
        explicit_flags,
    )


def _parse_defines(defines: list[str]) -> dict[str, str]:
    """Turn `NAME=VALUE` items into a context mapping. Later items win."""
    context: dict[str, str] = {}
    for item in defines:
        name, sep, value = item.partition("=")
        if not sep or not name:
            raise ValueError(f"Invalid variable definition (expected NAME=VALUE): {item!r}")
        context[name] = value
    return context


def _declare_outputs(options: Options) -> CheckpointsList:
    """Declare one output file parameter per spec, then one per `--ref`."""
    outputs = CheckpointsList()
    defaults = options.file_options()
    for spec in options.specs:
        value: Any = TemplateString.parse(spec) if TemplateString.has_refs(spec) else spec
        FileCheckpointParam(outputs, defaults=defaults).bind(value)
    for ref in options.refs:
        FileCheckpointParam(outputs, defaults=defaults).bind(VarRef(ref))
    outputs.freeze()
    return outputs


def _describe(param: FileCheckpointParam) -> str:
    spec = param.spec
    bound = getattr(spec, "template", None) or getattr(spec, "pattern", None)
    return str(bound) if bound is not None else str(param.name)


def main(args: list[str] | None = None) -> int:
    """
    Main entry point for the outparams CLI.

    Args:
        args: Command-line arguments (uses sys.argv if None)

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    options, explicit_flags = _parse_args(args)

    if options.version:
        try:
            version = importlib.metadata.version("outparams")
            print(f"v{version}")
        except importlib.metadata.PackageNotFoundError:
            print("unknown (package not installed)")
        return 0

    logging.basicConfig(
        level=logging.DEBUG if options.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if not options.specs and not options.refs:
        print(
            "Error: No outputs specified. Provide at least one spec or --ref."
            " Use --help for more options.",
            file=sys.stderr,
        )
        return 1

    try:
        config_path = find_config_file(Path.cwd())
        if config_path:
            config = load_config(config_path)
            merge_cli_with_config(options, config, explicit_flags)

        context = _parse_defines(options.defines)
        work_dir = Path(options.work_dir).absolute() if options.work_dir else Path.cwd()
        outputs = _declare_outputs(options)

        results: list[tuple[FileCheckpointParam, list[str]]] = []
        for param in outputs.of_type(FileCheckpointParam):
            patterns = param.get_file_patterns(context, work_dir)
            log.debug("Output %s resolved to %s", _describe(param), patterns)
            results.append((param, patterns))
    except (OutParamsError, ValueError) as e:
        # Resolution errors, bad config values and malformed -D definitions.
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if options.json:
        payload = {
            "work_dir": str(work_dir),
            "outputs": [
                {
                    "index": param.index,
                    "spec": _describe(param),
                    "name": param.name,
                    "dynamic": param.is_dynamic,
                    "patterns": patterns,
                    "options": asdict(param.options),
                }
                for param, patterns in results
            ],
        }
        print(json.dumps(payload, indent=2))
    else:
        for _, patterns in results:
            for pattern in patterns:
                print(pattern)

    return 0


if __name__ == "__main__":
    sys.exit(main())
