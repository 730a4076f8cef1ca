"""
transclusion render command.

SUMMARY: Expand transclusion directives and write the composed document

Reads INPUT (or standard input), expands every ``![[...]]`` directive and
writes the result to --output (or standard output). Content errors are
reported on stderr and replaced by ``<!-- Error: ... -->`` markers; with
--strict they also make the command exit non-zero.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List

from transclusion.cli import (
    EngineSetup,
    OutputFormatter,
    add_dry_run_flag,
    add_engine_flags,
    add_input_arg,
    add_standard_flags,
    build_engine,
    iter_stdin_chunks,
    read_stdin,
    transclusion_error_dicts,
)
from transclusion.core.exceptions import TransclusionFrameworkError
from transclusion.core.file_io.utils import write_text_atomic
from transclusion.core.transclusion.api import (
    iter_transclude,
    iter_transclude_file,
    transclude,
    transclude_file,
)
from transclusion.core.transclusion.types import TransclusionError, TransclusionResult

SUMMARY = "Expand transclusion directives and write the composed document"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_input_arg(parser)
    parser.add_argument(
        "--output",
        "-o",
        type=str,
        help="Write the composed document to this file (default: standard output)",
    )
    add_engine_flags(parser)
    add_dry_run_flag(parser)
    add_standard_flags(parser)


def compose(setup: EngineSetup) -> TransclusionResult:
    """Compose the configured input in one pass."""
    kwargs = dict(
        reader=setup.reader,
        cache=setup.cache,
        transformers=setup.transformers,
        template_variables=setup.template_variables,
    )
    if setup.input_path is not None:
        return transclude_file(setup.input_path, setup.options, **kwargs)
    return transclude(read_stdin(), setup.options, **kwargs)


def _stream(setup: EngineSetup, formatter: OutputFormatter) -> List[TransclusionError]:
    errors: List[TransclusionError] = []
    kwargs = dict(reader=setup.reader, cache=setup.cache, errors=errors)
    if setup.input_path is not None:
        pieces = iter_transclude_file(setup.input_path, setup.options, **kwargs)
    else:
        pieces = iter_transclude(iter_stdin_chunks(), setup.options, **kwargs)
    for piece in pieces:
        formatter.raw(piece)
    return errors


def _can_stream(args: argparse.Namespace, setup: EngineSetup) -> bool:
    return (
        not args.output
        and not args.json
        and not args.dry_run
        and not setup.has_transformers
    )


def main(args: argparse.Namespace) -> int:
    """Render a document."""
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        setup = build_engine(args)

        if _can_stream(args, setup):
            errors = _stream(setup, formatter)
            formatter.transclusion_errors(errors, setup.options, setup.reader)
            return 1 if (errors and setup.options.strict) else 0

        result = compose(setup)
        output = Path(args.output).resolve() if args.output else None
        source = str(setup.input_path) if setup.input_path else "<stdin>"

        if args.dry_run:
            formatter.success(
                {
                    "dry_run": True,
                    "input": source,
                    "output": str(output) if output else None,
                    "processed_files": result.processed_files,
                    "errors": transclusion_error_dicts(result.errors, setup.options, setup.reader),
                },
                f"Would compose {source} -> {output or '<stdout>'}: "
                f"{len(result.processed_files)} file(s), {len(result.errors)} error(s)",
            )
            if not formatter.json_mode:
                for path in result.processed_files:
                    formatter.text_kv("read", path)
            formatter.transclusion_errors(result.errors, setup.options, setup.reader)
            return 1 if (result.errors and setup.options.strict) else 0

        if output is not None:
            write_text_atomic(output, result.content)

        if formatter.json_mode:
            formatter.success(
                {
                    "input": source,
                    "output": str(output) if output else None,
                    "content": None if output else result.content,
                    "processed_files": result.processed_files,
                    "errors": transclusion_error_dicts(result.errors, setup.options, setup.reader),
                },
                "",
                status="success" if result.ok else "error",
            )
        elif output is None:
            formatter.raw(result.content)

        formatter.transclusion_errors(result.errors, setup.options, setup.reader)
        return 1 if (result.errors and setup.options.strict) else 0

    except (TransclusionFrameworkError, OSError, ValueError) as e:
        formatter.error(e, error_code="render_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    cli_args = parser.parse_args()
    sys.exit(main(cli_args))
