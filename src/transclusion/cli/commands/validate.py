"""
transclusion validate command.

SUMMARY: Check a document for broken transclusions

Processes INPUT (or standard input) exactly like ``render`` but discards the
composed content. Every content error is reported and any error makes the
command exit non-zero.
"""

from __future__ import annotations

import argparse
import sys

from transclusion.cli import (
    OutputFormatter,
    add_engine_flags,
    add_input_arg,
    add_standard_flags,
    build_engine,
    print_success,
    transclusion_error_dicts,
)
from transclusion.cli.commands.render import compose
from transclusion.core.exceptions import TransclusionFrameworkError

SUMMARY = "Check a document for broken transclusions"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_input_arg(parser)
    add_engine_flags(parser)
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    """Validate a document."""
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        setup = build_engine(args)
        result = compose(setup)
    except (TransclusionFrameworkError, OSError, ValueError) as e:
        formatter.error(e, error_code="validate_error")
        return 1

    source = str(setup.input_path) if setup.input_path else "<stdin>"

    if formatter.json_mode:
        formatter.success(
            {
                "input": source,
                "valid": result.ok,
                "processed_files": result.processed_files,
                "errors": transclusion_error_dicts(result.errors, setup.options, setup.reader),
            },
            "",
            status="success" if result.ok else "error",
        )
        return 0 if result.ok else 1

    if result.ok:
        print_success(
            f"No transclusion errors in {source} ({len(result.processed_files)} file(s) read)"
        )
        return 0

    formatter.transclusion_errors(result.errors, setup.options, setup.reader)
    print(f"{len(result.errors)} transclusion error(s) in {source}", file=sys.stderr)
    return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    cli_args = parser.parse_args()
    sys.exit(main(cli_args))
