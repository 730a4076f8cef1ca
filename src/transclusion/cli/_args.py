"""Common CLI argument registration utilities.

This module provides reusable argument registration functions shared by the
``render`` and ``validate`` commands.
"""
from __future__ import annotations

import argparse


def add_json_flag(parser: argparse.ArgumentParser) -> None:
    """Add --json flag for JSON output mode."""
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )


def add_repo_root_flag(parser: argparse.ArgumentParser) -> None:
    """Add --repo-root flag (project root used to find configuration)."""
    parser.add_argument(
        "--repo-root",
        type=str,
        help="Project root holding .transclusion/ configuration (default: working directory)",
    )


def add_dry_run_flag(parser: argparse.ArgumentParser) -> None:
    """Add --dry-run flag."""
    parser.add_argument(
        "--dry-run",
        "-n",
        action="store_true",
        help="Show what would be composed without writing output",
    )


def add_log_level_flag(parser: argparse.ArgumentParser) -> None:
    """Add --log-level flag (overrides logging.level from configuration)."""
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        help="Log level for diagnostics on stderr",
    )


def add_input_arg(parser: argparse.ArgumentParser) -> None:
    """Add optional INPUT positional (stdin when omitted or '-')."""
    parser.add_argument(
        "input",
        nargs="?",
        help="Markdown file to process (default: read standard input)",
    )


def add_engine_flags(parser: argparse.ArgumentParser) -> None:
    """Add flags that map onto transclusion options.

    Flags left unset fall back to configuration values.
    """
    parser.add_argument(
        "--base-path",
        type=str,
        help="Sandbox root for transcluded files (default: input file directory)",
    )
    parser.add_argument(
        "--extensions",
        type=str,
        help="Comma-separated extensions tried for references without one (default: md,markdown)",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        help="Maximum nesting depth (default: 10)",
    )
    parser.add_argument(
        "--var",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Path variable for {{KEY}} inside directives (repeatable)",
    )
    parser.add_argument(
        "--template-var",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Template variable substituted in the composed output (repeatable)",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="Fail on undefined path variables and exit non-zero on any error",
    )
    parser.add_argument(
        "--strip-frontmatter",
        dest="strip_front_matter",
        action="store_true",
        default=None,
        help="Remove YAML/TOML front matter from the document and transcluded files",
    )
    parser.add_argument(
        "--no-headings",
        dest="extract_headings",
        action="store_false",
        default=None,
        help="Ignore #heading selectors and transclude whole files",
    )


def add_standard_flags(parser: argparse.ArgumentParser) -> None:
    """Add --json, --repo-root and --log-level."""
    add_json_flag(parser)
    add_repo_root_flag(parser)
    add_log_level_flag(parser)


__all__ = [
    "add_json_flag",
    "add_repo_root_flag",
    "add_dry_run_flag",
    "add_log_level_flag",
    "add_input_arg",
    "add_engine_flags",
    "add_standard_flags",
]
