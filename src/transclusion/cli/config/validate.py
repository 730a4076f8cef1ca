"""
transclusion config validate command.

SUMMARY: Validate project configuration

Merges every configuration layer and checks the result against the bundled
schema, then checks the configured base path.
"""

from __future__ import annotations

import argparse
import sys
from typing import List, Tuple

from transclusion.cli import OutputFormatter, add_json_flag, add_repo_root_flag, get_repo_root
from transclusion.core.config import ConfigManager, TransclusionConfig
from transclusion.core.config.schema import schema_errors
from transclusion.core.exceptions import ConfigError

SUMMARY = "Validate project configuration"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Enable strict validation (treat warnings as errors)",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Only output errors, no success messages",
    )
    add_json_flag(parser)
    add_repo_root_flag(parser)


def _check_paths(manager: ConfigManager, config: dict) -> List[Tuple[str, str]]:
    """Check that a configured base path exists."""
    issues: List[Tuple[str, str]] = []
    section = config.get("transclusion") or {}
    if section.get("base_path") is None:
        return issues
    base = TransclusionConfig(repo_root=manager.repo_root, config=config).base_path
    if base is not None and not base.is_dir():
        issues.append(("warning", f"transclusion.base_path does not exist: {base}"))
    return issues


def main(args: argparse.Namespace) -> int:
    """Validate configuration."""
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        manager = ConfigManager(get_repo_root(args))
        config = manager.load_config_uncached(validate=False)
    except ConfigError as e:
        formatter.error(e, error_code="config_error")
        return 1

    issues: List[Tuple[str, str]] = [("error", msg) for msg in schema_errors(config)]
    if not any(level == "error" for level, _ in issues):
        issues.extend(_check_paths(manager, config))

    errors = [msg for level, msg in issues if level == "error"]
    warnings = [msg for level, msg in issues if level == "warning"]
    failed = bool(errors) or (args.strict and bool(warnings))

    if formatter.json_mode:
        formatter.json_output(
            {
                "valid": not failed,
                "errors": errors,
                "warnings": warnings,
            }
        )
        return 1 if failed else 0

    for msg in errors:
        formatter.text(f"ERROR: {msg}")
    for msg in warnings:
        formatter.text(f"WARNING: {msg}")

    if failed:
        formatter.text(f"\nConfiguration invalid ({len(errors)} error(s), {len(warnings)} warning(s))")
        return 1
    if not args.quiet:
        formatter.text("Configuration is valid")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    cli_args = parser.parse_args()
    sys.exit(main(cli_args))
