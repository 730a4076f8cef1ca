"""
transclusion config show command.

SUMMARY: Show current configuration

Displays the merged configuration from bundled defaults, project overrides,
and environment variables. Supports filtering by key and multiple output formats.
"""

from __future__ import annotations

import argparse
import sys
from typing import Any

import yaml

from transclusion.cli import OutputFormatter, add_json_flag, add_repo_root_flag, get_repo_root
from transclusion.core.config import ConfigManager

SUMMARY = "Show current configuration"

_SECTION_ORDER = ["transclusion", "reader", "cache", "template", "plugins", "logging"]


def _nest_key(key: str, value: Any) -> Any:
    """Nest a dot-notation key into a YAML/JSON-friendly mapping."""
    parts = [p for p in str(key).split(".") if p]
    out = value
    for part in reversed(parts):
        out = {part: out}
    return out


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument(
        "key",
        nargs="?",
        help="Specific configuration key to show (e.g., 'transclusion.max_depth')",
    )
    parser.add_argument(
        "--format",
        choices=["json", "yaml", "table"],
        default="table",
        help="Output format (default: table)",
    )
    add_json_flag(parser)
    add_repo_root_flag(parser)


def _format_value(value: Any, indent: int = 0) -> str:
    """Format a value for table display."""
    prefix = "  " * indent
    if isinstance(value, dict):
        if not value:
            return "{}"
        lines = []
        for k, v in value.items():
            formatted = _format_value(v, indent + 1)
            if "\n" in formatted:
                lines.append(f"{prefix}{k}:")
                lines.append(formatted)
            else:
                lines.append(f"{prefix}{k}: {formatted}")
        return "\n".join(lines)
    if isinstance(value, list):
        if not value:
            return "[]"
        if all(isinstance(v, (str, int, float, bool)) for v in value):
            return f"[{', '.join(str(v) for v in value)}]"
        return "\n".join(f"{prefix}- {_format_value(v, indent + 1).strip()}" for v in value)
    if value is None:
        return "null"
    return str(value)


def _dump_yaml(data: Any) -> str:
    return yaml.safe_dump(
        data,
        default_flow_style=False,
        sort_keys=True,
        allow_unicode=True,
    ).rstrip()


def _print_table(formatter: OutputFormatter, config_data: dict) -> None:
    formatter.text("Transclusion Configuration")
    formatter.text("=" * 60)
    formatter.text("")

    known = [s for s in _SECTION_ORDER if s in config_data]
    remaining = sorted(set(config_data) - set(known))
    for section in known + remaining:
        formatter.text(f"[{section}]")
        value = config_data[section]
        if isinstance(value, dict):
            for k, v in value.items():
                formatted = _format_value(v, 1)
                if "\n" in formatted:
                    formatter.text(f"  {k}:")
                    for line in formatted.split("\n"):
                        formatter.text(f"  {line}")
                else:
                    formatter.text(f"  {k}: {formatted}")
        else:
            formatter.text(f"  {_format_value(value)}")
        formatter.text("")


def main(args: argparse.Namespace) -> int:
    """Show configuration - delegates to ConfigManager."""
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        config_manager = ConfigManager(get_repo_root(args))
        output_format = "json" if args.json else args.format

        if args.key:
            missing = object()
            value = config_manager.get(args.key, missing)
            if value is missing:
                formatter.error(KeyError(args.key), f"Key not found: {args.key}", error_code="key_not_found")
                return 1

            if output_format == "json":
                formatter.json_output({args.key: value})
            elif output_format == "yaml":
                formatter.text(_dump_yaml(_nest_key(args.key, value)))
            else:
                formatter.text(f"{args.key}:")
                formatter.text(_format_value(value, indent=1))
            return 0

        config_data = config_manager.get_all()
        if output_format == "json":
            formatter.json_output(config_data)
        elif output_format == "yaml":
            formatter.text(_dump_yaml(config_data))
        else:
            _print_table(formatter, config_data)
        return 0

    except Exception as e:
        formatter.error(e, error_code="config_show_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    cli_args = parser.parse_args()
    sys.exit(main(cli_args))
