"""Unified CLI output formatting utilities.

Supports both JSON and text output modes. Composed documents go to stdout (or
the output file); diagnostics go to stderr.
"""
from __future__ import annotations

import json
import sys
from typing import Any, Dict, Iterable, List, Optional, Sequence

from transclusion.core.exceptions import TransclusionFrameworkError
from transclusion.core.file_io.reader import FileReader
from transclusion.core.transclusion.suggestions import Suggestion, suggest
from transclusion.core.transclusion.types import TransclusionError, TransclusionOptions


class OutputFormatter:
    """Unified output formatter for CLI commands."""

    def __init__(self, json_mode: bool = False, indent: int = 2):
        """Initialize formatter.

        Args:
            json_mode: If True, output JSON; otherwise output text
            indent: JSON indentation level
        """
        self.json_mode = json_mode
        self.indent = indent

    def success(
        self,
        data: Dict[str, Any],
        message: str,
        *,
        status: str = "success",
    ) -> None:
        """Output success result.

        Args:
            data: Result data dictionary
            message: Human-readable success message (used in text mode)
            status: Status string for JSON output
        """
        if self.json_mode:
            output = {"status": status, **data}
            print(json.dumps(output, indent=self.indent, default=str))
        else:
            print(message)

    def error(
        self,
        error: Exception,
        message: Optional[str] = None,
        *,
        error_code: str = "error",
    ) -> None:
        """Output error result.

        Args:
            error: The exception that occurred
            message: Optional human-readable message (defaults to str(error))
            error_code: Error code for JSON output
        """
        msg = message or str(error)
        if self.json_mode:
            output: Dict[str, Any] = {
                "error": error_code,
                "message": msg,
            }
            if isinstance(error, TransclusionFrameworkError) and error.context:
                output["context"] = error.context
            print(json.dumps(output, indent=self.indent, default=str), file=sys.stderr)
        else:
            print(f"Error: {msg}", file=sys.stderr)

    def transclusion_errors(
        self,
        errors: Iterable[TransclusionError],
        options: Optional[TransclusionOptions] = None,
        reader: Optional[FileReader] = None,
    ) -> None:
        """Report content errors on stderr (text mode only).

        With ``options`` each error is followed by its close-match suggestions.
        """
        if self.json_mode:
            return
        for err in errors:
            found = suggest(err, options, reader) if options is not None else []
            print(format_transclusion_error(err, found), file=sys.stderr)

    def json_output(self, data: Any) -> None:
        """Output raw JSON data."""
        print(json.dumps(data, indent=self.indent, default=str))

    def text(self, message: str) -> None:
        """Output plain text message."""
        print(message)

    def raw(self, content: str) -> None:
        """Write ``content`` to stdout exactly as given (no added newline)."""
        sys.stdout.write(content)
        sys.stdout.flush()

    def text_kv(self, key: str, value: Any, prefix: str = "  ") -> None:
        """Output key-value pair in text mode."""
        if not self.json_mode:
            print(f"{prefix}{key}: {value}")


def format_transclusion_error(
    error: TransclusionError, suggestions: Sequence[Suggestion] = ()
) -> str:
    """Text form: ``Warning: [CODE] message (line N)`` plus one line per suggestion."""
    location = f" (line {error.line})" if error.line is not None else ""
    lines = [f"Warning: [{error.code.value}] {error.message}{location}"]
    for item in suggestions:
        lines.append(f"  Did you mean: {item.text} ({item.percent}% match)")
    return "\n".join(lines)


def transclusion_error_dicts(
    errors: Iterable[TransclusionError],
    options: TransclusionOptions,
    reader: Optional[FileReader] = None,
) -> List[Dict[str, Any]]:
    """JSON form of ``errors``; ``suggestions`` is present only when there are any."""
    payload: List[Dict[str, Any]] = []
    for err in errors:
        data = err.to_dict()
        found = suggest(err, options, reader)
        if found:
            data["suggestions"] = [s.to_dict() for s in found]
        payload.append(data)
    return payload


def print_success(message: str) -> None:
    """Print success message with checkmark."""
    print(f"\u2713 {message}")


__all__ = [
    "OutputFormatter",
    "format_transclusion_error",
    "print_success",
    "transclusion_error_dicts",
]
