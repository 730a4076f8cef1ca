"""Sandbox checks for transclusion paths.

A reference must never reach outside the sandbox root (the configured base
path). Checks run on the variable-substituted reference:

- NUL bytes are rejected outright
- absolute references (POSIX, Windows drive, UNC, and their URL-encoded
  forms) are rejected
- relative references may contain ``..`` but the resolved candidate must stay
  inside the root (``is_within``)
"""
from __future__ import annotations

import re
from pathlib import Path, PurePosixPath, PureWindowsPath
from urllib.parse import unquote

_WINDOWS_DRIVE = re.compile(r"^[A-Za-z]:[/\\]")
_UNC_PREFIX = re.compile(r"^[/\\]{2}")


class SecurityError(ValueError):
    """Raised when a reference violates the sandbox."""

    NULL_BYTE = "Null bytes in paths are not allowed"
    ABSOLUTE_PATH = "Absolute paths are not allowed"
    ENCODED_ABSOLUTE = "Path traversal attempts are not allowed"

    def __init__(self, message: str, *, reference: str = "") -> None:
        super().__init__(message)
        self.reference = reference


def _is_absolute(reference: str) -> bool:
    if PurePosixPath(reference).is_absolute() or PureWindowsPath(reference).is_absolute():
        return True
    return bool(_WINDOWS_DRIVE.match(reference) or _UNC_PREFIX.match(reference))


def validate_reference(reference: str) -> str:
    """Validate a substituted reference before it touches the filesystem.

    Args:
        reference: Reference path after variable substitution

    Returns:
        The reference unchanged

    Raises:
        SecurityError: On NUL bytes or absolute paths
    """
    if "\0" in reference:
        raise SecurityError(SecurityError.NULL_BYTE, reference=reference)

    if _is_absolute(reference):
        raise SecurityError(SecurityError.ABSOLUTE_PATH, reference=reference)

    decoded = unquote(reference)
    if decoded != reference and ("\0" in decoded or _is_absolute(decoded)):
        raise SecurityError(SecurityError.ENCODED_ABSOLUTE, reference=reference)

    return reference


def is_within(candidate: Path, root: Path) -> bool:
    """Return True when ``candidate`` resolves to ``root`` or below it.

    Comparison is on resolved path components (symlinks followed), so
    ``/docs-evil`` is not inside ``/docs``.
    """
    try:
        c = candidate.resolve()
        r = root.resolve()
    except (OSError, RuntimeError):
        return False
    return c == r or c.is_relative_to(r)


def ensure_within(candidate: Path, root: Path, reference: str) -> Path:
    """Resolve ``candidate`` and ensure it stays inside ``root``.

    Raises:
        SecurityError: When the candidate escapes the root
    """
    if not is_within(candidate, root):
        raise SecurityError(
            f"Path resolves outside base directory: {reference}",
            reference=reference,
        )
    return candidate.resolve()


__all__ = ["SecurityError", "validate_reference", "is_within", "ensure_within"]
