"""Resolve transclusion references to files inside the sandbox root.

Resolution pipeline (each stage short-circuits with a typed error):
1. VARIABLES  - ``{{name}}`` substitution (strict mode fails on unknown names)
2. SECURITY   - NUL bytes, absolute paths, escapes from the base path
3. EXTENSIONS - candidate file names (``name.md``, ``name.markdown``, ...)
4. EXISTENCE  - first candidate that is a regular file wins

Candidates are searched relative to the including file's directory first,
then relative to the base path.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from .security import SecurityError, ensure_within, validate_reference
from .types import DEFAULT_EXTENSIONS, ErrorCode, FileResolution, TransclusionOptions
from .variables import UndefinedVariableError, substitute_variables

logger = logging.getLogger(__name__)


def normalize_extensions(extensions: Iterable[str]) -> List[str]:
    """Return extensions with a leading dot, dropping empty entries."""
    result: List[str] = []
    for ext in extensions:
        ext = str(ext).strip()
        if not ext:
            continue
        result.append(ext if ext.startswith(".") else f".{ext}")
    return result


def has_extension(reference: str) -> bool:
    name = reference.replace("\\", "/").rsplit("/", 1)[-1]
    return os.path.splitext(name)[1] != ""


def candidate_names(reference: str, extensions: Sequence[str] = DEFAULT_EXTENSIONS) -> List[str]:
    """Enumerate file names to probe for ``reference``.

    A reference that already carries an extension is its only candidate.
    Otherwise each configured extension is appended in order.
    """
    if has_extension(reference):
        return [reference]
    return [reference + ext for ext in normalize_extensions(extensions)]


def _search_bases(options: TransclusionOptions) -> List[Path]:
    bases: List[Path] = []
    if options.parent_path is not None:
        bases.append(Path(options.parent_path).parent)
    base = Path(options.base_path)
    if base not in bases:
        bases.append(base)
    return bases


def _is_file(candidate: Path) -> bool:
    # Over-long names and unreadable directories raise instead of reporting a miss.
    try:
        return candidate.is_file()
    except OSError as exc:
        logger.debug("Cannot probe %s: %s", candidate, exc)
        return False


def _failure(reference: str, message: str, code: ErrorCode) -> FileResolution:
    return FileResolution(
        original_reference=reference,
        absolute_path="",
        exists=False,
        error=message,
        error_code=code,
    )


def resolve_path(reference: str, options: TransclusionOptions) -> FileResolution:
    """Resolve a raw transclusion reference.

    Args:
        reference: Path part of the directive, as written
        options: Engine options (base path, parent path, extensions, variables)

    Returns:
        FileResolution; ``absolute_path`` is empty unless the file was found
    """
    try:
        substituted = substitute_variables(reference, options.variables, strict=options.strict)
    except UndefinedVariableError as exc:
        return _failure(reference, str(exc), ErrorCode.INVALID_PATH)

    try:
        validate_reference(substituted)
    except SecurityError as exc:
        return _failure(reference, str(exc), ErrorCode.SECURITY_VIOLATION)

    root = Path(options.base_path)
    names = candidate_names(substituted, options.extensions)
    security_error: Optional[SecurityError] = None
    probed_inside_root = False

    for search_base in _search_bases(options):
        for name in names:
            try:
                candidate = ensure_within(search_base / name, root, substituted)
            except SecurityError as exc:
                security_error = exc
                continue
            probed_inside_root = True
            if _is_file(candidate):
                logger.debug("Resolved %s -> %s", reference, candidate)
                return FileResolution(
                    original_reference=reference,
                    absolute_path=str(candidate),
                    exists=True,
                )

    if security_error is not None and not probed_inside_root:
        return _failure(reference, str(security_error), ErrorCode.SECURITY_VIOLATION)

    return _failure(reference, f"File not found: {reference}", ErrorCode.FILE_NOT_FOUND)


__all__ = ["normalize_extensions", "has_extension", "candidate_names", "resolve_path"]
