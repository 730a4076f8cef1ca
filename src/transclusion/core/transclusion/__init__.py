"""Recursive transclusion engine for ``![[...]]`` directives.

``api`` (``transclude``, ``transclude_file``) is imported from the top-level
package; this package exposes the engine building blocks.
"""
from __future__ import annotations

from .headings import extract_heading, extract_heading_range
from .parser import parse_references
from .processor import TransclusionProcessor
from .resolver import resolve_path
from .security import SecurityError
from .stream import FrontMatterState, TransclusionStream
from .types import (
    ErrorCode,
    FileResolution,
    ProcessingState,
    Token,
    TransclusionError,
    TransclusionOptions,
    TransclusionResult,
)
from .variables import UndefinedVariableError, substitute_variables

__all__ = [
    "extract_heading",
    "extract_heading_range",
    "parse_references",
    "TransclusionProcessor",
    "resolve_path",
    "SecurityError",
    "FrontMatterState",
    "TransclusionStream",
    "ErrorCode",
    "FileResolution",
    "ProcessingState",
    "Token",
    "TransclusionError",
    "TransclusionOptions",
    "TransclusionResult",
    "UndefinedVariableError",
    "substitute_variables",
]
