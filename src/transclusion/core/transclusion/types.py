"""Data types shared by the transclusion engine.

- Token: one parsed ``![[...]]`` directive
- FileResolution: outcome of resolving a token's path
- TransclusionError: one recorded (non-fatal) content error
- TransclusionOptions: immutable per-document engine configuration
- ProcessingState: visited stack, error list and processed files of one document
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

DEFAULT_EXTENSIONS: Tuple[str, ...] = ("md", "markdown")
DEFAULT_MAX_DEPTH = 10


class ErrorCode(str, Enum):
    """Error taxonomy for content errors."""

    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    SECURITY_VIOLATION = "SECURITY_VIOLATION"
    INVALID_PATH = "INVALID_PATH"
    CIRCULAR_REFERENCE = "CIRCULAR_REFERENCE"
    MAX_DEPTH_EXCEEDED = "MAX_DEPTH_EXCEEDED"
    HEADING_NOT_FOUND = "HEADING_NOT_FOUND"
    READ_ERROR = "READ_ERROR"


@dataclass(frozen=True)
class Token:
    """A parsed transclusion directive.

    ``end_heading`` is None for the single-heading form and a (possibly empty)
    string for the range form; an empty ``heading`` in range form means the
    top of the document.
    """

    original: str
    path: str
    start: int
    end: int
    heading: Optional[str] = None
    end_heading: Optional[str] = None

    @property
    def is_range(self) -> bool:
        return self.end_heading is not None

    @property
    def wants_section(self) -> bool:
        """True when only part of the target file should be transcluded."""
        return self.is_range or bool(self.heading)


@dataclass(frozen=True)
class FileResolution:
    original_reference: str
    absolute_path: str = ""
    exists: bool = False
    error: Optional[str] = None
    error_code: Optional[ErrorCode] = None

    @property
    def ok(self) -> bool:
        return self.exists and not self.error


@dataclass(frozen=True)
class TransclusionError:
    """A content error recorded while composing a document."""

    message: str
    path: str
    code: ErrorCode
    line: Optional[int] = None
    heading: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "code": self.code.value,
            "message": self.message,
            "path": self.path,
        }
        if self.line is not None:
            data["line"] = self.line
        if self.heading is not None:
            data["heading"] = self.heading
        return data


@dataclass(frozen=True)
class TransclusionOptions:
    """Engine configuration for one document."""

    base_path: Path = field(default_factory=Path.cwd)
    parent_path: Optional[Path] = None
    extensions: Tuple[str, ...] = DEFAULT_EXTENSIONS
    variables: Mapping[str, str] = field(default_factory=dict)
    strict: bool = False
    max_depth: int = DEFAULT_MAX_DEPTH
    extract_headings: bool = True
    strip_front_matter: bool = False

    def __post_init__(self) -> None:
        # Normalise loosely typed inputs (lists, str paths) without losing immutability.
        object.__setattr__(self, "base_path", Path(self.base_path))
        if self.parent_path is not None:
            object.__setattr__(self, "parent_path", Path(self.parent_path))
        object.__setattr__(self, "extensions", tuple(self.extensions))
        object.__setattr__(self, "variables", MappingProxyType(dict(self.variables)))
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be >= 1, got {self.max_depth}")


@dataclass
class ProcessingState:
    """Mutable per-document state of the recursive processor.

    ``stack`` is the ordered list of files currently being expanded. It is
    also the cycle-detection set: a path never appears in it twice.
    """

    stack: List[str] = field(default_factory=list)
    errors: List[TransclusionError] = field(default_factory=list)
    processed_files: List[str] = field(default_factory=list)

    @property
    def depth(self) -> int:
        return len(self.stack)

    def push(self, path: str) -> None:
        if path in self.stack:
            raise ValueError(f"Path already on the visited stack: {path}")
        self.stack.append(path)

    def pop(self) -> str:
        return self.stack.pop()

    def record_error(self, error: TransclusionError) -> None:
        self.errors.append(error)

    def record_file(self, path: str) -> None:
        if path not in self.processed_files:
            self.processed_files.append(path)


@dataclass(frozen=True)
class TransclusionResult:
    """Composed document plus everything recorded while composing it."""

    content: str
    errors: List[TransclusionError]
    processed_files: List[str]

    @property
    def ok(self) -> bool:
        return not self.errors


__all__ = [
    "DEFAULT_EXTENSIONS",
    "DEFAULT_MAX_DEPTH",
    "ErrorCode",
    "Token",
    "FileResolution",
    "TransclusionError",
    "TransclusionOptions",
    "ProcessingState",
    "TransclusionResult",
]
