"""File access collaborators: validated reader, content caches, atomic writes."""
from __future__ import annotations

from .cache import CacheStats, FileCache, MemoryFileCache, NoopFileCache
from .reader import (
    BinaryFileError,
    FileNotFoundReadError,
    FileReader,
    FileReadError,
    FileTooLargeError,
    NotAFileError,
    PermissionDeniedError,
)
from .utils import read_yaml, write_text_atomic

__all__ = [
    "CacheStats",
    "FileCache",
    "MemoryFileCache",
    "NoopFileCache",
    "BinaryFileError",
    "FileNotFoundReadError",
    "FileReader",
    "FileReadError",
    "FileTooLargeError",
    "NotAFileError",
    "PermissionDeniedError",
    "read_yaml",
    "write_text_atomic",
]
