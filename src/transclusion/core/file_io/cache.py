"""Content caches for transcluded files.

A cache only changes how often files are read; composed output is identical
with or without one.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Protocol, runtime_checkable

logger = logging.getLogger(__name__)

DEFAULT_MAX_ENTRY_SIZE = 1024 * 1024


@runtime_checkable
class FileCache(Protocol):
    def get(self, path: str) -> Optional[str]: ...

    def set(self, path: str, content: str) -> None: ...


@dataclass
class CacheStats:
    hits: int = 0
    misses: int = 0
    size: int = 0


class MemoryFileCache:
    """In-memory cache keyed by absolute path.

    Entries larger than ``max_entry_size`` characters are not stored.
    """

    def __init__(self, max_entry_size: int = DEFAULT_MAX_ENTRY_SIZE) -> None:
        self.max_entry_size = max_entry_size
        self._entries: Dict[str, str] = {}
        self._hits = 0
        self._misses = 0

    def get(self, path: str) -> Optional[str]:
        content = self._entries.get(path)
        if content is None:
            self._misses += 1
        else:
            self._hits += 1
        return content

    def set(self, path: str, content: str) -> None:
        if len(content) > self.max_entry_size:
            logger.debug("Not caching %s (%d chars exceeds limit)", path, len(content))
            return
        self._entries[path] = content

    def clear(self) -> None:
        self._entries.clear()
        self._hits = 0
        self._misses = 0

    @property
    def stats(self) -> CacheStats:
        return CacheStats(hits=self._hits, misses=self._misses, size=len(self._entries))

    @property
    def total_size(self) -> int:
        """Total cached characters."""
        return sum(len(c) for c in self._entries.values())

    def __contains__(self, path: object) -> bool:
        return path in self._entries

    def __len__(self) -> int:
        return len(self._entries)


class NoopFileCache:
    """Cache that stores nothing."""

    def get(self, path: str) -> Optional[str]:
        return None

    def set(self, path: str, content: str) -> None:
        return None


__all__ = [
    "DEFAULT_MAX_ENTRY_SIZE",
    "FileCache",
    "CacheStats",
    "MemoryFileCache",
    "NoopFileCache",
]
