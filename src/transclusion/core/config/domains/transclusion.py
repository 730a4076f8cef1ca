"""Domain-specific configuration for the transclusion engine.

Covers the ``transclusion`` section plus the ``reader`` and ``cache``
sections that configure the engine's collaborators.
"""
from __future__ import annotations

from functools import cached_property
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from ...file_io.cache import FileCache, MemoryFileCache, NoopFileCache
from ...file_io.reader import DEFAULT_MAX_FILE_SIZE, FileReader
from ...transclusion.types import DEFAULT_EXTENSIONS, DEFAULT_MAX_DEPTH, TransclusionOptions
from ..base import BaseDomainConfig


class TransclusionConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "transclusion"

    @cached_property
    def base_path(self) -> Optional[Path]:
        """Configured sandbox root; relative values resolve against the project root."""
        raw = self.section.get("base_path")
        if not raw:
            return None
        path = Path(str(raw)).expanduser()
        return path if path.is_absolute() else self.repo_root / path

    @cached_property
    def extensions(self) -> Tuple[str, ...]:
        raw = self.section.get("extensions")
        if not raw:
            return DEFAULT_EXTENSIONS
        return tuple(str(e) for e in raw)

    @cached_property
    def variables(self) -> Dict[str, str]:
        return {str(k): str(v) for k, v in (self.section.get("variables") or {}).items()}

    @cached_property
    def strict(self) -> bool:
        return bool(self.section.get("strict", False))

    @cached_property
    def max_depth(self) -> int:
        return int(self.section.get("max_depth", DEFAULT_MAX_DEPTH))

    @cached_property
    def extract_headings(self) -> bool:
        return bool(self.section.get("extract_headings", True))

    @cached_property
    def strip_front_matter(self) -> bool:
        return bool(self.section.get("strip_front_matter", False))

    @cached_property
    def max_file_size(self) -> int:
        reader = self._config.get("reader") or {}
        return int(reader.get("max_file_size", DEFAULT_MAX_FILE_SIZE))

    @cached_property
    def cache_enabled(self) -> bool:
        cache = self._config.get("cache") or {}
        return bool(cache.get("enabled", True))

    @cached_property
    def cache_max_entry_size(self) -> int:
        cache = self._config.get("cache") or {}
        return int(cache.get("max_entry_size", DEFAULT_MAX_FILE_SIZE))

    def build_reader(self) -> FileReader:
        return FileReader(max_size=self.max_file_size)

    def build_cache(self) -> FileCache:
        if not self.cache_enabled:
            return NoopFileCache()
        return MemoryFileCache(max_entry_size=self.cache_max_entry_size)

    def to_options(
        self,
        *,
        default_base_path: Optional[Path] = None,
        parent_path: Optional[Path] = None,
        **overrides: Any,
    ) -> TransclusionOptions:
        """Build engine options from configuration.

        Args:
            default_base_path: Sandbox root used when none is configured
            parent_path: Path of the document being composed
            **overrides: Option values that take precedence (e.g. CLI flags);
                ``None`` values are ignored

        Returns:
            Immutable TransclusionOptions
        """
        values: Dict[str, Any] = {
            "base_path": self.base_path or default_base_path or Path.cwd(),
            "parent_path": parent_path,
            "extensions": self.extensions,
            "variables": self.variables,
            "strict": self.strict,
            "max_depth": self.max_depth,
            "extract_headings": self.extract_headings,
            "strip_front_matter": self.strip_front_matter,
        }
        for key, value in overrides.items():
            if value is None:
                continue
            if key not in values:
                raise TypeError(f"Unknown transclusion option: {key}")
            if key == "variables":
                value = {**values["variables"], **value}
            values[key] = value
        return TransclusionOptions(**values)


__all__ = ["TransclusionConfig"]
