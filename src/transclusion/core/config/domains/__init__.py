"""Domain-specific configuration accessors."""
from __future__ import annotations

from .logging import LoggingConfig
from .plugins import PluginsConfig
from .transclusion import TransclusionConfig

__all__ = ["LoggingConfig", "PluginsConfig", "TransclusionConfig"]
