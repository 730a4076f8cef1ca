"""Configuration system.

Usage:
    from transclusion.core.config import ConfigManager, TransclusionConfig

    # Direct config manager usage
    manager = ConfigManager(repo_root=Path("/path/to/project"))
    config = manager.load_config()

    # Domain-specific accessors (recommended)
    options = TransclusionConfig(repo_root=Path("/path/to/project")).to_options()
"""
from __future__ import annotations

from .base import BaseDomainConfig
from .cache import clear_all_caches, get_cached_config, is_cached
from .domains import LoggingConfig, PluginsConfig, TransclusionConfig
from .manager import ConfigManager

__all__ = [
    "ConfigManager",
    "BaseDomainConfig",
    "get_cached_config",
    "clear_all_caches",
    "is_cached",
    "LoggingConfig",
    "PluginsConfig",
    "TransclusionConfig",
]
