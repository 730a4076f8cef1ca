"""Centralized configuration caching.

Loaded configuration is cached per project root. The cache key includes a
fingerprint of ``TRANSCLUSION_*`` environment variables and of the project
config files, so edits and env changes are picked up without explicit
invalidation.
"""
from __future__ import annotations

import hashlib
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

_config_cache: Dict[str, Dict[str, Any]] = {}


def _normalize_repo_root(repo_root: Optional[Path]) -> Path:
    if repo_root is None:
        return Path.cwd().resolve()
    return Path(repo_root).expanduser().resolve()


def _fingerprint(paths: List[Path]) -> str:
    entries: List[Tuple[str, int, int]] = []
    for p in paths:
        try:
            st = p.stat()
        except OSError:
            continue
        entries.append((str(p), int(st.st_mtime_ns), int(st.st_size)))
    return hashlib.sha256(repr(entries).encode("utf-8")).hexdigest()[:12]


def _cache_key(repo_root: Path) -> str:
    from .manager import ENV_PREFIX, PROJECT_CONFIG_DIRNAME, PROJECT_CONFIG_FILES, iter_yaml_files

    env_items = sorted((k, v) for k, v in os.environ.items() if k.startswith(ENV_PREFIX))
    env_fp = hashlib.sha256(repr(env_items).encode("utf-8")).hexdigest()[:12]

    files = iter_yaml_files(repo_root / PROJECT_CONFIG_DIRNAME / "config")
    files.extend(repo_root / name for name in PROJECT_CONFIG_FILES)
    return f"{repo_root}:env={env_fp}:cfg={_fingerprint(files)}"


def get_cached_config(repo_root: Optional[Path] = None, validate: bool = False) -> Dict[str, Any]:
    """Get configuration with caching.

    Args:
        repo_root: Project root. Defaults to the working directory.
        validate: Whether to validate against the schema on a cache miss.

    Returns:
        Configuration dictionary (cached; treat as immutable).
    """
    from .manager import ConfigManager

    root = _normalize_repo_root(repo_root)
    key = _cache_key(root)
    if key not in _config_cache:
        _config_cache[key] = ConfigManager(repo_root=root).load_config_uncached(validate=validate)
    return _config_cache[key]


def clear_all_caches() -> None:
    """Drop every cached configuration."""
    _config_cache.clear()


def is_cached(repo_root: Optional[Path] = None) -> bool:
    return _cache_key(_normalize_repo_root(repo_root)) in _config_cache


__all__ = ["get_cached_config", "clear_all_caches", "is_cached"]
