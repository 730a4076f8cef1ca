"""
Layered YAML configuration management.
"""
from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from ...data import get_data_path
from ..exceptions import ConfigError
from ..file_io.utils import read_yaml
from ..utils.merge import deep_merge as _deep_merge
from .schema import CONFIG_SCHEMA, validate_payload

# Module logger (warnings are user-visible via CLI log config).
logger = logging.getLogger(__name__)

ENV_PREFIX = "TRANSCLUSION_"
PROJECT_CONFIG_DIRNAME = ".transclusion"
PROJECT_CONFIG_FILES = (".transclusion.yaml", ".transclusion.yml")

PathSegment = Union[str, int]


def iter_yaml_files(directory: Path) -> List[Path]:
    """Return ``*.yaml`` and ``*.yml`` files of ``directory`` in name order."""
    d = Path(directory)
    if not d.is_dir():
        return []
    return sorted(
        (p for p in d.iterdir() if p.is_file() and p.suffix in (".yaml", ".yml")),
        key=lambda p: p.name,
    )


class ConfigManager:
    """Load, merge, and validate configuration.

    Configuration sources (highest to lowest priority):
    1. Environment variables: TRANSCLUSION_<SECTION>__<KEY>
    2. Project file: <project>/.transclusion.yaml (or .yml)
    3. Project config: <project>/.transclusion/config/*.yaml (alphabetical order)
    4. Bundled defaults: transclusion.data/config/*.yaml (alphabetical order)

    CLI flags are applied on top by the commands.
    """

    def __init__(self, repo_root: Optional[Path] = None) -> None:
        self.repo_root = Path(repo_root) if repo_root is not None else Path.cwd()

        # Bundled defaults from the data package (always available)
        self.core_config_dir = get_data_path("config")

        # Project-specific config overrides
        self.project_config_dir = self.repo_root / PROJECT_CONFIG_DIRNAME / "config"
        self.project_config_files = [self.repo_root / name for name in PROJECT_CONFIG_FILES]

    @property
    def project_root(self) -> Path:
        return self.repo_root

    def deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge dictionaries. Delegates to shared implementation."""
        return _deep_merge(base, override)

    def load_yaml(self, path: Path) -> Dict[str, Any]:
        # Fail closed: configuration must never silently ignore invalid YAML.
        data = read_yaml(path, default={}, raise_on_error=True)
        if not isinstance(data, dict):
            raise ConfigError(
                f"Configuration file must contain a mapping: {path}",
                context={"path": str(path)},
            )
        return data

    def _load_directory(self, directory: Path, cfg: Dict[str, Any]) -> Dict[str, Any]:
        for path in iter_yaml_files(directory):
            logger.debug("Loading config layer %s", path)
            cfg = self.deep_merge(cfg, self.load_yaml(path))
        return cfg

    def _load_project_file(self, cfg: Dict[str, Any]) -> Dict[str, Any]:
        for path in self.project_config_files:
            if path.is_file():
                logger.debug("Loading project config %s", path)
                return self.deep_merge(cfg, self.load_yaml(path))
        return cfg

    # ========== Environment overrides ==========

    def _as_bool(self, v: str) -> Optional[bool]:
        low = v.strip().lower()
        if low in {"true", "false"}:
            return low == "true"
        return None

    def _as_int(self, v: str) -> Optional[int]:
        if re.fullmatch(r"[-+]?\d+", v.strip() or " "):
            return int(v)
        return None

    def _as_float(self, v: str) -> Optional[float]:
        s = v.strip()
        if re.fullmatch(r"[-+]?\d*\.\d+", s) or re.fullmatch(r"[-+]?\d+\.\d*", s):
            return float(s)
        return None

    def _as_json(self, v: str) -> Optional[Any]:
        s = v.strip()
        if (s.startswith("{") and s.endswith("}")) or (s.startswith("[") and s.endswith("]")):
            try:
                return json.loads(s)
            except json.JSONDecodeError:
                return None
        return None

    def _coerce_type(self, value: str) -> Any:
        for caster in (self._as_bool, self._as_int, self._as_float, self._as_json):
            result = caster(value)
            if result is not None:
                return result
        return value.strip()

    def _parse_env_key(self, raw: str) -> List[PathSegment]:
        segments: List[PathSegment] = []
        for seg in raw.split("__"):
            if seg == "":
                raise ConfigError(
                    f"Malformed {ENV_PREFIX}* key: empty segment in '{raw}'",
                    context={"key": ENV_PREFIX + raw},
                )
            segments.append(int(seg) if seg.isdigit() else seg.lower())
        return segments

    def iter_env_overrides(self) -> Iterator[Tuple[List[PathSegment], Any]]:
        for key in sorted(os.environ):
            if not key.startswith(ENV_PREFIX):
                continue
            raw = key[len(ENV_PREFIX):]
            if not raw:
                continue
            yield self._parse_env_key(raw), self._coerce_type(os.environ[key])

    def _set_nested(self, root: Dict[str, Any], path: List[PathSegment], value: Any) -> None:
        cur: Any = root
        for part, nxt in zip(path, path[1:]):
            if not isinstance(cur, dict) or isinstance(part, int):
                raise ConfigError(f"Cannot override config path: {'.'.join(map(str, path))}")
            if not isinstance(cur.get(part), (dict, list)):
                cur[part] = [] if isinstance(nxt, int) else {}
            cur = cur[part]

        leaf = path[-1]
        if isinstance(leaf, int):
            if not isinstance(cur, list):
                raise ConfigError(f"Index assignment requires list: {'.'.join(map(str, path))}")
            while len(cur) <= leaf:
                cur.append(None)
            cur[leaf] = value
            return
        if not isinstance(cur, dict):
            raise ConfigError(f"Key assignment requires mapping: {'.'.join(map(str, path))}")
        cur[leaf] = value

    def apply_env_overrides(self, cfg: Dict[str, Any]) -> None:
        for path, value in self.iter_env_overrides():
            logger.debug("Environment override %s = %r", ".".join(map(str, path)), value)
            self._set_nested(cfg, path, value)

    # ========== Loading ==========

    def load_config_uncached(self, validate: bool = True) -> Dict[str, Any]:
        """Load and merge configuration from every layer (no caching).

        Args:
            validate: If True, validate the merged result against the bundled schema

        Returns:
            Merged configuration dictionary

        Raises:
            ConfigError: On invalid YAML, malformed overrides or schema violations
        """
        cfg: Dict[str, Any] = {}

        # Layer 1: Core config (bundled defaults)
        cfg = self._load_directory(self.core_config_dir, cfg)

        # Layer 2: Project config directory
        cfg = self._load_directory(self.project_config_dir, cfg)

        # Layer 3: Project config file
        cfg = self._load_project_file(cfg)

        # Layer 4: Environment overrides
        self.apply_env_overrides(cfg)

        if validate:
            validate_payload(cfg, CONFIG_SCHEMA)
        return cfg

    def load_config(self, validate: bool = True) -> Dict[str, Any]:
        """Load configuration using the centralized cache.

        Returned dict should be treated as immutable.
        """
        from .cache import get_cached_config

        cfg = get_cached_config(repo_root=self.repo_root, validate=False)
        if validate:
            validate_payload(cfg, CONFIG_SCHEMA)
        return cfg

    # ========== Accessor Methods ==========

    def get_all(self) -> Dict[str, Any]:
        """Get full merged configuration."""
        return self.load_config(validate=False)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a config value by dot-notation key.

        Example:
            >>> manager.get('transclusion.max_depth')
            10
            >>> manager.get('nonexistent.key', 'fallback')
            'fallback'
        """
        current: Any = self.load_config(validate=False)
        for part in key.split("."):
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return default
        return current


__all__ = ["ConfigManager", "iter_yaml_files", "ENV_PREFIX"]
