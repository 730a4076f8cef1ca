"""Load content transformers from configuration specs.

A spec is either a string or a mapping:

- ``"package.module:ClassName"``     - importable module attribute
- ``"plugins/wrap.py:WrapTransformer"`` - attribute of a Python file (relative
  paths resolve against ``base_dir``)
- ``{"spec": "...", "options": {...}}`` - as above, instantiated with options

The attribute may be a ContentTransformer subclass (instantiated), a factory
callable returning a transformer, or a ready transformer instance.
"""
from __future__ import annotations

import importlib
import importlib.util
import logging
from pathlib import Path
from types import ModuleType
from typing import Any, Iterable, List, Mapping, Optional, Union

from ..exceptions import PluginLoadError
from .base import STAGES, ContentTransformer

logger = logging.getLogger(__name__)

TransformerSpec = Union[str, Mapping[str, Any]]


def load_module_from_path(path: Path, namespace: str = "transclusion.plugins") -> ModuleType:
    """Load a Python module from file without adding it to sys.modules."""
    module_name = f"{namespace}.{path.stem}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise PluginLoadError(f"Cannot load plugin module: {path}", spec=str(path))
    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as exc:
        raise PluginLoadError(f"Failed to load plugin module {path}: {exc}", spec=str(path)) from exc
    return module


def _import_target(target: str, base_dir: Optional[Path]) -> ModuleType:
    if target.endswith(".py"):
        path = Path(target)
        if not path.is_absolute() and base_dir is not None:
            path = base_dir / path
        if not path.is_file():
            raise PluginLoadError(f"Plugin file not found: {path}", spec=target)
        return load_module_from_path(path)
    try:
        return importlib.import_module(target)
    except ImportError as exc:
        raise PluginLoadError(f"Cannot import plugin module {target}: {exc}", spec=target) from exc


def _instantiate(obj: Any, options: Mapping[str, Any], spec: str) -> ContentTransformer:
    if isinstance(obj, ContentTransformer):
        if options:
            raise PluginLoadError(f"Options given for transformer instance: {spec}", spec=spec)
        return obj
    if not callable(obj):
        raise PluginLoadError(f"Not a transformer: {spec}", spec=spec)
    try:
        instance = obj(**options)
    except Exception as exc:
        raise PluginLoadError(f"Failed to create transformer {spec}: {exc}", spec=spec) from exc
    if not isinstance(instance, ContentTransformer):
        raise PluginLoadError(f"Not a transformer: {spec}", spec=spec)
    return instance


def load_transformer(spec: TransformerSpec, base_dir: Optional[Path] = None) -> ContentTransformer:
    """Load a single transformer from ``spec``.

    Raises:
        PluginLoadError: When the spec is malformed or cannot be loaded
    """
    options: Mapping[str, Any] = {}
    if isinstance(spec, Mapping):
        options = spec.get("options") or {}
        raw = spec.get("spec")
        if not isinstance(raw, str):
            raise PluginLoadError("Transformer mapping requires a 'spec' string")
        spec = raw

    target, sep, attr = spec.rpartition(":")
    if not sep or not target or not attr:
        raise PluginLoadError(f"Invalid transformer spec (expected 'module:attr'): {spec}", spec=spec)

    module = _import_target(target, base_dir)
    try:
        obj = getattr(module, attr)
    except AttributeError:
        raise PluginLoadError(f"Plugin attribute not found: {spec}", spec=spec) from None

    transformer = _instantiate(obj, options, spec)
    if transformer.stage not in STAGES:
        raise PluginLoadError(
            f"Invalid stage {transformer.stage!r} for transformer {spec}", spec=spec
        )
    logger.debug(
        "Loaded transformer %s (%s, priority %d)",
        transformer.name,
        transformer.stage,
        transformer.priority,
    )
    return transformer


def load_transformers(
    specs: Iterable[TransformerSpec], base_dir: Optional[Path] = None
) -> List[ContentTransformer]:
    """Load every transformer in ``specs``, in order."""
    return [load_transformer(spec, base_dir) for spec in specs]


__all__ = ["load_module_from_path", "load_transformer", "load_transformers"]
