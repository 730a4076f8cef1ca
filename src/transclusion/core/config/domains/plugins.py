"""Domain-specific configuration for content transformer plugins.

Covers the ``plugins`` section (transformer specs) and the ``template``
section (output variables).
"""
from __future__ import annotations

from functools import cached_property
from typing import Any, Dict, List

from ...transformers.base import ContentTransformer
from ...transformers.loader import TransformerSpec, load_transformers
from ..base import BaseDomainConfig


class PluginsConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "plugins"

    @cached_property
    def transformer_specs(self) -> List[TransformerSpec]:
        return list(self.section.get("transformers") or [])

    @cached_property
    def template_variables(self) -> Dict[str, Any]:
        template = self._config.get("template") or {}
        return dict(template.get("variables") or {})

    def load_transformers(self) -> List[ContentTransformer]:
        """Instantiate configured transformers; relative file specs resolve against the project root.

        Raises:
            PluginLoadError: When any spec cannot be loaded
        """
        return load_transformers(self.transformer_specs, base_dir=self.repo_root)


__all__ = ["PluginsConfig"]
