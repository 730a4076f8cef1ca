"""Core library: transclusion engine, file access, configuration, plugins."""
from __future__ import annotations

from . import exceptions  # noqa: F401

__all__ = ["exceptions"]
