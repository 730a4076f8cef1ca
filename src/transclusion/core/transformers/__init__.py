"""Content transformer plugins run before and after transclusion."""
from __future__ import annotations

from .base import (
    STAGE_POST,
    STAGE_PRE,
    STAGES,
    ContentTransformer,
    TransformContext,
    TransformerPipeline,
)
from .loader import load_transformer, load_transformers
from .variables import TemplateVariableTransformer

__all__ = [
    "STAGE_POST",
    "STAGE_PRE",
    "STAGES",
    "ContentTransformer",
    "TransformContext",
    "TransformerPipeline",
    "TemplateVariableTransformer",
    "load_transformer",
    "load_transformers",
]
