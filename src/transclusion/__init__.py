"""Recursive Markdown transclusion.

Expands ``![[file]]``, ``![[file#Heading]]`` and ``![[file#Start:End]]``
directives into the referenced content.

    from transclusion import TransclusionOptions, transclude_file

    result = transclude_file("docs/index.md")
    print(result.content)
"""
from __future__ import annotations

__version__ = "1.0.0"

from .core.exceptions import ConfigError, PluginLoadError, TransclusionFrameworkError
from .core.file_io import FileReader, FileReadError, MemoryFileCache, NoopFileCache
from .core.transclusion import (
    ErrorCode,
    TransclusionError,
    TransclusionOptions,
    TransclusionProcessor,
    TransclusionResult,
    TransclusionStream,
)
from .core.transclusion.api import iter_transclude, iter_transclude_file, transclude, transclude_file
from .core.transformers import ContentTransformer, TemplateVariableTransformer, TransformContext

__all__ = [
    "__version__",
    "transclude",
    "transclude_file",
    "iter_transclude",
    "iter_transclude_file",
    "ErrorCode",
    "TransclusionError",
    "TransclusionOptions",
    "TransclusionProcessor",
    "TransclusionResult",
    "TransclusionStream",
    "FileReader",
    "FileReadError",
    "MemoryFileCache",
    "NoopFileCache",
    "ContentTransformer",
    "TemplateVariableTransformer",
    "TransformContext",
    "ConfigError",
    "PluginLoadError",
    "TransclusionFrameworkError",
]
