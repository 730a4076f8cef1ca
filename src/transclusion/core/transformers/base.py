"""Base classes for content transformers.

Transformers are plugins that rewrite whole documents around the
transclusion engine:

- ``pre``  stage - runs on the input document before directives are expanded
- ``post`` stage - runs on the composed output

Within a stage transformers run in ascending ``priority`` order. A
transformer that raises is logged and skipped; the pipeline continues with
the content it had before that transformer ran.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Set

if TYPE_CHECKING:
    from ..transclusion.types import TransclusionOptions

logger = logging.getLogger(__name__)

STAGE_PRE = "pre"
STAGE_POST = "post"
STAGES = (STAGE_PRE, STAGE_POST)


@dataclass
class TransformContext:
    """Context provided to transformers during processing.

    Contains:
    - Engine options of the document being composed
    - Template variables for output substitution
    - Source path (None for stdin / in-memory text)
    - Tracking for reporting
    """

    options: Optional[TransclusionOptions] = None
    variables: Dict[str, Any] = field(default_factory=dict)
    source_path: Optional[Path] = None
    stage: str = STAGE_POST

    # Tracking for reports
    variables_substituted: Set[str] = field(default_factory=set)
    variables_missing: Set[str] = field(default_factory=set)
    failed_transformers: List[str] = field(default_factory=list)

    def record_variable(self, name: str, resolved: bool) -> None:
        """Record variable resolution result."""
        if resolved:
            self.variables_substituted.add(name)
        else:
            self.variables_missing.add(name)


class ContentTransformer(ABC):
    """Abstract base class for content transformers.

    Example:
        class StripTrailingWhitespace(ContentTransformer):
            stage = "post"
            priority = 50

            def transform(self, content: str, context: TransformContext) -> str:
                return "\\n".join(line.rstrip() for line in content.split("\\n"))
    """

    stage: str = STAGE_POST
    priority: int = 100

    @abstractmethod
    def transform(self, content: str, context: TransformContext) -> str:
        """Transform content using this transformer's rules.

        Args:
            content: Input content to transform
            context: TransformContext with options, variables and tracking

        Returns:
            Transformed content
        """
        ...

    @property
    def name(self) -> str:
        """Transformer name for logging/debugging."""
        return self.__class__.__name__


class TransformerPipeline:
    """Execute transformers of one stage in priority order.

    Example:
        pipeline = TransformerPipeline([TemplateVariableTransformer()])
        result = pipeline.execute(content, context)
    """

    def __init__(self, transformers: Optional[Iterable[ContentTransformer]] = None) -> None:
        self.transformers: List[ContentTransformer] = list(transformers or [])

    def add_transformer(self, transformer: ContentTransformer) -> None:
        self.transformers.append(transformer)

    def ordered(self, stage: Optional[str] = None) -> List[ContentTransformer]:
        """Transformers of ``stage`` (all when None) sorted by priority.

        The sort is stable, so equal priorities keep registration order.
        """
        selected = [t for t in self.transformers if stage is None or t.stage == stage]
        return sorted(selected, key=lambda t: t.priority)

    def execute(self, content: str, context: TransformContext, stage: Optional[str] = None) -> str:
        """Run transformers on ``content``.

        Args:
            content: Input content
            context: TransformContext for the pipeline
            stage: Only run transformers of this stage (default: ``context.stage``)

        Returns:
            Transformed content
        """
        stage = stage or context.stage
        context.stage = stage
        result = content
        for transformer in self.ordered(stage):
            try:
                result = transformer.transform(result, context)
            except Exception as exc:
                logger.warning("Transformer %s failed, skipping: %s", transformer.name, exc)
                context.failed_transformers.append(transformer.name)
        return result

    def __len__(self) -> int:
        return len(self.transformers)


__all__ = [
    "STAGE_PRE",
    "STAGE_POST",
    "STAGES",
    "TransformContext",
    "ContentTransformer",
    "TransformerPipeline",
]
