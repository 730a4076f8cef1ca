"""High-level entry points for composing documents.

- ``transclude``            - compose an in-memory document
- ``transclude_file``       - compose a file (base path defaults to its directory)
- ``iter_transclude``       - streaming composition over an iterable of chunks
- ``iter_transclude_file``  - streaming composition of a file

The top-level document is always consumed as a stream of chunks, so it is not
subject to the reader's size limit; that limit applies to transcluded files.
"""
from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Iterable, Iterator, List, Mapping, Optional, Sequence, Union

from ..file_io.cache import FileCache, MemoryFileCache
from ..file_io.reader import FileReader
from ..transformers.base import (
    STAGE_POST,
    STAGE_PRE,
    ContentTransformer,
    TransformContext,
    TransformerPipeline,
)
from ..transformers.variables import TemplateVariableTransformer
from .processor import TransclusionProcessor
from .content import strip_bom
from .stream import Chunk, TransclusionStream
from .types import ProcessingState, TransclusionOptions, TransclusionResult

logger = logging.getLogger(__name__)


def _default_cache(options: TransclusionOptions, cache: Optional[FileCache]) -> Optional[FileCache]:
    # Nested documents re-read shared fragments; a flat document never does.
    if cache is None and options.max_depth > 1:
        return MemoryFileCache()
    return cache


def _build_pipeline(
    transformers: Optional[Sequence[ContentTransformer]],
    template_variables: Optional[Mapping[str, Any]],
) -> TransformerPipeline:
    pipeline = TransformerPipeline(transformers or [])
    if template_variables and not any(
        isinstance(t, TemplateVariableTransformer) for t in pipeline.transformers
    ):
        pipeline.add_transformer(TemplateVariableTransformer())
    return pipeline


def _read_all(chunks: Iterable[Chunk]) -> str:
    parts = list(chunks)
    if parts and isinstance(parts[0], bytes):
        return strip_bom(b"".join(parts).decode("utf-8", errors="replace"))
    return "".join(parts)


def _file_options(source: Path, options: Optional[TransclusionOptions]) -> TransclusionOptions:
    if options is None:
        return TransclusionOptions(base_path=source.parent, parent_path=source)
    return replace(options, parent_path=source)


def _compose(
    chunks: Iterable[Chunk],
    options: TransclusionOptions,
    *,
    reader: Optional[FileReader],
    cache: Optional[FileCache],
    transformers: Optional[Sequence[ContentTransformer]],
    template_variables: Optional[Mapping[str, Any]],
    source_path: Optional[Path],
    state: ProcessingState,
) -> TransclusionResult:
    pipeline = _build_pipeline(transformers, template_variables)
    context = TransformContext(
        options=options,
        variables=dict(template_variables or {}),
        source_path=source_path,
        stage=STAGE_PRE,
    )

    # Pre transformers see the whole document; without them the input stays a stream.
    if pipeline.ordered(STAGE_PRE):
        chunks = [pipeline.execute(_read_all(chunks), context, STAGE_PRE)]

    processor = TransclusionProcessor(
        options, reader=reader, cache=_default_cache(options, cache), state=state
    )
    stream = TransclusionStream(options, processor=processor)
    content = "".join(stream.iter_transform(chunks))

    content = pipeline.execute(content, context, STAGE_POST)

    logger.debug(
        "Composed document: %d file(s), %d error(s)",
        len(state.processed_files),
        len(state.errors),
    )
    return TransclusionResult(
        content=content,
        errors=list(state.errors),
        processed_files=list(state.processed_files),
    )


def transclude(
    text: str,
    options: Optional[TransclusionOptions] = None,
    *,
    reader: Optional[FileReader] = None,
    cache: Optional[FileCache] = None,
    transformers: Optional[Sequence[ContentTransformer]] = None,
    template_variables: Optional[Mapping[str, Any]] = None,
) -> TransclusionResult:
    """Expand every transclusion directive in ``text``.

    Args:
        text: Document content
        options: Engine options (default: current directory as base path)
        reader: File reader (default ``FileReader()``)
        cache: Content cache (default: in-memory cache when nesting is allowed)
        transformers: Pre/post content transformers
        template_variables: ``{{name}}`` values substituted in the output

    Returns:
        TransclusionResult with the composed content, errors and files read
    """
    options = options or TransclusionOptions()
    return _compose(
        [text],
        options,
        reader=reader,
        cache=cache,
        transformers=transformers,
        template_variables=template_variables,
        source_path=options.parent_path,
        state=ProcessingState(),
    )


def transclude_file(
    path: Union[str, Path],
    options: Optional[TransclusionOptions] = None,
    *,
    reader: Optional[FileReader] = None,
    cache: Optional[FileCache] = None,
    transformers: Optional[Sequence[ContentTransformer]] = None,
    template_variables: Optional[Mapping[str, Any]] = None,
) -> TransclusionResult:
    """Compose the document stored at ``path``.

    The file itself is the parent path of its top-level directives and is
    listed first in ``processed_files``. Without options the file's directory
    is the sandbox root. The file is read in chunks, so the reader's size
    limit does not apply to it.

    Raises:
        FileReadError: When the input file itself cannot be opened
    """
    source = Path(path).resolve()
    reader = reader or FileReader()
    chunks = reader.iter_chunks(source)

    return _compose(
        chunks,
        _file_options(source, options),
        reader=reader,
        cache=cache,
        transformers=transformers,
        template_variables=template_variables,
        source_path=source,
        state=ProcessingState(processed_files=[str(source)]),
    )


def iter_transclude(
    chunks: Iterable[Chunk],
    options: Optional[TransclusionOptions] = None,
    *,
    reader: Optional[FileReader] = None,
    cache: Optional[FileCache] = None,
    errors: Optional[List] = None,
) -> Iterator[str]:
    """Stream ``chunks`` through the engine, yielding output as lines complete.

    Chunks are pulled from ``chunks`` only as output is consumed. Recorded
    errors are appended to ``errors`` when a list is given.
    """
    options = options or TransclusionOptions()
    stream = TransclusionStream(options, reader=reader, cache=_default_cache(options, cache))
    try:
        yield from stream.iter_transform(chunks)
    finally:
        if errors is not None:
            errors.extend(stream.errors)


def iter_transclude_file(
    path: Union[str, Path],
    options: Optional[TransclusionOptions] = None,
    *,
    reader: Optional[FileReader] = None,
    cache: Optional[FileCache] = None,
    errors: Optional[List] = None,
) -> Iterator[str]:
    """Stream the document stored at ``path``, yielding output as lines complete.

    Options are derived as in ``transclude_file``. The file is opened before
    this returns, so a missing input fails immediately.

    Raises:
        FileReadError: When the input file itself cannot be opened
    """
    source = Path(path).resolve()
    reader = reader or FileReader()
    chunks = reader.iter_chunks(source)
    return iter_transclude(
        chunks, _file_options(source, options), reader=reader, cache=cache, errors=errors
    )


__all__ = ["transclude", "transclude_file", "iter_transclude", "iter_transclude_file"]
