"""Recursive expansion of transclusion directives.

Each directive on a line goes through::

    parsed -> resolved -> cycle check -> depth check -> read
           -> (front matter) -> (heading / range) -> recursive expansion

Any failure is recorded on ``ProcessingState.errors`` and the directive is
replaced by an ``<!-- Error: ... -->`` marker. Failures never stop sibling
directives or later lines.
"""
from __future__ import annotations

import logging
import re
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from ..file_io.cache import FileCache, NoopFileCache
from ..file_io.reader import FileNotFoundReadError, FileReader, FileReadError
from .content import strip_front_matter, trim_for_transclusion
from .headings import extract_heading, extract_heading_range
from .parser import parse_references
from .resolver import resolve_path
from .types import (
    ErrorCode,
    ProcessingState,
    Token,
    TransclusionError,
    TransclusionOptions,
)

logger = logging.getLogger(__name__)

_LINE_SPLIT = re.compile(r"\r?\n")


def error_marker(message: str) -> str:
    return f"<!-- Error: {message} -->"


class TransclusionProcessor:
    """Expand directives line by line for one document.

    Args:
        options: Engine options for the document
        reader: File reader (default ``FileReader()``)
        cache: Content cache consulted before the reader (default: no cache)
        state: Processing state to accumulate into (default: fresh state)
    """

    def __init__(
        self,
        options: TransclusionOptions,
        reader: Optional[FileReader] = None,
        cache: Optional[FileCache] = None,
        state: Optional[ProcessingState] = None,
    ) -> None:
        self.options = options
        self.reader = reader if reader is not None else FileReader()
        self.cache: FileCache = cache if cache is not None else NoopFileCache()
        self.state = state if state is not None else ProcessingState()

    @property
    def errors(self) -> List[TransclusionError]:
        return self.state.errors

    @property
    def processed_files(self) -> List[str]:
        return self.state.processed_files

    def process_line(self, line: str, line_number: Optional[int] = None) -> str:
        """Expand every directive on ``line`` (given without its terminator)."""
        return self._process_line(line, self.options, line_number)

    def process_content(self, content: str, line_number: Optional[int] = None) -> str:
        """Expand every line of ``content`` and join the results with ``\\n``."""
        return self._process_content(content, self.options, line_number)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _process_content(
        self, content: str, options: TransclusionOptions, line_number: Optional[int]
    ) -> str:
        return "\n".join(
            self._process_line(line, options, line_number) for line in _LINE_SPLIT.split(content)
        )

    def _process_line(
        self, line: str, options: TransclusionOptions, line_number: Optional[int]
    ) -> str:
        tokens = parse_references(line)
        if not tokens:
            return line

        parts: List[str] = []
        cursor = 0
        for token in tokens:
            parts.append(line[cursor:token.start])
            parts.append(self._expand(token, options, line_number))
            cursor = token.end
        parts.append(line[cursor:])
        return "".join(parts)

    def _fail(
        self,
        message: str,
        path: str,
        code: ErrorCode,
        line_number: Optional[int],
        heading: Optional[str] = None,
    ) -> str:
        logger.debug("Transclusion error [%s] %s", code.value, message)
        self.state.record_error(
            TransclusionError(
                message=message, path=path, code=code, line=line_number, heading=heading
            )
        )
        return error_marker(message)

    def _expand(
        self, token: Token, options: TransclusionOptions, line_number: Optional[int]
    ) -> str:
        resolution = resolve_path(token.path, options)
        if not resolution.ok:
            return self._fail(
                resolution.error or f"File not found: {token.path}",
                token.path,
                resolution.error_code or ErrorCode.FILE_NOT_FOUND,
                line_number,
            )

        path = resolution.absolute_path
        stack = self.state.stack

        if path in stack:
            chain = " -> ".join(stack + [path])
            return self._fail(
                f"Circular reference detected: {chain}",
                path,
                ErrorCode.CIRCULAR_REFERENCE,
                line_number,
            )

        if self.state.depth >= options.max_depth:
            return self._fail(
                f"Maximum transclusion depth ({options.max_depth}) exceeded",
                path,
                ErrorCode.MAX_DEPTH_EXCEEDED,
                line_number,
            )

        self.state.push(path)
        try:
            return self._expand_file(token, path, options, line_number)
        finally:
            self.state.pop()

    def _read(self, path: str) -> str:
        cached = self.cache.get(path)
        if cached is not None:
            logger.debug("Cache hit: %s", path)
            return cached
        content = self.reader.read(path)
        self.cache.set(path, content)
        return content

    def _expand_file(
        self,
        token: Token,
        path: str,
        options: TransclusionOptions,
        line_number: Optional[int],
    ) -> str:
        try:
            content = self._read(path)
        except FileNotFoundReadError:
            return self._fail(
                f"File not found: {token.path}", path, ErrorCode.FILE_NOT_FOUND, line_number
            )
        except FileReadError as exc:
            return self._fail(str(exc), path, ErrorCode.READ_ERROR, line_number)

        self.state.record_file(path)

        if options.strip_front_matter:
            content = strip_front_matter(content)

        if options.extract_headings and token.wants_section:
            section = self._select_section(token, content)
            if section is None:
                if token.is_range:
                    name = token.heading or "(beginning)"
                    message = f'Start heading "{name}" not found in {path}'
                else:
                    message = f'Heading "{token.heading}" not found in {path}'
                return self._fail(
                    message, path, ErrorCode.HEADING_NOT_FOUND, line_number, heading=token.heading
                )
            content = section

        child_options = replace(options, parent_path=Path(path))
        expanded = self._process_content(content, child_options, line_number)
        return trim_for_transclusion(expanded)

    @staticmethod
    def _select_section(token: Token, content: str) -> Optional[str]:
        if token.is_range:
            return extract_heading_range(content, token.heading or "", token.end_heading or "")
        return extract_heading(content, token.heading or "")


__all__ = ["TransclusionProcessor", "error_marker"]
