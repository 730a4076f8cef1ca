"""Line-buffered streaming transform.

Chunks (``str`` or UTF-8 ``bytes``) are appended to a pending buffer; a leading
byte order mark is dropped. Every complete line is expanded by the processor
and emitted with its original terminator. The remainder is kept until more
input arrives or the stream is closed, so a directive split across chunks is
expanded once its line is complete.
"""
from __future__ import annotations

import codecs
import logging
from enum import Enum
from typing import Iterable, Iterator, List, Optional, Union

from ..file_io.cache import FileCache
from ..file_io.reader import FileReader
from .content import BOM, front_matter_delimiter
from .processor import TransclusionProcessor
from .types import TransclusionError, TransclusionOptions

logger = logging.getLogger(__name__)

Chunk = Union[str, bytes]


class FrontMatterState(str, Enum):
    UNKNOWN = "unknown"
    YAML_START = "yaml-start"
    TOML_START = "toml-start"
    INSIDE = "inside"
    DONE = "done"


class TransclusionStream:
    """Streaming transclusion of a single document.

    Usage::

        stream = TransclusionStream(options)
        for chunk in source:
            sink.write(stream.feed(chunk))
        sink.write(stream.close())

    Args:
        options: Engine options for the document
        reader: File reader passed to the processor
        cache: Content cache passed to the processor
        processor: Pre-built processor (overrides ``reader`` and ``cache``)
    """

    def __init__(
        self,
        options: TransclusionOptions,
        reader: Optional[FileReader] = None,
        cache: Optional[FileCache] = None,
        processor: Optional[TransclusionProcessor] = None,
    ) -> None:
        self.options = options
        self.processor = processor or TransclusionProcessor(options, reader=reader, cache=cache)
        self._decoder = codecs.getincrementaldecoder("utf-8-sig")(errors="replace")
        self._buffer = ""
        self._line_number = 0
        self._closed = False
        self._front_matter = (
            FrontMatterState.UNKNOWN if options.strip_front_matter else FrontMatterState.DONE
        )
        self._delimiter: Optional[str] = None
        self._skip_blank = False

    @property
    def errors(self) -> List[TransclusionError]:
        return self.processor.errors

    @property
    def processed_files(self) -> List[str]:
        return self.processor.processed_files

    @property
    def front_matter_state(self) -> FrontMatterState:
        return self._front_matter

    @property
    def line_number(self) -> int:
        """Number of lines consumed so far."""
        return self._line_number

    def feed(self, chunk: Chunk) -> str:
        """Consume ``chunk`` and return the output for every completed line."""
        if self._closed:
            raise ValueError("Cannot feed a closed stream")
        if isinstance(chunk, bytes):
            chunk = self._decoder.decode(chunk)
        elif self._at_start() and chunk.startswith(BOM):
            chunk = chunk[len(BOM):]
        if not chunk:
            return ""

        self._buffer += chunk
        if "\n" not in self._buffer:
            return ""

        *complete, self._buffer = self._buffer.split("\n")
        out: List[str] = []
        for line in complete:
            if line.endswith("\r"):
                out.append(self._emit(line[:-1], "\r\n"))
            else:
                out.append(self._emit(line, "\n"))
        return "".join(out)

    def close(self) -> str:
        """Flush the pending remainder as a final unterminated line."""
        if self._closed:
            return ""
        tail = self._decoder.decode(b"", final=True)
        out = self.feed(tail) if tail else ""
        self._closed = True

        remainder, self._buffer = self._buffer, ""
        if remainder:
            out += self._emit(remainder, "")
        return out

    def iter_transform(self, chunks: Iterable[Chunk]) -> Iterator[str]:
        """Pull-based transform: each chunk is read only when output is requested."""
        for chunk in chunks:
            out = self.feed(chunk)
            if out:
                yield out
        out = self.close()
        if out:
            yield out

    def _at_start(self) -> bool:
        return self._line_number == 0 and not self._buffer

    def _emit(self, line: str, terminator: str) -> str:
        self._line_number += 1
        if self._suppress(line):
            return ""
        return self.processor.process_line(line, self._line_number) + terminator

    def _suppress(self, line: str) -> bool:
        """Advance the front-matter state machine; True drops the line."""
        state = self._front_matter

        if state is FrontMatterState.DONE:
            if self._skip_blank and not line.strip():
                return True
            self._skip_blank = False
            return False

        delimiter = front_matter_delimiter(line)

        if state is FrontMatterState.UNKNOWN:
            if delimiter == "---":
                self._front_matter = FrontMatterState.YAML_START
            elif delimiter == "+++":
                self._front_matter = FrontMatterState.TOML_START
            else:
                self._front_matter = FrontMatterState.DONE
                return False
            self._delimiter = delimiter
            return True

        if delimiter is not None and delimiter == self._delimiter:
            logger.debug("Front matter closed at line %d", self._line_number)
            self._front_matter = FrontMatterState.DONE
            self._skip_blank = True
            return True

        self._front_matter = FrontMatterState.INSIDE
        return True


__all__ = ["FrontMatterState", "TransclusionStream"]
