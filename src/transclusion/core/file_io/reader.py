"""Validated UTF-8 reads of files referenced by transclusion directives."""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, BinaryIO, Iterator, Mapping, Union

from ..exceptions import TransclusionFrameworkError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

DEFAULT_MAX_FILE_SIZE = 1024 * 1024
DEFAULT_CHUNK_SIZE = 64 * 1024

BOM = "\ufeff"


class FileReadError(TransclusionFrameworkError, OSError):
    """Base class for failures while reading a referenced file."""

    def __init__(
        self,
        message: str,
        *,
        path: PathLike | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        if path is not None:
            ctx["path"] = str(path)
        TransclusionFrameworkError.__init__(self, message, context=ctx)
        OSError.__init__(self, message)
        self.path = str(path) if path is not None else None

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class FileNotFoundReadError(FileReadError):
    """The file does not exist."""


class NotAFileError(FileReadError):
    """The path exists but is a directory or special file."""


class PermissionDeniedError(FileReadError):
    """The file is not readable by the current user."""


class FileTooLargeError(FileReadError):
    """The file exceeds the reader's size limit."""


class BinaryFileError(FileReadError):
    """The file is not UTF-8 text (NUL byte or invalid encoding)."""


class FileReader:
    """Read text files for transclusion.

    Args:
        max_size: Largest accepted file size in bytes
    """

    def __init__(self, max_size: int = DEFAULT_MAX_FILE_SIZE) -> None:
        self.max_size = max_size

    @staticmethod
    def _stat(target: Path) -> os.stat_result:
        try:
            stat = target.stat()
        except FileNotFoundError:
            raise FileNotFoundReadError(f"File not found: {target}", path=target) from None
        except PermissionError:
            raise PermissionDeniedError(f"Permission denied: {target}", path=target) from None

        if not target.is_file():
            raise NotAFileError(f"Not a file: {target}", path=target)
        return stat

    def read(self, path: PathLike) -> str:
        """Read ``path`` as UTF-8 text with any BOM removed.

        Raises:
            FileNotFoundReadError: File is missing
            NotAFileError: Path is not a regular file
            PermissionDeniedError: File is not readable
            FileTooLargeError: File is larger than ``max_size``
            BinaryFileError: File contains NUL bytes or invalid UTF-8
        """
        target = Path(path)
        stat = self._stat(target)

        if stat.st_size > self.max_size:
            raise FileTooLargeError(
                f"File too large: {target} ({stat.st_size} bytes, limit {self.max_size})",
                path=target,
                context={"size": stat.st_size, "limit": self.max_size},
            )

        try:
            raw = target.read_bytes()
        except FileNotFoundError:
            raise FileNotFoundReadError(f"File not found: {target}", path=target) from None
        except PermissionError:
            raise PermissionDeniedError(f"Permission denied: {target}", path=target) from None
        except OSError as exc:
            raise FileReadError(f"Failed to read {target}: {exc}", path=target) from exc

        if b"\0" in raw:
            raise BinaryFileError(f"Binary file not supported: {target}", path=target)

        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError:
            raise BinaryFileError(f"File is not valid UTF-8: {target}", path=target) from None

        logger.debug("Read %s (%d bytes)", target, len(raw))
        if text.startswith(BOM):
            text = text[len(BOM):]
        return text

    def iter_chunks(self, path: PathLike, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[bytes]:
        """Open ``path`` and return an iterator over its raw bytes.

        Meant for the top-level document, which is streamed: ``max_size`` is
        not applied and decoding is left to the consumer. Missing, special
        and unreadable files fail here, before any chunk is produced.
        """
        target = Path(path)
        self._stat(target)
        try:
            handle = target.open("rb")
        except PermissionError:
            raise PermissionDeniedError(f"Permission denied: {target}", path=target) from None
        except OSError as exc:
            raise FileReadError(f"Failed to read {target}: {exc}", path=target) from exc
        logger.debug("Streaming %s", target)
        return _iter_handle(handle, chunk_size)


def _iter_handle(handle: BinaryIO, chunk_size: int) -> Iterator[bytes]:
    with handle:
        while True:
            chunk = handle.read(chunk_size)
            if not chunk:
                return
            yield chunk


__all__ = [
    "DEFAULT_MAX_FILE_SIZE",
    "DEFAULT_CHUNK_SIZE",
    "FileReadError",
    "FileNotFoundReadError",
    "NotAFileError",
    "PermissionDeniedError",
    "FileTooLargeError",
    "BinaryFileError",
    "FileReader",
]
