"""Tests for the validated file reader."""
from __future__ import annotations

import os
from pathlib import Path

import pytest

from transclusion.core.exceptions import TransclusionFrameworkError
from transclusion.core.file_io.reader import (
    BinaryFileError,
    FileNotFoundReadError,
    FileReader,
    FileReadError,
    FileTooLargeError,
    NotAFileError,
    PermissionDeniedError,
)


class TestFileReader:
    def test_reads_utf8(self, tmp_path: Path) -> None:
        target = tmp_path / "a.md"
        target.write_text("héllo\n", encoding="utf-8")
        assert FileReader().read(target) == "héllo\n"

    def test_bom_is_stripped(self, tmp_path: Path) -> None:
        target = tmp_path / "a.md"
        target.write_bytes(b"\xef\xbb\xbfHello")
        assert FileReader().read(str(target)) == "Hello"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundReadError) as exc:
            FileReader().read(tmp_path / "nope.md")
        assert str(exc.value).startswith("File not found:")
        assert exc.value.path == str(tmp_path / "nope.md")

    def test_directory(self, tmp_path: Path) -> None:
        with pytest.raises(NotAFileError):
            FileReader().read(tmp_path)

    def test_size_limit(self, tmp_path: Path) -> None:
        target = tmp_path / "big.md"
        target.write_text("x" * 11, encoding="utf-8")
        with pytest.raises(FileTooLargeError) as exc:
            FileReader(max_size=10).read(target)
        assert exc.value.context["size"] == 11
        assert exc.value.context["limit"] == 10

    def test_nul_byte_is_binary(self, tmp_path: Path) -> None:
        target = tmp_path / "bin.md"
        target.write_bytes(b"a\0b")
        with pytest.raises(BinaryFileError):
            FileReader().read(target)

    def test_invalid_utf8_is_binary(self, tmp_path: Path) -> None:
        target = tmp_path / "latin.md"
        target.write_bytes(b"caf\xe9")
        with pytest.raises(BinaryFileError) as exc:
            FileReader().read(target)
        assert "not valid UTF-8" in str(exc.value)

    @pytest.mark.skipif(
        not hasattr(os, "geteuid") or os.geteuid() == 0,
        reason="permission bits are not enforced for root",
    )
    def test_unreadable_file(self, tmp_path: Path) -> None:
        target = tmp_path / "secret.md"
        target.write_text("x", encoding="utf-8")
        target.chmod(0)
        try:
            with pytest.raises(PermissionDeniedError):
                FileReader().read(target)
        finally:
            target.chmod(0o644)

    def test_error_hierarchy(self) -> None:
        err = FileTooLargeError("too big", path="x.md")
        assert isinstance(err, FileReadError)
        assert isinstance(err, OSError)
        assert isinstance(err, TransclusionFrameworkError)
        assert err.to_json_error()["context"] == {"path": "x.md"}


class TestIterChunks:
    def test_chunks_ignore_size_limit(self, tmp_path: Path) -> None:
        target = tmp_path / "big.md"
        target.write_bytes(b"x" * 25)
        chunks = list(FileReader(max_size=10).iter_chunks(target, chunk_size=10))
        assert chunks == [b"x" * 10, b"x" * 10, b"x" * 5]

    def test_missing_file_fails_before_iteration(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundReadError):
            FileReader().iter_chunks(tmp_path / "nope.md")

    def test_directory(self, tmp_path: Path) -> None:
        with pytest.raises(NotAFileError):
            FileReader().iter_chunks(tmp_path)
