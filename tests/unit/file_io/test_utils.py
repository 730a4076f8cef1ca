"""Tests for atomic writes and YAML reads."""
from __future__ import annotations

from pathlib import Path

import pytest

from transclusion.core.exceptions import ConfigError
from transclusion.core.file_io.utils import read_yaml, write_text_atomic


class TestWriteTextAtomic:
    def test_creates_parents(self, tmp_path: Path) -> None:
        target = tmp_path / "out" / "nested" / "doc.md"
        write_text_atomic(target, "hello")
        assert target.read_text(encoding="utf-8") == "hello"

    def test_line_endings_preserved(self, tmp_path: Path) -> None:
        target = tmp_path / "doc.md"
        write_text_atomic(target, "a\r\nb\n")
        assert target.read_bytes() == b"a\r\nb\n"

    def test_no_temp_files_left(self, tmp_path: Path) -> None:
        write_text_atomic(tmp_path / "doc.md", "x")
        assert [p.name for p in tmp_path.iterdir()] == ["doc.md"]


class TestReadYaml:
    def test_missing_returns_default(self, tmp_path: Path) -> None:
        assert read_yaml(tmp_path / "none.yaml", default={}) == {}

    def test_reads_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "c.yaml"
        path.write_text("a:\n  b: 1\n", encoding="utf-8")
        assert read_yaml(path) == {"a": {"b": 1}}

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("a: [unclosed\n", encoding="utf-8")
        assert read_yaml(path, default="fallback") == "fallback"
        with pytest.raises(ConfigError):
            read_yaml(path, raise_on_error=True)
