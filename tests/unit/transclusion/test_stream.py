"""Tests for the line-buffered streaming transform."""
from __future__ import annotations

from pathlib import Path
from typing import Iterator, List

import pytest

from transclusion.core.transclusion.stream import FrontMatterState, TransclusionStream
from transclusion.core.transclusion.types import ErrorCode, TransclusionOptions


def _run(stream: TransclusionStream, chunks) -> str:
    return "".join(stream.feed(c) for c in chunks) + stream.close()


class TestFraming:
    def test_identity_without_directives(self, docs: Path) -> None:
        text = "# Title\r\n\r\nSome text\nlast line without newline"
        stream = TransclusionStream(TransclusionOptions(base_path=docs))
        assert _run(stream, [text]) == text

    def test_trailing_newline_preserved(self, docs: Path) -> None:
        stream = TransclusionStream(TransclusionOptions(base_path=docs))
        assert _run(stream, ["a\nb\n"]) == "a\nb\n"

    def test_empty_input(self, docs: Path) -> None:
        stream = TransclusionStream(TransclusionOptions(base_path=docs))
        assert _run(stream, []) == ""

    def test_partial_line_is_buffered(self, write_docs) -> None:
        root = write_docs({"b.md": "B"})
        stream = TransclusionStream(TransclusionOptions(base_path=root))
        assert stream.feed("A\n![[") == "A\n"
        assert stream.feed("b]]") == ""
        assert stream.feed("\nC") == "B\n"
        assert stream.close() == "C"

    def test_directive_split_across_chunks(self, write_docs) -> None:
        """Any chunking of the input yields the same output."""
        root = write_docs({"b.md": "B"})
        text = "A\n![[b]]\nC"
        whole = _run(TransclusionStream(TransclusionOptions(base_path=root)), [text])
        assert whole == "A\nB\nC"
        for cut in range(1, len(text)):
            stream = TransclusionStream(TransclusionOptions(base_path=root))
            assert _run(stream, [text[:cut], text[cut:]]) == whole

    def test_crlf_split_between_chunks(self, docs: Path) -> None:
        stream = TransclusionStream(TransclusionOptions(base_path=docs))
        assert _run(stream, ["a\r", "\nb"]) == "a\r\nb"

    def test_multibyte_bytes_split_across_chunks(self, write_docs) -> None:
        root = write_docs({"b.md": "é"})
        data = "ñ ![[b]]\n".encode("utf-8")
        stream = TransclusionStream(TransclusionOptions(base_path=root))
        assert _run(stream, [data[:1], data[1:]]) == "ñ é\n"

    def test_line_numbers_on_errors(self, docs: Path) -> None:
        stream = TransclusionStream(TransclusionOptions(base_path=docs))
        _run(stream, ["ok\n", "still ok\n![[missing]]"])
        assert stream.line_number == 3
        assert [(e.code, e.line) for e in stream.errors] == [(ErrorCode.FILE_NOT_FOUND, 3)]

    def test_feed_after_close_raises(self, docs: Path) -> None:
        stream = TransclusionStream(TransclusionOptions(base_path=docs))
        stream.close()
        with pytest.raises(ValueError):
            stream.feed("more")

    def test_close_is_idempotent(self, docs: Path) -> None:
        stream = TransclusionStream(TransclusionOptions(base_path=docs))
        stream.feed("tail")
        assert stream.close() == "tail"
        assert stream.close() == ""

    def test_leading_bom_dropped_from_bytes(self, docs: Path) -> None:
        stream = TransclusionStream(TransclusionOptions(base_path=docs))
        assert _run(stream, [b"\xef\xbb", b"\xbfTitle\n"]) == "Title\n"

    def test_leading_bom_dropped_from_text(self, docs: Path) -> None:
        stream = TransclusionStream(TransclusionOptions(base_path=docs))
        assert _run(stream, ["\ufeffTitle\n", "\ufeffkept"]) == "Title\n\ufeffkept"


class TestIterTransform:
    def test_pull_based(self, write_docs) -> None:
        root = write_docs({"b.md": "B"})
        consumed: List[str] = []

        def source() -> Iterator[str]:
            for chunk in ["A\n", "![[b]]\n", "C"]:
                consumed.append(chunk)
                yield chunk

        stream = TransclusionStream(TransclusionOptions(base_path=root))
        output = stream.iter_transform(source())
        assert next(output) == "A\n"
        assert consumed == ["A\n"]
        assert list(output) == ["B\n", "C"]
        assert stream.processed_files == [str(root / "b.md")]


class TestFrontMatter:
    def _stream(self, docs: Path) -> TransclusionStream:
        return TransclusionStream(TransclusionOptions(base_path=docs, strip_front_matter=True))

    def test_yaml_front_matter_removed(self, docs: Path) -> None:
        stream = self._stream(docs)
        assert _run(stream, ["---\ntitle: x\n---\n\n# Body\n"]) == "# Body\n"
        assert stream.front_matter_state is FrontMatterState.DONE

    def test_toml_front_matter_removed(self, docs: Path) -> None:
        assert _run(self._stream(docs), ['+++\ntitle = "x"\n+++\nBody']) == "Body"

    def test_blank_lines_after_body_are_kept(self, docs: Path) -> None:
        assert _run(self._stream(docs), ["---\na: 1\n---\nBody\n\nMore"]) == "Body\n\nMore"

    def test_no_front_matter_passes_through(self, docs: Path) -> None:
        assert _run(self._stream(docs), ["Body\n---\n"]) == "Body\n---\n"

    def test_unclosed_front_matter_suppresses_rest(self, docs: Path) -> None:
        stream = self._stream(docs)
        assert _run(stream, ["---\ntitle: x\nBody\n"]) == ""
        assert stream.front_matter_state is FrontMatterState.INSIDE

    def test_state_transitions(self, docs: Path) -> None:
        stream = self._stream(docs)
        assert stream.front_matter_state is FrontMatterState.UNKNOWN
        stream.feed("---\n")
        assert stream.front_matter_state is FrontMatterState.YAML_START
        stream.feed("a: 1\n")
        assert stream.front_matter_state is FrontMatterState.INSIDE
        stream.feed("---\n")
        assert stream.front_matter_state is FrontMatterState.DONE

    def test_disabled_by_default(self, docs: Path) -> None:
        stream = TransclusionStream(TransclusionOptions(base_path=docs))
        assert stream.front_matter_state is FrontMatterState.DONE
        assert _run(stream, ["---\na: 1\n---\n"]) == "---\na: 1\n---\n"
