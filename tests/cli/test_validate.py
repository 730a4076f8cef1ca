"""Tests for `transclusion validate`."""
from __future__ import annotations

import json
from pathlib import Path


class TestValidate:
    def test_clean_document(self, run_cli, write_docs, capsys) -> None:
        root = write_docs({"index.md": "![[b]]", "b.md": "B"})
        assert run_cli("validate", str(root / "index.md")) == 0
        out = capsys.readouterr()
        assert "No transclusion errors" in out.out
        assert "(2 file(s) read)" in out.out

    def test_any_error_fails(self, run_cli, write_docs, capsys) -> None:
        root = write_docs({"index.md": "![[a]]\n![[missing]]\n", "a.md": "![[a]]"})
        assert run_cli("validate", str(root / "index.md")) == 1
        err = capsys.readouterr().err
        assert "CIRCULAR_REFERENCE" in err
        assert "FILE_NOT_FOUND" in err
        assert "2 transclusion error(s)" in err

    def test_json(self, run_cli, write_docs, capsys) -> None:
        root = write_docs({"index.md": "![[missing]]"})
        assert run_cli("validate", str(root / "index.md"), "--json") == 1
        payload = json.loads(capsys.readouterr().out)
        assert payload["valid"] is False
        assert payload["errors"][0]["code"] == "FILE_NOT_FOUND"

    def test_stdin(self, run_cli, docs: Path, stdin, capsys) -> None:
        stdin("plain text\n")
        assert run_cli("validate", "--base-path", str(docs)) == 0
        assert "<stdin>" in capsys.readouterr().out

    def test_json_includes_file_suggestions(self, run_cli, write_docs, capsys) -> None:
        root = write_docs({"index.md": "![[foter]]", "footer.md": "F"})
        assert run_cli("validate", str(root / "index.md"), "--json") == 1
        [error] = json.loads(capsys.readouterr().out)["errors"]
        assert [s["text"] for s in error["suggestions"]] == ["footer"]
