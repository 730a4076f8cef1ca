"""Tests for `transclusion render`."""
from __future__ import annotations

import json
from pathlib import Path

import pytest


class TestRenderFile:
    def test_writes_composed_document_to_stdout(self, run_cli, write_docs, capsys) -> None:
        root = write_docs({"index.md": "A\n![[b]]\nC\n", "b.md": "B"})
        assert run_cli("render", str(root / "index.md")) == 0
        out = capsys.readouterr()
        assert out.out == "A\nB\nC\n"
        assert out.err == ""

    def test_writes_output_file(self, run_cli, write_docs, tmp_path: Path, capsys) -> None:
        root = write_docs({"index.md": "![[b]]", "b.md": "B"})
        target = tmp_path / "build" / "out.md"
        assert run_cli("render", str(root / "index.md"), "-o", str(target)) == 0
        assert target.read_text(encoding="utf-8") == "B"
        assert capsys.readouterr().out == ""

    def test_content_errors_reported_on_stderr(self, run_cli, write_docs, capsys) -> None:
        root = write_docs({"index.md": "x\n![[missing]]\n"})
        assert run_cli("render", str(root / "index.md")) == 0
        out = capsys.readouterr()
        assert out.out == "x\n<!-- Error: File not found: missing -->\n"
        assert "Warning: [FILE_NOT_FOUND] File not found: missing (line 2)" in out.err

    def test_strict_exit_code(self, run_cli, write_docs) -> None:
        root = write_docs({"index.md": "![[missing]]"})
        assert run_cli("render", str(root / "index.md"), "--strict") == 1

    def test_path_variables(self, run_cli, write_docs, capsys) -> None:
        root = write_docs({"index.md": "![[intro-{{lang}}]]", "intro-es.md": "Hola"})
        assert run_cli("render", str(root / "index.md"), "--var", "lang=es") == 0
        assert capsys.readouterr().out == "Hola"

    def test_template_variables(self, run_cli, write_docs, capsys) -> None:
        root = write_docs({"index.md": "v{{version}}"})
        assert run_cli("render", str(root / "index.md"), "--template-var", "version=2") == 0
        assert capsys.readouterr().out == "v2"

    def test_max_depth_flag(self, run_cli, write_docs, capsys) -> None:
        root = write_docs({"index.md": "![[a]]", "a.md": "![[b]]", "b.md": "B"})
        assert run_cli("render", str(root / "index.md"), "--max-depth", "1") == 0
        assert "MAX_DEPTH_EXCEEDED" in capsys.readouterr().err

    def test_strip_front_matter(self, run_cli, write_docs, capsys) -> None:
        root = write_docs({"index.md": "---\ntitle: x\n---\n\nBody\n"})
        assert run_cli("render", str(root / "index.md"), "--strip-frontmatter") == 0
        assert capsys.readouterr().out == "Body\n"

    def test_no_headings(self, run_cli, write_docs, capsys) -> None:
        root = write_docs({"index.md": "![[g#B]]", "g.md": "# A\na\n# B\nb"})
        assert run_cli("render", str(root / "index.md"), "--no-headings") == 0
        assert capsys.readouterr().out == "# A\na\n# B\nb"

    def test_project_config_applies(self, run_cli, project: Path, write_docs, capsys) -> None:
        (project / ".transclusion.yaml").write_text(
            "transclusion:\n  variables:\n    lang: es\n", encoding="utf-8"
        )
        root = write_docs({"index.md": "![[intro-{{lang}}]]", "intro-es.md": "Hola"})
        assert run_cli("render", str(root / "index.md")) == 0
        assert capsys.readouterr().out == "Hola"


class TestRenderStdin:
    def test_streams_stdin(self, run_cli, write_docs, stdin, capsys) -> None:
        root = write_docs({"b.md": "B"})
        stdin("A\n![[b]]\nC")
        assert run_cli("render", "--base-path", str(root)) == 0
        assert capsys.readouterr().out == "A\nB\nC"

    def test_dash_means_stdin(self, run_cli, write_docs, stdin, capsys) -> None:
        root = write_docs({"b.md": "B"})
        stdin("![[b]]\n")
        assert run_cli("render", "-", "--base-path", str(root)) == 0
        assert capsys.readouterr().out == "B\n"

    def test_stdin_with_template_variables(self, run_cli, write_docs, stdin, capsys) -> None:
        root = write_docs({"b.md": "B {{v}}"})
        stdin("![[b]]")
        assert run_cli("render", "--base-path", str(root), "--template-var", "v=1") == 0
        assert capsys.readouterr().out == "B 1"

    def test_stdin_strict_errors(self, run_cli, docs: Path, stdin, capsys) -> None:
        stdin("![[missing]]")
        assert run_cli("render", "--base-path", str(docs), "--strict") == 1
        assert "FILE_NOT_FOUND" in capsys.readouterr().err


class TestRenderModes:
    def test_json_output(self, run_cli, write_docs, capsys) -> None:
        root = write_docs({"index.md": "![[b]] ![[missing]]", "b.md": "B"})
        assert run_cli("render", str(root / "index.md"), "--json") == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload["status"] == "error"
        assert payload["content"] == "B <!-- Error: File not found: missing -->"
        assert payload["processed_files"] == [str(root / "index.md"), str(root / "b.md")]
        assert payload["errors"] == [
            {"code": "FILE_NOT_FOUND", "message": "File not found: missing", "path": "missing", "line": 1}
        ]

    def test_dry_run_does_not_write(self, run_cli, write_docs, tmp_path: Path, capsys) -> None:
        root = write_docs({"index.md": "![[b]]", "b.md": "B"})
        target = tmp_path / "out.md"
        assert run_cli("render", str(root / "index.md"), "-o", str(target), "--dry-run") == 0
        assert not target.exists()
        out = capsys.readouterr().out
        assert "Would compose" in out
        assert "2 file(s), 0 error(s)" in out
        assert str(root / "b.md") in out

    def test_dry_run_json(self, run_cli, write_docs, capsys) -> None:
        root = write_docs({"index.md": "![[b]]", "b.md": "B"})
        assert run_cli("render", str(root / "index.md"), "--dry-run", "--json") == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload["dry_run"] is True
        assert payload["errors"] == []


class TestRenderFailures:
    def test_missing_input(self, run_cli, docs: Path, capsys) -> None:
        assert run_cli("render", str(docs / "nope.md")) == 1
        assert "Error: File not found:" in capsys.readouterr().err

    def test_missing_input_json(self, run_cli, docs: Path, capsys) -> None:
        assert run_cli("render", str(docs / "nope.md"), "--json") == 1
        payload = json.loads(capsys.readouterr().err)
        assert payload["error"] == "render_error"
        assert payload["context"]["path"] == str(docs / "nope.md")

    def test_malformed_var(self, run_cli, write_docs, capsys) -> None:
        root = write_docs({"index.md": "x"})
        assert run_cli("render", str(root / "index.md"), "--var", "novalue") == 1
        assert "expected KEY=VALUE" in capsys.readouterr().err

    def test_invalid_configuration(self, run_cli, project: Path, write_docs, capsys) -> None:
        (project / ".transclusion.yaml").write_text("transclusion:\n  max_depth: 0\n", encoding="utf-8")
        root = write_docs({"index.md": "x"})
        assert run_cli("render", str(root / "index.md")) == 1
        assert "failed validation" in capsys.readouterr().err

    def test_invalid_max_depth_flag(self, run_cli, write_docs, capsys) -> None:
        root = write_docs({"index.md": "x"})
        assert run_cli("render", str(root / "index.md"), "--max-depth", "0") == 1
        assert "max_depth" in capsys.readouterr().err

    def test_bad_plugin(self, run_cli, project: Path, write_docs, capsys) -> None:
        (project / ".transclusion.yaml").write_text(
            "plugins:\n  transformers:\n    - missing_plugin_module:Thing\n", encoding="utf-8"
        )
        root = write_docs({"index.md": "x"})
        assert run_cli("render", str(root / "index.md")) == 1
        assert "Cannot import plugin module" in capsys.readouterr().err


class TestRenderStreaming:
    def test_large_input_file_is_streamed(self, run_cli, write_docs, capsys) -> None:
        body = "filler line\n" * 120_000
        root = write_docs({"big.md": body + "![[b]]\n", "b.md": "B"})
        assert run_cli("render", str(root / "big.md")) == 0
        out = capsys.readouterr()
        assert out.out == body + "B\n"
        assert out.err == ""

    def test_large_input_file_to_output(self, run_cli, write_docs, tmp_path: Path) -> None:
        body = "filler line\n" * 120_000
        root = write_docs({"big.md": body})
        target = tmp_path / "out.md"
        assert run_cli("render", str(root / "big.md"), "-o", str(target)) == 0
        assert target.read_text(encoding="utf-8") == body


class TestRenderSuggestions:
    def test_similar_file_suggested(self, run_cli, write_docs, capsys) -> None:
        root = write_docs({"index.md": "![[sectons/intro]]\n", "sections/intro.md": "Hi"})
        assert run_cli("render", str(root / "index.md")) == 0
        err = capsys.readouterr().err
        assert "Warning: [FILE_NOT_FOUND] File not found: sectons/intro (line 1)" in err
        assert "  Did you mean: sections/intro (96% match)" in err

    def test_similar_heading_suggested(self, run_cli, write_docs, capsys) -> None:
        root = write_docs({"index.md": "![[guide#Instal]]", "guide.md": "# Install\nsteps\n# Usage\nrun"})
        assert run_cli("render", str(root / "index.md")) == 0
        err = capsys.readouterr().err
        assert "[HEADING_NOT_FOUND]" in err
        assert "Did you mean: Install" in err
        assert "Did you mean: Usage" not in err

    def test_suggestions_in_json(self, run_cli, write_docs, capsys) -> None:
        root = write_docs({"index.md": "![[guide#Instal]]", "guide.md": "# Install\n"})
        assert run_cli("render", str(root / "index.md"), "--json") == 0
        [error] = json.loads(capsys.readouterr().out)["errors"]
        assert error["code"] == "HEADING_NOT_FOUND"
        assert error["heading"] == "Instal"
        assert error["suggestions"] == [{"text": "Install", "score": 0.92, "kind": "heading"}]

    def test_no_suggestions_without_close_match(self, run_cli, write_docs, capsys) -> None:
        root = write_docs({"index.md": "![[zzzzzz]]"})
        assert run_cli("render", str(root / "index.md")) == 0
        assert "Did you mean" not in capsys.readouterr().err
