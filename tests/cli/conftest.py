from __future__ import annotations

import io
from pathlib import Path
from typing import Callable, List

import pytest


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """Project root holding configuration (empty by default)."""
    root = (tmp_path / "project").resolve()
    root.mkdir()
    return root


@pytest.fixture
def run_cli(project: Path) -> Callable[..., int]:
    """Invoke the dispatcher with ``--repo-root`` pointing at the test project."""
    from transclusion.cli._dispatcher import main

    def _run(*argv: str) -> int:
        args: List[str] = list(argv)
        return main(args + ["--repo-root", str(project)])

    return _run


@pytest.fixture
def stdin(monkeypatch: pytest.MonkeyPatch) -> Callable[[str], None]:
    """Replace standard input with the given UTF-8 text."""

    def _set(text: str) -> None:
        monkeypatch.setattr("sys.stdin", io.TextIOWrapper(io.BytesIO(text.encode("utf-8")), encoding="utf-8"))

    return _set
