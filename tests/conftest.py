from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable, Dict

import pytest

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'transclusion'
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))


@pytest.fixture(autouse=True)
def _isolate_process_state(monkeypatch: pytest.MonkeyPatch):
    """Reset config caches, logging handlers and TRANSCLUSION_* env between tests."""
    import os

    from transclusion.core.config import clear_all_caches
    from transclusion.core.utils.logging import reset_logging_for_tests

    for key in list(os.environ):
        if key.startswith("TRANSCLUSION_"):
            monkeypatch.delenv(key, raising=False)

    clear_all_caches()
    yield
    clear_all_caches()
    reset_logging_for_tests()


@pytest.fixture
def docs(tmp_path: Path) -> Path:
    """A sandbox root directory for fixture documents."""
    root = (tmp_path / "docs").resolve()
    root.mkdir()
    return root


@pytest.fixture
def write_docs(docs: Path) -> Callable[[Dict[str, str]], Path]:
    """Write ``{relative_name: content}`` under the sandbox root."""

    def _write(files: Dict[str, str]) -> Path:
        for name, content in files.items():
            target = docs / name
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        return docs

    return _write
