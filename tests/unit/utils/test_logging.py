"""Tests for CLI logging setup."""
from __future__ import annotations

import logging
from pathlib import Path

from transclusion.core.utils.logging import (
    configure_logging,
    level_from_name,
    reset_logging_for_tests,
    suppress_lastresort_in_json_mode,
)


class TestConfigureLogging:
    def test_level_from_name(self) -> None:
        assert level_from_name("debug") == logging.DEBUG
        assert level_from_name(logging.ERROR) == logging.ERROR
        assert level_from_name("bogus") == logging.WARNING

    def test_idempotent_stream_handler(self) -> None:
        root = logging.getLogger()
        before = len(root.handlers)
        configure_logging("INFO")
        configure_logging("DEBUG")
        assert len(root.handlers) == before + 1
        assert root.level == logging.DEBUG

    def test_file_handler(self, tmp_path: Path) -> None:
        log_path = tmp_path / "logs" / "run.log"
        configure_logging("INFO", log_path=log_path, stream=False)
        logging.getLogger("transclusion.test").info("hello file")
        for handler in logging.getLogger().handlers:
            handler.flush()
        assert "hello file" in log_path.read_text(encoding="utf-8")

    def test_reset_removes_handlers(self) -> None:
        root = logging.getLogger()
        before = len(root.handlers)
        configure_logging("INFO")
        reset_logging_for_tests()
        assert len(root.handlers) == before
        assert root.level == logging.WARNING

    def test_json_mode_null_handler(self) -> None:
        root = logging.getLogger()
        saved = list(root.handlers)
        for h in saved:
            root.removeHandler(h)
        try:
            suppress_lastresort_in_json_mode()
            assert any(isinstance(h, logging.NullHandler) for h in root.handlers)
        finally:
            reset_logging_for_tests()
            for h in saved:
                root.addHandler(h)
