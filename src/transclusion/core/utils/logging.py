"""Process-wide stdlib logging setup for the command line.

Library modules only create loggers; handlers are installed here, once per
process, by the CLI.
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

_STREAM_HANDLER: logging.Handler | None = None
_FILE_HANDLER: logging.Handler | None = None
_CONFIGURED_LOG_PATH: str | None = None
_JSON_MODE_NULL_HANDLER_INSTALLED: bool = False

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"
FILE_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def level_from_name(name: str | int) -> int:
    if isinstance(name, int):
        return name
    try:
        return int(getattr(logging, str(name).upper()))
    except (AttributeError, TypeError, ValueError):
        return logging.WARNING


def configure_logging(
    level: str | int = "WARNING",
    log_path: Optional[Path] = None,
    *,
    stream: bool = True,
) -> None:
    """Configure the root logger with a stderr handler and an optional file handler.

    ``stream=False`` installs only the file handler.

    Idempotent per-process: calling again replaces the handlers installed by a
    previous call and leaves any other handlers alone.
    """
    global _STREAM_HANDLER, _FILE_HANDLER, _CONFIGURED_LOG_PATH

    root = logging.getLogger()
    numeric = level_from_name(level)
    root.setLevel(numeric)

    if stream:
        if _STREAM_HANDLER is None:
            _STREAM_HANDLER = logging.StreamHandler(sys.stderr)
            _STREAM_HANDLER.setFormatter(logging.Formatter(LOG_FORMAT))
            root.addHandler(_STREAM_HANDLER)
        _STREAM_HANDLER.setLevel(numeric)

    if log_path is None:
        return

    resolved = str(Path(log_path).resolve())
    if _CONFIGURED_LOG_PATH == resolved and _FILE_HANDLER is not None:
        _FILE_HANDLER.setLevel(numeric)
        return

    if _FILE_HANDLER is not None:
        root.removeHandler(_FILE_HANDLER)
        _FILE_HANDLER.close()
        _FILE_HANDLER = None

    Path(resolved).parent.mkdir(parents=True, exist_ok=True)
    fh = logging.FileHandler(resolved, encoding="utf-8")
    fh.setLevel(numeric)
    fh.setFormatter(logging.Formatter(FILE_LOG_FORMAT))
    root.addHandler(fh)

    _FILE_HANDLER = fh
    _CONFIGURED_LOG_PATH = resolved


def suppress_lastresort_in_json_mode() -> None:
    """Prevent stdlib logging's lastResort handler from polluting JSON output.

    Ensures the root logger has at least one handler (a NullHandler) when it
    otherwise has none.
    """
    global _JSON_MODE_NULL_HANDLER_INSTALLED

    root = logging.getLogger()
    if root.handlers or _JSON_MODE_NULL_HANDLER_INSTALLED:
        return
    root.addHandler(logging.NullHandler())
    _JSON_MODE_NULL_HANDLER_INSTALLED = True


def reset_logging_for_tests() -> None:
    """Test-only: remove handlers installed by this module."""
    global _STREAM_HANDLER, _FILE_HANDLER, _CONFIGURED_LOG_PATH, _JSON_MODE_NULL_HANDLER_INSTALLED
    root = logging.getLogger()
    for handler in (_STREAM_HANDLER, _FILE_HANDLER):
        if handler is not None:
            root.removeHandler(handler)
            handler.close()
    for h in list(root.handlers):
        if isinstance(h, logging.NullHandler):
            root.removeHandler(h)
    _STREAM_HANDLER = None
    _FILE_HANDLER = None
    _CONFIGURED_LOG_PATH = None
    root.setLevel(logging.WARNING)
    _JSON_MODE_NULL_HANDLER_INSTALLED = False


__all__ = [
    "configure_logging",
    "level_from_name",
    "suppress_lastresort_in_json_mode",
    "reset_logging_for_tests",
]
