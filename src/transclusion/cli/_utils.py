"""Shared CLI utility functions.

Builds engine collaborators from configuration plus command-line flags so
every command composes documents the same way.
"""
from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Union

from transclusion.core.config import ConfigManager, LoggingConfig, PluginsConfig, TransclusionConfig
from transclusion.core.file_io.cache import FileCache
from transclusion.core.file_io.reader import FileReader
from transclusion.core.transclusion.types import TransclusionOptions
from transclusion.core.transformers.base import ContentTransformer
from transclusion.core.utils.logging import configure_logging, suppress_lastresort_in_json_mode

STDIN_MARKER = "-"
CHUNK_SIZE = 64 * 1024


def get_repo_root(args: argparse.Namespace) -> Path:
    """Get the project root from ``--repo-root`` or the working directory."""
    raw = getattr(args, "repo_root", None)
    if raw:
        return Path(raw).resolve()
    return Path.cwd().resolve()


def get_input_path(args: argparse.Namespace) -> Optional[Path]:
    """Return the INPUT path, or None when reading standard input."""
    raw = getattr(args, "input", None)
    if not raw or raw == STDIN_MARKER:
        return None
    return Path(raw).resolve()


def parse_assignments(items: Iterable[str], flag: str = "--var") -> Dict[str, str]:
    """Parse ``KEY=VALUE`` items into a dict.

    Raises:
        ValueError: When an item has no ``=`` or an empty key
    """
    result: Dict[str, str] = {}
    for item in items or []:
        key, sep, value = item.partition("=")
        key = key.strip()
        if not sep or not key:
            raise ValueError(f"Invalid {flag} value (expected KEY=VALUE): {item}")
        result[key] = value
    return result


def parse_extensions(raw: Optional[str]) -> Optional[List[str]]:
    if raw is None:
        return None
    exts = [e.strip() for e in raw.split(",") if e.strip()]
    if not exts:
        raise ValueError("--extensions requires at least one extension")
    return exts


def setup_logging(args: argparse.Namespace, config: Dict[str, Any], repo_root: Path) -> None:
    """Configure process logging from ``--log-level`` and the ``logging`` section.

    JSON mode without an explicit level keeps stderr free of log records.
    """
    logging_cfg = LoggingConfig(repo_root=repo_root, config=config)
    explicit = getattr(args, "log_level", None)
    if getattr(args, "json", False) and not explicit:
        if logging_cfg.file is not None:
            configure_logging(logging_cfg.level, log_path=logging_cfg.file, stream=False)
        suppress_lastresort_in_json_mode()
        return
    configure_logging(explicit or logging_cfg.level, log_path=logging_cfg.file)


@dataclass
class EngineSetup:
    """Everything a command needs to compose one document."""

    options: TransclusionOptions
    reader: FileReader
    cache: FileCache
    transformers: List[ContentTransformer] = field(default_factory=list)
    template_variables: Dict[str, Any] = field(default_factory=dict)
    input_path: Optional[Path] = None

    @property
    def has_transformers(self) -> bool:
        return bool(self.transformers or self.template_variables)


def build_engine(args: argparse.Namespace) -> EngineSetup:
    """Load configuration, apply CLI flags and build engine collaborators.

    Raises:
        ConfigError: Invalid configuration
        PluginLoadError: A configured transformer cannot be loaded
        ValueError: Malformed command-line values
    """
    repo_root = get_repo_root(args)
    config = ConfigManager(repo_root).load_config(validate=True)
    setup_logging(args, config, repo_root)

    input_path = get_input_path(args)
    default_base = input_path.parent if input_path is not None else Path.cwd()

    tc = TransclusionConfig(repo_root=repo_root, config=config)
    plugins = PluginsConfig(repo_root=repo_root, config=config)

    base_path = getattr(args, "base_path", None)
    options = tc.to_options(
        default_base_path=default_base,
        parent_path=input_path,
        base_path=Path(base_path).resolve() if base_path else None,
        extensions=parse_extensions(getattr(args, "extensions", None)),
        max_depth=getattr(args, "max_depth", None),
        variables=parse_assignments(getattr(args, "var", []), "--var") or None,
        strict=getattr(args, "strict", None),
        strip_front_matter=getattr(args, "strip_front_matter", None),
        extract_headings=getattr(args, "extract_headings", None),
    )

    template_variables = {
        **plugins.template_variables,
        **parse_assignments(getattr(args, "template_var", []), "--template-var"),
    }

    return EngineSetup(
        options=options,
        reader=tc.build_reader(),
        cache=tc.build_cache(),
        transformers=plugins.load_transformers(),
        template_variables=template_variables,
        input_path=input_path,
    )


def iter_stdin_chunks(size: int = CHUNK_SIZE) -> Iterator[Union[str, bytes]]:
    """Yield chunks from standard input until EOF (bytes when a binary buffer is available)."""
    stream = getattr(sys.stdin, "buffer", sys.stdin)
    while True:
        chunk = stream.read(size)
        if not chunk:
            return
        yield chunk


def read_stdin() -> str:
    chunks = list(iter_stdin_chunks())
    if chunks and isinstance(chunks[0], bytes):
        return b"".join(chunks).decode("utf-8", errors="replace")
    return "".join(chunks)


__all__ = [
    "STDIN_MARKER",
    "EngineSetup",
    "build_engine",
    "get_repo_root",
    "get_input_path",
    "iter_stdin_chunks",
    "parse_assignments",
    "parse_extensions",
    "read_stdin",
    "setup_logging",
]
