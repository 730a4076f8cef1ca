"""File I/O utilities.

- Atomic text writes (temp file + fsync + rename) for composed output
- YAML reads with consistent error handling for configuration files
"""
from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Any, Callable, Optional, TextIO, Union

import yaml

from ..exceptions import ConfigError

PathLike = Union[str, Path]


def ensure_parent_dir(path: Path) -> None:
    """Ensure the parent directory for ``path`` exists."""
    Path(path).parent.mkdir(parents=True, exist_ok=True)


def _atomic_write(
    path: Path,
    write_fn: Callable[[TextIO], None],
    *,
    encoding: str = "utf-8",
) -> None:
    """Write to ``path`` atomically using a temp file + fsync + rename.

    - Parent directory is created if missing
    - Data is written to a temporary file in the same directory
    - File is fsync'd, then atomically replaced
    - Any leftover temp file is cleaned up on failure
    """
    path = Path(path)
    ensure_parent_dir(path)

    tmp_path: Optional[Path] = None
    try:
        # newline="" keeps the caller's line terminators byte for byte.
        with tempfile.NamedTemporaryFile(
            "w",
            encoding=encoding,
            newline="",
            dir=str(path.parent),
            delete=False,
        ) as f:
            tmp_path = Path(f.name)
            write_fn(f)
            f.flush()
            os.fsync(f.fileno())

        os.replace(str(tmp_path), str(path))
    finally:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink(missing_ok=True)


def write_text_atomic(path: PathLike, content: str) -> None:
    """Atomically write UTF-8 text to ``path``."""

    def _writer(f: TextIO) -> None:
        f.write(content)

    _atomic_write(Path(path), _writer)


def read_yaml(path: PathLike, default: Any = None, *, raise_on_error: bool = False) -> Any:
    """Read a YAML file.

    Args:
        path: YAML file path to read
        default: Value returned when the file is missing, empty or invalid
        raise_on_error: Raise ConfigError on parse errors instead of
            returning ``default``

    Returns:
        Parsed YAML data, or ``default``
    """
    path = Path(path)
    if not path.exists():
        return default

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (yaml.YAMLError, OSError) as exc:
        if raise_on_error:
            raise ConfigError(
                f"Failed to parse YAML: {path}: {exc}",
                context={"path": str(path)},
            ) from exc
        return default
    return data if data is not None else default


__all__ = ["ensure_parent_dir", "write_text_atomic", "read_yaml"]
