"""Helpers for raw file content: BOM, front matter, trimming."""
from __future__ import annotations

from typing import List, Optional, Tuple

BOM = "\ufeff"

YAML_DELIMITER = "---"
TOML_DELIMITER = "+++"
FRONT_MATTER_DELIMITERS = (YAML_DELIMITER, TOML_DELIMITER)


def strip_bom(content: str) -> str:
    if content.startswith(BOM):
        return content[len(BOM):]
    return content


def front_matter_delimiter(line: str) -> Optional[str]:
    """Return the delimiter if ``line`` opens or closes a front-matter block."""
    stripped = line.rstrip("\r").strip()
    if stripped in FRONT_MATTER_DELIMITERS:
        return stripped
    return None


def detect_front_matter(content: str) -> Optional[Tuple[int, int]]:
    """Locate a leading front-matter block.

    Returns:
        ``(first_line, first_body_line)`` line indices, where the body starts
        after the closing delimiter and any blank lines following it; None when
        the content has no closed front-matter block
    """
    lines = content.split("\n")
    if not lines:
        return None

    opener = front_matter_delimiter(lines[0])
    if opener is None:
        return None

    for index in range(1, len(lines)):
        if front_matter_delimiter(lines[index]) == opener:
            body = index + 1
            while body < len(lines) and not lines[body].strip():
                body += 1
            return 0, body
    return None


def strip_front_matter(content: str) -> str:
    """Remove a leading YAML (``---``) or TOML (``+++``) front-matter block.

    An unclosed block leaves the content unchanged.
    """
    span = detect_front_matter(content)
    if span is None:
        return content
    lines: List[str] = content.split("\n")
    return "\n".join(lines[span[1]:])


def trim_for_transclusion(content: str) -> str:
    """Trim surrounding whitespace from composed sub-file content."""
    return content.strip()


__all__ = [
    "BOM",
    "YAML_DELIMITER",
    "TOML_DELIMITER",
    "strip_bom",
    "front_matter_delimiter",
    "detect_front_matter",
    "strip_front_matter",
    "trim_for_transclusion",
]
