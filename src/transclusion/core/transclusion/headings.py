"""Extract heading sections and heading ranges from Markdown content.

Headings are ATX lines: 1-6 ``#`` followed by whitespace and text. Heading
text is compared case-insensitively after trimming.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional

HEADING_PATTERN = re.compile(r"^(#{1,6})\s+(.+)$")


@dataclass(frozen=True)
class Heading:
    level: int
    text: str
    line_index: int


def _normalize(text: str) -> str:
    return text.strip().lower()


def parse_heading(line: str, index: int = 0) -> Optional[Heading]:
    match = HEADING_PATTERN.match(line.rstrip("\r"))
    if match is None:
        return None
    return Heading(level=len(match.group(1)), text=match.group(2).strip(), line_index=index)


def iter_headings(lines: List[str], start: int = 0):
    for index in range(start, len(lines)):
        heading = parse_heading(lines[index], index)
        if heading is not None:
            yield heading


def _find(lines: List[str], name: str, start: int = 0) -> Optional[Heading]:
    wanted = _normalize(name)
    for heading in iter_headings(lines, start):
        if _normalize(heading.text) == wanted:
            return heading
    return None


def _trim_trailing_blank(lines: List[str]) -> List[str]:
    end = len(lines)
    while end > 0 and not lines[end - 1].strip():
        end -= 1
    return lines[:end]


def extract_heading(content: str, name: str) -> Optional[str]:
    """Extract the section starting at heading ``name``.

    The section includes the heading line and runs up to (not including) the
    next heading of the same or a shallower level.

    Args:
        content: Full file content
        name: Heading text to look for

    Returns:
        Section text with trailing blank lines removed, or None when the
        heading does not exist
    """
    if not name:
        return content

    lines = content.split("\n")
    heading = _find(lines, name)
    if heading is None:
        return None

    end = len(lines)
    for other in iter_headings(lines, heading.line_index + 1):
        if other.level <= heading.level:
            end = other.line_index
            break

    return "\n".join(_trim_trailing_blank(lines[heading.line_index:end]))


def extract_heading_range(content: str, start: str = "", end: str = "") -> Optional[str]:
    """Extract the lines from heading ``start`` up to heading ``end``.

    - empty ``start``: begin at the top of the document
    - ``start`` not found: None (the caller reports a start-heading error)
    - empty or missing ``end``: run to the end of the document
    - otherwise stop just before the first heading after ``start`` matching ``end``
    """
    lines = content.split("\n")

    if start:
        heading = _find(lines, start)
        if heading is None:
            return None
        first = heading.line_index
    else:
        first = 0

    last = len(lines)
    if end:
        # The line at the start position never ends the range, even with an empty start.
        stop = _find(lines, end, first + 1)
        if stop is not None:
            last = stop.line_index

    return "\n".join(_trim_trailing_blank(lines[first:last]))


__all__ = [
    "HEADING_PATTERN",
    "Heading",
    "parse_heading",
    "iter_headings",
    "extract_heading",
    "extract_heading_range",
]
