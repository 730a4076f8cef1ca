"""Parse ``![[...]]`` transclusion directives out of a single line.

Supported forms:
- ``![[path]]``              - whole file
- ``![[path#Heading]]``      - one heading section
- ``![[path#Start:End]]``    - heading range (either side may be empty)

Directives inside inline code spans or HTML comments are left alone.
"""
from __future__ import annotations

import re
from typing import List, Optional

from .types import Token

# ![[ + non-empty body without nested brackets + ]]
TRANSCLUSION_PATTERN = re.compile(r"!\[\[([^\[\]]+)\]\]")

COMMENT_OPEN = "<!--"
COMMENT_CLOSE = "-->"


def build_mask(line: str) -> List[bool]:
    """Return a per-character mask; True marks inline code or HTML comments.

    Both regions are scanned left to right in one pass so that a back-tick
    inside a comment (or ``<!--`` inside a code span) does not open a new
    region. Unterminated regions run to the end of the line.
    """
    mask = [False] * len(line)
    i = 0
    n = len(line)
    while i < n:
        if line.startswith(COMMENT_OPEN, i):
            close = line.find(COMMENT_CLOSE, i + len(COMMENT_OPEN))
            stop = n if close == -1 else close + len(COMMENT_CLOSE)
        elif line[i] == "`":
            close = line.find("`", i + 1)
            stop = n if close == -1 else close + 1
        else:
            i += 1
            continue
        for pos in range(i, stop):
            mask[pos] = True
        i = stop
    return mask


def _split_body(body: str, original: str, start: int, end: int) -> Optional[Token]:
    path_part, hash_sep, anchor = body.partition("#")
    path = path_part.strip()
    if not path:
        return None

    if not hash_sep:
        return Token(original=original, path=path, start=start, end=end)

    head, colon, tail = anchor.partition(":")
    if colon:
        return Token(
            original=original,
            path=path,
            start=start,
            end=end,
            heading=head.strip(),
            end_heading=tail.strip(),
        )

    heading = head.strip()
    return Token(
        original=original,
        path=path,
        start=start,
        end=end,
        heading=heading or None,
    )


def parse_references(line: str) -> List[Token]:
    """Parse all transclusion tokens on ``line`` in left-to-right order.

    Args:
        line: One line of text (without its terminator)

    Returns:
        Tokens whose start offset is outside inline code and HTML comments
    """
    if "![[" not in line:
        return []

    mask = build_mask(line)
    tokens: List[Token] = []
    for match in TRANSCLUSION_PATTERN.finditer(line):
        if mask[match.start()]:
            continue
        token = _split_body(match.group(1), match.group(0), match.start(), match.end())
        if token is not None:
            tokens.append(token)
    return tokens


__all__ = ["TRANSCLUSION_PATTERN", "build_mask", "parse_references"]
