"""Close-match suggestions for recorded transclusion errors.

- FILE_NOT_FOUND: Markdown files under the base path with a similar name
- HEADING_NOT_FOUND: headings of the target file with similar text
- INVALID_PATH (undefined variable): defined variables with a similar name

Scores are ``difflib.SequenceMatcher`` ratios over lowercased text.
"""
from __future__ import annotations

import difflib
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from ..file_io.reader import FileReader, FileReadError
from .headings import iter_headings
from .resolver import has_extension, normalize_extensions
from .types import ErrorCode, TransclusionError, TransclusionOptions
from .variables import find_variables, substitute_variables

logger = logging.getLogger(__name__)

FILE_THRESHOLD = 0.5
HEADING_THRESHOLD = 0.4
VARIABLE_THRESHOLD = 0.6
MAX_SUGGESTIONS = 3
MAX_SCANNED_FILES = 5000


@dataclass(frozen=True)
class Suggestion:
    text: str
    score: float
    kind: str

    @property
    def percent(self) -> int:
        return round(self.score * 100)

    def to_dict(self) -> Dict[str, Any]:
        return {"text": self.text, "score": round(self.score, 2), "kind": self.kind}


def close_matches(
    target: str,
    candidates: Iterable[str],
    *,
    threshold: float,
    limit: int = MAX_SUGGESTIONS,
) -> List[Tuple[str, float]]:
    """Return up to ``limit`` candidates scoring at least ``threshold``, best first."""
    want = target.strip().lower()
    if not want:
        return []
    scored: List[Tuple[str, float]] = []
    seen = set()
    for cand in candidates:
        if cand in seen:
            continue
        seen.add(cand)
        score = difflib.SequenceMatcher(None, want, cand.strip().lower()).ratio()
        if score >= threshold:
            scored.append((cand, score))
    scored.sort(key=lambda item: item[1], reverse=True)
    return scored[:limit]


def markdown_files(base_path: Path, extensions: Sequence[str]) -> List[str]:
    """Relative POSIX paths of files under ``base_path`` with a listed extension."""
    suffixes = {ext.lower() for ext in normalize_extensions(extensions)}
    found: List[str] = []
    try:
        for path in sorted(base_path.rglob("*")):
            if path.suffix.lower() in suffixes and path.is_file():
                found.append(path.relative_to(base_path).as_posix())
                if len(found) >= MAX_SCANNED_FILES:
                    break
    except OSError as exc:
        logger.debug("Cannot scan %s for suggestions: %s", base_path, exc)
    return found


def _reference_of(error: TransclusionError, options: TransclusionOptions) -> Optional[str]:
    path = Path(error.path)
    if not path.is_absolute():
        return substitute_variables(error.path, options.variables).replace("\\", "/")
    try:
        return path.relative_to(options.base_path).as_posix()
    except ValueError:
        return None


def suggest_files(reference: str, options: TransclusionOptions) -> List[Suggestion]:
    """Suggest files for a reference that did not resolve.

    A reference written without an extension is compared against, and
    suggested as, paths without their extension.
    """
    files = markdown_files(options.base_path, options.extensions)
    if has_extension(reference):
        candidates = files
    else:
        candidates = [f.rsplit(".", 1)[0] for f in files]
    return [
        Suggestion(text=text, score=score, kind="file")
        for text, score in close_matches(reference, candidates, threshold=FILE_THRESHOLD)
        if text != reference
    ]


def suggest_headings(
    heading: str, path: str, reader: Optional[FileReader] = None
) -> List[Suggestion]:
    """Suggest headings of the file at ``path`` that resemble ``heading``."""
    try:
        content = (reader or FileReader()).read(path)
    except FileReadError as exc:
        logger.debug("Cannot read %s for heading suggestions: %s", path, exc)
        return []
    names = [h.text for h in iter_headings(content.split("\n"))]
    return [
        Suggestion(text=text, score=score, kind="heading")
        for text, score in close_matches(heading, names, threshold=HEADING_THRESHOLD)
    ]


def suggest_variables(reference: str, variables: Dict[str, str]) -> List[Suggestion]:
    missing = sorted(name for name in find_variables(reference) if name not in variables)
    suggestions: List[Suggestion] = []
    for name in missing:
        for text, score in close_matches(name, variables, threshold=VARIABLE_THRESHOLD):
            suggestions.append(Suggestion(text=text, score=score, kind="variable"))
    return suggestions[:MAX_SUGGESTIONS]


def suggest(
    error: TransclusionError,
    options: TransclusionOptions,
    reader: Optional[FileReader] = None,
) -> List[Suggestion]:
    """Suggestions for ``error``; empty for error kinds without close matches."""
    if error.code is ErrorCode.FILE_NOT_FOUND:
        reference = _reference_of(error, options)
        return suggest_files(reference, options) if reference else []
    if error.code is ErrorCode.HEADING_NOT_FOUND and error.heading:
        return suggest_headings(error.heading, error.path, reader)
    if error.code is ErrorCode.INVALID_PATH:
        return suggest_variables(error.path, dict(options.variables))
    return []


__all__ = [
    "Suggestion",
    "close_matches",
    "markdown_files",
    "suggest_files",
    "suggest_headings",
    "suggest_variables",
    "suggest",
]
