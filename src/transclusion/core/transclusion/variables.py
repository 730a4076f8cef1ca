"""Flat ``{{identifier}}`` variable substitution.

Used for transclusion paths (``![[intro-{{lang}}]]``) and, through
``TemplateVariableTransformer``, for composed output. Substitution is a single
pass: replacement text is never re-scanned for placeholders.
"""
from __future__ import annotations

import re
from typing import Callable, Mapping, Optional, Set

VARIABLE_PATTERN = re.compile(r"\{\{([A-Za-z0-9_-]+)\}\}")


class UndefinedVariableError(KeyError):
    """Raised in strict mode when a placeholder names an unknown variable."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Undefined variable: {self.name}"


def substitute_variables(
    text: str,
    variables: Mapping[str, object],
    *,
    strict: bool = False,
    on_missing: Optional[Callable[[str], None]] = None,
) -> str:
    """Replace ``{{name}}`` placeholders with values from ``variables``.

    Args:
        text: Input text
        variables: Variable table; values are converted with ``str()``
        strict: Raise UndefinedVariableError on the first unknown name
        on_missing: Called with each unknown name in lenient mode

    Returns:
        Text with known placeholders replaced; unknown ones left unchanged
    """
    if "{{" not in text:
        return text

    def replacer(match: re.Match[str]) -> str:
        name = match.group(1)
        if name in variables:
            value = variables[name]
            if callable(value):
                value = value()
            return str(value)
        if strict:
            raise UndefinedVariableError(name)
        if on_missing is not None:
            on_missing(name)
        return match.group(0)

    return VARIABLE_PATTERN.sub(replacer, text)


def find_variables(text: str) -> Set[str]:
    """Return the set of placeholder names used in ``text``."""
    return {m.group(1) for m in VARIABLE_PATTERN.finditer(text)}


__all__ = ["VARIABLE_PATTERN", "UndefinedVariableError", "substitute_variables", "find_variables"]
