"""Deep merge used to layer configuration files.

- Nested mappings merge key by key
- Lists are replaced by default
- A list whose first item is ``"+"`` appends to the lower layer
- A list whose first item is ``"="`` replaces explicitly
- An empty list keeps the lower layer
"""
from __future__ import annotations

from typing import Any, Dict, List


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``override`` into ``base`` without mutating either.

    Example:
        >>> deep_merge({"transclusion": {"strict": False, "max_depth": 10}},
        ...            {"transclusion": {"strict": True}})
        {'transclusion': {'strict': True, 'max_depth': 10}}
    """
    result: Dict[str, Any] = dict(base)
    for key, value in (override or {}).items():
        current = result.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            result[key] = deep_merge(current, value)
        elif isinstance(current, list) and isinstance(value, list):
            result[key] = merge_arrays(current, value)
        else:
            result[key] = value
    return result


def merge_arrays(base: List[Any], override: List[Any]) -> List[Any]:
    """Merge a list from a higher layer over one from a lower layer.

    Example:
        >>> merge_arrays(["md"], ["txt"])
        ['txt']
        >>> merge_arrays(["md"], ["+", "txt"])
        ['md', 'txt']
        >>> merge_arrays(["md"], ["="])
        []
    """
    if not override:
        return list(base)
    first = override[0]
    if first == "+":
        return [*base, *override[1:]]
    if first == "=":
        return list(override[1:])
    return list(override)


__all__ = ["deep_merge", "merge_arrays"]
