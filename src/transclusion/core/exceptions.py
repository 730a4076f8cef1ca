from __future__ import annotations

from typing import Any, Dict, Mapping


class TransclusionFrameworkError(Exception):
    """Base exception for framework misuse (configuration, plugins, I/O).

    Content problems found while composing a document are never raised; they
    are recorded as ``TransclusionError`` entries instead.
    """

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            # Store a shallow copy to avoid accidental mutation.
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }


class ConfigError(TransclusionFrameworkError, ValueError):
    """Raised when configuration cannot be loaded or fails validation."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        TransclusionFrameworkError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class PluginLoadError(TransclusionFrameworkError, ImportError):
    """Raised when a transformer spec cannot be imported or instantiated."""

    def __init__(
        self,
        message: str,
        *,
        spec: str | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        if spec:
            ctx["spec"] = spec
        TransclusionFrameworkError.__init__(self, message, context=ctx)
        ImportError.__init__(self, message)


__all__ = [
    "TransclusionFrameworkError",
    "ConfigError",
    "PluginLoadError",
]
