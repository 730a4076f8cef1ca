"""Template variable substitution in composed output.

Replaces ``{{name}}`` placeholders with template variables after all
directives have been expanded. Unknown names are left in place.
"""
from __future__ import annotations

from typing import Any, Mapping, Optional

from ..transclusion.variables import substitute_variables
from .base import STAGE_POST, ContentTransformer, TransformContext


class TemplateVariableTransformer(ContentTransformer):
    """Substitute ``{{name}}`` template variables.

    Variables given to the constructor are defaults; ``context.variables``
    takes precedence over them.

    Examples:
        Variables: {"product": "Acme"}
        Template: Welcome to {{product}} ({{version}})
        Output: Welcome to Acme ({{version}})
    """

    stage = STAGE_POST
    priority = 50

    def __init__(self, variables: Optional[Mapping[str, Any]] = None) -> None:
        self.variables = dict(variables or {})

    def transform(self, content: str, context: TransformContext) -> str:
        table = {**self.variables, **context.variables}
        if not table:
            return content

        def on_missing(name: str) -> None:
            context.record_variable(name, resolved=False)

        for name in table:
            if "{{" + name + "}}" in content:
                context.record_variable(name, resolved=True)
        return substitute_variables(content, table, on_missing=on_missing)


__all__ = ["TemplateVariableTransformer"]
