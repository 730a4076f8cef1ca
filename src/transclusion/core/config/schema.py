"""JSON Schema validation of merged configuration.

Schemas are stored as YAML (JSON Schema expressed in YAML) under
``transclusion/data/schemas``.
"""
from __future__ import annotations

from typing import Any, Dict, List

from jsonschema import Draft202012Validator

from ...data import get_data_path
from ..exceptions import ConfigError
from ..file_io.utils import read_yaml

CONFIG_SCHEMA = "config.schema.yaml"


def load_schema(schema_name: str = CONFIG_SCHEMA) -> Dict[str, Any]:
    """Load a bundled schema.

    Raises:
        ConfigError: If the schema is missing or not a YAML mapping
    """
    if not schema_name.endswith((".yaml", ".yml")):
        schema_name = f"{schema_name}.yaml"
    path = get_data_path("schemas", schema_name)
    if not path.exists():
        raise ConfigError(f"Schema not found: {schema_name}", context={"path": str(path)})
    schema = read_yaml(path, default=None, raise_on_error=True)
    if not isinstance(schema, dict):
        raise ConfigError(f"Schema must be a YAML mapping, got {type(schema).__name__}")
    return schema


def schema_errors(payload: Dict[str, Any], schema_name: str = CONFIG_SCHEMA) -> List[str]:
    """Return readable validation errors for ``payload`` (empty if valid)."""
    validator = Draft202012Validator(load_schema(schema_name))
    errors: List[str] = []
    for error in sorted(validator.iter_errors(payload), key=lambda e: [str(p) for p in e.path]):
        if error.path:
            path_str = ".".join(str(p) for p in error.path)
            errors.append(f"{path_str}: {error.message}")
        else:
            errors.append(error.message)
    return errors


def validate_payload(payload: Dict[str, Any], schema_name: str = CONFIG_SCHEMA) -> None:
    """Validate ``payload`` against a bundled schema.

    Raises:
        ConfigError: If validation fails; ``context["errors"]`` lists every problem
    """
    errors = schema_errors(payload, schema_name)
    if errors:
        raise ConfigError(
            f"Configuration failed validation against '{schema_name}': {errors[0]}",
            context={"errors": errors},
        )


__all__ = ["CONFIG_SCHEMA", "load_schema", "schema_errors", "validate_payload"]
