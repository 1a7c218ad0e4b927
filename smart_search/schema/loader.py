"""Load a schema registry from a TOML file.

Example schema file::

    [fields.status]
    label = "Status"
    type = "enum"
    options = ["active", "archived", "draft"]

    [fields.age]
    label = "Age"
    type = "number"
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

from smart_search.exceptions import SchemaLoadError
from smart_search.schema.registry import FieldDescriptor, FieldType, SchemaRegistry

_VALID_TYPES = ", ".join(t.value for t in FieldType)


def load_schema(path: Path) -> SchemaRegistry:
    """Load a schema file into a registry.

    Args:
        path: Path to the TOML schema file.

    Returns:
        SchemaRegistry with fields in file order.

    Raises:
        SchemaLoadError: If the file is missing, unparsable or malformed.
    """
    path = path.expanduser()
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        raise SchemaLoadError(path, "file not found") from None
    except OSError as e:
        raise SchemaLoadError(path, e.strerror or str(e)) from e
    except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
        raise SchemaLoadError(path, str(e)) from e

    return parse_schema_dict(data, path)


def parse_schema_dict(data: dict[str, Any], path: Path) -> SchemaRegistry:
    """Parse the decoded TOML document into a registry."""
    fields = data.get("fields")
    if not isinstance(fields, dict) or not fields:
        raise SchemaLoadError(path, "expected at least one [fields.<key>] table")

    descriptors: list[FieldDescriptor] = []
    for key, spec in fields.items():
        if not isinstance(spec, dict):
            raise SchemaLoadError(path, f"fields.{key} must be a table")

        type_name = spec.get("type")
        try:
            field_type = FieldType(type_name)
        except ValueError:
            raise SchemaLoadError(
                path, f"fields.{key}.type must be one of: {_VALID_TYPES}"
            ) from None

        label = spec.get("label", key)
        if not isinstance(label, str):
            raise SchemaLoadError(path, f"fields.{key}.label must be a string")

        options = spec.get("options")
        if options is not None:
            if not isinstance(options, list) or not all(isinstance(o, str) for o in options):
                raise SchemaLoadError(path, f"fields.{key}.options must be a list of strings")

        descriptors.append(
            FieldDescriptor(key=key, label=label, type=field_type, options=options)
        )

    return SchemaRegistry(descriptors)
