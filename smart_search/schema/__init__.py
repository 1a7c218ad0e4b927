"""Field schema: descriptors, operator table and option sources."""

from smart_search.schema.loader import load_schema
from smart_search.schema.options import OptionResolver, resolve_options
from smart_search.schema.registry import (
    OPERATORS,
    FieldDescriptor,
    FieldType,
    SchemaRegistry,
    allowed_operators,
    suggest_operators,
    value_placeholder,
)

__all__ = [
    "OPERATORS",
    "FieldDescriptor",
    "FieldType",
    "OptionResolver",
    "SchemaRegistry",
    "allowed_operators",
    "load_schema",
    "resolve_options",
    "suggest_operators",
    "value_placeholder",
]
