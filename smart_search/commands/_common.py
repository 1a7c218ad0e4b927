"""Helpers shared by the schema-aware commands."""

from __future__ import annotations

from pathlib import Path

import click
from rich.markup import escape

from smart_search.cli import Context
from smart_search.exceptions import SchemaLoadError
from smart_search.schema.loader import load_schema
from smart_search.schema.registry import SchemaRegistry
from smart_search.utils.output import error, verbose

EXIT_SUCCESS = 0
EXIT_INVALID_INPUT = 1
EXIT_FILE_ERROR = 2

schema_option = click.option(
    "--schema",
    "-s",
    "schema_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Schema TOML file (default: paths.schema from config)",
)


def load_registry(ctx: Context, schema_path: Path | None) -> SchemaRegistry:
    """Load the schema from the command line or the configured path.

    Exits with EXIT_FILE_ERROR if no schema is configured or it fails to load.
    """
    schema_path = ctx.schema_file(schema_path)
    if schema_path is None:
        error("No schema file given", hint="Pass --schema or set paths.schema in the config")
        raise SystemExit(EXIT_FILE_ERROR)

    try:
        registry = load_schema(schema_path)
    except SchemaLoadError as e:
        error(escape(str(e)))
        raise SystemExit(EXIT_FILE_ERROR)

    verbose(f"Loaded {len(registry)} fields from {escape(str(schema_path))}")
    return registry
