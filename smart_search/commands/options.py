"""Show the value options offered for a field."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import click
from rich.markup import escape

from smart_search.cli import Context, pass_context
from smart_search.commands._common import EXIT_INVALID_INPUT, load_registry, schema_option
from smart_search.exceptions import UnknownFieldError
from smart_search.schema.options import OptionResolver
from smart_search.schema.registry import value_placeholder
from smart_search.utils.output import error, info


@click.command("options")
@click.argument("field")
@click.argument("query", required=False, default="")
@schema_option
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    default=False,
    help="Print the options as a JSON array",
)
@pass_context
def cli(
    ctx: Context,
    field: str,
    query: str,
    schema_path: Path | None,
    as_json: bool,
) -> None:
    """List the values offered for FIELD, filtered by QUERY.

    FIELD may be a field key or label. Options are matched
    case-insensitively as substrings of QUERY.

    \b
    Examples:
      smart-search options status
      smart-search options Department eng
    """
    registry = load_registry(ctx, schema_path)

    key = registry.find(field)
    if key is None:
        error(
            escape(str(UnknownFieldError(field))),
            hint=f"Available: {escape(', '.join(registry.keys))}",
        )
        raise SystemExit(EXIT_INVALID_INPUT)
    descriptor = registry.get(key)

    if not descriptor.has_choices:
        info(
            f"{escape(descriptor.label)} takes free-form {descriptor.type.value} values "
            f"(e.g. {value_placeholder(descriptor.type)})"
        )
        return

    resolver = OptionResolver(descriptor)
    options = asyncio.run(resolver.resolve(query)) or []

    if as_json:
        click.echo(json.dumps(options))
        return
    for option in options:
        click.echo(option)
