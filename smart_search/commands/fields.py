"""List the filterable fields of a schema."""

from __future__ import annotations

import json
from pathlib import Path

import click
from rich.text import Text

from smart_search.cli import Context, pass_context
from smart_search.commands._common import load_registry, schema_option
from smart_search.schema.registry import value_placeholder
from smart_search.utils.output import console, create_table


@click.command("fields")
@schema_option
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format (default: table)",
)
@pass_context
def cli(ctx: Context, schema_path: Path | None, output_format: str) -> None:
    """Show each field's key, label, type and allowed operators.

    \b
    Examples:
      smart-search fields --schema schema.toml
      smart-search fields --format json
    """
    registry = load_registry(ctx, schema_path)

    if output_format == "json":
        results = [
            {
                "key": descriptor.key,
                "label": descriptor.label,
                "type": descriptor.type.value,
                "operators": list(descriptor.operators),
                "options": (
                    list(descriptor.options)
                    if descriptor.options is not None and not callable(descriptor.options)
                    else None
                ),
            }
            for descriptor in registry
        ]
        click.echo(json.dumps(results, indent=2))
        return

    table = create_table(show_header=True, header_style="bold")
    table.add_column("Key", style="chip.label", no_wrap=True)
    table.add_column("Label")
    table.add_column("Type")
    table.add_column("Operators", style="chip.operator")
    table.add_column("Value")

    for descriptor in registry:
        if descriptor.options is not None and not callable(descriptor.options):
            value_hint = ", ".join(descriptor.options)
        else:
            value_hint = value_placeholder(descriptor.type)
        table.add_row(
            Text(descriptor.key),
            Text(descriptor.label),
            descriptor.type.value,
            " ".join(descriptor.operators),
            Text(value_hint),
        )

    console.print(table)
