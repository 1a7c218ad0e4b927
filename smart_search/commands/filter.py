"""Filter a JSON row set with field-aware expressions."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import click
from rich.markup import escape
from rich.text import Text

from smart_search.cli import Context, pass_context
from smart_search.commands._common import (
    EXIT_FILE_ERROR,
    EXIT_INVALID_INPUT,
    EXIT_SUCCESS,
    load_registry,
    schema_option,
)
from smart_search.exceptions import DataLoadError, FilterError, SchemaError, SessionError
from smart_search.rows import collect_columns, load_rows
from smart_search.search.ast_nodes import AstNode
from smart_search.search.compiler import append_condition, count_conditions
from smart_search.search.evaluator import filter_rows
from smart_search.search.parser import format_node, parse_expression
from smart_search.search.session import SearchSession
from smart_search.search.values import to_text
from smart_search.utils.output import (
    console,
    create_table,
    debug,
    error,
    info,
    print_chip,
    verbose,
)


@click.command("filter")
@click.argument("expression", nargs=-1)
@click.option(
    "--where",
    "-w",
    "chips",
    nargs=3,
    multiple=True,
    metavar="FIELD OP VALUE",
    help="Add a filter chip; repeat to AND several chips",
)
@schema_option
@click.option(
    "--data",
    "-d",
    "data_path",
    type=click.Path(path_type=Path),
    default=None,
    help="JSON rows file (default: paths.data from config)",
)
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format (default: table)",
)
@click.option(
    "--columns",
    "-C",
    default=None,
    help="Comma-separated columns to display (default: display.columns or all)",
)
@pass_context
def cli(
    ctx: Context,
    expression: tuple[str, ...],
    chips: tuple[tuple[str, str, str], ...],
    schema_path: Path | None,
    data_path: Path | None,
    output_format: str,
    columns: str | None,
) -> None:
    """Filter rows by chips and/or a filter EXPRESSION.

    EXPRESSION uses the chip syntax joined by "and"/"or", with
    parentheses for grouping. Multiple arguments are joined with spaces.
    Chips given with --where are AND-ed with the expression.

    \b
    Examples:
      smart-search filter "status = active"
      smart-search filter "age > 30 and department = design"
      smart-search filter -w name contains alice -w date ">=" 2025-03-01
      smart-search filter '(status = draft or status = archived) and age < 40'

    \b
    Operators by field type:
      string          contains = !=
      number, date    = != > >= < <=
      enum, relation  = !=
      boolean         = !=
    """
    registry = load_registry(ctx, schema_path)

    data_path = ctx.data_file(data_path)
    if data_path is None:
        error("No data file given", hint="Pass --data or set paths.data in the config")
        raise SystemExit(EXIT_FILE_ERROR)

    # Build the filter: chips first, then the free-form expression
    session = SearchSession(registry)
    expression_text = " ".join(expression)
    try:
        for field, operator, value in chips:
            session.add(field, operator, value)
        parsed = parse_expression(expression_text, registry)
    except (FilterError, SchemaError, SessionError) as e:
        error(
            f"Invalid filter: {escape(str(e))}",
            hint=f"Fields: {escape(', '.join(registry.keys))}",
        )
        raise SystemExit(EXIT_INVALID_INPUT)

    ast: AstNode | None = session.ast
    if parsed is not None:
        ast = parsed if ast is None else append_condition(ast, parsed)
    debug(f"Filter AST: {escape(repr(ast))}")

    if ctx.verbose:
        for i, chip in enumerate(session.chips):
            label = registry.get(chip.field).label
            print_chip(label, chip.operator, chip.value, prefix=f"[{i}]")

    try:
        rows = load_rows(data_path)
    except DataLoadError as e:
        error(escape(str(e)))
        raise SystemExit(EXIT_FILE_ERROR)

    matched = filter_rows(rows, ast)
    verbose(f"{count_conditions(ast)} conditions, {len(matched)} of {len(rows)} rows matched")

    if output_format == "json":
        click.echo(json.dumps(matched, indent=2, default=str))
        raise SystemExit(EXIT_SUCCESS)

    if not matched:
        info(f"No rows match: {escape(format_node(ast))}")
        raise SystemExit(EXIT_SUCCESS)

    col_list = ctx.columns(columns) or collect_columns(rows)

    _print_table(matched, col_list, registry_labels={d.key: d.label for d in registry})
    if not ctx.quiet:
        filter_text = format_node(ast) or "(no filter)"
        info(f"Filter: {escape(filter_text)} ({len(matched)} of {len(rows)} rows)")
    raise SystemExit(EXIT_SUCCESS)


def _print_table(
    rows: list[dict[str, Any]],
    col_list: list[str],
    registry_labels: dict[str, str],
) -> None:
    """Print rows as a Rich table."""
    table = create_table(show_header=True, header_style="bold")
    for col in col_list:
        table.add_column(Text(registry_labels.get(col, col)), no_wrap=True)
    for row in rows:
        table.add_row(*(Text(to_text(row.get(col))) for col in col_list))
    console.print(table)
