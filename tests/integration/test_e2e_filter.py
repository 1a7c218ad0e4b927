"""End-to-end tests: schema file + row file through session, parser and CLI."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from smart_search.cli import cli
from smart_search.rows import load_rows
from smart_search.schema.loader import load_schema
from smart_search.search.evaluator import filter_rows
from smart_search.search.parser import format_node, parse_expression
from smart_search.search.session import SearchSession

# ---------------------------------------------------------------------------
# Chips built step by step
# ---------------------------------------------------------------------------


def test_chip_session_against_files(schema_file: Path, rows_file: Path) -> None:
    """Two chips built through the menus select the two senior designers."""
    registry = load_schema(schema_file)
    rows = load_rows(rows_file)
    published = []
    session = SearchSession(registry, on_change=published.append)

    assert "age" in session.suggestions("ag")
    session.choose_field("age")
    assert ">" in session.suggestions(">")
    session.choose_operator(">")
    session.commit("30")

    session.choose_field("Department")
    session.choose_operator("=")
    assert asyncio.run(session.lookup_options("des")) == ["design"]
    session.commit("design")

    assert session.chip_labels() == ["Age: > 30", "Department: = design"]
    assert [r["name"] for r in session.apply(rows)] == ["Alice Johnson", "Alice M."]
    assert len(published) == 2

    session.remove_chip(0)
    assert [r["age"] for r in session.apply(rows)] == [31, 35]
    session.remove_chip(0)
    assert session.apply(rows) == rows


# ---------------------------------------------------------------------------
# Typed expressions
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "expression,authors",
    [
        ("status = active", ["Alice", "Alice"]),
        ("date < 2025-02-01", ["Alice"]),
        ("date >= 2025-02-11 and date <= 2025-03-09", ["Bob", "Carol"]),
        ("Author = Bob or Age > 40", ["Bob", "Carol"]),
        ("name contains o and (department = ops or department = engineering)", ["Bob", "Carol"]),
        ("project != \"Design System\"", ["Alice", "Carol", "Alice"]),
    ],
)
def test_expressions_against_files(
    schema_file: Path, rows_file: Path, expression: str, authors: list[str]
) -> None:
    registry = load_schema(schema_file)
    rows = load_rows(rows_file)

    ast = parse_expression(expression, registry)

    assert [r["author"] for r in filter_rows(rows, ast)] == authors
    # The canonical rendering selects the same rows
    reparsed = parse_expression(format_node(ast), registry)
    assert filter_rows(rows, reparsed) == filter_rows(rows, ast)


# ---------------------------------------------------------------------------
# CLI workflow
# ---------------------------------------------------------------------------


def test_cli_workflow(temp_dir: Path, schema_file: Path, rows_file: Path) -> None:
    """init-config, point it at the demo files, then list fields and filter."""
    runner = CliRunner()
    config_path = temp_dir / "generated.toml"

    result = runner.invoke(cli, ["init-config", "--output", str(config_path)])
    assert result.exit_code == 0, result.output

    # The example config refers to schema.toml and rows.json next to itself
    assert config_path.parent == schema_file.parent == rows_file.parent
    base = ["--config", str(config_path), "--no-color"]

    result = runner.invoke(cli, [*base, "fields", "--format", "json"])
    assert result.exit_code == 0, result.output
    assert len(json.loads(result.output)) == 7

    result = runner.invoke(cli, [*base, "options", "author", "a"])
    assert result.output.splitlines() == ["Alice", "Carol"]

    result = runner.invoke(
        cli, [*base, "filter", "-f", "json", "-w", "author", "=", "Alice", "date > 2025-02-01"]
    )
    assert result.exit_code == 0, result.output
    assert [r["project"] for r in json.loads(result.output)] == ["Marketing Site"]
