"""Unit tests for the filter command."""

from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner

from smart_search.cli import cli


def _filter(sample_config: Path, *args: str):
    runner = CliRunner()
    return runner.invoke(cli, ["--config", str(sample_config), "filter", *args])


def _names(output: str) -> list[str]:
    return [row["name"] for row in json.loads(output)]


class TestFilterJson:
    def test_expression(self, sample_config: Path) -> None:
        result = _filter(sample_config, "--format", "json", "age > 30 and department = design")
        assert result.exit_code == 0, result.output
        assert _names(result.output) == ["Alice Johnson", "Alice M."]

    def test_expression_split_over_arguments(self, sample_config: Path) -> None:
        result = _filter(sample_config, "-f", "json", "status", "=", "active")
        assert _names(result.output) == ["Alice Johnson", "Alice M."]

    def test_where_chips(self, sample_config: Path) -> None:
        result = _filter(
            sample_config,
            "-f",
            "json",
            "-w",
            "name",
            "contains",
            "ALICE",
            "-w",
            "date",
            ">=",
            "2025-03-01",
        )
        assert result.exit_code == 0, result.output
        assert _names(result.output) == ["Alice M."]

    def test_chips_and_expression_combined(self, sample_config: Path) -> None:
        result = _filter(
            sample_config,
            "-f",
            "json",
            "-w",
            "age",
            "<",
            "40",
            "status = draft or department = design",
        )
        assert _names(result.output) == ["Alice Johnson", "Bob Gray", "Alice M."]

    def test_no_filter_returns_everything(self, sample_config: Path) -> None:
        result = _filter(sample_config, "-f", "json")
        assert len(json.loads(result.output)) == 4

    def test_no_matches_is_empty_array(self, sample_config: Path) -> None:
        result = _filter(sample_config, "-f", "json", "age > 100")
        assert result.exit_code == 0
        assert json.loads(result.output) == []

    def test_explicit_paths_override_config(
        self, schema_file: Path, rows_file: Path, temp_dir: Path
    ) -> None:
        other = temp_dir / "other.json"
        other.write_text(json.dumps([{"name": "Zed", "age": 50}]))

        runner = CliRunner()
        result = runner.invoke(
            cli,
            [
                "filter",
                "--schema",
                str(schema_file),
                "--data",
                str(other),
                "-f",
                "json",
                "age >= 50",
            ],
        )
        assert result.exit_code == 0, result.output
        assert _names(result.output) == ["Zed"]


class TestFilterTable:
    def test_table_output(self, sample_config: Path) -> None:
        result = _filter(sample_config, "status = archived")
        assert result.exit_code == 0, result.output
        assert "Carol" in result.output
        assert "Bob" not in result.output
        assert "1 of 4 rows" in result.output

    def test_labels_as_headers(self, sample_config: Path) -> None:
        result = _filter(sample_config, "author = Bob")
        assert "Author" in result.output
        assert "Status" in result.output

    def test_columns_option(self, sample_config: Path) -> None:
        result = _filter(sample_config, "--columns", "name,age", "author = Bob")
        assert "Bob Gray" in result.output
        assert "29" in result.output
        assert "Design System" not in result.output

    def test_no_matches_message(self, sample_config: Path) -> None:
        result = _filter(sample_config, "age > 100")
        assert result.exit_code == 0
        assert "No rows match" in result.output

    def test_quiet_hides_summary(self, sample_config: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(
            cli, ["--config", str(sample_config), "--quiet", "filter", "author = Bob"]
        )
        assert result.exit_code == 0
        assert "rows)" not in result.output

    def test_verbose_prints_chips(self, sample_config: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(
            cli,
            ["--config", str(sample_config), "--verbose", "filter", "-w", "age", ">", "30"],
        )
        assert result.exit_code == 0, result.output
        assert "Age: > 30" in result.output


class TestFilterErrors:
    def test_parse_error(self, sample_config: Path) -> None:
        result = _filter(sample_config, "age >")
        assert result.exit_code == 1
        assert "Invalid filter" in result.output

    def test_unknown_field(self, sample_config: Path) -> None:
        result = _filter(sample_config, "colour = red")
        assert result.exit_code == 1
        assert "Unknown field" in result.output

    def test_operator_not_allowed(self, sample_config: Path) -> None:
        result = _filter(sample_config, "-w", "status", ">", "active")
        assert result.exit_code == 1
        assert "not allowed" in result.output

    def test_empty_chip_value(self, sample_config: Path) -> None:
        result = _filter(sample_config, "-w", "name", "contains", "  ")
        assert result.exit_code == 1

    def test_missing_data_file(self, schema_file: Path, temp_dir: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(
            cli,
            ["filter", "--schema", str(schema_file), "--data", str(temp_dir / "none.json")],
        )
        assert result.exit_code == 2
        assert "file not found" in result.output

    def test_malformed_data_file(self, schema_file: Path, temp_dir: Path) -> None:
        bad = temp_dir / "bad.json"
        bad.write_text('{"not": "a list"}')
        runner = CliRunner()
        result = runner.invoke(
            cli, ["filter", "--schema", str(schema_file), "--data", str(bad)]
        )
        assert result.exit_code == 2

    def test_non_utf8_data_file(self, schema_file: Path, temp_dir: Path) -> None:
        bad = temp_dir / "latin1.json"
        bad.write_bytes(b'[{"name": "\xff"}]')
        runner = CliRunner()
        result = runner.invoke(
            cli, ["filter", "--schema", str(schema_file), "--data", str(bad)]
        )
        assert result.exit_code == 2
        assert result.exception is None or isinstance(result.exception, SystemExit)

    def test_bad_config(self, temp_dir: Path) -> None:
        config_path = temp_dir / "broken.toml"
        config_path.write_text("not [ toml")
        runner = CliRunner()
        result = runner.invoke(cli, ["--config", str(config_path), "filter"])
        assert result.exit_code == 1


class TestBracketedText:
    """Square brackets in values and rows are printed as-is."""

    def _rows(self, temp_dir: Path) -> Path:
        path = temp_dir / "brackets.json"
        path.write_text(
            json.dumps(
                [
                    {"author": "a[/b]", "name": "[/x] tag", "age": 1},
                    {"author": "[bold]c", "name": "plain", "age": 2},
                ]
            )
        )
        return path

    def _invoke(self, schema_file: Path, rows: Path, *args: str):
        runner = CliRunner()
        return runner.invoke(
            cli,
            [
                "filter",
                "--schema",
                str(schema_file),
                "--data",
                str(rows),
                "-C",
                "author,name",
                *args,
            ],
        )

    def test_closing_tag_in_expression(self, schema_file: Path, temp_dir: Path) -> None:
        result = self._invoke(schema_file, self._rows(temp_dir), "name contains [/x]")
        assert result.exit_code == 0, result.output
        assert "a[/b]" in result.output
        assert "[/x] tag" in result.output

    def test_rows_with_markup_like_cells(self, schema_file: Path, temp_dir: Path) -> None:
        result = self._invoke(schema_file, self._rows(temp_dir))
        assert result.exit_code == 0, result.output
        assert "a[/b]" in result.output
        assert "[bold]c" in result.output

    def test_no_match_message(self, schema_file: Path, temp_dir: Path) -> None:
        result = self._invoke(schema_file, self._rows(temp_dir), "name = [/nothing]")
        assert result.exit_code == 0, result.output
        assert "[/nothing]" in result.output

    def test_verbose_chip(self, schema_file: Path, temp_dir: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(
            cli,
            [
                "--verbose",
                "filter",
                "--schema",
                str(schema_file),
                "--data",
                str(self._rows(temp_dir)),
                "-w",
                "name",
                "contains",
                "[/x]",
            ],
        )
        assert result.exit_code == 0, result.output
        assert "Name: contains [/x]" in result.output

    def test_parse_error_with_brackets(self, schema_file: Path, temp_dir: Path) -> None:
        result = self._invoke(schema_file, self._rows(temp_dir), "name [/x]")
        assert result.exit_code == 1
        assert "Invalid filter" in result.output


def test_debug_prints_ast(sample_config: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(
        cli, ["--config", str(sample_config), "--debug", "filter", "-f", "json", "age > 30"]
    )
    assert result.exit_code == 0, result.output
    assert "[DEBUG]" in result.output
    assert "Filter AST" in result.output
