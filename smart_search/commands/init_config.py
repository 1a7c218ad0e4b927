"""Write a starter configuration file."""

from __future__ import annotations

import re
from importlib import resources
from pathlib import Path

import click
from rich.markup import escape

from smart_search.cli import Context, pass_context
from smart_search.commands._common import EXIT_FILE_ERROR, EXIT_INVALID_INPUT
from smart_search.config import get_default_config_path
from smart_search.utils.output import error, info, success


def _load_example_config() -> str:
    """Load the example configuration from package data."""
    return resources.files("smart_search").joinpath("config.example.toml").read_text()


def _set_path(content: str, key: str, path: Path) -> str:
    """Point ``[paths] key`` of the example config at ``path``."""
    # TOML literal strings need no escaping, which keeps Windows paths intact
    line = f"{key} = '{path.expanduser().resolve()}'"
    return re.sub(rf"^{key} = .*$", lambda _: line, content, count=1, flags=re.MULTILINE)


@click.command("init-config")
@click.option(
    "--force",
    "-f",
    is_flag=True,
    default=False,
    help="Overwrite existing config file",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    default=None,
    help="Output path for config file (default: ~/.config/smart-search/config.toml)",
)
@click.option(
    "--schema",
    "schema_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Schema file to record under [paths]",
)
@click.option(
    "--data",
    "data_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Rows file to record under [paths]",
)
@pass_context
def cli(
    ctx: Context,
    force: bool,
    output: Path | None,
    schema_path: Path | None,
    data_path: Path | None,
) -> None:
    """Create a configuration file from the bundled example.

    Without --schema/--data the [paths] section keeps the example's
    relative names, which resolve next to the config file.

    \b
    Examples:
      smart-search init-config
      smart-search init-config --output ./smart-search.toml
      smart-search init-config --schema schema.toml --data rows.json --force
    """
    config_path = output if output is not None else get_default_config_path()
    config_path = config_path.expanduser().resolve()

    if config_path.exists() and not force:
        error(
            f"Config file already exists: {escape(str(config_path))}",
            hint="Use --force to overwrite",
        )
        raise SystemExit(EXIT_INVALID_INPUT)

    content = _load_example_config()
    if schema_path is not None:
        content = _set_path(content, "schema", schema_path)
    if data_path is not None:
        content = _set_path(content, "data", data_path)

    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(content)
    except OSError as e:
        error(f"Failed to write config file: {escape(str(e))}")
        raise SystemExit(EXIT_FILE_ERROR)

    success(f"Created config file: {escape(str(config_path))}")
    if schema_path is None or data_path is None:
        info("Edit \\[paths] to point at your schema and data files.")
