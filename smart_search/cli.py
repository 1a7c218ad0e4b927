"""Command-line interface for smart-search."""

from __future__ import annotations

import os
from pathlib import Path

import click
from rich.markup import escape

from smart_search import __version__
from smart_search.config import Config, load_config
from smart_search.exceptions import SmartSearchError
from smart_search.utils.output import (
    error,
    set_color,
    set_verbosity,
    warning,
)


class Context:
    """Shared context for all commands.

    Holds the loaded config and the global flags. Schema and data files
    given on the command line win over the ``[paths]`` section of the config.
    """

    def __init__(self) -> None:
        self.config: Config | None = None
        self.verbose: bool = False
        self.debug: bool = False
        self.quiet: bool = False

    def schema_file(self, override: Path | None = None) -> Path | None:
        """Schema TOML to load, or None if neither flag nor config names one."""
        if override is not None:
            return override
        return self.config.schema_path if self.config is not None else None

    def data_file(self, override: Path | None = None) -> Path | None:
        """JSON rows file to filter, or None if none is configured."""
        if override is not None:
            return override
        return self.config.data_path if self.config is not None else None

    def columns(self, override: str | None = None) -> list[str]:
        """Table columns from a comma-separated flag, else ``display.columns``."""
        if override:
            return [c.strip() for c in override.split(",") if c.strip()]
        if self.config is not None:
            return list(self.config.columns)
        return []


pass_context = click.make_pass_decorator(Context, ensure=True)


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=False, path_type=Path),
    envvar="SMART_SEARCH_CONFIG",
    help="Path to config file (default: ~/.config/smart-search/config.toml)",
)
@click.option(
    "--no-color",
    is_flag=True,
    default=False,
    help="Disable colored output",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    help="Enable verbose output",
)
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug output (implies --verbose)",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    default=False,
    help="Suppress non-error output",
)
@click.version_option(version=__version__, prog_name="smart-search")
@click.pass_context
def cli(
    ctx: click.Context,
    config: Path | None,
    no_color: bool,
    verbose: bool,
    debug: bool,
    quiet: bool,
) -> None:
    """smart-search: Field-aware filter expressions over tabular data.

    Describe fields in a TOML schema, then filter a JSON array of rows with
    chips such as "status = active" or "age > 30".

    Configuration is loaded from ~/.config/smart-search/config.toml by default.
    Use --config (or SMART_SEARCH_CONFIG) to pick another file; its [paths]
    section supplies the schema and data files when --schema and --data are
    not given.

    Examples:

        # List filterable fields and their operators
        smart-search fields --schema schema.toml

        # Filter rows
        smart-search filter --schema schema.toml --data rows.json "age > 30"

        # Combine a chip with an expression, using the configured files
        smart-search filter -w status = active "age > 30 or department = ops"
    """
    # Initialize context
    ctx.ensure_object(Context)
    app_ctx = ctx.obj
    app_ctx.verbose = verbose or debug
    app_ctx.debug = debug
    app_ctx.quiet = quiet

    # Configure module-level verbosity for output helpers
    set_verbosity(verbose=verbose, debug=debug)

    # Configure color output: disabled by --no-color, NO_COLOR env, or config
    disable_color = no_color or os.environ.get("NO_COLOR") is not None

    if disable_color:
        set_color(False)

    # Load configuration
    try:
        loaded_config, warnings = load_config(config)
    except SmartSearchError as e:
        error(escape(str(e)))
        ctx.exit(1)
        return

    app_ctx.config = loaded_config

    # Apply config settings
    if not disable_color and not loaded_config.colored_output:
        set_color(False)

    # Show warnings unless quiet. A missing default config is normal, so
    # that one only shows up in verbose mode.
    if not quiet:
        for warn in warnings:
            if config is None and warn.startswith("No config file found"):
                if app_ctx.verbose:
                    warning(escape(warn))
                continue
            warning(escape(warn))


@cli.command("help")
@click.argument("command", required=False, nargs=-1)
@click.pass_context
def help_cmd(ctx: click.Context, command: tuple[str, ...]) -> None:
    """Show help for a command."""
    group = cli
    # Resolve subcommand chain
    for name in command:
        cmd = group.get_command(ctx, name)
        if cmd is None:
            error(f"Unknown command: {escape(name)}")
            ctx.exit(1)
            return
        if isinstance(cmd, click.Group):
            group = cmd
        else:
            click.echo(cmd.get_help(ctx))
            return
    # Print group help
    click.echo(group.get_help(ctx))


def register_commands() -> None:
    """Register all commands from the commands package."""
    from smart_search.commands import discover_commands

    for command in discover_commands():
        cli.add_command(command)


# Register commands on import
register_commands()
