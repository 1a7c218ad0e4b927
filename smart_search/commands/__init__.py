"""Subcommands of the smart-search CLI.

Every public module in this package that defines a Click command named
``cli`` becomes a subcommand; modules starting with ``_`` hold shared
helpers.
"""

from __future__ import annotations

import importlib
import logging
import pkgutil

import click

logger = logging.getLogger(__name__)


def discover_commands() -> list[click.Command]:
    """Import the command modules and return their commands sorted by name.

    Raises:
        RuntimeError: If two modules register the same command name.
    """
    import smart_search.commands as commands_pkg

    found: dict[str, click.Command] = {}
    for module_info in pkgutil.iter_modules(commands_pkg.__path__):
        if module_info.name.startswith("_"):
            continue

        module = importlib.import_module(f"{commands_pkg.__name__}.{module_info.name}")
        cmd = getattr(module, "cli", None)
        if not isinstance(cmd, click.Command):
            logger.debug("Module %s has no command, skipping", module_info.name)
            continue
        if cmd.name in found:
            raise RuntimeError(f"Duplicate command name: {cmd.name}")
        found[cmd.name] = cmd

    return [found[name] for name in sorted(found)]
