"""Configuration management for smart-search."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tomli_w

from smart_search.exceptions import (
    ConfigParseError,
    ConfigValidationError,
)


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    return Path.home() / ".config" / "smart-search" / "config.toml"


@dataclass
class Config:
    """Application configuration.

    Attributes:
        schema_path: TOML schema describing the filterable fields.
        data_path: JSON array of rows to filter.
        colored_output: Whether to use colored terminal output.
        columns: Columns shown in table output (empty = every column).
        config_path: Path where config was loaded from (None if defaults).
    """

    schema_path: Path | None = None
    data_path: Path | None = None
    colored_output: bool = True
    columns: list[str] = field(default_factory=list)
    config_path: Path | None = None

    def validate(self) -> list[str]:
        """Validate configuration values.

        Relative paths are resolved against the config file's directory.

        Returns:
            List of warning messages for non-fatal issues.
        """
        warnings: list[str] = []
        base = self.config_path.parent if self.config_path is not None else Path.cwd()

        if self.schema_path is not None:
            self.schema_path = _resolve(self.schema_path, base)
            if not self.schema_path.exists():
                warnings.append(f"Schema file not found: {self.schema_path}")

        if self.data_path is not None:
            self.data_path = _resolve(self.data_path, base)
            if not self.data_path.exists():
                warnings.append(f"Data file not found: {self.data_path}")

        return warnings


def _resolve(path: Path, base: Path) -> Path:
    path = path.expanduser()
    if not path.is_absolute():
        path = base / path
    return path.resolve()


def load_config(config_path: Path | None = None) -> tuple[Config, list[str]]:
    """Load configuration from file or use defaults.

    Args:
        config_path: Explicit config file path. If None, uses default location.

    Returns:
        Tuple of (Config object, list of warning messages).

    Raises:
        ConfigParseError: If config file exists but has invalid syntax.
        ConfigValidationError: If config values are invalid.
    """
    warnings: list[str] = []

    if config_path is None:
        config_path = get_default_config_path()

    config_path = config_path.expanduser().resolve()

    if not config_path.exists():
        # Use defaults
        config = Config()
        warnings.append(
            f"No config file found at {config_path}. Using defaults. "
            f"Create config with: smart-search init-config"
        )
        return config, warnings + config.validate()

    # Load from file
    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(config_path, str(e)) from e

    config = _parse_config_dict(data, config_path)
    config_warnings = config.validate()

    return config, warnings + config_warnings


def _parse_config_dict(data: dict[str, Any], config_path: Path) -> Config:
    """Parse configuration dictionary into Config object."""
    config = Config(config_path=config_path)

    # Parse [paths] section
    paths = data.get("paths", {})
    if "schema" in paths:
        value = paths["schema"]
        if not isinstance(value, str):
            raise ConfigValidationError("paths.schema", value, "must be a string path")
        config.schema_path = Path(value)

    if "data" in paths:
        value = paths["data"]
        if not isinstance(value, str):
            raise ConfigValidationError("paths.data", value, "must be a string path")
        config.data_path = Path(value)

    # Parse [display] section
    display = data.get("display", {})
    if "colored_output" in display:
        value = display["colored_output"]
        if not isinstance(value, bool):
            raise ConfigValidationError("display.colored_output", value, "must be a boolean")
        config.colored_output = value

    if "columns" in display:
        value = display["columns"]
        if not isinstance(value, list) or not all(isinstance(c, str) for c in value):
            raise ConfigValidationError("display.columns", value, "must be a list of strings")
        config.columns = list(value)

    return config


def save_config(config: Config, config_path: Path | None = None) -> None:
    """Save configuration to file.

    Args:
        config: Configuration to save.
        config_path: Path to save to. If None, uses config.config_path or default.
    """
    if config_path is None:
        config_path = config.config_path or get_default_config_path()

    config_path = config_path.expanduser().resolve()

    # Ensure directory exists
    config_path.parent.mkdir(parents=True, exist_ok=True)

    # Build TOML structure
    data: dict[str, Any] = {
        "display": {
            "colored_output": config.colored_output,
        },
    }

    paths: dict[str, str] = {}
    if config.schema_path is not None:
        paths["schema"] = str(config.schema_path)
    if config.data_path is not None:
        paths["data"] = str(config.data_path)
    if paths:
        data["paths"] = paths

    if config.columns:
        data["display"]["columns"] = list(config.columns)

    with open(config_path, "wb") as f:
        tomli_w.dump(data, f)
