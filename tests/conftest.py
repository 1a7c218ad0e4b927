"""Shared pytest fixtures."""

from __future__ import annotations

import json
import shutil
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING, Any

import pytest

from smart_search.schema.registry import SchemaRegistry

if TYPE_CHECKING:
    from collections.abc import Generator

PROJECTS = ["Dynamic filtering", "Design System", "Internal Tools", "Marketing Site"]

DEMO_ROWS: list[dict[str, Any]] = [
    {
        "author": "Alice",
        "project": "Dynamic filtering",
        "date": "2025-01-04",
        "status": "active",
        "department": "design",
        "age": 31,
        "name": "Alice Johnson",
    },
    {
        "author": "Bob",
        "project": "Design System",
        "date": "2025-02-11",
        "status": "draft",
        "department": "engineering",
        "age": 29,
        "name": "Bob Gray",
    },
    {
        "author": "Carol",
        "project": "Internal Tools",
        "date": "2025-03-09",
        "status": "archived",
        "department": "ops",
        "age": 41,
        "name": "Carol Voss",
    },
    {
        "author": "Alice",
        "project": "Marketing Site",
        "date": "2025-03-21",
        "status": "active",
        "department": "design",
        "age": 35,
        "name": "Alice M.",
    },
]

SCHEMA_TOML = """[fields.author]
label = "Author"
type = "enum"
options = ["Alice", "Bob", "Carol"]

[fields.project]
label = "Project"
type = "relation"
options = ["Dynamic filtering", "Design System", "Internal Tools", "Marketing Site"]

[fields.date]
label = "Date"
type = "date"

[fields.status]
label = "Status"
type = "enum"
options = ["active", "archived", "draft"]

[fields.department]
label = "Department"
type = "enum"
options = ["design", "engineering", "ops"]

[fields.age]
label = "Age"
type = "number"

[fields.name]
label = "Name"
type = "string"
"""


async def _lookup_projects(query: str) -> list[str]:
    return [p for p in PROJECTS if query.lower() in p.lower()]


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    path = Path(tempfile.mkdtemp())
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def demo_rows() -> list[dict[str, Any]]:
    """The four demo rows (copied so tests cannot leak mutations)."""
    return [dict(row) for row in DEMO_ROWS]


@pytest.fixture
def registry() -> SchemaRegistry:
    """Demo schema with a static enum and an async relation lookup."""
    return SchemaRegistry.from_dict(
        {
            "author": {"label": "Author", "type": "enum", "options": ["Alice", "Bob", "Carol"]},
            "project": {"label": "Project", "type": "relation", "options": _lookup_projects},
            "date": {"label": "Date", "type": "date"},
            "status": {
                "label": "Status",
                "type": "enum",
                "options": ["active", "archived", "draft"],
            },
            "department": {
                "label": "Department",
                "type": "enum",
                "options": ["design", "engineering", "ops"],
            },
            "age": {"label": "Age", "type": "number"},
            "name": {"label": "Name", "type": "string"},
            "remote": {"label": "Remote", "type": "boolean"},
        }
    )


@pytest.fixture
def schema_file(temp_dir: Path) -> Path:
    """Write the demo schema as TOML."""
    path = temp_dir / "schema.toml"
    path.write_text(SCHEMA_TOML)
    return path


@pytest.fixture
def rows_file(temp_dir: Path) -> Path:
    """Write the demo rows as JSON."""
    path = temp_dir / "rows.json"
    path.write_text(json.dumps(DEMO_ROWS))
    return path


@pytest.fixture
def sample_config(temp_dir: Path, schema_file: Path, rows_file: Path) -> Path:
    """Create a sample config file pointing at the demo schema and rows."""
    config_path = temp_dir / "config.toml"
    config_path.write_text("""[paths]
schema = "schema.toml"
data = "rows.json"

[display]
colored_output = false
columns = ["author", "project", "date", "status"]
""")
    return config_path
