"""Load row sets for filtering from JSON files."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from smart_search.exceptions import DataLoadError


def load_rows(path: Path) -> list[dict[str, Any]]:
    """Load a JSON array of objects.

    Raises:
        DataLoadError: If the file is missing, is not valid JSON, or is not
            an array of objects.
    """
    path = path.expanduser()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise DataLoadError(path, "file not found") from None
    except OSError as e:
        raise DataLoadError(path, e.strerror or str(e)) from e
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DataLoadError(path, str(e)) from e

    if not isinstance(data, list):
        raise DataLoadError(path, "expected a JSON array of objects")
    for i, row in enumerate(data):
        if not isinstance(row, dict):
            raise DataLoadError(path, f"row {i} is not an object")
    return data


def collect_columns(rows: list[dict[str, Any]]) -> list[str]:
    """All keys used by ``rows``, in first-seen order."""
    seen: dict[str, None] = {}
    for row in rows:
        for key in row:
            seen.setdefault(key, None)
    return list(seen)
