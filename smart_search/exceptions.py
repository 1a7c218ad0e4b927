"""Exception hierarchy for smart-search."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path


class SmartSearchError(Exception):
    """Base exception for all smart-search errors.

    All exceptions in this package inherit from this class,
    allowing callers to catch all smart-search errors with
    a single except clause.
    """

    pass


# Configuration Errors
class ConfigError(SmartSearchError):
    """Configuration-related errors."""

    pass


class ConfigParseError(ConfigError):
    """Configuration file has invalid syntax."""

    def __init__(self, path: Path, detail: str) -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"Invalid config at {path}: {detail}")


class ConfigValidationError(ConfigError):
    """Configuration value is invalid."""

    def __init__(self, key: str, value: object, reason: str) -> None:
        self.key = key
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid config value for '{key}': {reason}")


# Schema Errors
class SchemaError(SmartSearchError):
    """Schema-related errors."""

    pass


class UnknownFieldError(SchemaError):
    """Field key is not present in the schema registry."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"Unknown field: {field}")


class DuplicateFieldError(SchemaError):
    """Two field descriptors share a key."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"Duplicate field key: {field}")


class SchemaLoadError(SchemaError):
    """Schema file is missing or malformed."""

    def __init__(self, path: Path, detail: str) -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"Invalid schema at {path}: {detail}")


# Filter Errors
class FilterError(SmartSearchError):
    """Filter construction errors."""

    pass


class InvalidOperatorError(FilterError):
    """Operator is not permitted for the field's type."""

    def __init__(self, field: str, operator: str, allowed: Sequence[str]) -> None:
        self.field = field
        self.operator = operator
        self.allowed = tuple(allowed)
        super().__init__(
            f"Operator '{operator}' is not allowed for field '{field}' "
            f"(allowed: {', '.join(self.allowed)})"
        )


class IndexOutOfRangeError(FilterError, IndexError):
    """Chip index is outside the group's children."""

    def __init__(self, index: int, size: int) -> None:
        self.index = index
        self.size = size
        super().__init__(f"Index {index} out of range for group of {size} children")


class InvalidCombinatorError(FilterError):
    """Group combinator is neither 'and' nor 'or'."""

    def __init__(self, combinator: str) -> None:
        self.combinator = combinator
        super().__init__(f"Invalid combinator: {combinator!r} (expected 'and' or 'or')")


class ExpressionParseError(FilterError):
    """Raised when a filter expression cannot be parsed."""

    def __init__(self, text: str, message: str) -> None:
        self.text = text
        super().__init__(f"Failed to parse filter expression '{text}': {message}")


# Session Errors
class SessionError(SmartSearchError):
    """Chip assembly errors."""

    pass


class SessionStateError(SessionError):
    """Action is not valid in the session's current state."""

    def __init__(self, state: str, action: str) -> None:
        self.state = state
        self.action = action
        super().__init__(f"Cannot {action} while session is {state}")


class EmptyValueError(SessionError):
    """Commit attempted with a blank value."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"No value given for field '{field}'")


# Data Errors
class DataError(SmartSearchError):
    """Row data errors."""

    pass


class DataLoadError(DataError):
    """Row file is missing or malformed."""

    def __init__(self, path: Path, detail: str) -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"Invalid data at {path}: {detail}")
