"""Field descriptors and the per-type operator table."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable, Iterator, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Union

from smart_search.exceptions import DuplicateFieldError, UnknownFieldError


class FieldType(Enum):
    """Primitive type of a filterable field."""

    STRING = "string"
    NUMBER = "number"
    DATE = "date"
    BOOLEAN = "boolean"
    ENUM = "enum"
    RELATION = "relation"


# Operators understood by the evaluator
CONTAINS = "contains"
EQ = "="
NEQ = "!="
GT = ">"
GTE = ">="
LT = "<"
LTE = "<="

OPERATORS: tuple[str, ...] = (CONTAINS, EQ, NEQ, GT, GTE, LT, LTE)

_STRING_OPS: tuple[str, ...] = (CONTAINS, EQ, NEQ)
_NUMBER_OPS: tuple[str, ...] = (EQ, NEQ, GT, GTE, LT, LTE)
_ENUM_OPS: tuple[str, ...] = (EQ, NEQ)

_OPERATORS_BY_TYPE: dict[FieldType, tuple[str, ...]] = {
    FieldType.STRING: _STRING_OPS,
    FieldType.NUMBER: _NUMBER_OPS,
    FieldType.DATE: _NUMBER_OPS,
    FieldType.ENUM: _ENUM_OPS,
    FieldType.RELATION: _ENUM_OPS,
    FieldType.BOOLEAN: _ENUM_OPS,
}

# Types whose values are picked from an option list rather than typed freely
CHOICE_TYPES: frozenset[FieldType] = frozenset(
    {FieldType.ENUM, FieldType.RELATION, FieldType.BOOLEAN}
)

OptionLookup = Callable[[str], Union[Sequence[str], Awaitable[Sequence[str]]]]
OptionSource = Union[Sequence[str], OptionLookup]


def allowed_operators(field_type: FieldType | str) -> tuple[str, ...]:
    """Return the operators permitted for a field type, in display order."""
    return _OPERATORS_BY_TYPE[FieldType(field_type)]


def suggest_operators(field_type: FieldType | str, text: str = "") -> list[str]:
    """Return allowed operators starting with ``text`` (all when empty)."""
    ops = allowed_operators(field_type)
    if not text:
        return list(ops)
    return [op for op in ops if op.startswith(text)]


def value_placeholder(field_type: FieldType | str) -> str:
    """Hint shown in an empty value input for the given type."""
    field_type = FieldType(field_type)
    if field_type is FieldType.NUMBER:
        return "123"
    if field_type is FieldType.DATE:
        return "YYYY-MM-DD"
    return "value"


@dataclass(frozen=True)
class FieldDescriptor:
    """A filterable attribute.

    Attributes:
        key: Unique field key, matching the record key it filters on.
        label: Human-readable name shown on chips.
        type: Primitive type, which decides the allowed operators.
        options: Option source for enum/relation/boolean value entry.
            Either a fixed sequence of strings, or a callable taking the
            partial query and returning a list (or an awaitable of one).
    """

    key: str
    label: str
    type: FieldType
    options: OptionSource | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.type, FieldType):
            object.__setattr__(self, "type", FieldType(self.type))
        if self.options is not None and not callable(self.options):
            object.__setattr__(self, "options", tuple(self.options))

    @property
    def operators(self) -> tuple[str, ...]:
        return allowed_operators(self.type)

    @property
    def has_choices(self) -> bool:
        """Whether values are picked from a suggestion list."""
        return self.type in CHOICE_TYPES


class SchemaRegistry:
    """Fixed, ordered collection of field descriptors for one search session."""

    def __init__(self, fields: Iterable[FieldDescriptor] = ()) -> None:
        self._fields: dict[str, FieldDescriptor] = {}
        for descriptor in fields:
            if descriptor.key in self._fields:
                raise DuplicateFieldError(descriptor.key)
            self._fields[descriptor.key] = descriptor

    @classmethod
    def from_dict(cls, schema: dict[str, dict]) -> SchemaRegistry:
        """Build a registry from ``{key: {"label": ..., "type": ..., "options": ...}}``."""
        return cls(
            FieldDescriptor(
                key=key,
                label=spec.get("label", key),
                type=FieldType(spec["type"]),
                options=spec.get("options"),
            )
            for key, spec in schema.items()
        )

    def __contains__(self, key: object) -> bool:
        return key in self._fields

    def __iter__(self) -> Iterator[FieldDescriptor]:
        return iter(self._fields.values())

    def __len__(self) -> int:
        return len(self._fields)

    @property
    def keys(self) -> list[str]:
        return list(self._fields)

    def get(self, key: str) -> FieldDescriptor:
        """Return the descriptor for ``key``.

        Raises:
            UnknownFieldError: If the key is not registered.
        """
        try:
            return self._fields[key]
        except KeyError:
            raise UnknownFieldError(key) from None

    def operators_for(self, key: str) -> tuple[str, ...]:
        """Return the operators allowed for a registered field."""
        return self.get(key).operators

    def find(self, text: str) -> str | None:
        """Resolve a field key or label, case-insensitively, to a key."""
        needle = text.strip().lower()
        if not needle:
            return None
        for descriptor in self._fields.values():
            if descriptor.key.lower() == needle:
                return descriptor.key
        for descriptor in self._fields.values():
            if descriptor.label.lower() == needle:
                return descriptor.key
        return None

    def suggest_fields(self, text: str) -> list[str]:
        """Return field keys containing ``text`` (case-insensitive).

        An empty string yields no suggestions, matching the input box which
        only opens the field menu once something has been typed.
        """
        if not text:
            return []
        needle = text.lower()
        return [key for key in self._fields if needle in key.lower()]
