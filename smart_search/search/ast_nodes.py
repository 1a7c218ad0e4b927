"""AST data classes for compiled filter expressions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

AND = "and"
OR = "or"
COMBINATORS: frozenset[str] = frozenset({AND, OR})


@dataclass(frozen=True)
class Condition:
    """A single ``field operator value`` filter, e.g. ``status = active``.

    The value is kept as the raw string the user typed; it is only coerced
    at evaluation time. The operator is not checked here, the compiler
    validates it against the field type.
    """

    field: str
    operator: str
    value: str


@dataclass(frozen=True)
class Group:
    """Children joined by a combinator (``and`` or ``or``).

    An empty ``and`` group matches everything, an empty ``or`` group
    matches nothing.
    """

    combinator: str = AND
    children: tuple[AstNode, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not isinstance(self.children, tuple):
            object.__setattr__(self, "children", tuple(self.children))


AstNode = Union[Condition, Group]
