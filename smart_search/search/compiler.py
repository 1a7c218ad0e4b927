"""Build and edit filter ASTs against a schema registry.

Groups are immutable: every edit returns a new :class:`Group` and leaves
the original untouched, so a committed tree can be shared freely.
"""

from __future__ import annotations

from collections.abc import Iterable

from smart_search.exceptions import (
    IndexOutOfRangeError,
    InvalidCombinatorError,
    InvalidOperatorError,
)
from smart_search.schema.registry import SchemaRegistry
from smart_search.search.ast_nodes import AND, COMBINATORS, OR, AstNode, Condition, Group


def build_condition(
    registry: SchemaRegistry, field: str, operator: str, raw_value: str
) -> Condition:
    """Build a Condition after checking the operator against the field type.

    The value is accepted as typed: a non-numeric value for a number field is
    stored as-is and simply fails numeric comparisons later.

    Raises:
        UnknownFieldError: If ``field`` is not registered.
        InvalidOperatorError: If ``operator`` is not allowed for the field type.
    """
    descriptor = registry.get(field)
    allowed = descriptor.operators
    if operator not in allowed:
        raise InvalidOperatorError(field, operator, allowed)
    return Condition(field=field, operator=operator, value=str(raw_value))


def group(combinator: str, children: Iterable[AstNode] = ()) -> Group:
    """Build a group with an explicit combinator."""
    if combinator not in COMBINATORS:
        raise InvalidCombinatorError(combinator)
    return Group(combinator=combinator, children=tuple(children))


def and_group(*children: AstNode) -> Group:
    return Group(combinator=AND, children=children)


def or_group(*children: AstNode) -> Group:
    return Group(combinator=OR, children=children)


def append_condition(target: Group, node: AstNode) -> Group:
    """Return a copy of ``target`` with ``node`` appended to its children."""
    return Group(combinator=target.combinator, children=(*target.children, node))


def remove_child(target: Group, index: int) -> Group:
    """Return a copy of ``target`` without the child at ``index``.

    Raises:
        IndexOutOfRangeError: If ``index`` is not in ``[0, len(children))``.
    """
    size = len(target.children)
    if not 0 <= index < size:
        raise IndexOutOfRangeError(index, size)
    children = target.children[:index] + target.children[index + 1 :]
    return Group(combinator=target.combinator, children=children)


def chips_to_group(conditions: Iterable[AstNode]) -> Group | None:
    """Join a chip list into a flat AND group, or None if there are no chips."""
    children = tuple(conditions)
    if not children:
        return None
    return Group(combinator=AND, children=children)


def validate_node(registry: SchemaRegistry, node: AstNode | None) -> None:
    """Check a tree built outside the compiler.

    Raises the same errors as :func:`build_condition` and :func:`group`.
    """
    if node is None:
        return
    if isinstance(node, Group):
        if node.combinator not in COMBINATORS:
            raise InvalidCombinatorError(node.combinator)
        for child in node.children:
            validate_node(registry, child)
        return
    build_condition(registry, node.field, node.operator, node.value)


def count_conditions(node: AstNode | None) -> int:
    """Number of Condition leaves in a tree."""
    if node is None:
        return 0
    if isinstance(node, Condition):
        return 1
    return sum(count_conditions(child) for child in node.children)
