"""Evaluate filter ASTs against in-memory records."""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterable, Mapping
from typing import Any, TypeVar

from smart_search.search.ast_nodes import AND, OR, AstNode, Condition, Group
from smart_search.search.values import coerce, sniff_date, to_number, to_text

logger = logging.getLogger(__name__)

Record = Mapping[str, Any]
Predicate = Callable[[Record], bool]
OperatorFunc = Callable[[Any, Any], bool]

R = TypeVar("R", bound=Mapping[str, Any])


def _contains(a: Any, b: Any) -> bool:
    """Case-insensitive substring match."""
    return to_text(b).lower() in to_text(a).lower()


def _eq(a: Any, b: Any) -> bool:
    """Text equality, so ``3`` equals ``"3"``."""
    return to_text(a) == to_text(b)


def _neq(a: Any, b: Any) -> bool:
    # Separate branch, not ``not _eq``
    return to_text(a) != to_text(b)


def _numeric(op: Callable[[float, float], bool]) -> OperatorFunc:
    """Wrap a numeric comparison; any NaN operand compares false."""

    def compare(a: Any, b: Any) -> bool:
        x = to_number(a)
        y = to_number(b)
        if math.isnan(x) or math.isnan(y):
            return False
        return op(x, y)

    return compare


# Operator registry
OPERATORS: dict[str, OperatorFunc] = {
    "contains": _contains,
    "=": _eq,
    "!=": _neq,
    ">": _numeric(lambda x, y: x > y),
    ">=": _numeric(lambda x, y: x >= y),
    "<": _numeric(lambda x, y: x < y),
    "<=": _numeric(lambda x, y: x <= y),
}


def compare(operator: str, left: Any, right: Any) -> bool:
    """Apply ``operator`` to two values. Unknown operators are always false."""
    op_func = OPERATORS.get(operator)
    if op_func is None:
        return False
    return op_func(left, right)


def evaluate_condition(record: Record, condition: Condition) -> bool:
    """Evaluate a single condition against a record.

    If both the record value and the condition value look like
    ``YYYY-MM-DD``, they are compared as dates (epoch milliseconds). This
    goes by string shape only, so it also applies to fields declared as
    strings or enums.
    """
    raw = record.get(condition.field)

    left_date = sniff_date(raw)
    if left_date is not None:
        right_date = sniff_date(condition.value)
        if right_date is not None:
            return compare(condition.operator, left_date, right_date)

    return compare(condition.operator, coerce(raw), coerce(condition.value))


def evaluate(record: Record, node: AstNode | None) -> bool:
    """Check whether a record passes a filter tree.

    Args:
        record: Mapping from field key to scalar value.
        node: Filter tree, or None for no filter (everything matches).

    Returns:
        True if the record matches. Never raises for malformed values or
        unknown operators; those simply do not match.
    """
    if node is None:
        return True
    if isinstance(node, Group):
        if node.combinator == AND:
            return all(evaluate(record, child) for child in node.children)
        if node.combinator == OR:
            return any(evaluate(record, child) for child in node.children)
        return False
    return evaluate_condition(record, node)


def compile_node(node: AstNode | None) -> Predicate:
    """Return a reusable predicate for a filter tree."""
    return lambda record: evaluate(record, node)


def filter_rows(rows: Iterable[R], node: AstNode | None) -> list[R]:
    """Return the rows matching ``node``, in their original order."""
    predicate = compile_node(node)
    matched = [row for row in rows if predicate(row)]
    logger.debug("Filter matched %d rows", len(matched))
    return matched
