"""Filter AST construction, parsing and evaluation."""

from smart_search.search.ast_nodes import AND, OR, AstNode, Condition, Group
from smart_search.search.compiler import (
    and_group,
    append_condition,
    build_condition,
    chips_to_group,
    group,
    or_group,
    remove_child,
    validate_node,
)
from smart_search.search.evaluator import compile_node, evaluate, filter_rows
from smart_search.search.parser import format_node, parse_expression
from smart_search.search.session import SearchSession, SessionState

__all__ = [
    "AND",
    "OR",
    "AstNode",
    "Condition",
    "Group",
    "SearchSession",
    "SessionState",
    "and_group",
    "append_condition",
    "build_condition",
    "chips_to_group",
    "compile_node",
    "evaluate",
    "filter_rows",
    "format_node",
    "group",
    "or_group",
    "parse_expression",
    "remove_child",
    "validate_node",
]
