"""Parse typed filter expressions such as ``status = active`` into an AST."""

from __future__ import annotations

import re
from importlib import resources
from typing import Any

from lark import Lark, Token, Transformer, UnexpectedInput

from smart_search.exceptions import ExpressionParseError
from smart_search.schema.registry import SchemaRegistry
from smart_search.search.ast_nodes import AND, OR, AstNode, Condition, Group
from smart_search.search.compiler import validate_node


def _load_grammar() -> str:
    """Load the Lark grammar from the package resources."""
    return resources.files("smart_search.search").joinpath("grammar.lark").read_text()


_GRAMMAR_TEXT = _load_grammar()

# LALR with the contextual lexer: bare values, field names and keywords
# overlap, and only the parser state can tell them apart.
_parser = Lark(
    _GRAMMAR_TEXT,
    parser="lalr",
    lexer="contextual",
)

_ESCAPE = re.compile(r"\\(.)")
_NEEDS_QUOTES = re.compile(r'[\s()"\\]')
_KEYWORDS = frozenset({"and", "or"})


class _ExpressionTransformer(Transformer):
    """Transform Lark parse tree into AST data classes."""

    def start(self, items: list[Any]) -> AstNode:
        return items[0]

    def or_expr(self, items: list[Any]) -> Group:
        return Group(combinator=OR, children=tuple(items))

    def and_expr(self, items: list[Any]) -> Group:
        return Group(combinator=AND, children=tuple(items))

    def condition(self, items: list[Any]) -> Condition:
        field_name, operator, value = items
        return Condition(field=field_name, operator=operator, value=value)

    def FIELD(self, token: Token) -> str:
        return str(token)

    def OPERATOR(self, token: Token) -> str:
        # "CONTAINS" -> "contains"; symbolic operators are unaffected
        return str(token).lower()

    def BARE_VALUE(self, token: Token) -> str:
        return str(token)

    def QUOTED_STRING(self, token: Token) -> str:
        raw = str(token)
        # Strip surrounding quotes, then unescape
        return _ESCAPE.sub(r"\1", raw[1:-1])


_transformer = _ExpressionTransformer()


def _resolve_fields(node: AstNode, registry: SchemaRegistry) -> AstNode:
    """Replace field labels with keys wherever the registry knows them."""
    if isinstance(node, Group):
        return Group(
            combinator=node.combinator,
            children=tuple(_resolve_fields(child, registry) for child in node.children),
        )
    key = registry.find(node.field)
    if key is None or key == node.field:
        return node
    return Condition(field=key, operator=node.operator, value=node.value)


def parse_expression(text: str, registry: SchemaRegistry | None = None) -> Group | None:
    """Parse a filter expression into an AST.

    The result is always a Group, so a single condition comes back as an
    ``and`` group with one child. Blank input means no filter.

    Args:
        text: Expression such as ``age > 30 and status = active``.
        registry: If given, field labels are resolved to keys and every
            condition is validated against the schema.

    Returns:
        The parsed Group, or None for blank input.

    Raises:
        ExpressionParseError: If the expression is not well-formed.
        UnknownFieldError: If a field is not in ``registry``.
        InvalidOperatorError: If an operator does not suit its field's type.
    """
    text = text.strip()
    if not text:
        return None

    try:
        tree = _parser.parse(text)
    except UnexpectedInput as e:
        raise ExpressionParseError(text, str(e)) from e

    node = _transformer.transform(tree)
    if isinstance(node, Condition):
        node = Group(combinator=AND, children=(node,))

    if registry is not None:
        node = _resolve_fields(node, registry)
        validate_node(registry, node)
    return node


def _format_value(value: str) -> str:
    if value and value.lower() not in _KEYWORDS and not _NEEDS_QUOTES.search(value):
        return value
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def format_node(node: AstNode | None) -> str:
    """Render an AST in the expression syntax accepted by :func:`parse_expression`."""
    if node is None:
        return ""
    if isinstance(node, Condition):
        return f"{node.field} {node.operator} {_format_value(node.value)}"
    parts = []
    for child in node.children:
        text = format_node(child)
        if isinstance(child, Group) and len(child.children) > 1:
            text = f"({text})"
        parts.append(text)
    return f" {node.combinator} ".join(parts)
