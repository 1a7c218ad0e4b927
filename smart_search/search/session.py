"""Chip assembly state for one search box.

A chip is built in three steps: pick a field, pick an operator, then commit
a value. Committed chips accumulate into a flat ``and`` group which is
published to subscribers after every change::

    IDLE --choose_field--> FIELD_CHOSEN --choose_operator--> OPERATOR_CHOSEN
      ^                                                          |
      +------------------------ commit / cancel -----------------+

``cancel`` returns to IDLE from any state without touching the chips.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from enum import Enum
from typing import TypeVar

from smart_search.exceptions import (
    EmptyValueError,
    SessionStateError,
    UnknownFieldError,
)
from smart_search.schema.options import OptionResolver
from smart_search.schema.registry import FieldDescriptor, SchemaRegistry, suggest_operators
from smart_search.search.ast_nodes import AND, Condition, Group
from smart_search.search.compiler import append_condition, build_condition, remove_child
from smart_search.search.evaluator import Record, filter_rows

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=Record)

ChangeListener = Callable[[Group | None], None]


class SessionState(Enum):
    """Where the session is in building the next chip."""

    IDLE = "idle"
    FIELD_CHOSEN = "field_chosen"
    OPERATOR_CHOSEN = "operator_chosen"


class SearchSession:
    """Accumulated filter chips plus the chip currently being assembled.

    Args:
        registry: Fields available for the session (fixed for its lifetime).
        on_change: Optional subscriber called with the new AST (or None when
            there are no chips) after every change to the chips.
    """

    def __init__(
        self,
        registry: SchemaRegistry,
        on_change: ChangeListener | None = None,
    ) -> None:
        self.registry = registry
        self.state = SessionState.IDLE
        self.active_field: str | None = None
        self.active_operator: str | None = None
        self._chips = Group(combinator=AND)
        self._listeners: list[ChangeListener] = []
        self._resolvers: dict[str, OptionResolver] = {}
        if on_change is not None:
            self._listeners.append(on_change)

    # -- accumulated group ---------------------------------------------------

    @property
    def chips(self) -> tuple[Condition, ...]:
        return self._chips.children  # type: ignore[return-value]

    @property
    def ast(self) -> Group | None:
        """The chips as a flat ``and`` group, or None if there are none."""
        if not self._chips.children:
            return None
        return self._chips

    def subscribe(self, listener: ChangeListener) -> None:
        self._listeners.append(listener)

    def _publish(self) -> None:
        ast = self.ast
        logger.debug("Publishing filter with %d chips", len(self._chips.children))
        for listener in self._listeners:
            listener(ast)

    def remove_chip(self, index: int) -> None:
        """Remove the chip at ``index``.

        Raises:
            IndexOutOfRangeError: If there is no chip at ``index``.
        """
        self._chips = remove_child(self._chips, index)
        self._publish()

    def clear(self) -> None:
        """Drop all chips and any half-built chip."""
        self._chips = Group(combinator=AND)
        self.cancel()
        self._publish()

    def add(self, field: str, operator: str, value: str) -> Condition:
        """Commit a whole ``(field, operator, value)`` triple in one call."""
        self.choose_field(field)
        try:
            self.choose_operator(operator)
            return self.commit(value)
        except Exception:
            self.cancel()
            raise

    # -- assembling the next chip --------------------------------------------

    @property
    def active_descriptor(self) -> FieldDescriptor | None:
        if self.active_field is None:
            return None
        return self.registry.get(self.active_field)

    def choose_field(self, text: str) -> str:
        """Select the field for the next chip by key or label.

        Raises:
            SessionStateError: If an operator has already been chosen.
            UnknownFieldError: If nothing in the registry matches ``text``.
        """
        if self.state is SessionState.OPERATOR_CHOSEN:
            raise SessionStateError(self.state.value, "choose a field")
        key = self.registry.find(text)
        if key is None:
            raise UnknownFieldError(text)
        self.active_field = key
        self.active_operator = None
        self.state = SessionState.FIELD_CHOSEN
        return key

    def choose_operator(self, operator: str) -> None:
        """Select the operator for the active field.

        Fixed option lists (and boolean defaults) are applied at once, so
        :meth:`suggestions` offers them before any lookup runs.

        Raises:
            SessionStateError: If no field is chosen.
            InvalidOperatorError: If the operator does not suit the field.
        """
        if self.state is SessionState.IDLE or self.active_field is None:
            raise SessionStateError(self.state.value, "choose an operator")
        # Validates the operator without a value; the value is filled in on commit
        build_condition(self.registry, self.active_field, operator, "")
        self.active_operator = operator
        self.state = SessionState.OPERATOR_CHOSEN
        if self.registry.get(self.active_field).has_choices:
            self.resolver(self.active_field).prime()

    def commit(self, value: str) -> Condition:
        """Append the assembled chip and return to IDLE.

        Raises:
            SessionStateError: If the field and operator are not both chosen.
            EmptyValueError: If ``value`` is blank; the session stays put.
        """
        if (
            self.state is not SessionState.OPERATOR_CHOSEN
            or self.active_field is None
            or self.active_operator is None
        ):
            raise SessionStateError(self.state.value, "commit a chip")
        value = value.strip()
        if not value:
            raise EmptyValueError(self.active_field)

        condition = build_condition(self.registry, self.active_field, self.active_operator, value)
        self._chips = append_condition(self._chips, condition)
        self.cancel()
        self._publish()
        return condition

    def cancel(self) -> None:
        """Abandon the chip being assembled. Committed chips are kept."""
        if self.active_field in self._resolvers:
            self._resolvers[self.active_field].reset()
        self.state = SessionState.IDLE
        self.active_field = None
        self.active_operator = None

    # -- suggestions -----------------------------------------------------------

    def resolver(self, field: str) -> OptionResolver:
        """Option resolver for ``field``, created on first use."""
        if field not in self._resolvers:
            self._resolvers[field] = OptionResolver(self.registry.get(field))
        return self._resolvers[field]

    async def lookup_options(self, query: str) -> list[str]:
        """Resolve value options for the active field.

        Returns the list currently applied for the field, which may belong to
        a newer query if this lookup was overtaken.
        """
        if self.active_field is None:
            raise SessionStateError(self.state.value, "look up options")
        resolver = self.resolver(self.active_field)
        await resolver.resolve(query)
        return resolver.options

    def suggestions(self, text: str = "") -> list[str]:
        """Menu entries for the current step.

        Field keys while idle, operators once a field is chosen, and the
        applied value options once an operator is chosen (for choice-type
        fields only; free-text fields get none).
        """
        if self.state is SessionState.IDLE:
            return self.registry.suggest_fields(text)
        descriptor = self.active_descriptor
        if descriptor is None:
            return []
        if self.state is SessionState.FIELD_CHOSEN:
            return suggest_operators(descriptor.type, text)
        if not descriptor.has_choices:
            return []
        return list(self.resolver(descriptor.key).options)

    def chip_labels(self) -> list[str]:
        """Chips rendered as ``Label: op value``."""
        labels = []
        for chip in self.chips:
            label = chip.field
            if chip.field in self.registry:
                label = self.registry.get(chip.field).label
            labels.append(f"{label}: {chip.operator} {chip.value}")
        return labels

    def apply(self, rows: Iterable[R]) -> list[R]:
        """Filter ``rows`` by the current chips, preserving order."""
        return filter_rows(rows, self.ast)
