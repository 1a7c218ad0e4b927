"""Option resolution for enum, relation and boolean fields.

Option sources are either a fixed list, filtered locally by the partial
query, or a lookup callable that may return an awaitable. Lookups can be
slow and can complete out of order, so :class:`OptionResolver` tags every
request with a generation number and only applies the newest one.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Iterable, Sequence

from smart_search.schema.registry import FieldDescriptor, FieldType

logger = logging.getLogger(__name__)

BOOLEAN_OPTIONS: tuple[str, ...] = ("true", "false")


def filter_static_options(options: Sequence[str], query: str) -> list[str]:
    """Return the options containing ``query`` (case-insensitive), in order."""
    needle = query.lower()
    return [option for option in options if needle in option.lower()]


def static_options(descriptor: FieldDescriptor, query: str) -> list[str] | None:
    """Options for fields that need no lookup, or None when a lookup is required."""
    source = descriptor.options
    if source is None:
        if descriptor.type is FieldType.BOOLEAN:
            return filter_static_options(BOOLEAN_OPTIONS, query)
        return []
    if callable(source):
        return None
    return filter_static_options(source, query)


async def resolve_options(descriptor: FieldDescriptor, query: str) -> list[str]:
    """Resolve the option list for a field and a partial query.

    A lookup that raises, or returns something other than a list, degrades
    to an empty list; the failure is logged and never propagated. There is
    no retry.
    """
    source = descriptor.options
    if not callable(source):
        return static_options(descriptor, query) or []

    try:
        result = source(query)
        if inspect.isawaitable(result):
            result = await result
        if result is None:
            return []
        if isinstance(result, (str, bytes)) or not isinstance(result, Iterable):
            raise TypeError(f"expected a list of options, got {type(result).__name__}")
        return [str(option) for option in result]
    except Exception as e:
        logger.warning("Option lookup for %s failed (query=%r): %s", descriptor.key, query, e)
        return []


class OptionResolver:
    """Tracks the option list shown for one field.

    Every :meth:`resolve` call bumps the generation counter. When a lookup
    finishes, its result is applied only if no newer lookup has been issued
    since; otherwise it is dropped. The applied list therefore always belongs
    to the latest query, whatever order the lookups complete in.

    Args:
        descriptor: Field whose options are resolved.
        on_update: Optional callback invoked with the newly applied list.
    """

    def __init__(
        self,
        descriptor: FieldDescriptor,
        on_update: Callable[[list[str]], None] | None = None,
    ) -> None:
        self.descriptor = descriptor
        self.on_update = on_update
        self.options: list[str] = []
        self.query: str | None = None
        self._generation = 0

    @property
    def generation(self) -> int:
        """Bumped by every resolve, prime and reset; older lookups become stale."""
        return self._generation

    def prime(self, query: str = "") -> list[str]:
        """Apply options that need no lookup, right away.

        Static lists and boolean defaults are filtered by ``query``. Fields
        backed by a lookup start empty until :meth:`resolve` completes. Any
        lookup still in flight becomes stale.
        """
        self._generation += 1
        static = static_options(self.descriptor, query)
        self.options = static if static is not None else []
        self.query = query if static is not None else None
        if self.on_update is not None:
            self.on_update(self.options)
        return self.options

    def reset(self) -> None:
        """Forget the applied options and drop any lookup in flight."""
        self._generation += 1
        self.options = []
        self.query = None

    async def resolve(self, query: str) -> list[str] | None:
        """Look up options for ``query`` and apply them if still current.

        Returns:
            The applied option list, or None if the result was stale.
        """
        self._generation += 1
        generation = self._generation

        result = await resolve_options(self.descriptor, query)

        if generation != self._generation:
            logger.debug(
                "Discarding stale options for %s (query=%r, generation %d < %d)",
                self.descriptor.key,
                query,
                generation,
                self._generation,
            )
            return None

        self.options = result
        self.query = query
        if self.on_update is not None:
            self.on_update(result)
        return result
