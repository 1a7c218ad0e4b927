"""Tagged scalar values and the coercions used during evaluation.

Records hold loosely typed scalars (strings, numbers, booleans, date-like
strings, or nothing at all). Comparisons never look at the schema; they
coerce both operands with the functions below:

* ``to_text`` for ``contains``, ``=`` and ``!=``
* ``to_number`` for ``>``, ``>=``, ``<`` and ``<=``
* ``sniff_date`` to detect ``YYYY-MM-DD`` strings on either side
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Union

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

_NUMBER_PATTERN = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")
_INFINITY_PATTERN = re.compile(r"^[+-]?Infinity$")

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

NAN = float("nan")


@dataclass(frozen=True)
class TextValue:
    value: str


@dataclass(frozen=True)
class NumberValue:
    value: float

    @property
    def is_nan(self) -> bool:
        return math.isnan(self.value)


@dataclass(frozen=True)
class DateValue:
    """A calendar date as epoch milliseconds at UTC midnight (NaN if invalid)."""

    millis: float

    @property
    def is_valid(self) -> bool:
        return not math.isnan(self.millis)


ScalarValue = Union[TextValue, NumberValue, DateValue]


def _format_number(number: float) -> str:
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "Infinity" if number > 0 else "-Infinity"
    if number.is_integer():
        return str(int(number))
    return repr(number)


def to_text(raw: Any) -> str:
    """Render a record or condition value as text.

    ``None`` is empty, booleans are lower-case, and integral floats drop
    their ``.0`` so that ``31.0`` and ``"31"`` compare equal.
    """
    if raw is None:
        return ""
    if isinstance(raw, bool):
        return "true" if raw else "false"
    if isinstance(raw, float):
        return _format_number(raw)
    if isinstance(raw, DateValue):
        return _format_number(raw.millis)
    if isinstance(raw, NumberValue):
        return _format_number(raw.value)
    if isinstance(raw, TextValue):
        return raw.value
    return str(raw)


def to_number(raw: Any) -> float:
    """Parse a value as a number, returning NaN when it is not numeric.

    Blank strings count as zero. Missing values are NaN.
    """
    if raw is None:
        return NAN
    if isinstance(raw, bool):
        return 1.0 if raw else 0.0
    if isinstance(raw, (int, float)):
        return float(raw)
    if isinstance(raw, NumberValue):
        return raw.value
    if isinstance(raw, DateValue):
        return raw.millis

    text = to_text(raw).strip()
    if not text:
        return 0.0
    if _NUMBER_PATTERN.match(text):
        return float(text)
    if _INFINITY_PATTERN.match(text):
        return float(text.replace("Infinity", "inf"))
    return NAN


def sniff_date(raw: Any) -> DateValue | None:
    """Return a DateValue if ``raw`` is shaped like ``YYYY-MM-DD``.

    Detection is purely by string shape, independent of any declared field
    type. A well-shaped but impossible date (``2025-02-30``) still counts as
    a date, with NaN milliseconds.
    """
    text = to_text(raw)
    if not DATE_PATTERN.match(text):
        return None
    try:
        day = date.fromisoformat(text)
    except ValueError:
        return DateValue(NAN)
    moment = datetime(day.year, day.month, day.day, tzinfo=timezone.utc)
    delta = moment - _EPOCH
    return DateValue(float(delta.days * 86_400_000))


def coerce(raw: Any) -> ScalarValue | None:
    """Wrap a raw value in its tagged form.

    Missing values stay None (empty text, NaN number). Booleans become
    ``"true"``/``"false"`` text. Dates are not detected here; see
    :func:`sniff_date`, which only applies when both sides of a comparison
    are date-shaped.
    """
    if raw is None or isinstance(raw, (TextValue, NumberValue, DateValue)):
        return raw
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return NumberValue(float(raw))
    return TextValue(to_text(raw))
