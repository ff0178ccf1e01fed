"""Date inputs accepted at the storage and form boundary.

Dates reach the engine in three shapes: ``YYYY-MM-DD`` strings typed into
forms, epoch-second timestamps read back from the document store, and
real :class:`datetime.date` values. :func:`as_date_input` tags a raw value
with one of the variants below and :func:`to_date` is the single place
that turns a variant into a validated calendar date.
"""
from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Optional, Union

MIN_YEAR = 1900
MAX_YEAR = 2100


@dataclass(frozen=True)
class IsoDateString:
    text: str


@dataclass(frozen=True)
class EpochSeconds:
    seconds: float


@dataclass(frozen=True)
class DateValue:
    value: date


DateInput = Union[IsoDateString, EpochSeconds, DateValue]


def as_date_input(raw: Any) -> Optional[DateInput]:
    """Wrap ``raw`` in the matching :data:`DateInput` variant.

    Mappings with a ``seconds`` key (stored timestamps) become
    :class:`EpochSeconds`. ``None``, empty strings and unsupported types
    return ``None``.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (IsoDateString, EpochSeconds, DateValue)):
        return raw
    if isinstance(raw, str):
        return IsoDateString(raw) if raw.strip() else None
    if isinstance(raw, date):
        return DateValue(raw)
    if isinstance(raw, (int, float)):
        return EpochSeconds(float(raw))
    if isinstance(raw, dict) and isinstance(raw.get("seconds"), (int, float)):
        return EpochSeconds(float(raw["seconds"]))
    return None


def _parse_iso(text: str) -> Optional[date]:
    parts = text.strip().split("-")
    if len(parts) != 3:
        return None
    try:
        year, month, day = (int(p) for p in parts)
    except ValueError:
        return None
    if year < MIN_YEAR or year > MAX_YEAR:
        return None
    try:
        return date(year, month, day)
    except ValueError:
        return None


def to_date(value: Any) -> Optional[date]:
    """Convert a raw value or :data:`DateInput` into a :class:`date`.

    Returns ``None`` for anything that is not a valid calendar date.
    """
    tagged = as_date_input(value)
    if isinstance(tagged, IsoDateString):
        return _parse_iso(tagged.text)
    if isinstance(tagged, EpochSeconds):
        try:
            return datetime.fromtimestamp(tagged.seconds, tz=timezone.utc).date()
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(tagged, DateValue):
        if isinstance(tagged.value, datetime):
            return tagged.value.date()
        return tagged.value
    return None


def add_months(start: date, months: int) -> date:
    """Return ``start`` moved by ``months`` calendar months.

    The day is clamped to the last day of the target month, so Jan 31 plus
    one month is Feb 28 (or 29).
    """
    index = start.month - 1 + months
    year = start.year + index // 12
    month = index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)
