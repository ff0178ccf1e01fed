"""Whole months an employee has spent in their current position."""
from __future__ import annotations

from datetime import date
from typing import Any, Optional

from ..models.dates import to_date


def months_since(reference: Any, today: Optional[date] = None) -> int:
    """Return the calendar months between ``reference`` and ``today``.

    ``reference`` may be a ``YYYY-MM-DD`` string, epoch seconds (or a stored
    ``{"seconds": ...}`` timestamp) or a date. Unparseable, out-of-range
    and future dates count as 0 months. ``today`` may be a date or datetime.

    Months are counted on calendar-month boundaries, not elapsed days:
    Jan 31 to Feb 1 is one month. Stored evaluations depend on this.
    """
    today = to_date(today) or date.today()
    start = to_date(reference)
    if start is None or start > today:
        return 0
    months = (today.year - start.year) * 12 + (today.month - start.month)
    return max(0, months)
