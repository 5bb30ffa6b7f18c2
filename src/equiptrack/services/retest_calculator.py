"""
Retest date derivation.

A certificate is valid for 364 days from the service date (not one
calendar year), so the retest always lands on the same weekday.
"""

import logging
from datetime import date, datetime, timedelta, timezone
from typing import Optional, Union

from ..config import settings

logger = logging.getLogger(__name__)

DateLike = Union[date, datetime, str, None]


def parse_date(value: DateLike) -> Optional[date]:
    """
    Leniently parse a calendar date.

    Accepts ``date``/``datetime`` objects and ISO strings, with or without a
    time component (``2024-01-01`` and ``2024-01-01T09:30:00Z`` both give
    2024-01-01). Returns None for anything unparseable.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def compute_retest_date(
    service_date: DateLike,
    today: Optional[date] = None,
    interval_days: Optional[int] = None
) -> date:
    """
    Return service_date + 364 days.

    Falls back to today + 364 days when the service date is missing or
    unparseable; this never raises so a malformed form field cannot block
    a record from being written.
    """
    days = interval_days if interval_days is not None else settings.retest_interval_days
    parsed = parse_date(service_date)

    if parsed is None:
        base = today or datetime.now(timezone.utc).date()
        logger.warning(
            f"Unparseable service date {service_date!r}; "
            f"falling back to {base.isoformat()} + {days} days"
        )
        return base + timedelta(days=days)

    return parsed + timedelta(days=days)
