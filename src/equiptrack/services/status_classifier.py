"""
Compliance status projection.

Status is derived from the retest date and the current time on every read.
It is never stored, because "now" moves and a stored value would drift.
"""

from datetime import date, datetime, timedelta, timezone
from enum import Enum
from typing import Dict, Iterable, Optional, Union

from ..config import settings
from .retest_calculator import parse_date


class RecordStatus(str, Enum):
    VALID = "valid"
    DUE_SOON = "due-soon"
    EXPIRED = "expired"
    INVALID = "invalid"


def _as_utc_datetime(value: Union[date, datetime, str, None]) -> Optional[datetime]:
    """Dates are taken as midnight UTC; naive datetimes are assumed to be UTC."""
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    parsed = parse_date(value)
    if parsed is None:
        return None
    return datetime(parsed.year, parsed.month, parsed.day, tzinfo=timezone.utc)


def classify(
    retest_date: Union[date, datetime, str, None],
    now: Optional[datetime] = None,
    due_soon_days: Optional[int] = None
) -> RecordStatus:
    """
    Classify a record by its retest date.

    - invalid:  no (parseable) retest date
    - expired:  retest_date < now
    - due-soon: 0 <= retest_date - now < 30 days
    - valid:    otherwise

    A retest date exactly equal to ``now`` is due-soon, not expired.
    """
    retest = _as_utc_datetime(retest_date)
    if retest is None:
        return RecordStatus.INVALID

    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    if due_soon_days is None:
        due_soon_days = settings.due_soon_days

    remaining = retest - now
    if remaining < timedelta(0):
        return RecordStatus.EXPIRED
    if remaining < timedelta(days=due_soon_days):
        return RecordStatus.DUE_SOON
    return RecordStatus.VALID


def summarize(
    retest_dates: Iterable[Union[date, datetime, str, None]],
    now: Optional[datetime] = None
) -> Dict[str, int]:
    """Count records per status, including zero counts"""
    if now is None:
        now = datetime.now(timezone.utc)
    counts = {status.value: 0 for status in RecordStatus}
    for retest_date in retest_dates:
        counts[classify(retest_date, now).value] += 1
    counts["total"] = sum(counts.values())
    return counts
