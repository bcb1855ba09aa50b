from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta
from decimal import Decimal

from ..core.exceptions import ValidationError

_SECONDS_PER_HOUR = Decimal(3600)


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date: {value!r} (expected YYYY-MM-DD)")


def parse_iso_datetime(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid datetime: {value!r} (expected ISO 8601)")


def now_local() -> datetime:
    """Current local time.

    Wrapped so tests can patch it.
    """
    return datetime.now()


def day_start(instant: datetime) -> date:
    return instant.date()


def day_count(start: date, end: date) -> int:
    """Number of calendar days in [start, end], both ends inclusive.

    Zero or negative when ``end`` precedes ``start``.
    """
    return (end - start).days + 1


def overlap_days(start: date, end: date, period_start: date, period_end: date) -> int:
    """Inclusive day count of [start, end] clamped to [period_start, period_end]."""
    lo = max(start, period_start)
    hi = min(end, period_end)
    if lo > hi:
        return 0
    return day_count(lo, hi)


def month_bounds(month: int, year: int) -> tuple[date, date]:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def year_bounds(year: int) -> tuple[date, date]:
    return date(year, 1, 1), date(year, 12, 31)


def hours_between(start: datetime, end: datetime) -> Decimal:
    """Fractional hours elapsed, unrounded."""
    seconds = Decimal(str((end - start).total_seconds()))
    return seconds / _SECONDS_PER_HOUR


def minutes_between(start: datetime, end: datetime) -> int:
    """Whole minutes elapsed, truncated toward zero."""
    return int((end - start) / timedelta(minutes=1))
