"""Timezone-aware datetime utilities.

All datetime values use UTC for storage and comparison. Calendar days are
always UTC days: recommendation keys, streak walks and retention windows all
go through `to_day` so the per-day uniqueness rules agree with each other.
"""

from datetime import date, datetime, time, timedelta, timezone
from typing import Protocol


def utc_now() -> datetime:
    """Get current datetime with UTC timezone.

    Always use this function instead of datetime.utcnow() or datetime.now().

    Returns:
        Current datetime with UTC timezone
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Ensure datetime has UTC timezone.

    If datetime is naive (no timezone), assumes UTC and adds it.
    If datetime has different timezone, converts to UTC.

    Args:
        dt: Datetime to ensure is UTC

    Returns:
        Datetime with UTC timezone, or None if input is None
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


def to_day(value: datetime | date) -> date:
    """Truncate a datetime (or pass through a date) to its UTC calendar day."""
    if isinstance(value, datetime):
        return ensure_utc(value).date()
    return value


def days_back(day: date, count: int) -> list[date]:
    """Return `count` consecutive days ending at `day`, newest first."""
    return [day - timedelta(days=offset) for offset in range(count)]


def datetime_to_iso(dt: datetime | None) -> str | None:
    """Convert datetime to ISO 8601 string.

    Args:
        dt: Datetime to convert

    Returns:
        ISO 8601 formatted string, or None if input is None
    """
    if dt is None:
        return None
    return ensure_utc(dt).isoformat()


class Clock(Protocol):
    """Source of the current time, injectable for tests and batch runs."""

    def now(self) -> datetime:
        ...

    def today(self) -> date:
        ...


class SystemClock:
    """Wall clock in UTC."""

    def now(self) -> datetime:
        return utc_now()

    def today(self) -> date:
        return to_day(self.now())


class FixedClock:
    """Clock pinned to a given instant.

    Used by tests and by the CLI when a job is replayed for a past day.
    """

    def __init__(self, instant: datetime | date) -> None:
        if isinstance(instant, datetime):
            self._now = ensure_utc(instant)
        else:
            self._now = datetime.combine(instant, time.min, tzinfo=timezone.utc)

    def now(self) -> datetime:
        return self._now

    def today(self) -> date:
        return to_day(self._now)

    def advance(self, **delta: float) -> None:
        """Move the clock forward by a timedelta expressed as keyword args."""
        self._now = self._now + timedelta(**delta)
