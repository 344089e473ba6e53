"""
Clock

Injectable source of the current time. Services and jobs take a ``clock``
argument instead of reading the wall clock directly, so time-driven logic
can be pinned to an exact instant.
"""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Current time, timezone-aware UTC."""
    return datetime.now(UTC)


class FrozenClock:
    """
    A clock that only moves when told to.

    Example:
        clock = FrozenClock(datetime(2025, 1, 1, tzinfo=UTC))
        clock.advance(hours=1)
        clock()  # 2025-01-01 01:00 UTC
    """

    def __init__(self, now: datetime):
        self._now = ensure_utc(now)

    def __call__(self) -> datetime:
        return self._now

    def set(self, now: datetime) -> None:
        self._now = ensure_utc(now)

    def advance(self, delta: timedelta | None = None, **kwargs: float) -> datetime:
        """Move the clock forward by ``delta`` or by timedelta keyword args."""
        self._now = self._now + (delta if delta is not None else timedelta(**kwargs))
        return self._now


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
