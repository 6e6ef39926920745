"""Injectable time sources.

Everything that stamps timestamps or compares against "today" takes a
Clock instead of reading the system time, so behavior is reproducible
in tests.
"""

from datetime import UTC, datetime, timedelta, tzinfo
from typing import Protocol
from zoneinfo import ZoneInfo


class Clock(Protocol):
    """Protocol for time sources."""

    def now(self) -> datetime:
        """Return the current instant as an aware datetime."""
        ...


class SystemClock:
    """Wall clock in a fixed timezone.

    The timezone decides where calendar days start, which matters for
    due-date and staleness comparisons.
    """

    def __init__(self, tz: tzinfo | str = UTC) -> None:
        self._tz = ZoneInfo(tz) if isinstance(tz, str) else tz

    def now(self) -> datetime:
        return datetime.now(self._tz)


class FixedClock:
    """Clock that returns a settable instant."""

    def __init__(self, now: datetime) -> None:
        if now.tzinfo is None:
            raise ValueError("FixedClock requires an aware datetime")
        self._now = now

    def now(self) -> datetime:
        return self._now

    def set(self, now: datetime) -> None:
        if now.tzinfo is None:
            raise ValueError("FixedClock requires an aware datetime")
        self._now = now

    def advance(self, delta: timedelta) -> None:
        self._now = self._now + delta
