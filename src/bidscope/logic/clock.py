from datetime import UTC, datetime
from typing import Protocol

from bidscope.logic.timestamps import as_utc


class Clock(Protocol):
    def now(self) -> datetime:
        ...


class SystemClock:
    """Wall-clock time in UTC."""

    def now(self) -> datetime:
        return datetime.now(UTC)


class FixedClock:
    """
    Always returns the same instant. Used by tests and by report reruns that
    must reproduce an earlier dashboard.
    """

    def __init__(self, at: datetime):
        # buckets are keyed in UTC, so the anchor must be too
        self._at = as_utc(at)

    def now(self) -> datetime:
        return self._at
