"""Injectable clocks.

TTL decisions and timestamps read time through a Clock so tests can move
time forward deterministically.
"""

from datetime import UTC, datetime, timedelta


class Clock:
    """Wall clock, always timezone-aware UTC."""

    def now(self) -> datetime:
        return datetime.now(UTC)

    def timestamp_ms(self) -> int:
        return int(self.now().timestamp() * 1000)


class FrozenClock(Clock):
    """A clock that only moves when told to."""

    def __init__(self, start: datetime | None = None) -> None:
        self._now = start or datetime(2024, 1, 1, tzinfo=UTC)

    def now(self) -> datetime:
        return self._now

    def advance(self, seconds: float = 0, **kwargs) -> None:
        self._now = self._now + timedelta(seconds=seconds, **kwargs)


system_clock = Clock()
