"""Fake Time implementation for testing.

FakeTime returns a fixed instant that only moves when advance() is called,
so timestamp assertions are deterministic.
"""

from datetime import UTC, datetime, timedelta

from plugin_registry.integrations.time.abc import Time


class FakeTime(Time):
    """In-memory fake clock."""

    def __init__(self, now: datetime | None = None) -> None:
        """Create FakeTime.

        Args:
            now: Starting instant (defaults to 2025-01-01T00:00:00Z)
        """
        self._now = now or datetime(2025, 1, 1, tzinfo=UTC)

    def now(self) -> datetime:
        return self._now

    def advance(self, seconds: float) -> None:
        """Move the clock forward by the given number of seconds."""
        self._now = self._now + timedelta(seconds=seconds)
