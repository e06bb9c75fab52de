"""Real clock implementation using the system clock."""

from datetime import UTC, datetime

from plugin_registry.integrations.time.abc import Time


class RealTime(Time):
    """Production implementation using datetime.now()."""

    def now(self) -> datetime:
        return datetime.now(UTC)
