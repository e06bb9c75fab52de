"""Clock operations abstraction for testing.

Catalog timestamps come from here so tests can pin and advance the clock
instead of depending on wall time.
"""

from abc import ABC, abstractmethod
from datetime import datetime


class Time(ABC):
    """Abstract clock operations for dependency injection."""

    @abstractmethod
    def now(self) -> datetime:
        """Return the current time as a timezone-aware UTC datetime."""
        ...
