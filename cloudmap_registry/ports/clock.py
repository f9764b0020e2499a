"""Clock port abstraction for time handling."""

from abc import ABC, abstractmethod
from datetime import datetime


class ClockPort(ABC):
    """Abstract clock interface.

    Registration debouncing reads time only through this port, which keeps
    the debounce window testable without sleeping.
    """

    @abstractmethod
    def now(self) -> datetime:
        """Get the current time as a timezone-aware datetime."""
        ...
