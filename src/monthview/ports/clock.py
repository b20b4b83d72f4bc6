"""Clock interface."""

from datetime import date, datetime
from typing import Protocol


class Clock(Protocol):
    """Interface for reading the current date and time."""

    def now(self) -> datetime:
        """Current local date and time."""
        ...

    def today(self) -> date:
        """Current local calendar date."""
        ...
