"""Pure calendar domain logic - no I/O dependencies."""

import calendar
from dataclasses import dataclass, field
from datetime import MAXYEAR, MINYEAR, date, datetime, time
from enum import Enum


class Direction(Enum):
    """Month navigation direction."""

    PREVIOUS = -1
    NEXT = 1


@dataclass(frozen=True, order=True)
class Month:
    """A year + month pair."""

    year: int
    month: int

    def __post_init__(self):
        if not 1 <= self.month <= 12:
            raise ValueError(f"Month out of range: {self.month}")
        if not MINYEAR <= self.year <= MAXYEAR:
            raise ValueError(f"Year out of range: {self.year} (supported: {MINYEAR}-{MAXYEAR})")

    @classmethod
    def of(cls, d: date) -> "Month":
        return cls(d.year, d.month)

    @classmethod
    def parse(cls, value: str) -> "Month":
        """Parse a YYYY-MM string."""
        try:
            year_str, month_str = value.strip().split("-")
            year, month = int(year_str), int(month_str)
        except ValueError:
            raise ValueError(f"Invalid month '{value}', expected YYYY-MM") from None
        try:
            return cls(year, month)
        except ValueError as e:
            raise ValueError(f"Invalid month '{value}': {e}") from None

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def last_day(self) -> date:
        return date(self.year, self.month, calendar.monthrange(self.year, self.month)[1])

    def shift(self, months: int) -> "Month":
        """Move by a number of months, rolling the year over.

        Raises ValueError when the result falls outside the supported years.
        """
        index = self.year * 12 + (self.month - 1) + months
        return Month(index // 12, index % 12 + 1)

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


@dataclass
class Event:
    """A calendar event.

    Equality is structural over title, date and time. The id is assigned by
    the store that created the event and does not take part in comparison.
    """

    title: str
    date: date
    time: time
    id: int | None = field(default=None, compare=False)

    def format_time(self) -> str:
        return format_event_time(self.time)

    def format_date(self) -> str:
        return format_event_date(self.date)


def normalize_date(value: date | datetime) -> date:
    """Strip the time component from a date or datetime."""
    if isinstance(value, datetime):
        return value.date()
    return value


def generate_month_dates(month: Month) -> list[date]:
    """
    Every date of a month in ascending order.

    Pure function - no I/O.
    """
    days_in_month = calendar.monthrange(month.year, month.month)[1]
    return [date(month.year, month.month, day) for day in range(1, days_in_month + 1)]


def format_month_label(month: Month) -> str:
    """Format a month as "March 2024"."""
    return f"{calendar.month_name[month.month]} {month.year}"


def month_weeks(month: Month, first_weekday: int = calendar.SUNDAY) -> list[list[date | None]]:
    """
    Lay a month out as week rows of 7 cells.

    Cells outside the month are None. Padding is computed from day
    numbers so the first and last supported months never build a date
    outside them.
    """
    cal = calendar.Calendar(firstweekday=first_weekday)
    return [
        [date(month.year, month.month, day) if day else None for day in week]
        for week in cal.monthdayscalendar(month.year, month.month)
    ]


def format_event_date(d: date) -> str:
    """Medium date style, e.g. "Mar 5, 2024"."""
    return f"{d.strftime('%b')} {d.day}, {d.year}"


def format_event_time(t: time) -> str:
    """Short time style, e.g. "9:05 AM"."""
    hour = t.hour % 12 or 12
    suffix = "AM" if t.hour < 12 else "PM"
    return f"{hour}:{t.minute:02d} {suffix}"


def parse_date(value: str) -> date:
    """Parse a YYYY-MM-DD string."""
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        raise ValueError(f"Invalid date '{value}', expected YYYY-MM-DD") from None


def parse_time(value: str) -> time:
    """Parse an HH:MM string (24h)."""
    try:
        hour_str, minute_str = value.strip().split(":")
        return time(int(hour_str), int(minute_str))
    except ValueError:
        raise ValueError(f"Invalid time '{value}', expected HH:MM") from None


WEEKDAYS = {name.lower(): index for index, name in enumerate(calendar.day_name)}


def parse_weekday(value: str) -> int:
    """Map a weekday name ("Sunday", "mon") to a calendar constant."""
    key = value.strip().lower()
    for name, index in WEEKDAYS.items():
        if key and name.startswith(key) and len(key) >= 3:
            return index
    raise ValueError(f"Invalid weekday '{value}'")
