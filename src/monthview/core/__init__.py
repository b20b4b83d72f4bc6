"""Functional core - calendar logic and in-memory state, no I/O."""

from .calendar import (
    Direction,
    Event,
    Month,
    format_event_date,
    format_event_time,
    format_month_label,
    generate_month_dates,
    month_weeks,
    parse_date,
    parse_time,
)
from .store import CalendarStore, NewEventForm

__all__ = [
    # Calendar
    "Direction",
    "Event",
    "Month",
    "format_event_date",
    "format_event_time",
    "format_month_label",
    "generate_month_dates",
    "month_weeks",
    "parse_date",
    "parse_time",
    # Store
    "CalendarStore",
    "NewEventForm",
]
