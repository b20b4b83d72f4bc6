"""Plain-text rendering of the calendar screen."""

import calendar

from .core.calendar import Event, month_weeks
from .core.store import CalendarStore

NO_DATE_SELECTED = "Select a date to view events"
NO_EVENTS = "No events for this date"


def weekday_header(first_weekday: int) -> list[str]:
    """Two-letter weekday names starting at first_weekday."""
    return [calendar.day_abbr[(first_weekday + i) % 7][:2] for i in range(7)]


def render_grid(store: CalendarStore, first_weekday: int = calendar.SUNDAY) -> str:
    """
    Render the displayed month as a text grid.

    The selected day is wrapped in brackets.
    """
    lines = [store.month_label(), " ".join(f"{d:>4}" for d in weekday_header(first_weekday))]
    for week in month_weeks(store.displayed_month, first_weekday):
        cells = []
        for day in week:
            if day is None:
                cells.append("    ")
            elif day == store.selected_date:
                cells.append(f"[{day.day:>2}]")
            else:
                cells.append(f" {day.day:>2} ")
        lines.append(" ".join(cells).rstrip())
    return "\n".join(lines)


def format_event_row(index: int, event: Event, editing: bool = False) -> str:
    """One numbered event row: date, time, title."""
    marker = "*" if editing else " "
    return f"{marker}{index:>2}. {event.format_date():<13} {event.format_time():>8}  {event.title}"


def render_events(store: CalendarStore) -> str:
    """Rows for the selected day, or the placeholder message."""
    events = store.selected_events()
    if events is None:
        return NO_DATE_SELECTED
    if not events:
        return NO_EVENTS
    return "\n".join(
        format_event_row(i, event, editing=event is store.selected_event)
        for i, event in enumerate(events, start=1)
    )


def render_screen(store: CalendarStore, first_weekday: int = calendar.SUNDAY) -> str:
    return f"{render_grid(store, first_weekday)}\n\n{render_events(store)}"
