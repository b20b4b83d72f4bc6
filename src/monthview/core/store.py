"""In-memory calendar state: events keyed by day plus the view cursors."""

import itertools
import logging
from dataclasses import dataclass
from datetime import date, datetime, time

from monthview.ports.clock import Clock

from .calendar import (
    Direction,
    Event,
    Month,
    format_month_label,
    generate_month_dates,
    normalize_date,
)

logger = logging.getLogger(__name__)


@dataclass
class NewEventForm:
    """Fields of the add-event form."""

    title: str
    date: date
    time: time

    @classmethod
    def blank(cls, now: datetime) -> "NewEventForm":
        return cls(title="", date=now.date(), time=now.time().replace(second=0, microsecond=0))


class CalendarStore:
    """
    Events per calendar day, the displayed month, and the selection cursors.

    Events are stored under the day they were added to. Setters locate an
    event inside one day's list and mutate it in place. Changing an event's
    date leaves it under its original key unless ``regroup_on_date_change``
    is set, in which case it moves to the list for its new date.
    """

    def __init__(self, clock: Clock, regroup_on_date_change: bool = False):
        self.clock = clock
        self.regroup_on_date_change = regroup_on_date_change
        self.events_by_date: dict[date, list[Event]] = {}
        self.displayed_month = Month.of(clock.today())
        self.selected_date: date | None = None
        self.selected_event: Event | None = None
        self.draft = NewEventForm.blank(clock.now())
        self._ids = itertools.count(1)

    # ============== Month grid ==============

    def month_dates(self) -> list[date]:
        return generate_month_dates(self.displayed_month)

    def month_label(self) -> str:
        return format_month_label(self.displayed_month)

    def navigate_month(self, direction: Direction) -> None:
        """Show the previous or next month and clear the day selection.

        Raises ValueError past the supported years, leaving state unchanged.
        """
        self.displayed_month = self.displayed_month.shift(direction.value)
        self.selected_date = None
        logger.debug(f"Navigated to {self.displayed_month}")

    def go_to_today(self) -> None:
        """Show the current month with today selected."""
        today = self.clock.today()
        self.displayed_month = Month.of(today)
        self.selected_date = today

    # ============== Selection ==============

    def activate(self) -> None:
        """Select today, as happens when the screen first appears."""
        self.selected_date = self.clock.today()

    def select_date(self, value: date | datetime) -> None:
        self.selected_date = normalize_date(value)
        logger.debug(f"Selected {self.selected_date}")

    def select_event_for_edit(self, event: Event | None) -> None:
        self.selected_event = event

    # ============== Queries ==============

    def events_on(self, day: date) -> list[Event]:
        return list(self.events_by_date.get(normalize_date(day), []))

    def selected_events(self) -> list[Event] | None:
        """Events for the selected day, or None when no day is selected."""
        if self.selected_date is None:
            return None
        return self.events_on(self.selected_date)

    def find_event(self, event_id: int) -> tuple[date, Event] | None:
        """Locate a stored event by id across every day."""
        for day, events in self.events_by_date.items():
            for event in events:
                if event.id == event_id:
                    return day, event
        return None

    # ============== Mutation ==============

    def add_event(self, day: date | datetime, title: str, at: time) -> Event:
        """Append a new event to the list for a day."""
        day = normalize_date(day)
        event = Event(title=title, date=day, time=at, id=next(self._ids))
        self.events_by_date.setdefault(day, []).append(event)
        logger.debug(f"Added event {event.id} '{title}' on {day}")
        return event

    def submit_draft(self) -> Event | None:
        """
        Store the draft form as an event on the selected day.

        The event keeps the draft's own date field even though it is filed
        under the selected day. The draft is reset either way.
        """
        draft = self.draft
        self.draft = NewEventForm.blank(self.clock.now())

        if self.selected_date is None:
            logger.debug("Draft submitted with no selected date, discarded")
            return None

        event = Event(title=draft.title, date=draft.date, time=draft.time, id=next(self._ids))
        self.events_by_date.setdefault(self.selected_date, []).append(event)
        logger.debug(f"Added event {event.id} '{event.title}' on {self.selected_date}")
        return event

    def set_event_title(self, day: date, event: Event, title: str) -> None:
        stored = self._locate(day, event)
        if stored is not None:
            stored.title = title

    def set_event_time(self, day: date, event: Event, at: time) -> None:
        stored = self._locate(day, event)
        if stored is not None:
            stored.time = at

    def set_event_date(self, day: date, event: Event, new_date: date | datetime) -> None:
        day = normalize_date(day)
        stored = self._locate(day, event)
        if stored is None:
            return

        stored.date = normalize_date(new_date)
        if self.regroup_on_date_change and stored.date != day:
            events = self.events_by_date[day]
            events.pop(_index_of(events, stored))
            if not events:
                del self.events_by_date[day]
            self.events_by_date.setdefault(stored.date, []).append(stored)
            logger.debug(f"Moved event {stored.id} from {day} to {stored.date}")

    def _locate(self, day: date, event: Event) -> Event | None:
        """
        Find the stored event a caller refers to.

        Stored events are matched by id. Events without an id fall back to
        the first structurally equal entry.
        """
        events = self.events_by_date.get(normalize_date(day))
        if not events:
            logger.debug(f"No events on {day}, ignoring edit")
            return None

        if event.id is not None:
            found = next((e for e in events if e.id == event.id), None)
        else:
            found = next((e for e in events if e == event), None)

        if found is None:
            logger.debug(f"Event {event!r} not found on {day}, ignoring edit")
        return found


def _index_of(events: list[Event], target: Event) -> int:
    """Position of an exact object in a list, ignoring structural equals."""
    for i, event in enumerate(events):
        if event is target:
            return i
    raise ValueError("event not in list")
