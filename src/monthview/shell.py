"""Interactive session commands for the terminal calendar."""

import logging
import shlex
from datetime import date

from .core.calendar import Direction, Event, parse_date, parse_time
from .core.store import CalendarStore
from .views import NO_DATE_SELECTED, render_events, render_screen

logger = logging.getLogger(__name__)

HELP_TEXT = """Commands:
  next / prev           Show the next / previous month
  today                 Jump to today
  select DAY            Select a day of this month (or YYYY-MM-DD)
  add TITLE [@ HH:MM]   Add an event to the selected day
  edit N / done         Start / stop editing event row N
  title N TEXT          Rename event row N
  date N YYYY-MM-DD     Change the date of event row N
  time N HH:MM          Change the time of event row N
  list                  Show the selected day's events
  help                  Show this message
  quit                  Leave the session"""


class QuitSession(Exception):
    """Raised when the user leaves the session."""

    pass


class ShellSession:
    """Dispatches one line of user input against a CalendarStore."""

    def __init__(self, store: CalendarStore, first_weekday: int):
        self.store = store
        self.first_weekday = first_weekday

    def screen(self) -> str:
        return render_screen(self.store, self.first_weekday)

    def execute(self, line: str) -> str:
        """
        Run a command and return the text to show.

        Raises ValueError for malformed input and QuitSession on quit.
        """
        try:
            parts = shlex.split(line)
        except ValueError as e:
            raise ValueError(f"Could not parse input: {e}") from None
        if not parts:
            return ""

        command, args = parts[0].lower(), parts[1:]
        match command:
            case "next" | "n":
                self.store.navigate_month(Direction.NEXT)
                return self.screen()
            case "prev" | "p":
                self.store.navigate_month(Direction.PREVIOUS)
                return self.screen()
            case "today":
                self.store.go_to_today()
                return self.screen()
            case "select" | "s":
                self.store.select_date(self._parse_day(_require(args, 1, "select DAY")[0]))
                return self.screen()
            case "add" | "a":
                return self._add(args)
            case "edit":
                self.store.select_event_for_edit(self._row(args))
                return render_events(self.store)
            case "done":
                self.store.select_event_for_edit(None)
                return render_events(self.store)
            case "title":
                _require(args, 2, "title N TEXT")
                event = self._row(args)
                self.store.set_event_title(self.store.selected_date, event, " ".join(args[1:]))
                return render_events(self.store)
            case "date":
                _require(args, 2, "date N YYYY-MM-DD")
                event = self._row(args)
                self.store.set_event_date(self.store.selected_date, event, parse_date(args[1]))
                return render_events(self.store)
            case "time":
                _require(args, 2, "time N HH:MM")
                event = self._row(args)
                self.store.set_event_time(self.store.selected_date, event, parse_time(args[1]))
                return render_events(self.store)
            case "list" | "ls":
                return render_events(self.store)
            case "help" | "?":
                return HELP_TEXT
            case "quit" | "exit" | "q":
                raise QuitSession()
            case _:
                raise ValueError(f"Unknown command '{command}'. Type 'help' for commands.")

    def _add(self, args: list[str]) -> str:
        if self.store.selected_date is None:
            raise ValueError(NO_DATE_SELECTED)
        if "@" in args:
            split = args.index("@")
            title_parts, time_parts = args[:split], args[split + 1 :]
            self.store.draft.time = parse_time(" ".join(time_parts))
        else:
            title_parts = args
        self.store.draft.title = " ".join(title_parts)
        self.store.draft.date = self.store.selected_date
        self.store.submit_draft()
        return render_events(self.store)

    def _parse_day(self, value: str) -> date:
        """A bare day number refers to the displayed month."""
        if value.isdigit():
            month = self.store.displayed_month
            try:
                return date(month.year, month.month, int(value))
            except ValueError:
                raise ValueError(f"{month} has no day {value}") from None
        return parse_date(value)

    def _row(self, args: list[str]) -> Event:
        """Resolve a 1-based row number in the selected day's list."""
        events = self.store.selected_events()
        if events is None:
            raise ValueError(NO_DATE_SELECTED)
        row = _require(args, 1, "N")[0]
        if not row.isdigit() or not 1 <= int(row) <= len(events):
            raise ValueError(f"No event row {row}")
        return events[int(row) - 1]


def _require(args: list[str], count: int, usage: str) -> list[str]:
    if len(args) < count:
        raise ValueError(f"Usage: {usage}")
    return args
