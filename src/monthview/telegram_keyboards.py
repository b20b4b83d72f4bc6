"""Inline keyboards for the Telegram calendar screen."""

import calendar
from datetime import date

from telegram import InlineKeyboardButton, InlineKeyboardMarkup

from .core.calendar import month_weeks
from .core.store import CalendarStore
from .telegram_format import MAX_LISTED_EVENTS, shorten
from .views import weekday_header

NOOP = "noop"


def parse_callback(data: str) -> tuple[str, str]:
    """Split "kind:value" callback data. Data without a colon has an empty value."""
    kind, _, value = (data or "").partition(":")
    return kind, value


def _day_button(day: date | None, selected: date | None) -> InlineKeyboardButton:
    if day is None:
        return InlineKeyboardButton(" ", callback_data=NOOP)
    label = f"[{day.day}]" if day == selected else str(day.day)
    return InlineKeyboardButton(label, callback_data=f"day:{day.isoformat()}")


def build_month_keyboard(store: CalendarStore, first_weekday: int = calendar.SUNDAY) -> InlineKeyboardMarkup:
    """
    Month grid as an inline keyboard.

    Layout: month label, weekday names, one row per week, navigation, then
    one button per event on the selected day.
    """
    keyboard = [
        [InlineKeyboardButton(store.month_label(), callback_data=NOOP)],
        [InlineKeyboardButton(name, callback_data=NOOP) for name in weekday_header(first_weekday)],
    ]

    for week in month_weeks(store.displayed_month, first_weekday):
        keyboard.append([_day_button(day, store.selected_date) for day in week])

    keyboard.append(
        [
            InlineKeyboardButton("<- Previous", callback_data="nav:prev"),
            InlineKeyboardButton("Today", callback_data="nav:today"),
            InlineKeyboardButton("Next ->", callback_data="nav:next"),
        ]
    )

    for event in (store.selected_events() or [])[:MAX_LISTED_EVENTS]:
        marker = "Editing: " if event is store.selected_event else ""
        keyboard.append(
            [
                InlineKeyboardButton(
                    f"{marker}{event.format_time()} {shorten(event.title, 40)}",
                    callback_data=f"event:{event.id}",
                )
            ]
        )

    return InlineKeyboardMarkup(keyboard)
