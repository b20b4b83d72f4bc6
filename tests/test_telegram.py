"""Tests for the Telegram calendar screen."""

import asyncio
from datetime import date, datetime, time
from unittest.mock import AsyncMock, MagicMock

import pytest

from monthview.adapters.system_clock import FixedClock
from monthview.config import Config
from monthview.core.calendar import Month
from monthview.core.store import CalendarStore
from monthview.telegram_bot import AuthFilter, unauthorized_handler
from monthview.telegram_format import MAX_LISTED_EVENTS, screen_markdown, send_markdown, shorten
from monthview.telegram_handlers import (
    add_handler,
    callback_handler,
    date_handler,
    done_handler,
    time_handler,
    title_handler,
)
from monthview.telegram_keyboards import NOOP, build_month_keyboard, parse_callback


@pytest.fixture
def store():
    return CalendarStore(FixedClock(datetime(2024, 3, 15, 9, 30)))


@pytest.fixture
def context(store):
    ctx = MagicMock()
    ctx.bot_data = {"config": Config()}
    ctx.chat_data = {"store": store}
    ctx.args = []
    return ctx


@pytest.fixture
def message_update():
    update = MagicMock()
    update.message.reply_text = AsyncMock()
    update.effective_chat.id = 42
    return update


@pytest.fixture
def callback_update():
    def _make(data: str):
        update = MagicMock()
        update.callback_query.data = data
        update.callback_query.answer = AsyncMock()
        update.callback_query.edit_message_text = AsyncMock()
        return update
    return _make


def _callback_rows(markup):
    return [[button.callback_data for button in row] for row in markup.inline_keyboard]


class TestParseCallback:
    def test_kind_and_value(self):
        assert parse_callback("day:2024-03-05") == ("day", "2024-03-05")

    def test_no_value(self):
        assert parse_callback(NOOP) == ("noop", "")

    def test_empty(self):
        assert parse_callback("") == ("", "")


class TestMonthKeyboard:
    def test_layout(self, store):
        rows = _callback_rows(build_month_keyboard(store))
        # label, weekday names, six weeks for March 2024, navigation
        assert len(rows) == 9
        assert rows[0] == [NOOP]
        assert rows[1] == [NOOP] * 7
        assert rows[2] == [NOOP] * 5 + ["day:2024-03-01", "day:2024-03-02"]
        assert rows[-1] == ["nav:prev", "nav:today", "nav:next"]

    def test_label(self, store):
        markup = build_month_keyboard(store)
        assert markup.inline_keyboard[0][0].text == "March 2024"

    def test_selected_day_marked(self, store):
        store.select_date(date(2024, 3, 5))
        labels = [b.text for row in build_month_keyboard(store).inline_keyboard for b in row]
        assert "[5]" in labels

    def test_event_rows(self, store):
        store.select_date(date(2024, 3, 5))
        event = store.add_event(date(2024, 3, 5), "Lunch", time(12, 0))
        store.select_event_for_edit(event)

        markup = build_month_keyboard(store)

        button = markup.inline_keyboard[-1][0]
        assert button.callback_data == f"event:{event.id}"
        assert button.text == "Editing: 12:00 PM Lunch"

    def test_caps_event_rows(self, store):
        store.select_date(date(2024, 3, 5))
        for _ in range(MAX_LISTED_EVENTS + 5):
            store.add_event(date(2024, 3, 5), "Lunch", time(12, 0))

        rows = _callback_rows(build_month_keyboard(store))

        assert sum(1 for row in rows if row[0].startswith("event:")) == MAX_LISTED_EVENTS


class TestScreenMarkdown:
    def test_no_selection(self, store):
        assert "Select a date to view events" in screen_markdown(store)

    def test_no_events(self, store):
        store.activate()
        text = screen_markdown(store)
        assert "Friday, March 15" in text
        assert "No events for this date" in text

    def test_lists_events(self, store):
        store.activate()
        store.add_event(date(2024, 3, 15), "Lunch", time(12, 0))
        assert "12:00 PM` Lunch" in screen_markdown(store)


    def test_caps_listed_events(self, store):
        store.activate()
        for _ in range(MAX_LISTED_EVENTS + 5):
            store.add_event(date(2024, 3, 15), "x" * 500, time(12, 0))

        text = screen_markdown(store)

        assert text.count("- `") == MAX_LISTED_EVENTS
        assert "...and 5 more" in text
        assert len(text) < 4096

    def test_shorten(self):
        assert shorten("Lunch") == "Lunch"
        assert shorten("a" * 150) == "a" * 97 + "..."


class TestSendMarkdown:
    def test_replies_with_markdown_v2(self):
        message = MagicMock()
        message.reply_text = AsyncMock()

        asyncio.run(send_markdown(message, "*March 2024*", reply_markup="kb"))

        args, kwargs = message.reply_text.call_args
        assert kwargs["parse_mode"] == "MarkdownV2"
        assert kwargs["reply_markup"] == "kb"
        assert "March 2024" in args[0]


class TestCallbackHandler:
    def test_select_day(self, store, context, callback_update):
        update = callback_update("day:2024-03-07")
        asyncio.run(callback_handler(update, context))
        assert store.selected_date == date(2024, 3, 7)
        update.callback_query.answer.assert_awaited_once()
        update.callback_query.edit_message_text.assert_awaited_once()

    def test_navigate(self, store, context, callback_update):
        store.activate()
        asyncio.run(callback_handler(callback_update("nav:next"), context))
        assert store.displayed_month == Month(2024, 4)
        assert store.selected_date is None

    def test_select_event(self, store, context, callback_update):
        event = store.add_event(date(2024, 3, 15), "Lunch", time(12, 0))
        asyncio.run(callback_handler(callback_update(f"event:{event.id}"), context))
        assert store.selected_event is event

    def test_malformed_day_is_ignored(self, store, context, callback_update):
        update = callback_update("day:not-a-date")
        asyncio.run(callback_handler(update, context))
        assert store.selected_date is None
        update.callback_query.edit_message_text.assert_not_awaited()

    def test_navigate_past_last_year_is_ignored(self, context, callback_update):
        store = CalendarStore(FixedClock(datetime(9999, 12, 10)))
        context.chat_data = {"store": store}
        update = callback_update("nav:next")

        asyncio.run(callback_handler(update, context))

        assert store.displayed_month == Month(9999, 12)
        update.callback_query.edit_message_text.assert_not_awaited()

    def test_noop_does_not_edit(self, context, callback_update):
        update = callback_update(NOOP)
        asyncio.run(callback_handler(update, context))
        update.callback_query.edit_message_text.assert_not_awaited()

    def test_creates_store_per_chat(self, callback_update):
        ctx = MagicMock()
        ctx.bot_data = {"config": Config()}
        ctx.chat_data = {}
        asyncio.run(callback_handler(callback_update("nav:today"), ctx))
        assert isinstance(ctx.chat_data["store"], CalendarStore)


class TestEditingHandlers:
    def test_add_with_time(self, store, context, message_update):
        store.select_date(date(2024, 3, 5))
        context.args = ["Team", "lunch", "12:00"]

        asyncio.run(add_handler(message_update, context))

        [event] = store.events_on(date(2024, 3, 5))
        assert event.title == "Team lunch"
        assert event.time == time(12, 0)
        message_update.message.reply_text.assert_awaited_once()

    def test_add_without_time(self, store, context, message_update):
        store.select_date(date(2024, 3, 5))
        context.args = ["Gym"]
        asyncio.run(add_handler(message_update, context))
        [event] = store.events_on(date(2024, 3, 5))
        assert event.time == time(9, 30)

    def test_add_without_selection(self, store, context, message_update):
        context.args = ["Gym"]
        asyncio.run(add_handler(message_update, context))
        assert store.events_by_date == {}
        message_update.message.reply_text.assert_awaited_once_with("Select a date to view events")

    def test_rename_selected_event(self, store, context, message_update):
        event = store.add_event(date(2024, 3, 5), "Lunch", time(12, 0))
        store.select_event_for_edit(event)
        message_update.message.text = "  Brunch "

        asyncio.run(title_handler(message_update, context))

        assert event.title == "Brunch"

    def test_rename_after_navigating_away(self, store, context, message_update):
        event = store.add_event(date(2024, 3, 5), "Lunch", time(12, 0))
        store.select_event_for_edit(event)
        store.select_date(date(2024, 3, 20))
        message_update.message.text = "Brunch"

        asyncio.run(title_handler(message_update, context))

        assert event.title == "Brunch"

    def test_rename_without_selection(self, store, context, message_update):
        message_update.message.text = "Brunch"
        asyncio.run(title_handler(message_update, context))
        message_update.message.reply_text.assert_awaited_once_with("Tap an event first to edit it.")

    def test_change_date_and_time(self, store, context, message_update):
        event = store.add_event(date(2024, 3, 5), "Lunch", time(12, 0))
        store.select_event_for_edit(event)

        context.args = ["2024-03-09"]
        asyncio.run(date_handler(message_update, context))
        context.args = ["13:45"]
        asyncio.run(time_handler(message_update, context))

        assert event.date == date(2024, 3, 9)
        assert event.time == time(13, 45)
        assert store.events_on(date(2024, 3, 5)) == [event]

    def test_invalid_time_reports_error(self, store, context, message_update):
        event = store.add_event(date(2024, 3, 5), "Lunch", time(12, 0))
        store.select_event_for_edit(event)
        context.args = ["noon"]

        asyncio.run(time_handler(message_update, context))

        assert event.time == time(12, 0)
        message_update.message.reply_text.assert_awaited_once_with("Invalid time 'noon', expected HH:MM")

    def test_done(self, store, context, message_update):
        event = store.add_event(date(2024, 3, 5), "Lunch", time(12, 0))
        store.select_event_for_edit(event)
        asyncio.run(done_handler(message_update, context))
        assert store.selected_event is None


class TestUnauthorizedHandler:
    def test_replies_to_effective_message(self):
        update = MagicMock()
        update.message = None
        update.effective_message.reply_text = AsyncMock()

        asyncio.run(unauthorized_handler(update, MagicMock()))

        update.effective_message.reply_text.assert_awaited_once()

    def test_no_message(self):
        update = MagicMock()
        update.effective_message = None
        asyncio.run(unauthorized_handler(update, MagicMock()))


class TestAuthFilter:
    def _update(self, user_id):
        update = MagicMock()
        update.effective_user.id = user_id
        return update

    def test_open_without_allowlist(self):
        assert AuthFilter([]).check_update(self._update(1)) is True

    def test_allowlist(self):
        auth = AuthFilter([111])
        assert auth.check_update(self._update(111)) is True
        assert auth.check_update(self._update(222)) is False

    def test_no_user(self):
        update = MagicMock()
        update.effective_user = None
        assert AuthFilter([111]).check_update(update) is False
