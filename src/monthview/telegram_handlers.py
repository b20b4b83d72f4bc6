"""Telegram command handlers."""

import logging

from telegram import Update
from telegram.ext import ContextTypes

from .adapters.system_clock import SystemClock
from .config import Config
from .core.calendar import Direction, parse_date, parse_time
from .core.store import CalendarStore
from .telegram_format import edit_markdown, screen_markdown, send_markdown
from .telegram_keyboards import build_month_keyboard, parse_callback
from .views import NO_DATE_SELECTED

logger = logging.getLogger(__name__)


def get_config(context: ContextTypes.DEFAULT_TYPE) -> Config:
    return context.bot_data.get("config") or Config()


def get_store(context: ContextTypes.DEFAULT_TYPE) -> CalendarStore:
    """The calendar owned by the current chat, created on first use."""
    store = context.chat_data.get("store")
    if store is None:
        config = get_config(context)
        store = CalendarStore(SystemClock(), regroup_on_date_change=config.regroup_on_date_change)
        store.activate()
        context.chat_data["store"] = store
    return store


async def _send_screen(update: Update, context: ContextTypes.DEFAULT_TYPE):
    store = get_store(context)
    keyboard = build_month_keyboard(store, get_config(context).first_weekday)
    await send_markdown(update.message, screen_markdown(store), reply_markup=keyboard)


# ============== Simple Commands ==============


async def start_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /start command."""
    await update.message.reply_text(
        "Hi! Tap a day to see its events.\n\n"
        "Commands:\n"
        "/calendar - Show the month\n"
        "/add - Add an event to the selected day\n"
        "/help - Show all commands"
    )
    await _send_screen(update, context)


async def help_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /help command."""
    await update.message.reply_text(
        "*Calendar Commands*\n\n"
        "/calendar - Show the month grid\n"
        "/add TITLE [HH:MM] - Add an event to the selected day\n"
        "/date YYYY-MM-DD - Change the date of the event being edited\n"
        "/time HH:MM - Change the time of the event being edited\n"
        "/done - Stop editing\n\n"
        "Tap an event to edit it, then send a message to rename it.",
        parse_mode="Markdown",
    )


async def calendar_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /calendar command - show the month grid."""
    await _send_screen(update, context)


# ============== Grid Taps ==============


async def callback_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle inline keyboard taps: days, navigation and event rows."""
    query = update.callback_query
    await query.answer()

    store = get_store(context)
    kind, value = parse_callback(query.data)

    try:
        match kind:
            case "day":
                store.select_date(parse_date(value))
            case "nav":
                if value == "prev":
                    store.navigate_month(Direction.PREVIOUS)
                elif value == "next":
                    store.navigate_month(Direction.NEXT)
                elif value == "today":
                    store.go_to_today()
            case "event":
                found = store.find_event(int(value)) if value.isdigit() else None
                store.select_event_for_edit(found[1] if found else None)
            case "noop":
                return
            case _:
                logger.warning(f"Unknown callback data: {query.data}")
                return
    except ValueError as e:
        logger.warning(f"Ignoring callback {query.data}: {e}")
        return

    keyboard = build_month_keyboard(store, get_config(context).first_weekday)
    await edit_markdown(query, screen_markdown(store), reply_markup=keyboard)


# ============== Editing ==============


async def add_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /add TITLE [HH:MM] - add an event to the selected day."""
    store = get_store(context)
    if store.selected_date is None:
        await update.message.reply_text(NO_DATE_SELECTED)
        return

    args, at = _split_trailing_time(list(context.args or []))
    if at is not None:
        store.draft.time = at
    store.draft.title = " ".join(args)
    store.draft.date = store.selected_date
    event = store.submit_draft()
    logger.info(f"Chat {update.effective_chat.id} added event {event.id}")
    await _send_screen(update, context)


def _split_trailing_time(args: list[str]):
    """Separate an optional HH:MM from the end of the arguments."""
    if not args:
        return args, None
    try:
        return args[:-1], parse_time(args[-1])
    except ValueError:
        return args, None


async def _edit_selected(update: Update, context: ContextTypes.DEFAULT_TYPE, apply):
    """Run apply(store, day, event) against the event being edited."""
    store = get_store(context)
    selected = store.selected_event
    found = store.find_event(selected.id) if selected is not None else None
    if found is None:
        await update.message.reply_text("Tap an event first to edit it.")
        return

    day, event = found
    try:
        apply(store, day, event)
    except ValueError as e:
        await update.message.reply_text(str(e))
        return
    await _send_screen(update, context)


async def date_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /date YYYY-MM-DD."""
    value = " ".join(context.args or [])
    await _edit_selected(
        update, context, lambda store, day, event: store.set_event_date(day, event, parse_date(value))
    )


async def time_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /time HH:MM."""
    value = " ".join(context.args or [])
    await _edit_selected(
        update, context, lambda store, day, event: store.set_event_time(day, event, parse_time(value))
    )


async def title_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle plain text - rename the event being edited."""
    text = update.message.text.strip()
    if not text:
        return
    await _edit_selected(update, context, lambda store, day, event: store.set_event_title(day, event, text))


async def done_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /done - stop editing."""
    get_store(context).select_event_for_edit(None)
    await _send_screen(update, context)
