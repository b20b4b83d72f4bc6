"""Telegram message formatting utilities."""

import logging

import telegramify_markdown
from telegram.error import BadRequest

from .core.store import CalendarStore
from .views import NO_DATE_SELECTED, NO_EVENTS

logger = logging.getLogger(__name__)

# Keeps a screen well under Telegram's 4096 character message limit
MAX_LISTED_EVENTS = 20
MAX_TITLE_LENGTH = 100


def shorten(title: str, limit: int = MAX_TITLE_LENGTH) -> str:
    return title if len(title) <= limit else title[: limit - 3] + "..."


def screen_markdown(store: CalendarStore) -> str:
    """Markdown body shown above the month keyboard."""
    lines = [f"*{store.month_label()}*", ""]

    events = store.selected_events()
    if events is None:
        lines.append(NO_DATE_SELECTED)
        return "\n".join(lines)

    lines.append(f"_{store.selected_date.strftime('%A, %B %d')}_")
    if not events:
        lines.append(NO_EVENTS)
    for event in events[:MAX_LISTED_EVENTS]:
        marker = " (editing)" if event is store.selected_event else ""
        lines.append(f"- `{event.format_time():>8}` {shorten(event.title)}{marker}")
    if len(events) > MAX_LISTED_EVENTS:
        lines.append(f"...and {len(events) - MAX_LISTED_EVENTS} more")

    if store.selected_event is not None:
        lines.append("")
        lines.append("Send a message to rename the event, /date or /time to move it, /done to finish.")

    return "\n".join(lines)


async def send_markdown(message, text: str, *, reply_markup=None):
    """Reply to a message with markdown text, converting to MarkdownV2."""
    converted = telegramify_markdown.markdownify(text)
    await message.reply_text(converted, parse_mode="MarkdownV2", reply_markup=reply_markup)


async def edit_markdown(query, text: str, *, reply_markup=None):
    """Replace a callback query's message with converted markdown."""
    converted = telegramify_markdown.markdownify(text)
    try:
        await query.edit_message_text(converted, parse_mode="MarkdownV2", reply_markup=reply_markup)
    except BadRequest as e:
        # Re-tapping the selected day renders the same screen
        if "not modified" not in str(e).lower():
            raise
        logger.debug("Screen unchanged, skipping edit")
