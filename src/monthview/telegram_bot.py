"""monthview Telegram Bot."""

import logging

from telegram import Update
from telegram.ext import (
    Application,
    CallbackQueryHandler,
    CommandHandler,
    MessageHandler,
    filters,
)

from .config import LOG_FORMAT, Config, load_config
from .telegram_handlers import (
    add_handler,
    calendar_handler,
    callback_handler,
    date_handler,
    done_handler,
    help_handler,
    start_handler,
    time_handler,
    title_handler,
)

logger = logging.getLogger(__name__)


class AuthFilter(filters.BaseFilter):
    """Filter to only allow authorized users."""

    def __init__(self, allowed_users: list[int]):
        super().__init__()
        self.allowed_users = allowed_users

    def check_update(self, update: Update) -> bool:
        if not self.allowed_users:
            return True  # No restriction if no users configured
        user = update.effective_user
        if user is None:
            return False
        return user.id in self.allowed_users


async def unauthorized_handler(update: Update, context):
    """Reject users outside the allowlist."""
    user = update.effective_user
    logger.warning(f"Unauthorized access attempt from user {user.id} ({user.username})")
    message = update.effective_message
    if message is None:
        return
    await message.reply_text(
        "Unauthorized. This bot is private.\n"
        "If you're the owner, add your Telegram user ID to TELEGRAM_ALLOWED_USERS in monthview.conf"
    )


def create_application(config: Config | None = None) -> Application:
    """Create and configure the Telegram bot application."""
    if config is None:
        config = load_config()

    if not config.telegram_bot_token:
        raise ValueError(
            "TELEGRAM_BOT_TOKEN not configured. "
            "Get a token from @BotFather on Telegram and add it to monthview.conf"
        )

    app = Application.builder().token(config.telegram_bot_token).build()
    app.bot_data["config"] = config

    auth_filter = AuthFilter(config.telegram_allowed_users)

    app.add_handler(CommandHandler("start", start_handler, filters=auth_filter))
    app.add_handler(CommandHandler("help", help_handler, filters=auth_filter))
    app.add_handler(CommandHandler("calendar", calendar_handler, filters=auth_filter))
    app.add_handler(CommandHandler("add", add_handler, filters=auth_filter))
    app.add_handler(CommandHandler("date", date_handler, filters=auth_filter))
    app.add_handler(CommandHandler("time", time_handler, filters=auth_filter))
    app.add_handler(CommandHandler("done", done_handler, filters=auth_filter))

    # Grid taps; callback queries carry the user, so the allowlist is checked here too
    async def guarded_callback(update: Update, context):
        if auth_filter.check_update(update):
            await callback_handler(update, context)
        else:
            await update.callback_query.answer("Unauthorized", show_alert=True)

    app.add_handler(CallbackQueryHandler(guarded_callback))

    # Plain text renames the event being edited
    app.add_handler(MessageHandler(auth_filter & filters.TEXT & ~filters.COMMAND, title_handler))

    if config.telegram_allowed_users:
        app.add_handler(MessageHandler(~auth_filter & filters.ALL, unauthorized_handler))

    return app


def run_bot():
    """Run the Telegram bot."""
    logging.basicConfig(format=LOG_FORMAT, level=logging.INFO)

    config = load_config()
    app = create_application(config)

    if config.telegram_allowed_users:
        logger.info(f"Bot authorized for users: {config.telegram_allowed_users}")
    else:
        logger.warning("No TELEGRAM_ALLOWED_USERS configured - bot is open to anyone!")

    logger.info("Starting monthview Telegram bot...")

    app.run_polling(allowed_updates=Update.ALL_TYPES)
