"""Configuration management for monthview."""

import calendar
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from .core.calendar import parse_weekday

logger = logging.getLogger(__name__)

MONTHVIEW_HOME = Path(os.environ.get("MONTHVIEW_HOME", Path.home() / "monthview"))
CONFIG_FILE = MONTHVIEW_HOME / "config" / "monthview.conf"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class Config:
    """monthview configuration."""

    first_weekday: int = calendar.SUNDAY
    regroup_on_date_change: bool = False
    # Telegram bot settings
    telegram_bot_token: str = ""
    telegram_allowed_users: list[int] = field(default_factory=list)


def _unquote(value: str) -> str:
    """Strip quotes, or an inline comment from an unquoted value."""
    for quote in ('"', "'"):
        if value.startswith(quote):
            end_quote = value.find(quote, 1)
            return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def _parse_bool(value: str) -> bool:
    lowered = value.lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off", ""):
        return False
    raise ValueError(f"Invalid boolean '{value}'")


def load_config(path: Path | None = None) -> Config:
    """Load configuration from monthview.conf."""
    config = Config()
    path = path or CONFIG_FILE

    if not path.exists():
        return config

    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _unquote(value.strip())

        match key:
            case "first_weekday":
                try:
                    config.first_weekday = parse_weekday(value)
                except ValueError as e:
                    logger.warning(f"Ignoring FIRST_WEEKDAY: {e}")
            case "regroup_on_date_change":
                try:
                    config.regroup_on_date_change = _parse_bool(value)
                except ValueError as e:
                    logger.warning(f"Ignoring REGROUP_ON_DATE_CHANGE: {e}")
            case "telegram_bot_token":
                config.telegram_bot_token = value
            case "telegram_allowed_users":
                try:
                    config.telegram_allowed_users = [int(u.strip()) for u in value.split(",") if u.strip()]
                except ValueError as e:
                    logger.warning(f"Ignoring TELEGRAM_ALLOWED_USERS: {e}")
            case _:
                logger.debug(f"Unknown config key: {key}")

    return config
