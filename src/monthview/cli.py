"""monthview CLI - single-screen calendar."""

import json
import logging
import sys

import click

from .adapters.system_clock import SystemClock
from .config import LOG_FORMAT, load_config
from .core.calendar import Month, generate_month_dates, format_month_label
from .core.store import CalendarStore
from .shell import QuitSession, ShellSession
from .views import render_grid


def _parse_month(ctx, param, value: str | None) -> Month | None:
    if value is None:
        return None
    try:
        return Month.parse(value)
    except ValueError as e:
        raise click.BadParameter(str(e)) from None


def _new_store(config, month: Month | None = None) -> CalendarStore:
    store = CalendarStore(SystemClock(), regroup_on_date_change=config.regroup_on_date_change)
    store.activate()
    if month is not None:
        store.displayed_month = month
    return store


@click.group()
@click.version_option()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool):
    """monthview - a month calendar with simple events."""
    if debug:
        logging.basicConfig(format=LOG_FORMAT, level=logging.DEBUG)


@main.command()
@click.option("--month", "-m", callback=_parse_month, help="Month to show (YYYY-MM), defaults to this month")
def show(month: Month | None):
    """Print a month grid."""
    config = load_config()
    store = _new_store(config, month)
    click.echo(render_grid(store, config.first_weekday))


@main.command()
@click.option("--month", "-m", callback=_parse_month, help="Month to list (YYYY-MM), defaults to this month")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def days(month: Month | None, as_json: bool):
    """List every date in a month."""
    month = month or Month.of(SystemClock().today())
    dates = generate_month_dates(month)

    if as_json:
        click.echo(
            json.dumps(
                {
                    "label": format_month_label(month),
                    "dates": [d.isoformat() for d in dates],
                },
                indent=2,
            )
        )
    else:
        click.echo(format_month_label(month))
        for d in dates:
            click.echo(f"  {d.isoformat()} {d.strftime('%a')}")


@main.command()
@click.option("--month", "-m", callback=_parse_month, help="Month to start on (YYYY-MM)")
def shell(month: Month | None):
    """Interactive calendar session."""
    config = load_config()
    session = ShellSession(_new_store(config, month), config.first_weekday)

    click.echo(session.screen())
    click.echo("\nType 'help' for commands.")

    while True:
        try:
            line = click.prompt("monthview", default="", show_default=False, prompt_suffix="> ")
        except (EOFError, click.Abort):
            click.echo()
            break

        try:
            output = session.execute(line)
        except QuitSession:
            break
        except ValueError as e:
            click.echo(f"Error: {e}", err=True)
            continue

        if output:
            click.echo(output)


@main.command()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def bot(debug: bool):
    """Run the Telegram bot."""
    if debug:
        logging.basicConfig(format=LOG_FORMAT, level=logging.DEBUG)

    try:
        from .telegram_bot import run_bot
        click.echo("Starting monthview Telegram bot...")
        click.echo("Press Ctrl+C to stop")
        run_bot()
    except ImportError as e:
        click.echo("Error: Missing dependencies. Run 'pip install python-telegram-bot telegramify-markdown'", err=True)
        click.echo(f"Details: {e}", err=True)
        sys.exit(1)
    except ValueError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)
    except KeyboardInterrupt:
        click.echo("\nBot stopped.")
