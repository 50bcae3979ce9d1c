"""
sc welcome - Greet the configured author.
"""

from datetime import date

from rich.markup import escape

from commander.commands.git import make_console
from commander.lib.config import RepositoryContext, Settings


def welcome_message(name: str, today: date) -> str:
    """Rich markup for the greeting: name in magenta, date in green."""
    return (
        f"Welcome [magenta]{escape(name)}[/magenta]!\n"
        f"Today is [green]{today:%A, %B %d, %Y}[/green]."
    )


def cmd_welcome(args, settings: Settings, context: RepositoryContext) -> int:
    """Greet the configured git author with today's date."""
    make_console(args.no_color).print(welcome_message(settings.git_name, date.today()))
    return 0
