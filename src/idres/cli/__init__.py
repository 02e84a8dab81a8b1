"""CLI entry points for idres.

Provides command-line tools for:
- Name and institution matching
- Confidence adjustment
- Entity resolution over JSON record files
- Integrity screening against author lists
"""

import click

from .. import __version__
from ..logging import setup_logging
from .matching import adjust, institutions, match
from .resolve import resolve as resolve_command, screen


@click.group()
@click.version_option(version=__version__, prog_name="idres")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Override the configured log level",
)
def main(log_level: str | None):
    """idres - identity resolution and confidence scoring.

    Matches noisy person and institution strings, clusters candidate
    records into entities and screens names against author lists.
    """
    setup_logging(level=log_level)


main.add_command(match, name="match")
main.add_command(institutions, name="institutions")
main.add_command(adjust, name="adjust")
main.add_command(resolve_command, name="resolve")
main.add_command(screen, name="screen")


if __name__ == "__main__":
    main()
