# ABOUTME: CLI package for Burette, built on Click.
# ABOUTME: Defines the root command group, logging setup, and registers subcommands.

import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from burette.cli.commands import (
    add_cmd,
    edit_cmd,
    get_cmd,
    info_cmd,
    list_cmd,
    new_cmd,
    remove_cmd,
    validate_cmd,
)

_LOG_LEVELS = [logging.WARNING, logging.INFO, logging.DEBUG]


def _configure_logging(verbosity: int) -> None:
    """Send burette's log records to stderr through Rich."""
    logger = logging.getLogger("burette")
    logger.setLevel(_LOG_LEVELS[min(verbosity, len(_LOG_LEVELS) - 1)])
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(console=Console(stderr=True), show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)


@click.group()
@click.version_option(package_name="burette")
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="Show progress messages (-v) or debug output (-vv).",
)
def cli(verbose: int) -> None:
    """Burette - a personal document library for PDFs and EPUBs."""
    _configure_logging(verbose)


cli.add_command(new_cmd.new)
cli.add_command(add_cmd.add)
cli.add_command(list_cmd.list_documents)
cli.add_command(info_cmd.info)
cli.add_command(get_cmd.get)
cli.add_command(edit_cmd.edit)
cli.add_command(remove_cmd.remove)
cli.add_command(validate_cmd.validate)
