# ABOUTME: Shared Click options, parameter types, and error reporting for Burette commands.
# ABOUTME: Provides the --library option, an ISBN-13 parameter type, and a fail() helper.

from pathlib import Path
from typing import NoReturn

import click
from rich.console import Console
from rich.markup import escape

from burette.core.library import DEFAULT_LIBRARY_PATH, Library
from burette.errors import InvalidIsbnError, LibraryError
from burette.metadata.isbn import Isbn13

library_option = click.option(
    "-l",
    "--library",
    "library_path",
    type=click.Path(file_okay=False, path_type=Path),
    envvar="BURETTE_LIBRARY",
    default=None,
    help=f"Path to the document library (default: {DEFAULT_LIBRARY_PATH}, "
    "or $BURETTE_LIBRARY)",
)


class IsbnParamType(click.ParamType):
    """Click parameter type that parses and validates an ISBN-13."""

    name = "isbn"

    def convert(self, value, param, ctx) -> Isbn13:
        if isinstance(value, Isbn13):
            return value
        try:
            return Isbn13.parse(value)
        except InvalidIsbnError as exc:
            self.fail(f"{value!r}: {exc}", param, ctx)


ISBN = IsbnParamType()


def fail(console: Console, exc: LibraryError) -> NoReturn:
    """Print a library error and exit with status 1."""
    console.print(f"[red]Error:[/red] {escape(str(exc))}")
    raise SystemExit(1) from exc


def open_library_or_fail(console: Console, library_path: Path | None) -> Library:
    """Open the selected library, exiting with an error message on failure."""
    try:
        return Library.open(library_path or DEFAULT_LIBRARY_PATH)
    except LibraryError as exc:
        fail(console, exc)
