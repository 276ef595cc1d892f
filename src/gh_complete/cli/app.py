"""Typer application entrypoint."""

import logging
from typing import Optional

import typer

from gh_complete.cli.commands.complete import COMMANDS, make_command
from gh_complete.version import __version__

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Preview GitHub issue, pull request and mention completion items.",
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"gh-complete {__version__}")
        raise typer.Exit()


@app.callback()
def _global_options(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug logging."
    ),
    version: Optional[bool] = typer.Option(  # noqa: ARG001
        None,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Global options for gh-complete."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s: %(message)s", force=True)


for _name in COMMANDS:
    app.command(_name)(make_command(_name))


def main() -> None:
    """Run the CLI app."""
    app()


if __name__ == "__main__":
    main()
