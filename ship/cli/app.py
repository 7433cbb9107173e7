from __future__ import annotations

import typer

from ship import __version__
from ship.cli.commands.catalog_cmd import catalog
from ship.cli.commands.intent_cmd import intent
from ship.cli.commands.release_cmd import release


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


app.command()(release)
app.command()(intent)
app.command()(catalog)


def _show_version(value: bool) -> None:
    # Eager, so it runs before Click asks for a subcommand.
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit.",
        callback=_show_version,
        is_eager=True,
    ),
) -> None:
    """Conditional image seeding, build and rollout for the pets store."""
    del version


def main() -> None:
    app()
