from __future__ import annotations

import typer

from ship.core.intent import APP_TAG, SEED_TAG, parse_intent


def intent(message: str = typer.Argument(..., help="Trigger message to inspect.")) -> None:
    """Show which release activities a trigger message selects."""
    parsed = parse_intent(message)
    typer.echo(f"seed ({SEED_TAG}): {'yes' if parsed.seed_third_party else 'no'}")
    typer.echo(f"app  ({APP_TAG}): {'yes' if parsed.build_first_party else 'no'}")
