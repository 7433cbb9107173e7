from __future__ import annotations

import typer

from ship.core.errors import ErrorCode
from ship.output.console import ConsoleProtocol, RichConsole, Style
from ship.services.release.catalog import (
    FIRST_PARTY_BUILDS,
    SEED_IMPORTS,
    catalog_problems,
    workload_for,
)


def _workload_label(name: str) -> str:
    ref = workload_for(name)
    if ref is None:
        return "(no workload)"
    suffix = " +restart" if ref.needs_restart else ""
    return f"{ref.resource}[{ref.container}]{suffix}"


def print_catalog(console: ConsoleProtocol) -> bool:
    """Print the catalogs; False when they are inconsistent."""
    console.header("Seed images")
    for spec in SEED_IMPORTS:
        source = f"{spec.name}:{spec.version_tag}  <- {spec.upstream_source}"
        console.print(f"{source}  -> {_workload_label(spec.name)}")

    console.header("First-party images")
    for build in FIRST_PARTY_BUILDS:
        console.print(f"{build.name}  <- {build.build_context}  -> {_workload_label(build.name)}")

    problems = catalog_problems()
    for problem in problems:
        console.print(problem, Style.ERROR)
    return not problems


def catalog() -> None:
    """List the seed, build and workload catalogs."""
    if not print_catalog(RichConsole()):
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))
