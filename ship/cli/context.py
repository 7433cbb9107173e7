from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from ship.core.config import DEFAULT_CONFIG_FILE, ShipConfig, load_config_or_default
from ship.core.errors import ErrorCode
from ship.core.result import Err
from ship.output.console import ConsoleProtocol, RichConsole


@dataclass(frozen=True, slots=True)
class CLIContext:
    cwd: Path
    config: ShipConfig
    console: ConsoleProtocol

    @property
    def source_root(self) -> Path:
        return (self.cwd / self.config.build.source_root).resolve()


def build_context(config_path: Path | None = None, *, no_color: bool = False) -> CLIContext:
    cwd = Path.cwd().resolve()
    path = config_path if config_path is not None else cwd / DEFAULT_CONFIG_FILE

    # An explicit --config must exist; the default file is optional.
    if config_path is not None and not config_path.exists():
        typer.echo(f"error: config file not found: {config_path}", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    config_result = load_config_or_default(path)
    if isinstance(config_result, Err):
        typer.echo(f"error: {config_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    return CLIContext(cwd=cwd, config=config_result.value, console=RichConsole(no_color=no_color))
