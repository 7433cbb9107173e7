from __future__ import annotations

import os
import signal
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from types import FrameType
from typing import NoReturn

import typer

from ship.cli.context import CLIContext, build_context
from ship.core.cancel import CancelToken
from ship.core.errors import ErrorCode
from ship.core.result import Err
from ship.core.run_context import RunContext, resolve_run_id
from ship.output.console import Style
from ship.output.summary import print_summary
from ship.platform.process import run as run_process
from ship.services.release.acr import AcrBuilder, AcrRegistry
from ship.services.release.dry_run import DryRunBuilder, DryRunCluster, DryRunRegistry
from ship.services.release.kubectl import KubectlCluster
from ship.services.release.orchestrator import Collaborators, ReleaseSettings, run_release
from ship.services.release.preflight import ensure_tools_available

TRIGGER_ENV = "SHIP_TRIGGER_MESSAGE"


def _exit(err: str, *, code: ErrorCode) -> NoReturn:
    typer.echo(f"error: {err}", err=True)
    raise typer.Exit(code=int(code))


def resolve_trigger(message: str | None, *, source_root: Path) -> str:
    """Trigger text: --message, then $SHIP_TRIGGER_MESSAGE, then the last commit message."""
    if message is not None:
        return message
    env = os.environ.get(TRIGGER_ENV)
    if env:
        return env

    result = run_process(["git", "log", "-1", "--pretty=%B"], cwd=source_root, timeout=30.0)
    if isinstance(result, Err):
        _exit(
            f"no --message given and git log failed: {result.error.detail or result.error}",
            code=ErrorCode.USER_ERROR,
        )
    return result.value


def _collaborators(ctx: CLIContext, *, dry_run: bool) -> Collaborators:
    registry_name = ctx.config.registry.name
    kubectl = KubectlCluster(
        workdir=ctx.cwd,
        console=ctx.console,
        context=ctx.config.cluster.kubectl_context,
    )
    if dry_run:
        registry = DryRunRegistry(registry=registry_name, console=ctx.console)
        return Collaborators(
            registry=registry,
            builder=DryRunBuilder(registry=registry),
            cluster=DryRunCluster(kubectl=kubectl, console=ctx.console),
        )

    return Collaborators(
        registry=AcrRegistry(registry=registry_name, workdir=ctx.cwd, console=ctx.console),
        builder=AcrBuilder(
            registry=registry_name, source_root=ctx.source_root, console=ctx.console
        ),
        cluster=kubectl,
    )


@contextmanager
def cancel_on_signals(token: CancelToken) -> Iterator[None]:
    """Turn SIGINT/SIGTERM into a cancellation request for the duration of a run."""

    def handler(signum: int, frame: FrameType | None) -> None:
        del frame
        token.cancel(f"received {signal.Signals(signum).name}")

    previous = {sig: signal.signal(sig, handler) for sig in (signal.SIGINT, signal.SIGTERM)}
    try:
        yield
    finally:
        for sig, old in previous.items():
            signal.signal(sig, old)


def release(
    message: str | None = typer.Option(
        None, "--message", "-m", help="Trigger message (default: last commit message)."
    ),
    run_id: str | None = typer.Option(
        None,
        "--run-id",
        help="Immutable image tag for this run (default: $SHIP_RUN_ID, $BUILD_BUILDID).",
    ),
    config: Path | None = typer.Option(None, "--config", help="Path to ship.toml."),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print commands, change nothing."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colored output."),
) -> None:
    """Seed, build and roll out according to the trigger message."""
    ctx = build_context(config, no_color=no_color)
    console = ctx.console

    rid = resolve_run_id(run_id)
    if isinstance(rid, Err):
        _exit(rid.error.message, code=ErrorCode.USER_ERROR)

    settings = ReleaseSettings.from_config(ctx.config)
    if isinstance(settings, Err):
        _exit(str(settings.error), code=ErrorCode.USER_ERROR)

    if not dry_run:
        tools = ensure_tools_available()
        if isinstance(tools, Err):
            console.error(tools.error.message)
            if tools.error.hint:
                console.print(f"hint: {tools.error.hint}", Style.DIM)
            raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    trigger = resolve_trigger(message, source_root=ctx.source_root)
    context = RunContext(
        run_id=rid.value,
        namespace=ctx.config.cluster.namespace,
        login_server=ctx.config.registry.login_server,
    )
    console.print(f"run id: {context.run_id}", Style.DIM)
    console.print(f"registry: {context.login_server}", Style.DIM)
    if dry_run:
        console.warning("dry-run: no registry or cluster changes will be made")

    token = CancelToken()
    with cancel_on_signals(token):
        report = run_release(
            message=trigger,
            context=context,
            settings=settings.value,
            collaborators=_collaborators(ctx, dry_run=dry_run),
            console=console,
            cancel=token,
        )

    print_summary(report, console)
    code = report.exit_code
    if not code.is_success:
        raise typer.Exit(code=int(code))
