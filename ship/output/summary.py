"""Release summary rendering.

One line per catalog entry and per workload, so a best-effort rollout
failure is visible even when the run exits 0.
"""

from __future__ import annotations

from ship.core.errors import ErrorCode
from ship.output.console import ConsoleProtocol, Style
from ship.services.release.model import (
    BuildStatus,
    ImportStatus,
    RolloutReport,
    RolloutStatus,
)
from ship.services.release.report import ReleaseReport

__all__ = ["print_summary"]


def _import_style(status: ImportStatus) -> Style:
    if status == ImportStatus.FAILED:
        return Style.ERROR
    if status == ImportStatus.SKIPPED:
        return Style.DIM
    return Style.SUCCESS


def _rollout_style(status: RolloutStatus) -> Style:
    if status == RolloutStatus.UPDATED_READY:
        return Style.SUCCESS
    return Style.WARNING


def _print_rollout(title: str, report: RolloutReport, console: ConsoleProtocol) -> None:
    console.print(title, Style.HEADER)
    for o in report.outcomes:
        line = f"  {o.workload.resource:<28} {o.status.value}"
        if o.restarted:
            line += " (restarted)"
        if o.error is not None:
            line += f": {o.error}"
        elif o.reason:
            line += f": {o.reason}"
        console.print(line, _rollout_style(o.status))


def print_summary(report: ReleaseReport, console: ConsoleProtocol) -> None:
    console.header("Summary")
    console.print(f"run id: {report.run_id}", Style.DIM)
    console.print(f"namespace: {report.namespace}", Style.DIM)
    console.print(f"intent: {report.intent}", Style.DIM)

    if report.imports:
        console.print("imports", Style.HEADER)
        for o in report.imports:
            line = f"  {o.spec.name}:{o.spec.version_tag:<20} {o.status.value}"
            if o.error is not None:
                line += f": {o.error}"
            console.print(line, _import_style(o.status))
            if o.note:
                console.print(f"    {o.note}", Style.WARNING)
        if report.failed_imports and report.import_errors_tolerated:
            console.print("  import failures tolerated by configuration", Style.DIM)

    if report.builds:
        console.print("builds", Style.HEADER)
        for b in report.builds:
            if b.status == BuildStatus.PUBLISHED:
                console.print(f"  {b.spec.name:<20} {', '.join(b.tags)}", Style.SUCCESS)
            else:
                console.print(f"  {b.spec.name:<20} failed: {b.error}", Style.ERROR)

    if report.first_deploy is not None:
        mode = "first deploy" if report.first_deploy else "update"
        console.print(f"deployment: {mode}", Style.DIM)
    if report.apply is not None:
        applied = ", ".join(report.apply.applied) or "nothing"
        console.print(f"manifests applied: {applied}", Style.DIM)

    if report.seed_rollout is not None:
        _print_rollout("seed rollout", report.seed_rollout, console)
    if report.app_rollout is not None:
        _print_rollout("app rollout", report.app_rollout, console)

    if report.fatal is not None:
        console.error(f"run stopped: {report.fatal}")
    if report.cancelled:
        console.warning("run cancelled; remaining entries were not attempted")

    code = report.exit_code
    if code.is_success:
        warnings = report.rollout_warnings
        if warnings:
            console.warning(f"release finished with {warnings} rollout warning(s)")
        else:
            console.success("release finished")
    elif code != ErrorCode.CANCELLED:
        console.error(f"release failed ({code})")
