"""Conditional release state machine.

    trigger message
        -> intent
        -> [seed] import catalog -> roll seed workloads to the floating tag
        -> [app]  build catalog -> presence check -> (first deploy: apply
                  manifests once) -> roll app workloads to the run id

Both branches may run in one invocation, seed first. Each branch only rolls
out images that were actually published.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from ship.core.cancel import CancelToken
from ship.core.config import QueryFailurePolicy, ShipConfig
from ship.core.intent import parse_intent
from ship.core.result import Err, Ok, Result
from ship.core.run_context import FLOATING_TAG, RunContext
from ship.output.console import ConsoleProtocol, Style
from ship.services.release.builder import build_catalog
from ship.services.release.catalog import (
    FIRST_PARTY_BUILDS,
    SEED_IMPORTS,
    workload_for,
    workload_named,
)
from ship.services.release.collaborators import ClusterClient, ImageBuilder, RegistryClient
from ship.services.release.errors import ReleaseError
from ship.services.release.importer import import_catalog
from ship.services.release.manifests import apply_all, is_first_deploy
from ship.services.release.model import (
    BuildSpec,
    ImportSpec,
    RolloutReport,
    RolloutStatus,
    WorkloadOutcome,
    WorkloadRef,
)
from ship.services.release.report import ReleaseReport
from ship.services.release.rollout import RolloutUpdate, rollout


@dataclass(frozen=True, slots=True)
class Collaborators:
    registry: RegistryClient
    builder: ImageBuilder
    cluster: ClusterClient


@dataclass(frozen=True, slots=True)
class ReleaseSettings:
    on_query_failure: QueryFailurePolicy
    tolerate_import_errors: bool
    manifests: tuple[str, ...]
    reference_workload: WorkloadRef
    rollout_timeout_seconds: int
    seed_catalog: tuple[ImportSpec, ...] = SEED_IMPORTS
    build_catalog: tuple[BuildSpec, ...] = FIRST_PARTY_BUILDS

    @classmethod
    def from_config(cls, config: ShipConfig) -> Result[ReleaseSettings, ReleaseError]:
        ref = workload_named(config.cluster.reference_workload)
        if ref is None:
            return Err(
                ReleaseError(
                    kind="invalid_config",
                    message=f"unknown reference workload: {config.cluster.reference_workload}",
                    hint="cluster.reference_workload must name a catalog workload",
                )
            )
        source_root = Path(config.build.source_root)
        manifests = tuple(
            m if Path(m).is_absolute() else str(source_root / m) for m in config.cluster.manifests
        )
        return Ok(
            cls(
                on_query_failure=config.registry.on_query_failure,
                tolerate_import_errors=config.registry.tolerate_import_errors,
                manifests=manifests,
                reference_workload=ref,
                rollout_timeout_seconds=config.cluster.rollout_timeout_seconds,
            )
        )


def _rollout_published(
    names: Sequence[tuple[str, bool]],
    *,
    tag: str,
    context: RunContext,
    settings: ReleaseSettings,
    collaborators: Collaborators,
    console: ConsoleProtocol,
    cancel: CancelToken,
) -> RolloutReport:
    """Roll out the published images; record the rest as not attempted."""
    updates: list[RolloutUpdate] = []
    blocked: dict[str, WorkloadOutcome] = {}
    for name, published in names:
        ref = workload_for(name)
        if ref is None:
            console.warning(f"{name}: no workload in catalog, not rolled out")
            continue
        image = context.image_ref(name, tag)
        if published:
            updates.append(RolloutUpdate(ref, image))
        else:
            blocked[ref.resource] = WorkloadOutcome(
                ref, image, RolloutStatus.NOT_ATTEMPTED, reason="image not published"
            )

    report = rollout(
        updates,
        cluster=collaborators.cluster,
        namespace=context.namespace,
        timeout_seconds=settings.rollout_timeout_seconds,
        console=console,
        cancel=cancel,
    )
    rolled = {o.workload.resource: o for o in report.outcomes}
    ordered: list[WorkloadOutcome] = []
    for name, _ in names:
        ref = workload_for(name)
        if ref is None:
            continue
        ordered.append(rolled.get(ref.resource) or blocked[ref.resource])
    return RolloutReport(outcomes=tuple(ordered))


def _seed(
    report: ReleaseReport,
    *,
    context: RunContext,
    settings: ReleaseSettings,
    collaborators: Collaborators,
    console: ConsoleProtocol,
    cancel: CancelToken,
) -> ReleaseReport:
    console.header("Seed third-party images")
    imports = import_catalog(
        settings.seed_catalog,
        registry=collaborators.registry,
        on_query_failure=settings.on_query_failure,
        console=console,
        cancel=cancel,
    )
    report = dataclasses.replace(report, imports=imports)
    if cancel.requested:
        return dataclasses.replace(report, cancelled=True)

    console.header("Roll out seeded workloads")
    seed_rollout = _rollout_published(
        [(o.spec.name, o.published) for o in imports],
        tag=FLOATING_TAG,
        context=context,
        settings=settings,
        collaborators=collaborators,
        console=console,
        cancel=cancel,
    )
    return dataclasses.replace(report, seed_rollout=seed_rollout, cancelled=cancel.requested)


def _app(
    report: ReleaseReport,
    *,
    context: RunContext,
    settings: ReleaseSettings,
    collaborators: Collaborators,
    console: ConsoleProtocol,
    cancel: CancelToken,
) -> ReleaseReport:
    console.header(f"Build first-party images ({context.run_id})")
    builds = build_catalog(
        settings.build_catalog,
        context.run_id,
        builder=collaborators.builder,
        registry=collaborators.registry,
        console=console,
        cancel=cancel,
    )
    report = dataclasses.replace(report, builds=builds)
    if cancel.requested:
        return dataclasses.replace(report, cancelled=True)

    ref = settings.reference_workload
    first = is_first_deploy(ref, context.namespace, cluster=collaborators.cluster)
    if isinstance(first, Err):
        console.error(str(first.error))
        return dataclasses.replace(report, fatal=first.error)
    report = dataclasses.replace(report, first_deploy=first.value)

    if first.value:
        console.header(f"First deploy: {ref.resource} absent from {context.namespace}")
        applied = apply_all(
            settings.manifests,
            context.namespace,
            cluster=collaborators.cluster,
            console=console,
        )
        report = dataclasses.replace(report, apply=applied)
        if applied.error is not None:
            console.error(str(applied.error))
            return dataclasses.replace(report, fatal=applied.error)
    else:
        console.print(f"{ref.resource} present in {context.namespace}: update only", Style.DIM)

    console.header("Roll out first-party workloads")
    app_rollout = _rollout_published(
        [(o.spec.name, o.published) for o in builds],
        tag=context.run_id,
        context=context,
        settings=settings,
        collaborators=collaborators,
        console=console,
        cancel=cancel,
    )
    return dataclasses.replace(report, app_rollout=app_rollout, cancelled=cancel.requested)


def run_release(
    *,
    message: str,
    context: RunContext,
    settings: ReleaseSettings,
    collaborators: Collaborators,
    console: ConsoleProtocol,
    cancel: CancelToken | None = None,
) -> ReleaseReport:
    token = cancel if cancel is not None else CancelToken()
    intent = parse_intent(message)
    report = ReleaseReport(
        intent=intent,
        run_id=context.run_id,
        namespace=context.namespace,
        import_errors_tolerated=settings.tolerate_import_errors,
    )

    console.print(f"intent: {intent}", Style.DIM)
    if intent.is_empty:
        console.info("no release tags in trigger message; nothing to do")
        return report

    if intent.seed_third_party:
        report = _seed(
            report,
            context=context,
            settings=settings,
            collaborators=collaborators,
            console=console,
            cancel=token,
        )
        if report.cancelled:
            return report

    if intent.build_first_party:
        if token.requested:
            return dataclasses.replace(report, cancelled=True)
        report = _app(
            report,
            context=context,
            settings=settings,
            collaborators=collaborators,
            console=console,
            cancel=token,
        )

    return report
