"""Roll workloads onto new image references.

Every step is best-effort: a failed set-image, restart or readiness wait is
recorded for that workload and the batch moves on. Nothing here fails the
run.

The batch runs in two passes. First every workload gets its new image (and
a restart where its kind needs one), then each updated workload is waited
on in turn. A slow wait delays the ones after it but does not fail them.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from ship.core.cancel import CancelToken
from ship.core.result import Err
from ship.output.console import ConsoleProtocol
from ship.services.release.collaborators import ClusterClient
from ship.services.release.errors import ReleaseError
from ship.services.release.model import (
    RolloutReport,
    RolloutStatus,
    WorkloadOutcome,
    WorkloadRef,
)


@dataclass(frozen=True, slots=True)
class RolloutUpdate:
    workload: WorkloadRef
    image: str


@dataclass(slots=True)
class _Updated:
    update: RolloutUpdate
    restarted: bool
    restart_error: ReleaseError | None


def rollout(
    updates: Sequence[RolloutUpdate],
    *,
    cluster: ClusterClient,
    namespace: str,
    timeout_seconds: int,
    console: ConsoleProtocol,
    cancel: CancelToken,
) -> RolloutReport:
    outcomes: dict[str, WorkloadOutcome] = {}
    updated: list[_Updated] = []

    for update in updates:
        ref = update.workload
        if cancel.requested:
            outcomes[ref.resource] = WorkloadOutcome(
                ref, update.image, RolloutStatus.NOT_ATTEMPTED, reason="cancelled"
            )
            continue

        set_result = cluster.set_image(ref, update.image, namespace)
        if isinstance(set_result, Err):
            console.warning(f"{ref.resource}: {set_result.error}")
            outcomes[ref.resource] = WorkloadOutcome(
                ref, update.image, RolloutStatus.UPDATE_FAILED, error=set_result.error
            )
            continue

        restarted = False
        restart_error: ReleaseError | None = None
        if ref.needs_restart:
            restart_result = cluster.restart(ref, namespace)
            if isinstance(restart_result, Err):
                restart_error = restart_result.error
                console.warning(f"{ref.resource}: {restart_error}")
            else:
                restarted = True
        updated.append(_Updated(update, restarted, restart_error))

    for item in updated:
        ref = item.update.workload
        if cancel.requested:
            outcomes[ref.resource] = WorkloadOutcome(
                ref,
                item.update.image,
                RolloutStatus.UPDATED_NOT_READY,
                restarted=item.restarted,
                error=item.restart_error,
                reason="cancelled before readiness check",
            )
            continue

        ready = cluster.wait_ready(ref, namespace, timeout_seconds)
        if isinstance(ready, Err):
            console.warning(f"{ref.resource}: {ready.error}")
            outcomes[ref.resource] = WorkloadOutcome(
                ref,
                item.update.image,
                RolloutStatus.UPDATED_NOT_READY,
                restarted=item.restarted,
                error=ready.error,
            )
            continue

        # Ready, but a failed restart means the pods may still run the old digest.
        status = RolloutStatus.UPDATED_READY
        if item.restart_error is not None:
            status = RolloutStatus.UPDATED_NOT_READY
        else:
            console.success(f"{ref.resource}: ready")
        outcomes[ref.resource] = WorkloadOutcome(
            ref,
            item.update.image,
            status,
            restarted=item.restarted,
            error=item.restart_error,
        )

    return RolloutReport(outcomes=tuple(outcomes[u.workload.resource] for u in updates))
