"""First-deploy detection and the one-time manifest apply."""

from __future__ import annotations

from collections.abc import Sequence

from ship.core.result import Err, Ok, Result
from ship.output.console import ConsoleProtocol
from ship.services.release.collaborators import ClusterClient
from ship.services.release.errors import ReleaseError
from ship.services.release.model import ApplyOutcome, WorkloadRef


def is_first_deploy(
    ref: WorkloadRef, namespace: str, *, cluster: ClusterClient
) -> Result[bool, ReleaseError]:
    """True when the reference workload is absent from the namespace.

    Queried fresh on every call. An Err means the cluster could not be
    asked, which is not the same as "absent".
    """
    exists = cluster.workload_exists(ref, namespace)
    if isinstance(exists, Err):
        return exists
    return Ok(not exists.value)


def apply_all(
    manifests: Sequence[str],
    namespace: str,
    *,
    cluster: ClusterClient,
    console: ConsoleProtocol,
) -> ApplyOutcome:
    """Ensure the namespace exists, then apply every manifest once.

    Stops at the first failure; manifests after it are not applied.
    """
    created = False
    exists = cluster.namespace_exists(namespace)
    if isinstance(exists, Err):
        return ApplyOutcome(namespace, namespace_created=False, applied=(), error=exists.error)

    if not exists.value:
        made = cluster.create_namespace(namespace)
        if isinstance(made, Err):
            return ApplyOutcome(namespace, namespace_created=False, applied=(), error=made.error)
        created = True
        console.success(f"namespace {namespace}: created")

    applied: list[str] = []
    for path in manifests:
        result = cluster.apply_manifest(path, namespace)
        if isinstance(result, Err):
            return ApplyOutcome(namespace, created, tuple(applied), error=result.error)
        applied.append(path)
        console.success(f"{path}: applied")

    return ApplyOutcome(namespace, created, tuple(applied))
