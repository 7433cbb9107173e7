"""Seed third-party images into the private registry, idempotently."""

from __future__ import annotations

from collections.abc import Sequence

from ship.core.cancel import CancelToken
from ship.core.config import QueryFailurePolicy
from ship.core.result import Err
from ship.core.run_context import FLOATING_TAG
from ship.output.console import ConsoleProtocol, Style
from ship.services.release.collaborators import RegistryClient
from ship.services.release.model import ImportOutcome, ImportSpec, ImportStatus


def import_if_missing(
    spec: ImportSpec,
    *,
    registry: RegistryClient,
    on_query_failure: QueryFailurePolicy,
) -> ImportOutcome:
    """Import spec unless its version tag is already in the registry.

    A present version tag means no write at all. Otherwise the upstream
    image is published under both its version tag and the floating tag.
    """
    note: str | None = None
    tags = registry.list_tags(spec.name)
    if isinstance(tags, Err):
        if on_query_failure == "fail":
            return ImportOutcome(spec=spec, status=ImportStatus.FAILED, error=tags.error)
        note = f"tag query failed, imported anyway: {tags.error}"
    elif spec.version_tag in tags.value:
        return ImportOutcome(spec=spec, status=ImportStatus.SKIPPED)

    publish_tags = [spec.version_tag]
    if spec.version_tag != FLOATING_TAG:
        publish_tags.append(FLOATING_TAG)

    imported = registry.import_image(spec.upstream_source, spec.name, publish_tags)
    if isinstance(imported, Err):
        return ImportOutcome(spec=spec, status=ImportStatus.FAILED, error=imported.error, note=note)
    return ImportOutcome(spec=spec, status=ImportStatus.IMPORTED, note=note)


def import_catalog(
    specs: Sequence[ImportSpec],
    *,
    registry: RegistryClient,
    on_query_failure: QueryFailurePolicy,
    console: ConsoleProtocol,
    cancel: CancelToken,
) -> tuple[ImportOutcome, ...]:
    """Run import_if_missing over every entry; one failure never stops the batch.

    Stops early only on cancellation; entries not reached are absent from
    the result.
    """
    outcomes: list[ImportOutcome] = []
    for spec in specs:
        if cancel.requested:
            console.warning(f"cancelled before {spec.name}")
            break

        outcome = import_if_missing(spec, registry=registry, on_query_failure=on_query_failure)
        outcomes.append(outcome)
        ref = f"{spec.name}:{spec.version_tag}"
        match outcome.status:
            case ImportStatus.SKIPPED:
                console.print(f"{ref}: already present", Style.DIM)
            case ImportStatus.IMPORTED:
                console.success(f"{ref}: imported")
            case ImportStatus.FAILED:
                console.error(f"{ref}: {outcome.error}")
        if outcome.note:
            console.warning(f"{ref}: {outcome.note}")

    return tuple(outcomes)
