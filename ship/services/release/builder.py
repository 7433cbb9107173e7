"""Build first-party images and publish them under the run id and the floating tag."""

from __future__ import annotations

from collections.abc import Sequence

from ship.core.cancel import CancelToken
from ship.core.result import Err
from ship.core.run_context import FLOATING_TAG
from ship.output.console import ConsoleProtocol
from ship.services.release.collaborators import ImageBuilder, RegistryClient
from ship.services.release.errors import ReleaseError
from ship.services.release.model import BuildOutcome, BuildSpec, BuildStatus


def build_and_publish(
    spec: BuildSpec,
    run_id: str,
    *,
    builder: ImageBuilder,
    registry: RegistryClient,
) -> BuildOutcome:
    """Build one image; PUBLISHED only once both tags are visible in the registry."""
    tags = (run_id, FLOATING_TAG)
    built = builder.build(spec.build_context, spec.name, tags)
    if isinstance(built, Err):
        return BuildOutcome(spec=spec, status=BuildStatus.FAILED, error=built.error)

    present = registry.list_tags(spec.name)
    if isinstance(present, Err):
        return BuildOutcome(spec=spec, status=BuildStatus.FAILED, error=present.error)

    missing = [t for t in tags if t not in present.value]
    if missing:
        return BuildOutcome(
            spec=spec,
            status=BuildStatus.FAILED,
            error=ReleaseError(
                kind="tag_missing",
                message=f"{spec.name} built but not published as {', '.join(missing)}",
            ),
        )

    return BuildOutcome(spec=spec, status=BuildStatus.PUBLISHED, tags=tags)


def build_catalog(
    specs: Sequence[BuildSpec],
    run_id: str,
    *,
    builder: ImageBuilder,
    registry: RegistryClient,
    console: ConsoleProtocol,
    cancel: CancelToken,
) -> tuple[BuildOutcome, ...]:
    outcomes: list[BuildOutcome] = []
    for spec in specs:
        if cancel.requested:
            console.warning(f"cancelled before {spec.name}")
            break

        outcome = build_and_publish(spec, run_id, builder=builder, registry=registry)
        outcomes.append(outcome)
        if outcome.published:
            console.success(f"{spec.name}: published {run_id}, {FLOATING_TAG}")
        else:
            console.error(f"{spec.name}: {outcome.error}")

    return tuple(outcomes)
