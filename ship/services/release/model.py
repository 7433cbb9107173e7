from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal

from ship.services.release.errors import ReleaseError

WorkloadKind = Literal["Deployment", "StatefulSet"]


@dataclass(frozen=True, slots=True)
class ImportSpec:
    """A third-party image mirrored into the private registry."""

    name: str
    version_tag: str
    upstream_source: str


@dataclass(frozen=True, slots=True)
class BuildSpec:
    """A first-party image built from source."""

    name: str
    build_context: str  # relative to the source root


@dataclass(frozen=True, slots=True)
class WorkloadRef:
    kind: WorkloadKind
    name: str
    container: str

    @property
    def resource(self) -> str:
        return f"{self.kind.lower()}/{self.name}"

    @property
    def needs_restart(self) -> bool:
        # StatefulSets are pointed at the floating tag and do not pick up a
        # new digest behind it on their own.
        return self.kind == "StatefulSet"


class ImportStatus(Enum):
    IMPORTED = "imported"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class ImportOutcome:
    spec: ImportSpec
    status: ImportStatus
    error: ReleaseError | None = None
    # Set when the tag query failed and the import went ahead anyway.
    note: str | None = None

    @property
    def published(self) -> bool:
        return self.status != ImportStatus.FAILED


class BuildStatus(Enum):
    PUBLISHED = "published"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class BuildOutcome:
    spec: BuildSpec
    status: BuildStatus
    tags: tuple[str, ...] = ()
    error: ReleaseError | None = None

    @property
    def published(self) -> bool:
        return self.status == BuildStatus.PUBLISHED


@dataclass(frozen=True, slots=True)
class ApplyOutcome:
    namespace: str
    namespace_created: bool
    applied: tuple[str, ...]
    error: ReleaseError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class RolloutStatus(Enum):
    UPDATED_READY = "updated, ready"
    UPDATED_NOT_READY = "updated, not ready"
    UPDATE_FAILED = "update failed"
    NOT_ATTEMPTED = "not attempted"


@dataclass(frozen=True, slots=True)
class WorkloadOutcome:
    workload: WorkloadRef
    image: str
    status: RolloutStatus
    restarted: bool = False
    error: ReleaseError | None = None
    reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == RolloutStatus.UPDATED_READY


@dataclass(frozen=True, slots=True)
class RolloutReport:
    outcomes: tuple[WorkloadOutcome, ...]

    @property
    def all_ready(self) -> bool:
        return all(o.ok for o in self.outcomes)

    def with_status(self, status: RolloutStatus) -> tuple[WorkloadOutcome, ...]:
        return tuple(o for o in self.outcomes if o.status == status)
