from __future__ import annotations

from dataclasses import dataclass

from ship.core.errors import ErrorCode
from ship.core.intent import IntentSet
from ship.services.release.errors import ReleaseError
from ship.services.release.model import (
    ApplyOutcome,
    BuildOutcome,
    ImportOutcome,
    ImportStatus,
    RolloutReport,
)


@dataclass(frozen=True, slots=True)
class ReleaseReport:
    """Everything a release run did, for the summary and the exit code.

    Attributes:
        first_deploy: None when the presence check did not run.
        fatal: Error that stopped the run (presence check or first deploy).
    """

    intent: IntentSet
    run_id: str
    namespace: str
    imports: tuple[ImportOutcome, ...] = ()
    builds: tuple[BuildOutcome, ...] = ()
    first_deploy: bool | None = None
    apply: ApplyOutcome | None = None
    seed_rollout: RolloutReport | None = None
    app_rollout: RolloutReport | None = None
    fatal: ReleaseError | None = None
    cancelled: bool = False
    import_errors_tolerated: bool = False

    @property
    def failed_imports(self) -> tuple[ImportOutcome, ...]:
        return tuple(o for o in self.imports if o.status == ImportStatus.FAILED)

    @property
    def failed_builds(self) -> tuple[BuildOutcome, ...]:
        return tuple(o for o in self.builds if not o.published)

    @property
    def rollout_warnings(self) -> int:
        count = 0
        for report in (self.seed_rollout, self.app_rollout):
            if report is not None:
                count += sum(1 for o in report.outcomes if not o.ok)
        return count

    @property
    def exit_code(self) -> ErrorCode:
        """Hard failures only; rollout outcomes never change the code."""
        if self.fatal is not None:
            return ErrorCode.CLUSTER_ERROR
        if self.failed_builds:
            return ErrorCode.BUILD_ERROR
        if self.failed_imports and not self.import_errors_tolerated:
            return ErrorCode.REGISTRY_ERROR
        if self.cancelled:
            return ErrorCode.CANCELLED
        return ErrorCode.OK
