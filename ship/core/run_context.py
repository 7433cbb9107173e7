"""Per-run identity: run identifier, target namespace and registry address."""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from dataclasses import dataclass
from uuid import uuid4

from .result import Err, Ok, Result

__all__ = [
    "FLOATING_TAG",
    "RUN_ID_ENV_VARS",
    "RunContext",
    "RunIdError",
    "resolve_run_id",
    "validate_run_id",
]

FLOATING_TAG = "latest"

# Checked in order; BUILD_BUILDID is the CI build counter.
RUN_ID_ENV_VARS: tuple[str, ...] = ("SHIP_RUN_ID", "BUILD_BUILDID")

# Docker/OCI tag grammar.
_TAG_RE = re.compile(r"^[A-Za-z0-9_][A-Za-z0-9_.-]{0,127}$")


@dataclass(frozen=True, slots=True)
class RunIdError:
    run_id: str
    reason: str

    @property
    def message(self) -> str:
        return f"invalid run id '{self.run_id}': {self.reason}"


@dataclass(frozen=True, slots=True)
class RunContext:
    """Identity of a single orchestration run.

    Attributes:
        run_id: Immutable image tag for everything built in this run.
        namespace: Cluster namespace the workloads live in.
        login_server: Registry address images are referenced by
            (e.g. ``storeacr.azurecr.io``).
    """

    run_id: str
    namespace: str
    login_server: str

    def image_ref(self, name: str, tag: str) -> str:
        return f"{self.login_server}/{name}:{tag}"


def validate_run_id(run_id: str) -> Result[str, RunIdError]:
    value = run_id.strip()
    if not _TAG_RE.match(value):
        return Err(RunIdError(run_id, "not a valid image tag"))
    if value == FLOATING_TAG:
        return Err(RunIdError(run_id, f"'{FLOATING_TAG}' is reserved for the floating tag"))
    return Ok(value)


def resolve_run_id(
    explicit: str | None,
    *,
    environ: Mapping[str, str] | None = None,
) -> Result[str, RunIdError]:
    """Pick the run identifier for this invocation.

    An explicit value wins, then the first set variable of RUN_ID_ENV_VARS.
    Without either, a random ``run-<hex>`` id is generated so concurrent
    runs sharing a registry never collide.
    """
    env = os.environ if environ is None else environ
    if explicit is not None:
        return validate_run_id(explicit)
    for var in RUN_ID_ENV_VARS:
        value = env.get(var, "").strip()
        if value:
            return validate_run_id(value)
    return Ok(f"run-{uuid4().hex[:12]}")
