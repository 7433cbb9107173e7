"""Release flow: seed imports, first-party builds, first deploy and rollouts."""

from __future__ import annotations

from ship.services.release.orchestrator import Collaborators, ReleaseSettings, run_release
from ship.services.release.report import ReleaseReport

__all__ = ["Collaborators", "ReleaseReport", "ReleaseSettings", "run_release"]
