"""Interfaces of the external systems the release flow drives.

Concrete implementations shell out to ``az`` (acr.py) and ``kubectl``
(kubectl.py); dry_run.py records instead of executing; tests use fakes.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from ship.core.result import Result
from ship.services.release.errors import ReleaseError
from ship.services.release.model import WorkloadRef


class RegistryClient(Protocol):
    def list_tags(self, name: str) -> Result[frozenset[str], ReleaseError]:
        """Tags under a repository; an unknown repository has no tags."""
        ...

    def import_image(
        self, source: str, name: str, tags: Sequence[str]
    ) -> Result[None, ReleaseError]: ...


class ImageBuilder(Protocol):
    def build(
        self, context_path: str, name: str, tags: Sequence[str]
    ) -> Result[None, ReleaseError]:
        """Build the context and publish it under every tag."""
        ...


class ClusterClient(Protocol):
    def namespace_exists(self, namespace: str) -> Result[bool, ReleaseError]: ...

    def create_namespace(self, namespace: str) -> Result[None, ReleaseError]: ...

    def workload_exists(self, ref: WorkloadRef, namespace: str) -> Result[bool, ReleaseError]:
        """Ok(False) when absent; Err only when the cluster cannot be queried."""
        ...

    def apply_manifest(self, path: str, namespace: str) -> Result[None, ReleaseError]: ...

    def set_image(
        self, ref: WorkloadRef, image: str, namespace: str
    ) -> Result[None, ReleaseError]: ...

    def restart(self, ref: WorkloadRef, namespace: str) -> Result[None, ReleaseError]: ...

    def wait_ready(
        self, ref: WorkloadRef, namespace: str, timeout_seconds: int
    ) -> Result[None, ReleaseError]: ...
