"""Collaborators for ``ship release --dry-run``.

They print the ``az``/``kubectl`` commands a real run would execute and
report success without touching the registry or the cluster. The registry
starts empty, so every seed image shows up as an import, and the cluster
reports every workload present, so the plan shows the update path.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from ship.core.result import Ok, Result
from ship.output.console import ConsoleProtocol, Style
from ship.services.release.acr import build_cmd, import_cmd
from ship.services.release.errors import ReleaseError
from ship.services.release.kubectl import KubectlCluster
from ship.services.release.model import WorkloadRef


def _empty_tags() -> dict[str, set[str]]:
    return {}


@dataclass
class DryRunRegistry:
    registry: str
    console: ConsoleProtocol
    published: dict[str, set[str]] = field(default_factory=_empty_tags)

    def list_tags(self, name: str) -> Result[frozenset[str], ReleaseError]:
        return Ok(frozenset(self.published.get(name, set())))

    def import_image(
        self, source: str, name: str, tags: Sequence[str]
    ) -> Result[None, ReleaseError]:
        cmd = import_cmd(self.registry, source, name, tags)
        self.console.print("(dry-run) " + " ".join(cmd), Style.DIM)
        self.published.setdefault(name, set()).update(tags)
        return Ok(None)


@dataclass
class DryRunBuilder:
    registry: DryRunRegistry

    def build(
        self, context_path: str, name: str, tags: Sequence[str]
    ) -> Result[None, ReleaseError]:
        cmd = build_cmd(self.registry.registry, context_path, name, tags)
        self.registry.console.print("(dry-run) " + " ".join(cmd), Style.DIM)
        self.registry.published.setdefault(name, set()).update(tags)
        return Ok(None)


@dataclass
class DryRunCluster:
    kubectl: KubectlCluster
    console: ConsoleProtocol

    def _show(self, *args: str) -> None:
        self.console.print("(dry-run) " + " ".join(self.kubectl.command(*args)), Style.DIM)

    def namespace_exists(self, namespace: str) -> Result[bool, ReleaseError]:
        return Ok(True)

    def create_namespace(self, namespace: str) -> Result[None, ReleaseError]:
        self._show("create", "namespace", namespace)
        return Ok(None)

    def workload_exists(self, ref: WorkloadRef, namespace: str) -> Result[bool, ReleaseError]:
        return Ok(True)

    def apply_manifest(self, path: str, namespace: str) -> Result[None, ReleaseError]:
        self._show("apply", "-f", path, "-n", namespace)
        return Ok(None)

    def set_image(self, ref: WorkloadRef, image: str, namespace: str) -> Result[None, ReleaseError]:
        self._show("set", "image", ref.resource, f"{ref.container}={image}", "-n", namespace)
        return Ok(None)

    def restart(self, ref: WorkloadRef, namespace: str) -> Result[None, ReleaseError]:
        self._show("rollout", "restart", ref.resource, "-n", namespace)
        return Ok(None)

    def wait_ready(
        self, ref: WorkloadRef, namespace: str, timeout_seconds: int
    ) -> Result[None, ReleaseError]:
        self._show(
            "rollout", "status", ref.resource, "-n", namespace, f"--timeout={timeout_seconds}s"
        )
        return Ok(None)
