from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from ship.core.result import Err, Ok, Result
from ship.services.release.errors import ReleaseError
from ship.services.release.model import WorkloadRef


def _tags() -> dict[str, set[str]]:
    return {}


def _names() -> set[str]:
    return set()


def _calls() -> list[tuple[str, ...]]:
    return []


@dataclass
class FakeRegistry:
    tags: dict[str, set[str]] = field(default_factory=_tags)
    fail_query: set[str] = field(default_factory=_names)
    fail_import: set[str] = field(default_factory=_names)
    calls: list[tuple[str, ...]] = field(default_factory=_calls)

    def list_tags(self, name: str) -> Result[frozenset[str], ReleaseError]:
        self.calls.append(("list_tags", name))
        if name in self.fail_query:
            return Err(ReleaseError(kind="registry_query_failed", message=f"query {name}"))
        return Ok(frozenset(self.tags.get(name, set())))

    def import_image(
        self, source: str, name: str, tags: Sequence[str]
    ) -> Result[None, ReleaseError]:
        self.calls.append(("import_image", source, name, *tags))
        if name in self.fail_import:
            return Err(ReleaseError(kind="import_failed", message=f"import {name}"))
        self.tags.setdefault(name, set()).update(tags)
        return Ok(None)

    @property
    def writes(self) -> list[tuple[str, ...]]:
        return [c for c in self.calls if c[0] == "import_image"]


@dataclass
class FakeBuilder:
    registry: FakeRegistry
    fail: set[str] = field(default_factory=_names)
    # Builds that report success but leave the floating tag unpublished.
    drop_latest: set[str] = field(default_factory=_names)
    calls: list[tuple[str, ...]] = field(default_factory=_calls)

    def build(
        self, context_path: str, name: str, tags: Sequence[str]
    ) -> Result[None, ReleaseError]:
        self.calls.append(("build", context_path, name, *tags))
        if name in self.fail:
            return Err(ReleaseError(kind="build_failed", message=f"build {name}"))
        published = [t for t in tags if not (name in self.drop_latest and t == "latest")]
        self.registry.tags.setdefault(name, set()).update(published)
        return Ok(None)


@dataclass
class FakeCluster:
    namespaces: set[str] = field(default_factory=_names)
    workloads: set[str] = field(default_factory=_names)  # resource names, e.g. deployment/x
    unreachable: bool = False
    fail_apply: bool = False
    fail_set_image: set[str] = field(default_factory=_names)
    fail_restart: set[str] = field(default_factory=_names)
    not_ready: set[str] = field(default_factory=_names)
    calls: list[tuple[str, ...]] = field(default_factory=_calls)

    def namespace_exists(self, namespace: str) -> Result[bool, ReleaseError]:
        self.calls.append(("namespace_exists", namespace))
        return Ok(namespace in self.namespaces)

    def create_namespace(self, namespace: str) -> Result[None, ReleaseError]:
        self.calls.append(("create_namespace", namespace))
        self.namespaces.add(namespace)
        return Ok(None)

    def workload_exists(self, ref: WorkloadRef, namespace: str) -> Result[bool, ReleaseError]:
        self.calls.append(("workload_exists", ref.resource, namespace))
        if self.unreachable:
            return Err(ReleaseError(kind="cluster_unreachable", message="connection refused"))
        return Ok(ref.resource in self.workloads)

    def apply_manifest(self, path: str, namespace: str) -> Result[None, ReleaseError]:
        self.calls.append(("apply_manifest", path, namespace))
        if self.fail_apply:
            return Err(ReleaseError(kind="apply_failed", message=f"apply {path}"))
        return Ok(None)

    def set_image(self, ref: WorkloadRef, image: str, namespace: str) -> Result[None, ReleaseError]:
        self.calls.append(("set_image", ref.resource, image))
        if ref.name in self.fail_set_image:
            return Err(ReleaseError(kind="set_image_failed", message=f"set image {ref.name}"))
        return Ok(None)

    def restart(self, ref: WorkloadRef, namespace: str) -> Result[None, ReleaseError]:
        self.calls.append(("restart", ref.resource))
        if ref.name in self.fail_restart:
            return Err(ReleaseError(kind="restart_failed", message=f"restart {ref.name}"))
        return Ok(None)

    def wait_ready(
        self, ref: WorkloadRef, namespace: str, timeout_seconds: int
    ) -> Result[None, ReleaseError]:
        self.calls.append(("wait_ready", ref.resource, str(timeout_seconds)))
        if ref.name in self.not_ready:
            return Err(ReleaseError(kind="not_ready", message=f"{ref.name} not ready"))
        return Ok(None)

    def ops(self, op: str) -> list[tuple[str, ...]]:
        return [c for c in self.calls if c[0] == op]
