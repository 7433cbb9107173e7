"""Static image and workload catalogs.

Adding a service is a data change here: an entry in one of the image
catalogs plus its workload in WORKLOADS.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType

from ship.services.release.model import BuildSpec, ImportSpec, WorkloadRef

_SAMPLES = "ghcr.io/azure-samples/aks-store-demo"


SEED_IMPORTS: tuple[ImportSpec, ...] = (
    ImportSpec(
        name="rabbitmq",
        version_tag="3.12-management",
        upstream_source="docker.io/library/rabbitmq:3.12-management",
    ),
    ImportSpec(
        name="mongo",
        version_tag="6",
        upstream_source="docker.io/library/mongo:6",
    ),
    ImportSpec(
        name="product-service",
        version_tag="latest",
        upstream_source=f"{_SAMPLES}/product-service:latest",
    ),
    ImportSpec(
        name="virtual-customer",
        version_tag="latest",
        upstream_source=f"{_SAMPLES}/virtual-customer:latest",
    ),
    ImportSpec(
        name="virtual-worker",
        version_tag="latest",
        upstream_source=f"{_SAMPLES}/virtual-worker:latest",
    ),
)


FIRST_PARTY_BUILDS: tuple[BuildSpec, ...] = (
    BuildSpec(name="order-service", build_context="src/order-service"),
    BuildSpec(name="store-front", build_context="src/store-front"),
    BuildSpec(name="store-admin", build_context="src/store-admin"),
    BuildSpec(name="makeline-service", build_context="src/makeline-service"),
)


# Image name -> workload running it.
WORKLOADS: Mapping[str, WorkloadRef] = MappingProxyType(
    {
        "rabbitmq": WorkloadRef(kind="StatefulSet", name="rabbitmq", container="rabbitmq"),
        "mongo": WorkloadRef(kind="StatefulSet", name="mongodb", container="mongodb"),
        "product-service": WorkloadRef(
            kind="Deployment", name="product-service", container="product-service"
        ),
        "virtual-customer": WorkloadRef(
            kind="Deployment", name="virtual-customer", container="virtual-customer"
        ),
        "virtual-worker": WorkloadRef(
            kind="Deployment", name="virtual-worker", container="virtual-worker"
        ),
        "order-service": WorkloadRef(
            kind="Deployment", name="order-service", container="order-service"
        ),
        "store-front": WorkloadRef(kind="Deployment", name="store-front", container="store-front"),
        "store-admin": WorkloadRef(kind="Deployment", name="store-admin", container="store-admin"),
        "makeline-service": WorkloadRef(
            kind="Deployment", name="makeline-service", container="makeline-service"
        ),
    }
)


def catalog_problems(
    *,
    imports: Iterable[ImportSpec] = SEED_IMPORTS,
    builds: Iterable[BuildSpec] = FIRST_PARTY_BUILDS,
    workloads: Mapping[str, WorkloadRef] = WORKLOADS,
) -> list[str]:
    """Return human-readable catalog consistency problems (empty when valid)."""
    problems: list[str] = []
    for label, names in (
        ("seed", [s.name for s in imports]),
        ("build", [s.name for s in builds]),
    ):
        seen: set[str] = set()
        for name in names:
            if name in seen:
                problems.append(f"{label} catalog: duplicate image '{name}'")
            seen.add(name)
            if name not in workloads:
                problems.append(f"{label} catalog: no workload for image '{name}'")
    return problems


def workload_for(name: str) -> WorkloadRef | None:
    return WORKLOADS.get(name)


def workload_named(workload_name: str) -> WorkloadRef | None:
    """Find a workload by its cluster name (not its image name)."""
    for ref in WORKLOADS.values():
        if ref.name == workload_name:
            return ref
    return None
