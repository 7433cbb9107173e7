from __future__ import annotations

from ship.core.result import Err, Ok
from ship.output.console import MockConsole
from ship.services.release.manifests import apply_all, is_first_deploy
from ship.services.release.model import WorkloadRef

from ._fakes import FakeCluster

ORDER = WorkloadRef(kind="Deployment", name="order-service", container="order-service")


class TestIsFirstDeploy:
    def test_absent_workload_is_first_deploy(self) -> None:
        cluster = FakeCluster(namespaces={"pets"})

        result = is_first_deploy(ORDER, "pets", cluster=cluster)

        assert isinstance(result, Ok)
        assert result.value is True

    def test_present_workload_is_an_update(self) -> None:
        cluster = FakeCluster(namespaces={"pets"}, workloads={"deployment/order-service"})

        result = is_first_deploy(ORDER, "pets", cluster=cluster)

        assert isinstance(result, Ok)
        assert result.value is False

    def test_query_error_is_not_absence(self) -> None:
        cluster = FakeCluster(unreachable=True)

        result = is_first_deploy(ORDER, "pets", cluster=cluster)

        assert isinstance(result, Err)
        assert result.error.kind == "cluster_unreachable"

    def test_queried_fresh_each_time(self) -> None:
        cluster = FakeCluster()
        is_first_deploy(ORDER, "pets", cluster=cluster)
        cluster.workloads.add("deployment/order-service")

        second = is_first_deploy(ORDER, "pets", cluster=cluster)

        assert second == Ok(False)
        assert len(cluster.ops("workload_exists")) == 2


class TestApplyAll:
    def test_creates_missing_namespace_then_applies_in_order(self) -> None:
        cluster = FakeCluster()
        console = MockConsole()

        outcome = apply_all(["a.yaml", "b.yaml"], "pets", cluster=cluster, console=console)

        assert outcome.ok
        assert outcome.namespace_created
        assert outcome.applied == ("a.yaml", "b.yaml")
        assert [c[0] for c in cluster.calls] == [
            "namespace_exists",
            "create_namespace",
            "apply_manifest",
            "apply_manifest",
        ]
        assert console.find("namespace pets: created")

    def test_existing_namespace_is_not_recreated(self) -> None:
        cluster = FakeCluster(namespaces={"pets"})

        outcome = apply_all(["a.yaml"], "pets", cluster=cluster, console=MockConsole())

        assert outcome.ok
        assert not outcome.namespace_created
        assert cluster.ops("create_namespace") == []

    def test_apply_failure_is_reported(self) -> None:
        cluster = FakeCluster(namespaces={"pets"}, fail_apply=True)

        outcome = apply_all(["a.yaml", "b.yaml"], "pets", cluster=cluster, console=MockConsole())

        assert not outcome.ok
        assert outcome.applied == ()
        assert outcome.error is not None and outcome.error.kind == "apply_failed"
        assert len(cluster.ops("apply_manifest")) == 1
