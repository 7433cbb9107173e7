from __future__ import annotations

from pathlib import Path

import pytest

from ship.core.result import Err, Ok
from ship.output.console import MockConsole
from ship.platform.process import ProcessError
from ship.services.release import kubectl as kubectl_mod
from ship.services.release.model import WorkloadRef
from ship.services.release.timeouts import ROLLOUT_WAIT_GRACE_SECONDS

RABBIT = WorkloadRef(kind="StatefulSet", name="rabbitmq", container="rabbitmq")


def _err(stderr: str) -> Err[ProcessError]:
    return Err(ProcessError(command=("kubectl",), returncode=1, stdout="", stderr=stderr))


class Recorder:
    def __init__(self, *responses: object) -> None:
        self.responses = list(responses)
        self.calls: list[tuple[list[str], float | None]] = []

    def __call__(self, cmd: list[str], *, cwd: Path, timeout: float | None = None) -> object:
        del cwd
        self.calls.append((cmd, timeout))
        return self.responses.pop(0)


def _cluster(tmp_path: Path, context: str | None = None) -> kubectl_mod.KubectlCluster:
    return kubectl_mod.KubectlCluster(workdir=tmp_path, console=MockConsole(), context=context)


def test_context_is_passed_first(tmp_path: Path) -> None:
    cluster = _cluster(tmp_path, context="aks-prod")
    assert cluster.command("get", "pods") == ["kubectl", "--context", "aks-prod", "get", "pods"]


def test_workload_presence(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    fake = Recorder(Ok("statefulset.apps/rabbitmq\n"), Ok(""))
    monkeypatch.setattr(kubectl_mod, "run_process", fake)
    cluster = _cluster(tmp_path)

    assert cluster.workload_exists(RABBIT, "pets") == Ok(True)
    assert cluster.workload_exists(RABBIT, "pets") == Ok(False)
    assert fake.calls[0][0] == [
        "kubectl",
        "get",
        "statefulset/rabbitmq",
        "-n",
        "pets",
        "--ignore-not-found",
        "-o",
        "name",
    ]


def test_presence_query_error_is_unreachable(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setattr(kubectl_mod, "run_process", Recorder(_err("connection refused")))

    result = _cluster(tmp_path).namespace_exists("pets")

    assert isinstance(result, Err)
    assert result.error.kind == "cluster_unreachable"
    assert result.error.hint == "connection refused"


def test_create_namespace_tolerates_already_exists(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setattr(
        kubectl_mod,
        "run_process",
        Recorder(_err('Error from server (AlreadyExists): namespaces "pets" already exists')),
    )

    assert _cluster(tmp_path).create_namespace("pets") == Ok(None)


def test_set_image_targets_container(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    fake = Recorder(Ok(""))
    monkeypatch.setattr(kubectl_mod, "run_process", fake)

    result = _cluster(tmp_path).set_image(RABBIT, "storeacr.azurecr.io/rabbitmq:latest", "pets")

    assert result == Ok(None)
    assert fake.calls[0][0] == [
        "kubectl",
        "set",
        "image",
        "statefulset/rabbitmq",
        "rabbitmq=storeacr.azurecr.io/rabbitmq:latest",
        "-n",
        "pets",
    ]


def test_wait_ready_bounds_process_beyond_rollout_timeout(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    fake = Recorder(_err("error: timed out waiting for the condition"))
    monkeypatch.setattr(kubectl_mod, "run_process", fake)

    result = _cluster(tmp_path).wait_ready(RABBIT, "pets", 90)

    assert isinstance(result, Err)
    assert result.error.kind == "not_ready"
    cmd, timeout = fake.calls[0]
    assert cmd[-1] == "--timeout=90s"
    assert timeout == 90 + ROLLOUT_WAIT_GRACE_SECONDS
