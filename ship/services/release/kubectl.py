from __future__ import annotations

from pathlib import Path

from ship.core.result import Err, Ok, Result
from ship.output.console import ConsoleProtocol, Style
from ship.platform.process import run as run_process
from ship.services.release.errors import ReleaseError, ReleaseErrorKind
from ship.services.release.model import WorkloadRef
from ship.services.release.timeouts import KUBECTL_TIMEOUT_SECONDS, ROLLOUT_WAIT_GRACE_SECONDS


class KubectlCluster:
    """Orchestration-target collaborator backed by ``kubectl``.

    Presence queries use ``--ignore-not-found`` so an absent object is an
    empty answer and a non-zero exit always means the cluster could not be
    queried.
    """

    def __init__(
        self,
        *,
        workdir: Path,
        console: ConsoleProtocol,
        context: str | None = None,
    ) -> None:
        self._workdir = workdir
        self._console = console
        self._context = context

    def command(self, *args: str) -> list[str]:
        cmd = ["kubectl"]
        if self._context:
            cmd.extend(["--context", self._context])
        cmd.extend(args)
        return cmd

    def _run(
        self,
        cmd: list[str],
        *,
        kind: ReleaseErrorKind,
        message: str,
        timeout: float = KUBECTL_TIMEOUT_SECONDS,
        trace: bool = True,
    ) -> Result[str, ReleaseError]:
        if trace:
            self._console.print(" ".join(cmd), Style.DIM)
        result = run_process(cmd, cwd=self._workdir, timeout=timeout)
        if isinstance(result, Err):
            return Err(ReleaseError(kind=kind, message=message, hint=result.error.detail))
        return Ok(result.value)

    def namespace_exists(self, namespace: str) -> Result[bool, ReleaseError]:
        cmd = self.command("get", "namespace", namespace, "--ignore-not-found", "-o", "name")
        out = self._run(
            cmd,
            kind="cluster_unreachable",
            message=f"failed to query namespace {namespace}",
            trace=False,
        )
        if isinstance(out, Err):
            return out
        return Ok(bool(out.value.strip()))

    def create_namespace(self, namespace: str) -> Result[None, ReleaseError]:
        cmd = self.command("create", "namespace", namespace)
        out = self._run(cmd, kind="namespace_failed", message=f"failed to create {namespace}")
        if isinstance(out, Err):
            # Lost a race with another run; the namespace is there, which is all we need.
            if out.error.hint and "AlreadyExists" in out.error.hint:
                return Ok(None)
            return out
        return Ok(None)

    def workload_exists(self, ref: WorkloadRef, namespace: str) -> Result[bool, ReleaseError]:
        cmd = self.command(
            "get", ref.resource, "-n", namespace, "--ignore-not-found", "-o", "name"
        )
        out = self._run(
            cmd,
            kind="cluster_unreachable",
            message=f"failed to query {ref.resource} in {namespace}",
            trace=False,
        )
        if isinstance(out, Err):
            return out
        return Ok(bool(out.value.strip()))

    def apply_manifest(self, path: str, namespace: str) -> Result[None, ReleaseError]:
        cmd = self.command("apply", "-f", path, "-n", namespace)
        out = self._run(cmd, kind="apply_failed", message=f"failed to apply {path}")
        return out.map(lambda _: None)

    def set_image(self, ref: WorkloadRef, image: str, namespace: str) -> Result[None, ReleaseError]:
        cmd = self.command(
            "set", "image", ref.resource, f"{ref.container}={image}", "-n", namespace
        )
        out = self._run(
            cmd, kind="set_image_failed", message=f"failed to set image on {ref.resource}"
        )
        return out.map(lambda _: None)

    def restart(self, ref: WorkloadRef, namespace: str) -> Result[None, ReleaseError]:
        cmd = self.command("rollout", "restart", ref.resource, "-n", namespace)
        out = self._run(cmd, kind="restart_failed", message=f"failed to restart {ref.resource}")
        return out.map(lambda _: None)

    def wait_ready(
        self, ref: WorkloadRef, namespace: str, timeout_seconds: int
    ) -> Result[None, ReleaseError]:
        cmd = self.command(
            "rollout", "status", ref.resource, "-n", namespace, f"--timeout={timeout_seconds}s"
        )
        out = self._run(
            cmd,
            kind="not_ready",
            message=f"{ref.resource} not ready after {timeout_seconds}s",
            timeout=timeout_seconds + ROLLOUT_WAIT_GRACE_SECONDS,
        )
        return out.map(lambda _: None)
