from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path

from ship.core.result import Err, Ok, Result
from ship.core.structured import as_obj_list
from ship.output.console import ConsoleProtocol, Style
from ship.platform.process import ProcessError
from ship.platform.process import run as run_process
from ship.services.release.errors import ReleaseError
from ship.services.release.timeouts import (
    AZ_BUILD_TIMEOUT_SECONDS,
    AZ_IMPORT_TIMEOUT_SECONDS,
    AZ_TIMEOUT_SECONDS,
)


def _is_missing_repository(error: ProcessError) -> bool:
    text = f"{error.stderr}\n{error.stdout}".lower()
    markers = (
        "resourcenotfound",
        "name_unknown",
        "repository_unknown",
        "is not found",
        "not found in registry",
    )
    return any(marker in text for marker in markers)


def show_tags_cmd(registry: str, name: str) -> list[str]:
    return [
        "az",
        "acr",
        "repository",
        "show-tags",
        "--name",
        registry,
        "--repository",
        name,
        "--output",
        "json",
    ]


def import_cmd(registry: str, source: str, name: str, tags: Sequence[str]) -> list[str]:
    cmd = ["az", "acr", "import", "--name", registry, "--source", source]
    for tag in tags:
        cmd.extend(["--image", f"{name}:{tag}"])
    # Overwrite the floating tag when it already points elsewhere.
    cmd.append("--force")
    return cmd


def build_cmd(registry: str, context_path: str, name: str, tags: Sequence[str]) -> list[str]:
    cmd = ["az", "acr", "build", "--registry", registry]
    for tag in tags:
        cmd.extend(["--image", f"{name}:{tag}"])
    cmd.append(context_path)
    return cmd


def parse_tags(raw: str, *, name: str) -> Result[frozenset[str], ReleaseError]:
    if not raw.strip():
        return Ok(frozenset())
    try:
        obj: object = json.loads(raw)
    except json.JSONDecodeError as e:
        return Err(
            ReleaseError(
                kind="registry_query_failed",
                message=f"invalid JSON from show-tags: {e}",
                hint=name,
            )
        )

    items = as_obj_list(obj)
    if items is None:
        return Err(
            ReleaseError(
                kind="registry_query_failed",
                message="unexpected show-tags payload",
                hint=name,
            )
        )
    return Ok(frozenset(t for t in items if isinstance(t, str)))


class AcrRegistry:
    """Registry collaborator backed by ``az acr``."""

    def __init__(self, *, registry: str, workdir: Path, console: ConsoleProtocol) -> None:
        self._registry = registry
        self._workdir = workdir
        self._console = console

    def list_tags(self, name: str) -> Result[frozenset[str], ReleaseError]:
        cmd = show_tags_cmd(self._registry, name)
        result = run_process(cmd, cwd=self._workdir, timeout=AZ_TIMEOUT_SECONDS)
        if isinstance(result, Err):
            if _is_missing_repository(result.error):
                return Ok(frozenset())
            return Err(
                ReleaseError(
                    kind="registry_query_failed",
                    message=f"failed to list tags for {name}",
                    hint=result.error.detail,
                )
            )
        return parse_tags(result.value, name=name)

    def import_image(
        self, source: str, name: str, tags: Sequence[str]
    ) -> Result[None, ReleaseError]:
        cmd = import_cmd(self._registry, source, name, tags)
        self._console.print(" ".join(cmd), Style.DIM)
        result = run_process(cmd, cwd=self._workdir, timeout=AZ_IMPORT_TIMEOUT_SECONDS)
        if isinstance(result, Err):
            return Err(
                ReleaseError(
                    kind="import_failed",
                    message=f"failed to import {source}",
                    hint=result.error.detail,
                )
            )
        return Ok(None)


class AcrBuilder:
    """Build collaborator: ``az acr build`` pushes every tag in one call."""

    def __init__(self, *, registry: str, source_root: Path, console: ConsoleProtocol) -> None:
        self._registry = registry
        self._source_root = source_root
        self._console = console

    def build(
        self, context_path: str, name: str, tags: Sequence[str]
    ) -> Result[None, ReleaseError]:
        if not (self._source_root / context_path).is_dir():
            return Err(
                ReleaseError(
                    kind="build_failed",
                    message=f"build context not found: {context_path}",
                    hint=str(self._source_root),
                )
            )

        cmd = build_cmd(self._registry, context_path, name, tags)
        self._console.print(" ".join(cmd), Style.DIM)
        result = run_process(cmd, cwd=self._source_root, timeout=AZ_BUILD_TIMEOUT_SECONDS)
        if isinstance(result, Err):
            return Err(
                ReleaseError(
                    kind="build_failed",
                    message=f"failed to build {name}",
                    hint=result.error.detail,
                )
            )
        return Ok(None)
