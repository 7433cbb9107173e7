from __future__ import annotations

import shutil

from ship.core.result import Err, Ok, Result
from ship.services.release.errors import ReleaseError

_TOOL_HINTS = {
    "az": "Install Azure CLI: https://learn.microsoft.com/cli/azure/install-azure-cli",
    "kubectl": "Install kubectl: https://kubernetes.io/docs/tasks/tools/",
}


def ensure_tools_available(
    tools: tuple[str, ...] = ("az", "kubectl"),
) -> Result[None, ReleaseError]:
    for tool in tools:
        if shutil.which(tool) is None:
            return Err(
                ReleaseError(
                    kind="tool_missing",
                    message=f"{tool}: missing",
                    hint=_TOOL_HINTS.get(tool),
                )
            )
    return Ok(None)
