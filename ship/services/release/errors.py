from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ReleaseErrorKind = Literal[
    "tool_missing",
    "registry_query_failed",
    "import_failed",
    "build_failed",
    "tag_missing",
    "cluster_unreachable",
    "namespace_failed",
    "apply_failed",
    "set_image_failed",
    "restart_failed",
    "not_ready",
    "invalid_config",
]


@dataclass(frozen=True, slots=True)
class ReleaseError:
    kind: ReleaseErrorKind
    message: str
    hint: str | None = None

    def __str__(self) -> str:
        if self.hint:
            return f"{self.message} ({self.hint})"
        return self.message
