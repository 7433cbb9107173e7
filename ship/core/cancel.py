"""Cooperative cancellation for a release run.

The release flow checks the token between catalog entries and workloads,
never in the middle of a registry write or a rollout wait, so a cancelled
run leaves each touched entry either fully done or untouched.
"""

from __future__ import annotations

import threading

__all__ = ["CancelToken"]


class CancelToken:
    def __init__(self) -> None:
        self._event = threading.Event()
        self._reason: str | None = None

    def cancel(self, reason: str = "cancelled") -> None:
        if not self._event.is_set():
            self._reason = reason
            self._event.set()

    @property
    def requested(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> str | None:
        return self._reason
