"""Result type for explicit error handling.

Release steps return ``Ok(value)`` or ``Err(error)`` instead of raising, so
a failed registry query or rollout is a value the orchestrator can record
and carry into the summary. Callers branch with ``match``:

    match registry.list_tags("rabbitmq"):
        case Ok(tags):
            present = "3.12-management" in tags
        case Err(error):
            console.warning(error.message)
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar

U = TypeVar("U")


@dataclass(frozen=True, slots=True)
class Ok[T]:
    """Step succeeded with ``value``."""

    value: T

    def map(self, f: Callable[[T], U]) -> Ok[U]:
        return Ok(f(self.value))

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err[E]:
    """Step failed with ``error``; ``map`` passes it through untouched."""

    error: E

    def map(self, f: Callable[[object], object]) -> Err[E]:
        del f
        return self

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


type Result[T, E] = Ok[T] | Err[E]
