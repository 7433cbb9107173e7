"""Release intent extracted from a trigger message.

The trigger is free text (usually the last commit message). Tags embedded in
it decide which release activities run:

- ``[seed]``: import third-party images and roll out their workloads
- ``[app]``: build first-party images and roll out their workloads

Matching is case-sensitive substring containment; anything else in the
message is ignored.
"""

from __future__ import annotations

from dataclasses import dataclass

__all__ = ["APP_TAG", "SEED_TAG", "IntentSet", "parse_intent"]

SEED_TAG = "[seed]"
APP_TAG = "[app]"


@dataclass(frozen=True, slots=True)
class IntentSet:
    seed_third_party: bool
    build_first_party: bool

    @property
    def is_empty(self) -> bool:
        return not (self.seed_third_party or self.build_first_party)

    def __str__(self) -> str:
        names = [
            name
            for name, on in (("seed", self.seed_third_party), ("app", self.build_first_party))
            if on
        ]
        return ", ".join(names) if names else "none"


def parse_intent(message: str) -> IntentSet:
    """Derive the intent flags from a trigger message. Never fails."""
    return IntentSet(
        seed_third_party=SEED_TAG in message,
        build_first_party=APP_TAG in message,
    )
