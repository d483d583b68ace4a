"""EventGenerator protocol - randomness behind the decorative console."""

from __future__ import annotations

from typing import Protocol


class EventGenerator(Protocol):
    """Subset of random.Random used for hashrate jitter and fake events.

    Tests inject a scripted sequence to make the console deterministic.
    """

    def random(self) -> float:
        ...

    def uniform(self, a: float, b: float) -> float:
        ...
