"""Decorative mining console - fake hashrate, shares and blocks.

Nothing in here feeds back into session progress or the claim amount.
"""

from __future__ import annotations

import logging
import random
from collections import deque
from typing import Callable, Iterable, Iterator

from arc_miner.interfaces.events import EventGenerator
from arc_miner.models.events import LogEvent, LogKind
from arc_miner.models.session import HASHRATE_BANDS, Device

log = logging.getLogger(__name__)

# Roll thresholds for next_event(): [0, BLOCK) block, [BLOCK, SHARE) share, rest info
BLOCK_CHANCE = 0.08
SHARE_CHANCE = 0.45

MAX_EVENTS = 200


def sample_hashrate(devices: Iterable[Device], rng: EventGenerator) -> float:
    """Jittered hashrate in MH/s; combined devices add up."""
    return sum(rng.uniform(*HASHRATE_BANDS[d]) for d in sorted(devices, key=lambda d: d.value))


class MiningLog:
    """Bounded, append-only console of cosmetic mining events.

    A share can only be logged once a block has been found since the last
    reset(); until then a share roll degrades to an info line.
    """

    def __init__(
        self,
        rng: EventGenerator | None = None,
        max_events: int = MAX_EVENTS,
    ) -> None:
        self._rng = rng or random.Random()
        self._events: deque[LogEvent] = deque(maxlen=max_events)
        self._seq = 0  # total events ever recorded
        self._block_seen = False
        self.display_reward = 0.0  # cosmetic counter, never claimed

    @property
    def block_seen(self) -> bool:
        return self._block_seen

    @property
    def events(self) -> list[LogEvent]:
        return list(self._events)

    @property
    def sequence(self) -> int:
        return self._seq

    def reset(self) -> None:
        self._events.clear()
        self._seq = 0
        self._block_seen = False
        self.display_reward = 0.0

    def record(self, kind: LogKind, message: str, now_ms: float) -> LogEvent:
        if kind == LogKind.SHARE and not self._block_seen:
            kind = LogKind.INFO
            message = "Waiting for first block before submitting shares..."
        if kind == LogKind.BLOCK:
            self._block_seen = True
        event = LogEvent(kind=kind, message=message, timestamp_ms=now_ms)
        self._events.append(event)
        self._seq += 1
        return event

    def next_event(self, now_ms: float, hashrate: float) -> LogEvent:
        """Roll the dice for one console line."""
        roll = self._rng.random()
        if roll < BLOCK_CHANCE:
            return self.record(LogKind.BLOCK, "Block candidate found, propagating...", now_ms)
        if roll < SHARE_CHANCE:
            if self._block_seen:
                self.display_reward += self._rng.uniform(0.01, 0.05)
            return self.record(
                LogKind.SHARE, f"Share accepted @ {hashrate:.2f} MH/s", now_ms,
            )
        return self.record(LogKind.INFO, f"Hashrate: {hashrate:.2f} MH/s", now_ms)

    def since(self, seq: int) -> list[LogEvent]:
        """Events recorded after sequence number ``seq`` that are still buffered."""
        newer = self._seq - seq
        if newer <= 0:
            return []
        return list(self._events)[-newer:]

    def stream(self, clock: Callable[[], float], hashrate: Callable[[], float]) -> Iterator[LogEvent]:
        """Lazily generate console events, one per next()."""
        while True:
            yield self.next_event(clock(), hashrate())
