"""Mining session state models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class SessionState(str, Enum):
    """Lifecycle of a mining session."""

    IDLE = "idle"
    MINING = "mining"
    PAUSED = "paused"
    COMPLETED = "completed"  # reward ready to claim


class Device(str, Enum):
    """Mining device toggles. Selecting both runs them combined."""

    LOW = "low"
    HIGH = "high"


# Decorative hashrate band per device, MH/s
HASHRATE_BANDS: dict[Device, tuple[float, float]] = {
    Device.LOW: (45.0, 65.0),
    Device.HIGH: (120.0, 160.0),
}


@dataclass
class Session:
    """Mutable timing fields of the single live session.

    All times are milliseconds on the engine's clock. ``start_ms`` is the
    effective start: on resume it is shifted so that ``now - start_ms``
    equals the elapsed time captured at pause.
    """

    state: SessionState = SessionState.IDLE
    devices: frozenset[Device] = field(default_factory=frozenset)
    start_ms: float = 0.0
    elapsed_at_pause: float = 0.0
    progress_at_pause: float = 0.0
    progress: float = 0.0
    completed: bool = False

    def reset(self) -> None:
        self.state = SessionState.IDLE
        self.devices = frozenset()
        self.start_ms = 0.0
        self.elapsed_at_pause = 0.0
        self.progress_at_pause = 0.0
        self.progress = 0.0
        self.completed = False


@dataclass
class SessionSnapshot:
    """JSON-friendly view of the session for display."""

    state: str
    progress: float
    accrued_reward: float
    time_left_ms: int
    elapsed_ms: int
    hashrate: float
    devices: list[str]
    stop_pending: bool
    claim_in_flight: bool
