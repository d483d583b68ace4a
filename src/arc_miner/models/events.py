"""Decorative mining console events."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class LogKind(str, Enum):
    INFO = "info"
    SHARE = "share"
    BLOCK = "block"
    REWARD = "reward"


@dataclass(frozen=True)
class LogEvent:
    """A single line in the mining console. Cosmetic only."""

    kind: LogKind
    message: str
    timestamp_ms: float
