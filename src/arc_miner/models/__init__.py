"""Data models for arc_miner."""

from arc_miner.models.config import MinerConfig
from arc_miner.models.events import LogEvent, LogKind
from arc_miner.models.records import (
    ClaimInfo,
    ClaimLedgerEntry,
    ClaimResult,
    TokenTransfer,
    TotalClaimed,
)
from arc_miner.models.session import (
    HASHRATE_BANDS,
    Device,
    Session,
    SessionSnapshot,
    SessionState,
)

__all__ = [
    "MinerConfig",
    "LogEvent", "LogKind",
    "ClaimInfo", "ClaimLedgerEntry", "ClaimResult", "TokenTransfer", "TotalClaimed",
    "HASHRATE_BANDS", "Device", "Session", "SessionSnapshot", "SessionState",
]
