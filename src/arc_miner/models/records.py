"""Ledger records, feed rows and chain call results."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone


@dataclass
class ClaimLedgerEntry:
    """One faucet payout, either derived from the feed or stored locally."""

    id: str
    wallet_address: str
    amount: str  # fixed-point decimal string, e.g. "200.000000"
    claimed_at: int  # epoch milliseconds
    transaction_hash: str | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "walletAddress": self.wallet_address,
            "amount": self.amount,
            "transactionHash": self.transaction_hash,
            "claimedAt": _iso(self.claimed_at),
        }


def _iso(epoch_ms: int) -> str:
    dt = datetime.fromtimestamp(epoch_ms / 1000, tz=timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class TokenTransfer:
    """A token transfer row as reported by the explorer feed.

    Fields stay as the raw strings the indexer returns; the claim filter
    decides what parses.
    """

    hash: str
    from_address: str
    to_address: str
    value: str
    token_symbol: str
    token_decimal: str
    timestamp: str  # unix seconds
    contract_address: str


@dataclass
class TotalClaimed:
    """Best-effort sum of faucet payouts seen in the feed."""

    total_claimed: str = "0.00"
    claim_count: int = 0

    def to_dict(self) -> dict:
        return {"totalClaimed": self.total_claimed, "claimCount": self.claim_count}


@dataclass
class ClaimInfo:
    """Per-wallet faucet state read from the contract (smallest token units)."""

    total_claimed: int = 0
    remaining_allowance: int = 0
    next_claim_timestamp: int = 0  # unix seconds, 0 when no cooldown


@dataclass
class ClaimResult:
    """Result of a claim() transaction submission."""

    success: bool
    tx_hash: str | None = None
    error: str | None = None
    error_kind: str | None = None  # "rejected", "reverted", "network", "timeout"
