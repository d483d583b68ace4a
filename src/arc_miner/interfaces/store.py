"""ClaimStore protocol - local fallback storage for reported claims."""

from __future__ import annotations

from typing import Protocol

from arc_miner.models.records import ClaimLedgerEntry


class ClaimStore(Protocol):
    """Append-only keyed store with insert and ordered-range reads."""

    async def initialize(self) -> None:
        ...

    async def close(self) -> None:
        ...

    async def create_claim(
        self, wallet_address: str, amount: str, transaction_hash: str | None = None,
    ) -> ClaimLedgerEntry:
        ...

    async def get_claims(self, limit: int = 50) -> list[ClaimLedgerEntry]:
        """Most recent entries, claimed_at descending."""
        ...

    async def get_claims_by_wallet(self, wallet_address: str) -> list[ClaimLedgerEntry]:
        """Entries for one wallet (case-insensitive), claimed_at descending."""
        ...
