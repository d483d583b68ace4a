"""FaucetClient protocol - reads claim state and submits claim() transactions."""

from __future__ import annotations

from typing import Protocol

from arc_miner.models.records import ClaimInfo, ClaimResult


class FaucetClient(Protocol):
    """The external faucet contract that enforces per-wallet lifetime caps."""

    async def claim_info(self, wallet: str) -> ClaimInfo:
        """Read (total_claimed, remaining_allowance, next_claim_timestamp)."""
        ...

    async def submit_claim(self) -> ClaimResult:
        """Sign, send and wait for confirmation of a claim() transaction."""
        ...


class TokenBalanceReader(Protocol):
    """Reads token balances for display."""

    async def balance_of(self, address: str) -> int:
        ...
