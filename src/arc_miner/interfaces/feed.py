"""TransferFeed protocol - third-party indexer of token transfers."""

from __future__ import annotations

from typing import Protocol

from arc_miner.models.records import TokenTransfer


class TransferFeed(Protocol):
    """Read-only, append-only feed of token transfers for one address."""

    async def fetch_transfers(self, address: str, offset: int) -> list[TokenTransfer]:
        """Return the newest ``offset`` transfers, newest first.

        Raises FeedError when the indexer is unreachable or answers garbage.
        """
        ...
