"""ClaimSource protocol - one way of answering "what was claimed recently"."""

from __future__ import annotations

from typing import Protocol

from arc_miner.models.records import ClaimLedgerEntry


class ClaimSource(Protocol):

    name: str

    async def recent_claims(self, limit: int) -> list[ClaimLedgerEntry]:
        ...
