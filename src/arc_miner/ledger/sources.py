"""Claim sources - the preferred on-chain view and the local fallback."""

from __future__ import annotations

import logging

from arc_miner.errors import NetworkError
from arc_miner.interfaces.feed import TransferFeed
from arc_miner.interfaces.source import ClaimSource
from arc_miner.interfaces.store import ClaimStore
from arc_miner.ledger.filter import filter_claims, transfer_to_entry
from arc_miner.models.records import ClaimLedgerEntry

log = logging.getLogger(__name__)


class FeedClaimSource:
    """Derives entries from the transfer feed at read time. Never persists."""

    name = "feed"

    def __init__(
        self,
        feed: TransferFeed,
        distributor_address: str,
        token_address: str,
        fixed_claim_units: int,
        page_size: int = 100,
    ) -> None:
        self._feed = feed
        self._distributor = distributor_address
        self._token = token_address
        self._units = fixed_claim_units
        self._page_size = page_size

    async def recent_claims(self, limit: int) -> list[ClaimLedgerEntry]:
        transfers = await self._feed.fetch_transfers(self._distributor, self._page_size)
        matched = filter_claims(transfers, self._distributor, self._token, self._units)
        return [transfer_to_entry(tx) for tx in matched][:limit]


class LocalClaimSource:
    """Entries reported by clients and stored locally."""

    name = "local"

    def __init__(self, store: ClaimStore) -> None:
        self._store = store

    async def recent_claims(self, limit: int) -> list[ClaimLedgerEntry]:
        return await self._store.get_claims(limit)


class FallbackClaimSource:
    """Ask ``preferred`` first; on a network failure, silently use ``fallback``."""

    def __init__(self, preferred: ClaimSource, fallback: ClaimSource) -> None:
        self.preferred = preferred
        self.fallback = fallback
        self.name = f"{preferred.name}>{fallback.name}"
        self.last_source: str | None = None

    async def recent_claims(self, limit: int) -> list[ClaimLedgerEntry]:
        try:
            claims = await self.preferred.recent_claims(limit)
            self.last_source = self.preferred.name
            return claims
        except NetworkError as exc:
            log.warning(
                "Claim source %s unavailable, falling back to %s: %s",
                self.preferred.name, self.fallback.name, exc,
            )
        self.last_source = self.fallback.name
        return await self.fallback.recent_claims(limit)
