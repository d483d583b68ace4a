"""Claim ledger reconciler - the four claim-history operations."""

from __future__ import annotations

import logging
from decimal import Decimal

from arc_miner.errors import NetworkError, ValidationError
from arc_miner.interfaces.feed import TransferFeed
from arc_miner.interfaces.source import ClaimSource
from arc_miner.interfaces.store import ClaimStore
from arc_miner.ledger.filter import filter_claims, transfer_amount
from arc_miner.ledger.sources import FallbackClaimSource, FeedClaimSource, LocalClaimSource
from arc_miner.models.config import MinerConfig
from arc_miner.models.records import ClaimLedgerEntry, TotalClaimed
from arc_miner.units import parse_amount

log = logging.getLogger(__name__)


class ClaimReconciler:
    """Builds the claim history from the feed, with local storage as fallback.

    Locally reported claims are only ever written to the store; feed-derived
    entries are computed on read and never written back.
    """

    def __init__(
        self,
        store: ClaimStore,
        feed: TransferFeed,
        distributor_address: str,
        token_address: str,
        fixed_claim_units: int,
        page_size: int = 100,
        total_page_size: int = 1000,
        source: ClaimSource | None = None,
    ) -> None:
        self._store = store
        self._feed = feed
        self._distributor = distributor_address
        self._token = token_address
        self._units = fixed_claim_units
        self._total_page_size = total_page_size
        self.source: ClaimSource = source or FallbackClaimSource(
            preferred=FeedClaimSource(
                feed, distributor_address, token_address, fixed_claim_units, page_size,
            ),
            fallback=LocalClaimSource(store),
        )

    @classmethod
    def from_config(
        cls, cfg: MinerConfig, store: ClaimStore, feed: TransferFeed,
    ) -> ClaimReconciler:
        return cls(
            store=store,
            feed=feed,
            distributor_address=cfg.faucet_address,
            token_address=cfg.token_address,
            fixed_claim_units=cfg.fixed_claim_units,
            page_size=cfg.feed_page_size,
            total_page_size=cfg.feed_total_page_size,
        )

    async def record_local_claim(
        self,
        wallet_address: str,
        amount: str,
        transaction_hash: str | None = None,
    ) -> ClaimLedgerEntry:
        if not isinstance(wallet_address, str) or not wallet_address.strip():
            raise ValidationError("walletAddress is required")
        if not isinstance(amount, str) or parse_amount(amount) is None:
            raise ValidationError("amount must be a non-negative decimal string")
        if transaction_hash is not None and not isinstance(transaction_hash, str):
            raise ValidationError("transactionHash must be a string")

        entry = await self._store.create_claim(
            wallet_address.strip(), amount.strip(), transaction_hash or None,
        )
        log.info(
            "Recorded local claim %s: %s for %s", entry.id, entry.amount, entry.wallet_address,
        )
        return entry

    async def list_recent_claims(self, limit: int = 50) -> list[ClaimLedgerEntry]:
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
            raise ValidationError("limit must be a positive integer")
        return await self.source.recent_claims(limit)

    async def list_claims_for_wallet(self, wallet_address: str) -> list[ClaimLedgerEntry]:
        return await self._store.get_claims_by_wallet(wallet_address)

    async def aggregate_total_claimed(self) -> TotalClaimed:
        """Sum payouts over a large feed page. Zero on any feed failure."""
        try:
            transfers = await self._feed.fetch_transfers(
                self._distributor, self._total_page_size,
            )
        except NetworkError as exc:
            log.warning("Total claimed unavailable, reporting zero: %s", exc)
            return TotalClaimed()

        matched = filter_claims(transfers, self._distributor, self._token, self._units)
        total = sum((transfer_amount(tx) for tx in matched), Decimal(0))
        return TotalClaimed(total_claimed=f"{total:.2f}", claim_count=len(matched))
