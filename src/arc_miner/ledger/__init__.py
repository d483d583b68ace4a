"""Claim ledger: feed reconciliation, local fallback and reporting."""

from arc_miner.ledger.feed import ArcscanTransferFeed
from arc_miner.ledger.reconciler import ClaimReconciler
from arc_miner.ledger.reporter import HttpClaimReporter
from arc_miner.ledger.sources import FallbackClaimSource, FeedClaimSource, LocalClaimSource

__all__ = [
    "ArcscanTransferFeed",
    "ClaimReconciler",
    "HttpClaimReporter",
    "FallbackClaimSource", "FeedClaimSource", "LocalClaimSource",
]
