"""Exception hierarchy shared by the session engine and the reconciler."""

from __future__ import annotations


class ArcMinerError(Exception):
    """Base class for all arc_miner errors."""


class InvalidConfiguration(ArcMinerError):
    """A session cannot be started with the given devices or allowance."""


class StateError(ArcMinerError):
    """Operation is not valid for the current session state."""


class ClaimInFlight(StateError):
    """A claim transaction is already pending confirmation."""


class ValidationError(ArcMinerError):
    """Malformed claim report input."""


class NetworkError(ArcMinerError):
    """Feed or contract endpoint unreachable. Safe to retry."""


class FeedError(NetworkError):
    """Transfer feed returned an error or an unusable payload."""


class OnChainRejection(ArcMinerError):
    """Claim transaction was rejected by the wallet or reverted on-chain."""

    def __init__(self, message: str, tx_hash: str | None = None) -> None:
        super().__init__(message)
        self.tx_hash = tx_hash
