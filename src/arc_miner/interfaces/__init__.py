"""Protocol interfaces for all arc_miner components."""

from arc_miner.interfaces.events import EventGenerator
from arc_miner.interfaces.faucet import FaucetClient, TokenBalanceReader
from arc_miner.interfaces.feed import TransferFeed
from arc_miner.interfaces.reporter import ClaimReporter
from arc_miner.interfaces.source import ClaimSource
from arc_miner.interfaces.store import ClaimStore

__all__ = [
    "EventGenerator",
    "FaucetClient", "TokenBalanceReader",
    "TransferFeed",
    "ClaimReporter",
    "ClaimSource",
    "ClaimStore",
]
