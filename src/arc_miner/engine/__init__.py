"""Mining session engine, decorative console and timer runner."""

from arc_miner.engine.decor import MiningLog, sample_hashrate
from arc_miner.engine.runner import MiningRunner
from arc_miner.engine.session import MiningEngine

__all__ = ["MiningEngine", "MiningLog", "MiningRunner", "sample_hashrate"]
