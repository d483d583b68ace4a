"""arc_miner - simulated mining sessions with on-chain faucet claims."""

__version__ = "0.1.0"
