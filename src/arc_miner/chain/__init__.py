"""EVM collaborators: faucet contract and token balance reads."""

from arc_miner.chain.faucet import Web3FaucetClient, Web3TokenReader

__all__ = ["Web3FaucetClient", "Web3TokenReader"]
