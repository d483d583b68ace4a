"""HTTP API exposing the claim ledger."""

from arc_miner.api.server import create_app

__all__ = ["create_app"]
