"""Configuration models for the miner and the claim ledger service."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class MinerConfig:
    """Complete arc_miner configuration."""

    log_level: str = "info"

    # Chain
    rpc_url: str = "https://rpc.testnet.arc.network"
    chain_id: int = 5042002
    faucet_address: str = "0xBd736A5D744A6364dd74B12Bb679d66360d7AeD9"
    token_address: str = "0x3600000000000000000000000000000000000000"
    token_decimals: int = 6
    wallet_secret: str = ""  # loaded from env var ARC_MINER_SECRET

    # Session
    session_duration_ms: int = 600_000  # 10 minutes
    max_reward: int = 200  # whole tokens per completed session
    tick_interval_ms: int = 100
    log_interval_ms: int = 2_000
    balance_poll_interval: int = 10  # seconds
    claim_timeout: int = 120  # seconds to wait for a receipt

    # Transfer feed
    feed_url: str = "https://testnet.arcscan.app/api"
    feed_page_size: int = 100
    feed_total_page_size: int = 1000
    feed_timeout: int = 10  # seconds
    recent_limit: int = 50

    # Server
    host: str = "127.0.0.1"
    port: int = 5000
    reporter_url: str = "http://127.0.0.1:5000"

    # Storage
    db_path: str = "~/.arc_miner/claims.db"

    @property
    def fixed_claim_units(self) -> int:
        """Exact on-chain value of one faucet payout, in the token's smallest unit."""
        return self.max_reward * 10**self.token_decimals
