"""Configuration loading: TOML file + environment variables."""

from __future__ import annotations

import os
from pathlib import Path

try:
    import tomllib  # Python 3.11+
except ModuleNotFoundError:
    import tomli as tomllib  # type: ignore[no-redef]

from arc_miner.models.config import MinerConfig


def load_config(
    config_path: str | Path | None = None,
    env_prefix: str = "ARC_MINER_",
) -> MinerConfig:
    """Load configuration from a TOML file and env vars.

    Priority (highest wins):
        1. Environment variables (ARC_MINER_SECRET, etc.)
        2. TOML config file
        3. Defaults from MinerConfig
    """
    raw: dict = {}
    if config_path is not None:
        p = Path(config_path).expanduser()
        if p.exists():
            with open(p, "rb") as f:
                raw = tomllib.load(f)

    cfg = MinerConfig()

    # ── Miner section ──────────────────────────────────────
    miner = raw.get("miner", {})
    if v := miner.get("log_level"):
        cfg.log_level = str(v)

    # ── Chain section ──────────────────────────────────────
    chain = raw.get("chain", {})
    if v := chain.get("rpc_url"):
        cfg.rpc_url = str(v)
    if v := chain.get("chain_id"):
        cfg.chain_id = int(v)
    if v := chain.get("faucet_address"):
        cfg.faucet_address = str(v)
    if v := chain.get("token_address"):
        cfg.token_address = str(v)
    if (v := chain.get("token_decimals")) is not None:
        cfg.token_decimals = int(v)
    if v := chain.get("wallet_secret"):
        cfg.wallet_secret = str(v)

    # ── Session section ────────────────────────────────────
    session = raw.get("session", {})
    if v := session.get("duration_ms"):
        cfg.session_duration_ms = int(v)
    if v := session.get("max_reward"):
        cfg.max_reward = int(v)
    if v := session.get("tick_interval_ms"):
        cfg.tick_interval_ms = int(v)
    if v := session.get("log_interval_ms"):
        cfg.log_interval_ms = int(v)
    if v := session.get("balance_poll_interval"):
        cfg.balance_poll_interval = int(v)
    if v := session.get("claim_timeout"):
        cfg.claim_timeout = int(v)

    # ── Feed section ───────────────────────────────────────
    feed = raw.get("feed", {})
    if v := feed.get("url"):
        cfg.feed_url = str(v)
    if v := feed.get("page_size"):
        cfg.feed_page_size = int(v)
    if v := feed.get("total_page_size"):
        cfg.feed_total_page_size = int(v)
    if v := feed.get("timeout"):
        cfg.feed_timeout = int(v)
    if v := feed.get("recent_limit"):
        cfg.recent_limit = int(v)

    # ── Server section ─────────────────────────────────────
    server = raw.get("server", {})
    if v := server.get("host"):
        cfg.host = str(v)
    if v := server.get("port"):
        cfg.port = int(v)
    if v := server.get("reporter_url"):
        cfg.reporter_url = str(v)

    # ── Storage section ────────────────────────────────────
    storage = raw.get("storage", {})
    if v := storage.get("db_path"):
        cfg.db_path = str(v)

    # ── Environment variable overrides (highest priority) ──
    if secret := os.environ.get(f"{env_prefix}SECRET"):
        cfg.wallet_secret = secret
    if rpc := os.environ.get(f"{env_prefix}RPC_URL"):
        cfg.rpc_url = rpc
    if faucet := os.environ.get(f"{env_prefix}FAUCET_ADDRESS"):
        cfg.faucet_address = faucet
    if token := os.environ.get(f"{env_prefix}TOKEN_ADDRESS"):
        cfg.token_address = token
    if feed_url := os.environ.get(f"{env_prefix}FEED_URL"):
        cfg.feed_url = feed_url
    if db_path := os.environ.get(f"{env_prefix}DB_PATH"):
        cfg.db_path = db_path

    # Expand ~ in paths
    if cfg.db_path != ":memory:":
        cfg.db_path = str(Path(cfg.db_path).expanduser())

    return cfg
