"""Shared fixtures for arc_miner tests."""

from __future__ import annotations

import pytest
from pytest_metadata.plugin import metadata_key

from arc_miner.engine.decor import MiningLog
from arc_miner.engine.session import MiningEngine
from arc_miner.ledger.reconciler import ClaimReconciler
from arc_miner.models.config import MinerConfig
from arc_miner.storage.sqlite import SQLiteClaimStore

from tests.factories import FAUCET, TOKEN, WALLET
from tests.mocks import FakeClock, MockFaucet, MockFeed, MockReporter, ScriptedRng

EXPLORER_BASE = "https://testnet.arcscan.app"


def explorer_link(kind: str, id: str, label: str | None = None) -> str:
    """Build an HTML anchor to the block explorer for the report."""
    url = f"{EXPLORER_BASE}/{kind}/{id}"
    text = label or f"{id[:8]}...{id[-4:]}"
    return f'<a href="{url}" target="_blank">{text}</a>'


# ── Report metadata & explorer links ─────────────────────────────


def pytest_configure(config):
    """Add network info to the HTML report Environment table."""
    meta = config.stash.setdefault(metadata_key, {})
    meta["Network"] = "Arc Testnet"
    meta["Faucet Contract"] = FAUCET
    meta["Token Contract"] = TOKEN


def pytest_html_results_summary(prefix, summary, postfix):
    """Inject clickable explorer links into the report summary."""
    prefix.append(
        '<div style="margin:8px 0;padding:10px;background:#f8f9fa;border:1px solid #dee2e6;'
        'border-radius:4px;font-family:monospace;font-size:13px;">'
        "<strong>Arc Testnet Explorer Links</strong><br/>"
        f'Faucet: {explorer_link("address", FAUCET, FAUCET)}<br/>'
        f'Token: {explorer_link("token", TOKEN, TOKEN)}'
        "</div>"
    )


def make_test_config(**overrides) -> MinerConfig:
    """Build a MinerConfig suitable for testing."""
    defaults = dict(
        faucet_address=FAUCET,
        token_address=TOKEN,
        token_decimals=6,
        session_duration_ms=600_000,
        max_reward=200,
        feed_url="https://feed.test/api",
        feed_page_size=100,
        feed_total_page_size=1000,
        recent_limit=50,
        db_path=":memory:",
    )
    defaults.update(overrides)
    return MinerConfig(**defaults)


@pytest.fixture
def test_config():
    return make_test_config()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def rng():
    return ScriptedRng()


@pytest.fixture
def mock_faucet():
    return MockFaucet(succeed=True)


@pytest.fixture
def mock_reporter():
    return MockReporter()


@pytest.fixture
def engine(clock, rng, mock_faucet, mock_reporter):
    """MiningEngine on a hand-driven clock."""
    return MiningEngine(
        faucet=mock_faucet,
        reporter=mock_reporter,
        wallet_address=WALLET,
        clock=clock,
        wall_clock=lambda: 1_700_000_000.0,
        rng=rng,
    )


@pytest.fixture
def mining_log(rng):
    return MiningLog(rng=rng)


@pytest.fixture
async def store():
    """Initialized in-memory SQLiteClaimStore."""
    s = SQLiteClaimStore(":memory:")
    await s.initialize()
    yield s
    await s.close()


@pytest.fixture
def mock_feed():
    return MockFeed()


@pytest.fixture
def reconciler(test_config, store, mock_feed):
    return ClaimReconciler.from_config(test_config, store, mock_feed)
