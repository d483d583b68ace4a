"""CLI entry point for arc_miner."""

from __future__ import annotations

import asyncio
import logging
import signal
import sys

import click
from aiohttp import web

from arc_miner.api.server import create_app
from arc_miner.chain.faucet import Web3FaucetClient, Web3TokenReader
from arc_miner.config import load_config
from arc_miner.engine.runner import MiningRunner
from arc_miner.engine.session import MiningEngine
from arc_miner.errors import ArcMinerError, NetworkError, OnChainRejection
from arc_miner.ledger.feed import ArcscanTransferFeed
from arc_miner.ledger.reconciler import ClaimReconciler
from arc_miner.ledger.reporter import HttpClaimReporter
from arc_miner.models.config import MinerConfig
from arc_miner.models.session import Device, SessionState
from arc_miner.storage.sqlite import SQLiteClaimStore
from arc_miner.units import format_units

log = logging.getLogger(__name__)


def _fmt_time(ms: float) -> str:
    seconds = int(ms // 1000)
    return f"{seconds // 60:02d}:{seconds % 60:02d}"


def _tokens(cfg: MinerConfig, units: int) -> str:
    return f"{format_units(units, cfg.token_decimals)} USDC"


def _require_secret(cfg: MinerConfig) -> None:
    """Exit with error if no wallet secret is configured."""
    if not cfg.wallet_secret:
        click.echo("Error: No wallet secret configured.", err=True)
        click.echo("Set ARC_MINER_SECRET env var or wallet_secret in config.", err=True)
        sys.exit(1)


def _install_signal_handler(callback) -> None:
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, callback)
        except NotImplementedError:
            # Windows doesn't support add_signal_handler
            pass


async def _open_reconciler(cfg: MinerConfig) -> tuple[ClaimReconciler, SQLiteClaimStore]:
    store = SQLiteClaimStore(cfg.db_path)
    await store.initialize()
    feed = ArcscanTransferFeed(cfg.feed_url, cfg.feed_timeout)
    return ClaimReconciler.from_config(cfg, store, feed), store


@click.group()
@click.option("-c", "--config", "config_path", default=None, help="Path to config TOML file")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, verbose: bool) -> None:
    """arc-miner - simulated mining sessions with faucet claims."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    cfg = load_config(config_path)
    ctx.obj["config"] = cfg

    level = logging.DEBUG if verbose else getattr(logging, cfg.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


# ── Ledger service ─────────────────────────────────────


@cli.command()
@click.option("--host", default=None, help="Bind address (default from config)")
@click.option("--port", type=int, default=None, help="Bind port (default from config)")
@click.pass_context
def serve(ctx: click.Context, host: str | None, port: int | None) -> None:
    """Run the claim history HTTP API."""
    cfg: MinerConfig = ctx.obj["config"]
    host = host or cfg.host
    port = port or cfg.port

    async def _serve():
        reconciler, store = await _open_reconciler(cfg)
        runner = web.AppRunner(create_app(reconciler, cfg.recent_limit))
        await runner.setup()
        stop = asyncio.Event()
        _install_signal_handler(stop.set)
        try:
            await web.TCPSite(runner, host, port).start()
            log.info("Claim ledger listening on http://%s:%d", host, port)
            await stop.wait()
        finally:
            await runner.cleanup()
            await store.close()
            log.info("Claim ledger shut down cleanly")

    asyncio.run(_serve())


@cli.command()
@click.option("--wallet", default=None, help="Only locally reported claims for this wallet")
@click.option(
    "--limit", type=click.IntRange(min=1), default=None, help="Max entries for the recent view",
)
@click.pass_context
def history(ctx: click.Context, wallet: str | None, limit: int | None) -> None:
    """Show recent faucet claims (feed first, local fallback)."""
    cfg: MinerConfig = ctx.obj["config"]

    async def _history():
        reconciler, store = await _open_reconciler(cfg)
        try:
            if wallet:
                claims = await reconciler.list_claims_for_wallet(wallet)
            else:
                claims = await reconciler.list_recent_claims(limit or cfg.recent_limit)
        finally:
            await store.close()

        if not claims:
            click.echo("No claims yet")
            return
        for c in claims:
            d = c.to_dict()
            click.echo(f"{d['claimedAt']}  {c.wallet_address}  {c.amount}  {c.transaction_hash or '-'}")

    asyncio.run(_history())


@cli.command()
@click.pass_context
def total(ctx: click.Context) -> None:
    """Show total claimed from the faucet (best effort)."""
    cfg: MinerConfig = ctx.obj["config"]

    async def _total():
        reconciler, store = await _open_reconciler(cfg)
        try:
            result = await reconciler.aggregate_total_claimed()
        finally:
            await store.close()
        click.echo(f"Total claimed: {result.total_claimed} USDC ({result.claim_count} claims)")

    asyncio.run(_total())


# ── Info ───────────────────────────────────────────────


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show configuration."""
    cfg: MinerConfig = ctx.obj["config"]
    click.echo(f"RPC URL:    {cfg.rpc_url} (chain {cfg.chain_id})")
    click.echo(f"Faucet:     {cfg.faucet_address}")
    click.echo(f"Token:      {cfg.token_address} ({cfg.token_decimals} decimals)")
    click.echo(f"Session:    {_fmt_time(cfg.session_duration_ms)} for {cfg.max_reward} USDC")
    click.echo(f"Feed:       {cfg.feed_url}")
    click.echo(f"Ledger:     {cfg.reporter_url}")
    click.echo(f"DB path:    {cfg.db_path}")
    click.echo(f"Secret:     {'***configured***' if cfg.wallet_secret else '(not set)'}")


@cli.command()
@click.pass_context
def info(ctx: click.Context) -> None:
    """Query wallet claim allowance and the faucet pool balance."""
    cfg: MinerConfig = ctx.obj["config"]
    _require_secret(cfg)

    async def _info():
        faucet = Web3FaucetClient(cfg.rpc_url, cfg.faucet_address, cfg.chain_id, cfg.wallet_secret)
        token = Web3TokenReader(cfg.rpc_url, cfg.token_address)
        claim_info = await faucet.claim_info(faucet.address)
        pool = await token.balance_of(cfg.faucet_address)

        click.echo(f"Address:    {faucet.address}")
        click.echo(f"Claimed:    {_tokens(cfg, claim_info.total_claimed)}")
        click.echo(f"Remaining:  {_tokens(cfg, claim_info.remaining_allowance)}")
        if claim_info.next_claim_timestamp:
            click.echo(f"Next claim: unix {claim_info.next_claim_timestamp}")
        click.echo(f"Pool:       {_tokens(cfg, pool)}")

    try:
        asyncio.run(_info())
    except NetworkError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)


# ── Mining ─────────────────────────────────────────────


@cli.command()
@click.option(
    "--device", "devices", multiple=True, type=click.Choice([d.value for d in Device]),
    help="Mining device to enable (repeat for combined)",
)
@click.option("--yes", "-y", is_flag=True, help="Claim without a confirmation prompt")
@click.pass_context
def mine(ctx: click.Context, devices: tuple[str, ...], yes: bool) -> None:
    """Run one mining session and claim the reward.

    Ctrl-C pauses the session and offers to continue or stop. Stopping
    forfeits everything accrued so far.
    """
    cfg: MinerConfig = ctx.obj["config"]
    _require_secret(cfg)
    if not devices:
        click.echo("Error: select at least one --device.", err=True)
        sys.exit(1)

    async def _mine():
        faucet = Web3FaucetClient(
            cfg.rpc_url, cfg.faucet_address, cfg.chain_id, cfg.wallet_secret, cfg.claim_timeout,
        )
        engine = MiningEngine(
            faucet=faucet,
            reporter=HttpClaimReporter(cfg.reporter_url),
            wallet_address=faucet.address,
            session_duration_ms=cfg.session_duration_ms,
            max_reward=cfg.max_reward,
            token_decimals=cfg.token_decimals,
        )
        runner = MiningRunner(
            engine,
            tick_interval_ms=cfg.tick_interval_ms,
            log_interval_ms=cfg.log_interval_ms,
            balance_reader=Web3TokenReader(cfg.rpc_url, cfg.token_address),
            distributor_address=cfg.faucet_address,
            balance_poll_interval=cfg.balance_poll_interval,
        )
        interrupted = asyncio.Event()
        _install_signal_handler(interrupted.set)

        try:
            await runner.start([Device(d) for d in devices], await faucet.claim_info(faucet.address))
            runner.start_balance_polling()
            if not await _watch(runner, interrupted):
                return
            await _claim(runner, cfg, yes)
        finally:
            await runner.close()

    try:
        asyncio.run(_mine())
    except ArcMinerError as exc:
        click.echo(f"\nError: {exc}", err=True)
        sys.exit(1)


async def _watch(runner: MiningRunner, interrupted: asyncio.Event) -> bool:
    """Render progress until completion. Returns False if the user stopped."""
    engine = runner.engine
    seq = 0
    while engine.state != SessionState.COMPLETED:
        if interrupted.is_set():
            interrupted.clear()
            if engine.state == SessionState.MINING:
                await runner.pause()
            if engine.state == SessionState.COMPLETED:
                break
            click.echo("")
            snap = engine.snapshot()
            click.echo(f"Mining paused at {snap.progress:.0f}% ({snap.accrued_reward:.2f} USDC pending)")
            if click.confirm("Continue mining?", default=True):
                await runner.resume()
                continue
            runner.request_stop()
            if click.confirm("Stopping forfeits all unclaimed reward. Stop?", default=False):
                await runner.confirm_stop()
                click.echo("Session stopped.")
                return False
            engine.cancel_stop()
            await runner.resume()
            continue

        for event in runner.mining_log.since(seq):
            click.echo(f"\r> {event.message}".ljust(72))
        seq = runner.mining_log.sequence

        snap = engine.snapshot()
        click.echo(
            f"\r[{snap.progress:6.2f}%] {_fmt_time(snap.time_left_ms)} left  "
            f"{snap.hashrate:7.2f} MH/s  pending {snap.accrued_reward:.4f} USDC",
            nl=False,
        )
        try:
            await asyncio.wait_for(runner.run_until_complete(), timeout=1)
        except asyncio.TimeoutError:
            pass

    click.echo("\nSession ended. Ready to claim.")
    return True


async def _claim(runner: MiningRunner, cfg: MinerConfig, yes: bool) -> None:
    amount = runner.engine.claim_amount
    while True:
        if not yes and not click.confirm(f"Withdraw {amount} USDC?", default=True):
            click.echo("Reward left unclaimed.")
            return
        try:
            result = await runner.claim()
        except OnChainRejection as exc:
            click.echo(f"Claim failed: {exc}", err=True)
        except NetworkError as exc:
            click.echo(f"Claim failed, network error (retryable): {exc}", err=True)
        else:
            click.echo(f"Claim successful! tx {result.tx_hash}")
            if runner.latest_balance is not None:
                click.echo(f"Faucet pool: {_tokens(cfg, runner.latest_balance)}")
            return
        if yes or not click.confirm("Retry claim?", default=True):
            return


if __name__ == "__main__":
    cli()
