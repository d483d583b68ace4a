"""Mining runner - drives the engine with asyncio timers."""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable

from arc_miner.engine.decor import MiningLog
from arc_miner.engine.session import MiningEngine
from arc_miner.interfaces.faucet import TokenBalanceReader
from arc_miner.models.events import LogKind
from arc_miner.models.records import ClaimInfo, ClaimResult
from arc_miner.models.session import Device, SessionState

log = logging.getLogger(__name__)


class MiningRunner:
    """Runs the progress ticker and the console ticker for one engine.

    The two loops have independent cadences and are started and cancelled
    together whenever the session enters or leaves Mining. A separate
    poller refreshes the distributor's token balance for display.
    """

    def __init__(
        self,
        engine: MiningEngine,
        mining_log: MiningLog | None = None,
        tick_interval_ms: int = 100,
        log_interval_ms: int = 2_000,
        balance_reader: TokenBalanceReader | None = None,
        distributor_address: str = "",
        balance_poll_interval: float = 10,
    ) -> None:
        self.engine = engine
        self.mining_log = mining_log or MiningLog()
        self._tick_s = tick_interval_ms / 1000
        self._log_s = log_interval_ms / 1000
        self._balance_reader = balance_reader
        self._distributor = distributor_address
        self._balance_poll_s = balance_poll_interval

        self._tick_task: asyncio.Task | None = None
        self._log_task: asyncio.Task | None = None
        self._balance_task: asyncio.Task | None = None
        self._completed = asyncio.Event()
        self.latest_balance: int | None = None

        engine.on_complete(self._on_complete)

    @property
    def timers_running(self) -> bool:
        return any(
            t is not None and not t.done() for t in (self._tick_task, self._log_task)
        )

    # ── Session controls ──────────────────────────────────

    async def start(self, devices: Iterable[Device], claim_info: ClaimInfo | None = None) -> None:
        self.engine.start(devices, claim_info)
        self._completed.clear()
        self.mining_log.reset()
        self.mining_log.record(
            LogKind.INFO, "Connection established to Arc Testnet node...", self._now(),
        )
        self._start_timers()

    async def pause(self) -> None:
        self.engine.pause()
        await self._cancel_timers()

    async def resume(self) -> None:
        self.engine.resume()
        self._start_timers()

    def request_stop(self) -> None:
        self.engine.request_stop()

    async def confirm_stop(self) -> None:
        self.engine.confirm_stop()
        await self._cancel_timers()
        self.mining_log.reset()

    async def claim(self) -> ClaimResult:
        result = await self.engine.claim()
        self.mining_log.reset()
        await self.refresh_balance()
        return result

    async def run_until_complete(self) -> None:
        """Block until the current session reaches 100%."""
        await self._completed.wait()

    async def close(self) -> None:
        await self._cancel_timers()
        await self.stop_balance_polling()

    # ── Timers ────────────────────────────────────────────

    def _now(self) -> float:
        return self.engine.now()

    def _start_timers(self) -> None:
        self._tick_task = asyncio.create_task(self._tick_loop())
        self._log_task = asyncio.create_task(self._log_loop())

    async def _cancel_timers(self) -> None:
        current = asyncio.current_task()
        for task in (self._tick_task, self._log_task):
            if task is None or task is current or task.done():
                continue
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        self._tick_task = None
        self._log_task = None

    async def _tick_loop(self) -> None:
        while self.engine.state == SessionState.MINING:
            self.engine.tick()
            if self.engine.state != SessionState.MINING:
                break
            await asyncio.sleep(self._tick_s)
        if self._log_task is not None and not self._log_task.done():
            self._log_task.cancel()

    async def _log_loop(self) -> None:
        while self.engine.state == SessionState.MINING:
            await asyncio.sleep(self._log_s)
            if self.engine.state != SessionState.MINING:
                break
            event = self.mining_log.next_event(self._now(), self.engine.hashrate)
            log.debug("[%s] %s", event.kind.value, event.message)

    def _on_complete(self, engine: MiningEngine) -> None:
        self.mining_log.record(
            LogKind.REWARD,
            f"Session ended. {engine.claim_amount} ready to claim.",
            self._now(),
        )
        self._completed.set()

    # ── Balance display ───────────────────────────────────

    async def refresh_balance(self) -> int | None:
        if self._balance_reader is None or not self._distributor:
            return None
        try:
            self.latest_balance = await self._balance_reader.balance_of(self._distributor)
        except Exception as exc:
            log.debug("Balance poll failed: %s", exc)
        return self.latest_balance

    def start_balance_polling(self) -> None:
        if self._balance_task is None or self._balance_task.done():
            self._balance_task = asyncio.create_task(self._balance_loop())

    async def stop_balance_polling(self) -> None:
        if self._balance_task is not None:
            self._balance_task.cancel()
            try:
                await self._balance_task
            except asyncio.CancelledError:
                pass
            self._balance_task = None

    async def _balance_loop(self) -> None:
        while True:
            await self.refresh_balance()
            await asyncio.sleep(self._balance_poll_s)
