"""Mining session engine - the reward-accrual state machine.

Progress is always derived from the clock:

    progress = (now - effective_start) / session_duration * 100, clamped to [0, 100]

Pausing snapshots the elapsed time; resuming moves the effective start to
``now - elapsed_at_pause`` so no wall-clock time accrues while paused.
The accrued reward is a pure function of progress and is display-only:
the faucet contract pays a fixed amount per completed session.
"""

from __future__ import annotations

import logging
import random
import time
from typing import Callable, Iterable

from arc_miner.engine.decor import sample_hashrate
from arc_miner.errors import (
    ClaimInFlight,
    InvalidConfiguration,
    NetworkError,
    OnChainRejection,
    StateError,
)
from arc_miner.interfaces.events import EventGenerator
from arc_miner.interfaces.faucet import FaucetClient
from arc_miner.interfaces.reporter import ClaimReporter
from arc_miner.models.records import ClaimInfo, ClaimResult
from arc_miner.models.session import Device, Session, SessionSnapshot, SessionState
from arc_miner.units import format_units

log = logging.getLogger(__name__)

SESSION_DURATION_MS = 600_000
MAX_REWARD = 200

_RETRYABLE_KINDS = ("network", "timeout")


def _monotonic_ms() -> float:
    return time.monotonic() * 1000


class MiningEngine:
    """Owns the single live session for one client.

    Every method is synchronous except claim(), so under asyncio a tick can
    never observe a half-written pause snapshot.
    """

    def __init__(
        self,
        faucet: FaucetClient | None = None,
        reporter: ClaimReporter | None = None,
        wallet_address: str = "",
        session_duration_ms: int = SESSION_DURATION_MS,
        max_reward: int = MAX_REWARD,
        token_decimals: int = 6,
        clock: Callable[[], float] | None = None,
        wall_clock: Callable[[], float] | None = None,
        rng: EventGenerator | None = None,
    ) -> None:
        self._faucet = faucet
        self._reporter = reporter
        self._wallet_address = wallet_address
        self._duration = session_duration_ms
        self._max_reward = max_reward
        self._decimals = token_decimals
        self._clock = clock or _monotonic_ms
        self._wall_clock = wall_clock or time.time
        self._rng = rng or random.Random()

        self._session = Session()
        self._hashrate = 0.0
        self._stop_requested = False
        self._claim_in_flight = False
        self._listeners: list[Callable[[MiningEngine], None]] = []

    # ── Read-only views ───────────────────────────────────

    @property
    def state(self) -> SessionState:
        return self._session.state

    @property
    def devices(self) -> frozenset[Device]:
        return self._session.devices

    @property
    def session_duration_ms(self) -> int:
        return self._duration

    @property
    def max_reward(self) -> int:
        return self._max_reward

    @property
    def progress(self) -> float:
        return self.current_progress()

    @property
    def accrued_reward(self) -> float:
        return min(self._max_reward, self.current_progress() / 100 * self._max_reward)

    @property
    def hashrate(self) -> float:
        return self._hashrate if self.state == SessionState.MINING else 0.0

    @property
    def stop_pending(self) -> bool:
        return self._stop_requested

    @property
    def claim_in_flight(self) -> bool:
        return self._claim_in_flight

    @property
    def claim_amount(self) -> str:
        """Fixed payout of a completed session as a token decimal string."""
        return format_units(self._max_reward * 10**self._decimals, self._decimals)

    def now(self) -> float:
        return self._clock()

    def elapsed_ms(self) -> float:
        s = self._session
        if s.state == SessionState.MINING:
            return min(float(self._duration), max(0.0, self._clock() - s.start_ms))
        if s.state == SessionState.PAUSED:
            return s.elapsed_at_pause
        if s.state == SessionState.COMPLETED:
            return float(self._duration)
        return 0.0

    def time_left_ms(self) -> float:
        if self.state == SessionState.IDLE:
            return float(self._duration)
        return max(0.0, self._duration - self.elapsed_ms())

    def current_progress(self) -> float:
        s = self._session
        if s.state == SessionState.MINING:
            computed = min(100.0, self.elapsed_ms() / self._duration * 100)
            return max(s.progress, computed)
        if s.state == SessionState.PAUSED:
            return s.progress_at_pause
        if s.state == SessionState.COMPLETED:
            return 100.0
        return 0.0

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            state=self.state.value,
            progress=self.current_progress(),
            accrued_reward=self.accrued_reward,
            time_left_ms=int(self.time_left_ms()),
            elapsed_ms=int(self.elapsed_ms()),
            hashrate=self.hashrate,
            devices=sorted(d.value for d in self.devices),
            stop_pending=self._stop_requested,
            claim_in_flight=self._claim_in_flight,
        )

    def on_complete(self, callback: Callable[[MiningEngine], None]) -> None:
        """Register a callback fired once when a session reaches 100%."""
        self._listeners.append(callback)

    # ── Transitions ───────────────────────────────────────

    def start(self, devices: Iterable[Device], claim_info: ClaimInfo | None = None) -> None:
        """Idle -> Mining.

        ``claim_info`` is the wallet's faucet state read from the contract;
        a wallet at its lifetime cap or still in cooldown cannot start.
        """
        if self.state != SessionState.IDLE:
            raise StateError(f"cannot start from {self.state.value}")

        selected = frozenset(Device(d) for d in devices)
        if not selected:
            raise InvalidConfiguration("select at least one mining device")

        if claim_info is not None:
            if claim_info.remaining_allowance <= 0:
                raise InvalidConfiguration("wallet has reached its lifetime claim cap")
            wait = claim_info.next_claim_timestamp - self._wall_clock()
            if wait > 0:
                raise InvalidConfiguration(f"cooldown active for another {int(wait)}s")

        self._session.reset()
        self._stop_requested = False
        self._session.devices = selected
        self._session.start_ms = self._clock()
        self._session.state = SessionState.MINING
        self._hashrate = sample_hashrate(selected, self._rng)
        log.info("Mining started (devices=%s)", ",".join(sorted(d.value for d in selected)))

    def pause(self) -> None:
        """Mining -> Paused, freezing progress and elapsed time.

        If the deadline has already passed the session completes instead,
        keeping its reward claimable; check ``state`` afterwards.
        """
        if self.state != SessionState.MINING:
            raise StateError(f"cannot pause from {self.state.value}")

        self.tick()
        if self.state == SessionState.COMPLETED:
            log.info("Session completed before it could be paused")
            return

        s = self._session
        s.elapsed_at_pause = self.elapsed_ms()
        s.progress_at_pause = self.current_progress()
        s.state = SessionState.PAUSED
        self._stop_requested = False
        log.info("Mining paused at %.2f%%", s.progress_at_pause)

    def resume(self) -> None:
        """Paused -> Mining without a jump in progress."""
        if self.state != SessionState.PAUSED:
            raise StateError(f"cannot resume from {self.state.value}")

        s = self._session
        s.start_ms = self._clock() - s.elapsed_at_pause
        s.state = SessionState.MINING
        self._stop_requested = False
        log.info("Mining resumed at %.2f%%", s.progress_at_pause)

    def tick(self) -> float:
        """Recompute progress from the clock. No-op unless Mining."""
        s = self._session
        if s.state != SessionState.MINING:
            return self.current_progress()

        s.progress = self.current_progress()
        self._hashrate = sample_hashrate(s.devices, self._rng)
        if s.progress >= 100.0 and not s.completed:
            self._complete()
        return s.progress

    def _complete(self) -> None:
        s = self._session
        s.progress = 100.0
        s.completed = True
        s.state = SessionState.COMPLETED
        self._stop_requested = False
        log.info("Mining complete: %d reward ready to claim", self._max_reward)
        for callback in list(self._listeners):
            try:
                callback(self)
            except Exception as exc:
                log.error("Completion listener failed: %s", exc, exc_info=True)

    # ── Destructive stop (two-step) ───────────────────────

    def request_stop(self) -> None:
        """Arm a stop. Nothing is discarded until confirm_stop()."""
        if self.state == SessionState.IDLE:
            raise StateError("no session to stop")
        if self._claim_in_flight:
            raise ClaimInFlight("cannot stop while a claim is pending")
        self._stop_requested = True
        log.info("Stop requested at %.2f%%, awaiting confirmation", self.current_progress())

    def cancel_stop(self) -> None:
        self._stop_requested = False

    def confirm_stop(self) -> None:
        """Discard all progress and reward and return to Idle."""
        if not self._stop_requested:
            raise StateError("stop must be requested before it is confirmed")
        if self._claim_in_flight:
            raise ClaimInFlight("cannot stop while a claim is pending")
        forfeited = self.accrued_reward
        self._reset()
        log.info("Session stopped, %.4f unclaimed reward forfeited", forfeited)

    def _reset(self) -> None:
        self._session.reset()
        self._hashrate = 0.0
        self._stop_requested = False

    # ── Claim ─────────────────────────────────────────────

    async def claim(self) -> ClaimResult:
        """Submit claim() to the faucet and reset on confirmation.

        On failure the session stays Completed so the claim can be retried.
        """
        if self.state != SessionState.COMPLETED:
            raise StateError(f"cannot claim from {self.state.value}")
        if self._claim_in_flight:
            raise ClaimInFlight("a claim transaction is already pending")
        if self._faucet is None:
            raise StateError("no faucet client configured")

        self._claim_in_flight = True
        try:
            result = await self._faucet.submit_claim()
        finally:
            self._claim_in_flight = False

        if not result.success:
            message = result.error or "claim failed"
            log.warning("Claim failed (%s): %s", result.error_kind or "unknown", message)
            if result.error_kind in _RETRYABLE_KINDS:
                raise NetworkError(message)
            raise OnChainRejection(message, tx_hash=result.tx_hash)

        amount = self.claim_amount
        self._reset()
        log.info("Claim confirmed: %s (tx=%s)", amount, (result.tx_hash or "?")[:16])

        if self._reporter is not None:
            try:
                await self._reporter.report_claim(
                    self._wallet_address, amount, result.tx_hash,
                )
            except Exception as exc:
                log.warning("Could not report claim %s to ledger: %s", result.tx_hash, exc)

        return result
