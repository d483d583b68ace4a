"""Decorative console: share/block ordering and isolation from rewards."""

from __future__ import annotations

from arc_miner.engine.decor import MiningLog, sample_hashrate
from arc_miner.models.events import LogKind
from arc_miner.models.session import Device

from tests.mocks import ScriptedRng

SHARE_ROLL = 0.3
BLOCK_ROLL = 0.01
INFO_ROLL = 0.9


def _kinds(log: MiningLog) -> list[LogKind]:
    return [e.kind for e in log.events]


def test_share_gated_until_first_block():
    log = MiningLog(rng=ScriptedRng([SHARE_ROLL, SHARE_ROLL, BLOCK_ROLL, SHARE_ROLL]))
    for i in range(4):
        log.next_event(now_ms=i, hashrate=50.0)

    assert _kinds(log) == [LogKind.INFO, LogKind.INFO, LogKind.BLOCK, LogKind.SHARE]


def test_reset_rearms_gate():
    log = MiningLog(rng=ScriptedRng([BLOCK_ROLL, SHARE_ROLL]))
    log.next_event(0, 50.0)
    log.next_event(1, 50.0)
    assert log.block_seen

    log.reset()
    assert not log.block_seen
    assert log.events == []
    log.record(LogKind.SHARE, "share", 2)
    assert _kinds(log) == [LogKind.INFO]


def test_no_share_ever_precedes_a_block():
    rolls = [SHARE_ROLL, INFO_ROLL, SHARE_ROLL, BLOCK_ROLL, SHARE_ROLL, INFO_ROLL, SHARE_ROLL]
    log = MiningLog(rng=ScriptedRng(rolls))
    for i in range(40):
        log.next_event(i, 55.0)

    kinds = _kinds(log)
    first_block = kinds.index(LogKind.BLOCK)
    assert LogKind.SHARE not in kinds[:first_block]
    assert LogKind.SHARE in kinds[first_block:]


def test_cosmetic_counter_only_moves_after_block():
    log = MiningLog(rng=ScriptedRng([SHARE_ROLL, BLOCK_ROLL, SHARE_ROLL]))
    log.next_event(0, 50.0)
    assert log.display_reward == 0.0
    log.next_event(1, 50.0)
    log.next_event(2, 50.0)
    assert log.display_reward > 0.0


def test_buffer_is_bounded_and_since_tracks_sequence():
    log = MiningLog(rng=ScriptedRng([INFO_ROLL]), max_events=5)
    for i in range(12):
        log.next_event(i, 50.0)

    assert len(log.events) == 5
    assert log.sequence == 12
    assert [e.timestamp_ms for e in log.since(10)] == [10, 11]
    assert log.since(12) == []


def test_stream_is_lazy():
    log = MiningLog(rng=ScriptedRng([INFO_ROLL]))
    stream = log.stream(clock=lambda: 7.0, hashrate=lambda: 60.0)
    assert log.events == []

    event = next(stream)
    assert event.kind == LogKind.INFO
    assert "60.00" in event.message
    assert len(log.events) == 1


def test_sample_hashrate_adds_combined_devices():
    rng = ScriptedRng()
    assert sample_hashrate({Device.LOW}, rng) == 55.0
    assert sample_hashrate({Device.HIGH}, rng) == 140.0
    assert sample_hashrate({Device.LOW, Device.HIGH}, rng) == 195.0
