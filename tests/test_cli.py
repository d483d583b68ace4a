"""CLI commands that need no network."""

from __future__ import annotations

from click.testing import CliRunner

from arc_miner.cli import cli


def test_status_hides_secret(tmp_path, monkeypatch):
    monkeypatch.setenv("ARC_MINER_SECRET", "0x" + "11" * 32)
    monkeypatch.setenv("ARC_MINER_DB_PATH", str(tmp_path / "claims.db"))

    result = CliRunner().invoke(cli, ["status"])

    assert result.exit_code == 0
    assert "***configured***" in result.output
    assert "11" * 32 not in result.output
    assert "10:00 for 200 USDC" in result.output


def test_mine_requires_secret(monkeypatch):
    monkeypatch.delenv("ARC_MINER_SECRET", raising=False)
    result = CliRunner().invoke(cli, ["mine", "--device", "low"])
    assert result.exit_code == 1
    assert "No wallet secret configured" in result.output


def test_total_with_unreachable_feed(tmp_path, monkeypatch):
    monkeypatch.setenv("ARC_MINER_FEED_URL", "http://127.0.0.1:9/api")
    monkeypatch.setenv("ARC_MINER_DB_PATH", str(tmp_path / "claims.db"))

    result = CliRunner().invoke(cli, ["total"])

    assert result.exit_code == 0
    assert "Total claimed: 0.00 USDC (0 claims)" in result.output
