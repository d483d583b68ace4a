"""SQLite implementation of the ClaimStore protocol."""

from __future__ import annotations

import time
import uuid
from pathlib import Path

import aiosqlite

from arc_miner.models.records import ClaimLedgerEntry

SCHEMA = """
-- Locally reported claims (fallback when the feed is unreachable)
CREATE TABLE IF NOT EXISTS claim_history (
    id TEXT PRIMARY KEY,
    wallet_address TEXT NOT NULL,
    amount TEXT NOT NULL,
    transaction_hash TEXT,
    claimed_at INTEGER NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_claim_history_claimed_at ON claim_history(claimed_at);
CREATE INDEX IF NOT EXISTS idx_claim_history_wallet
    ON claim_history(wallet_address COLLATE NOCASE);
"""


def _now_ms() -> int:
    return int(time.time() * 1000)


def _row_to_entry(row: aiosqlite.Row) -> ClaimLedgerEntry:
    return ClaimLedgerEntry(
        id=row["id"],
        wallet_address=row["wallet_address"],
        amount=row["amount"],
        transaction_hash=row["transaction_hash"],
        claimed_at=row["claimed_at"],
    )


class SQLiteClaimStore:
    """SQLite-backed implementation of the ClaimStore protocol."""

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path
        self._db: aiosqlite.Connection | None = None

    async def initialize(self) -> None:
        if self._db_path != ":memory:":
            Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)
        self._db = await aiosqlite.connect(self._db_path)
        self._db.row_factory = aiosqlite.Row
        await self._db.executescript(SCHEMA)
        await self._db.commit()

    async def close(self) -> None:
        if self._db:
            await self._db.close()
            self._db = None

    @property
    def db(self) -> aiosqlite.Connection:
        assert self._db is not None, "Store not initialized. Call initialize() first."
        return self._db

    async def create_claim(
        self,
        wallet_address: str,
        amount: str,
        transaction_hash: str | None = None,
    ) -> ClaimLedgerEntry:
        entry = ClaimLedgerEntry(
            id=str(uuid.uuid4()),
            wallet_address=wallet_address,
            amount=amount,
            transaction_hash=transaction_hash,
            claimed_at=_now_ms(),
        )
        await self.db.execute(
            "INSERT INTO claim_history"
            " (id, wallet_address, amount, transaction_hash, claimed_at)"
            " VALUES (?, ?, ?, ?, ?)",
            (
                entry.id, entry.wallet_address, entry.amount,
                entry.transaction_hash, entry.claimed_at,
            ),
        )
        await self.db.commit()
        return entry

    async def get_claims(self, limit: int = 50) -> list[ClaimLedgerEntry]:
        async with self.db.execute(
            "SELECT * FROM claim_history ORDER BY claimed_at DESC, rowid DESC LIMIT ?",
            (limit,),
        ) as cur:
            return [_row_to_entry(row) async for row in cur]

    async def get_claims_by_wallet(self, wallet_address: str) -> list[ClaimLedgerEntry]:
        async with self.db.execute(
            "SELECT * FROM claim_history WHERE lower(wallet_address) = lower(?)"
            " ORDER BY claimed_at DESC, rowid DESC",
            (wallet_address,),
        ) as cur:
            return [_row_to_entry(row) async for row in cur]
