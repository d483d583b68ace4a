"""ClaimReporter protocol - hands confirmed claims to the ledger service."""

from __future__ import annotations

from typing import Protocol


class ClaimReporter(Protocol):

    async def report_claim(
        self, wallet_address: str, amount: str, transaction_hash: str | None,
    ) -> None:
        ...
