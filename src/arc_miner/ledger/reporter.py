"""HTTP claim reporter - POSTs confirmed claims to the ledger service."""

from __future__ import annotations

import logging

import httpx

from arc_miner.errors import NetworkError, ValidationError

log = logging.getLogger(__name__)


class HttpClaimReporter:
    """Reports a confirmed claim to ``POST /api/claim-history``."""

    def __init__(
        self,
        base_url: str = "http://127.0.0.1:5000",
        timeout: float = 10,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = f"{base_url.rstrip('/')}/api/claim-history"
        self._timeout = timeout
        self._transport = transport

    async def report_claim(
        self, wallet_address: str, amount: str, transaction_hash: str | None,
    ) -> None:
        body = {"walletAddress": wallet_address, "amount": amount}
        if transaction_hash:
            body["transactionHash"] = transaction_hash

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport,
            ) as client:
                resp = await client.post(self._url, json=body)
        except httpx.HTTPError as exc:
            raise NetworkError(f"ledger unreachable: {exc}") from exc

        if resp.status_code == 400:
            raise ValidationError(resp.json().get("error", "rejected by ledger"))
        if resp.status_code >= 300:
            raise NetworkError(f"ledger HTTP {resp.status_code}")
        log.info("Reported claim %s to ledger", (transaction_hash or "?")[:16])
