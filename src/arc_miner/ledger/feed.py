"""Explorer transfer feed - Etherscan-style tokentx API over httpx."""

from __future__ import annotations

import logging

import httpx

from arc_miner.errors import FeedError
from arc_miner.models.records import TokenTransfer

log = logging.getLogger(__name__)

_REQUIRED_FIELDS = ("hash", "from", "to", "value", "contractAddress")


def _row_to_transfer(row: dict) -> TokenTransfer:
    return TokenTransfer(
        hash=str(row["hash"]),
        from_address=str(row["from"]),
        to_address=str(row["to"]),
        value=str(row["value"]),
        token_symbol=str(row.get("tokenSymbol") or ""),
        token_decimal=str(row.get("tokenDecimal") or ""),
        timestamp=str(row.get("timeStamp") or "0"),
        contract_address=str(row.get("contractAddress") or ""),
    )


class ArcscanTransferFeed:
    """Fetches token transfers for an address from the explorer API.

    Query shape:
        GET ?module=account&action=tokentx&address=<addr>&page=1&offset=<N>&sort=desc
    """

    def __init__(
        self,
        api_url: str = "https://testnet.arcscan.app/api",
        timeout: float = 10,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_url = api_url
        self._timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self._timeout, connect=5),
            transport=self._transport,
            follow_redirects=True,
        )

    async def fetch_transfers(self, address: str, offset: int) -> list[TokenTransfer]:
        params = {
            "module": "account",
            "action": "tokentx",
            "address": address,
            "page": 1,
            "offset": offset,
            "sort": "desc",
        }
        try:
            async with self._client() as client:
                resp = await client.get(self._api_url, params=params)
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPStatusError as exc:
            raise FeedError(f"feed HTTP {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise FeedError(f"feed unreachable: {exc}") from exc
        except ValueError as exc:
            raise FeedError("feed returned non-JSON body") from exc

        if not isinstance(data, dict):
            raise FeedError("feed payload is not an object")

        result = data.get("result")
        if data.get("status") != "1":
            # Explorers answer status "0" with an empty list for "No transactions found"
            if result == []:
                return []
            raise FeedError(f"feed status {data.get('status')!r}: {data.get('message', '')}")

        if not isinstance(result, list):
            raise FeedError("feed result is not a list")

        transfers: list[TokenTransfer] = []
        for row in result:
            if not isinstance(row, dict) or any(f not in row for f in _REQUIRED_FIELDS):
                log.debug("Skipping malformed feed row: %r", row)
                continue
            transfers.append(_row_to_transfer(row))

        log.debug("Fetched %d transfers for %s", len(transfers), address[:10])
        return transfers
