"""HTTP claim reporter against a mocked transport."""

from __future__ import annotations

import json

import httpx
import pytest

from arc_miner.errors import NetworkError, ValidationError
from arc_miner.ledger.reporter import HttpClaimReporter

from tests.factories import WALLET


async def test_posts_entry():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.method, str(request.url), json.loads(request.content)))
        return httpx.Response(200, json={"id": "x"})

    reporter = HttpClaimReporter("http://ledger.test/", transport=httpx.MockTransport(handler))
    await reporter.report_claim(WALLET, "200.000000", "0xabc")

    assert seen == [(
        "POST",
        "http://ledger.test/api/claim-history",
        {"walletAddress": WALLET, "amount": "200.000000", "transactionHash": "0xabc"},
    )]


async def test_validation_error_surfaces():
    transport = httpx.MockTransport(lambda r: httpx.Response(400, json={"error": "bad amount"}))
    reporter = HttpClaimReporter("http://ledger.test", transport=transport)
    with pytest.raises(ValidationError, match="bad amount"):
        await reporter.report_claim(WALLET, "x", None)


async def test_unreachable_ledger_is_network_error():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    reporter = HttpClaimReporter("http://ledger.test", transport=httpx.MockTransport(handler))
    with pytest.raises(NetworkError):
        await reporter.report_claim(WALLET, "200.000000", None)
