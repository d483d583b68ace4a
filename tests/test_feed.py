"""Explorer feed client against a mocked HTTP transport."""

from __future__ import annotations

import httpx
import pytest

from arc_miner.errors import FeedError
from arc_miner.ledger.feed import ArcscanTransferFeed

from tests.factories import FAUCET, make_payload, make_row

API = "https://feed.test/api"


def _feed(handler) -> ArcscanTransferFeed:
    return ArcscanTransferFeed(API, timeout=1, transport=httpx.MockTransport(handler))


async def test_query_shape_and_parsing():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(request.url.params)
        return httpx.Response(200, json=make_payload([make_row(1), make_row(2)]))

    transfers = await _feed(handler).fetch_transfers(FAUCET, 100)

    assert seen == {
        "module": "account",
        "action": "tokentx",
        "address": FAUCET,
        "page": "1",
        "offset": "100",
        "sort": "desc",
    }
    assert len(transfers) == 2
    assert transfers[0].from_address == FAUCET
    assert transfers[0].value == "200000000"
    assert transfers[0].timestamp == "1700000000"


async def test_http_error_raises_feed_error():
    feed = _feed(lambda r: httpx.Response(502, text="bad gateway"))
    with pytest.raises(FeedError, match="502"):
        await feed.fetch_transfers(FAUCET, 100)


async def test_transport_error_raises_feed_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(FeedError, match="unreachable"):
        await _feed(handler).fetch_transfers(FAUCET, 100)


async def test_non_json_raises_feed_error():
    feed = _feed(lambda r: httpx.Response(200, text="<html>maintenance</html>"))
    with pytest.raises(FeedError):
        await feed.fetch_transfers(FAUCET, 100)


async def test_error_status_raises_feed_error():
    payload = {"status": "0", "message": "NOTOK", "result": "Max rate limit reached"}
    feed = _feed(lambda r: httpx.Response(200, json=payload))
    with pytest.raises(FeedError, match="NOTOK"):
        await feed.fetch_transfers(FAUCET, 100)


async def test_no_transactions_is_empty_page():
    payload = make_payload([], status="0", message="No transactions found")
    feed = _feed(lambda r: httpx.Response(200, json=payload))
    assert await feed.fetch_transfers(FAUCET, 100) == []


async def test_malformed_rows_are_skipped():
    bad = make_row(2)
    del bad["value"]
    payload = make_payload([make_row(1), bad, "junk"])
    feed = _feed(lambda r: httpx.Response(200, json=payload))

    transfers = await feed.fetch_transfers(FAUCET, 100)
    assert len(transfers) == 1
