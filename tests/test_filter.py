"""Claim filter: exact fixed-amount, fixed-origin, fixed-token matching."""

from __future__ import annotations

from decimal import Decimal

import pytest

from arc_miner.errors import FeedError
from arc_miner.ledger.filter import (
    filter_claims,
    is_faucet_claim,
    transfer_amount,
    transfer_to_entry,
)
from arc_miner.units import format_units, parse_amount

from tests.factories import FAUCET, OTHER_WALLET, TOKEN, WALLET, make_transfer

UNITS = 200_000000


def _match(tx) -> bool:
    return is_faucet_claim(tx, FAUCET, TOKEN, UNITS)


def test_exact_payout_matches():
    assert _match(make_transfer(value="200000000"))


def test_addresses_compare_case_insensitively():
    tx = make_transfer(from_address=FAUCET.upper().replace("0X", "0x"),
                       contract_address=TOKEN.lower())
    assert _match(tx)


@pytest.mark.parametrize(
    "overrides",
    [
        {"value": "199000000"},  # partial
        {"value": "200000001"},
        {"value": "400000000"},
        {"from_address": WALLET},  # not the faucet
        {"from_address": FAUCET, "to_address": FAUCET, "contract_address": OTHER_WALLET},
        {"contract_address": OTHER_WALLET},  # wrong token
        {"value": "not-a-number"},
        {"value": ""},
        {"value": "200.000000"},
        {"value": "200_000000"},
        {"value": "+200000000"},
        {"value": " 200000000 "},
        {"value": "\u0662" * 9},  # non-ASCII digits
    ],
)
def test_non_payouts_are_excluded(overrides):
    assert not _match(make_transfer(**overrides))


def test_filter_keeps_order_and_drops_noise():
    transfers = [
        make_transfer(1),
        make_transfer(2, value="199000000"),
        make_transfer(3, value="garbage"),
        make_transfer(4),
    ]
    kept = filter_claims(transfers, FAUCET, TOKEN, UNITS)
    assert [t.hash for t in kept] == [transfers[0].hash, transfers[3].hash]


def test_transfer_to_entry_mapping():
    tx = make_transfer(7, timestamp="1700000000")
    entry = transfer_to_entry(tx)

    assert entry.id == tx.hash[:8]
    assert entry.wallet_address == WALLET
    assert entry.amount == "200.000000"
    assert entry.transaction_hash == tx.hash
    assert entry.claimed_at == 1_700_000_000_000
    assert entry.to_dict()["claimedAt"] == "2023-11-14T22:13:20.000Z"


def test_out_of_range_timestamp_is_a_feed_error():
    with pytest.raises(FeedError):
        transfer_to_entry(make_transfer(timestamp="99999999999999"))


def test_missing_decimals_default_to_six():
    tx = make_transfer(token_decimal="")
    assert transfer_to_entry(tx).amount == "200.000000"
    assert transfer_amount(tx) == Decimal("200")


def test_format_units():
    assert format_units(200_000000, 6) == "200.000000"
    assert format_units(1, 6) == "0.000001"
    assert format_units(0, 2) == "0.00"


@pytest.mark.parametrize("raw", ["200.000000", "0", "0.5", " 12.25 "])
def test_parse_amount_accepts(raw):
    assert parse_amount(raw) is not None


@pytest.mark.parametrize(
    "raw", ["", "-1", "abc", "NaN", "Infinity", "1e", "1e3", "2E-2", "+5", "1_000", ".5", "5."],
)
def test_parse_amount_rejects(raw):
    assert parse_amount(raw) is None
