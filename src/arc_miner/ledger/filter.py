"""Claim filter - decides which feed transfers are genuine faucet payouts.

A transfer counts if and only if all of these hold:

1. sender is the distributor (faucet) contract, case-insensitive
2. token contract is the expected token, case-insensitive
3. the integer value equals exactly one fixed payout in smallest units

Rows whose value is not a plain string of ASCII digits are dropped, not raised.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import Decimal

from arc_miner.errors import FeedError
from arc_miner.models.records import ClaimLedgerEntry, TokenTransfer
from arc_miner.units import DEFAULT_DECIMALS, format_units

log = logging.getLogger(__name__)

ENTRY_ID_LENGTH = 8


def _parse_int(value: str) -> int | None:
    if not isinstance(value, str) or not (value.isascii() and value.isdecimal()):
        return None
    return int(value)


def _claimed_at_ms(tx: TokenTransfer) -> int:
    seconds = _parse_int(tx.timestamp) or 0
    try:
        datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as exc:
        raise FeedError(
            f"feed row {tx.hash[:10]} has out-of-range timestamp {tx.timestamp}"
        ) from exc
    return seconds * 1000


def _decimals(tx: TokenTransfer) -> int:
    parsed = _parse_int(tx.token_decimal)
    return parsed if parsed is not None and parsed >= 0 else DEFAULT_DECIMALS


def is_faucet_claim(
    tx: TokenTransfer,
    distributor_address: str,
    token_address: str,
    fixed_claim_units: int,
) -> bool:
    value = _parse_int(tx.value)
    if value is None:
        return False
    return (
        (tx.from_address or "").lower() == distributor_address.lower()
        and (tx.contract_address or "").lower() == token_address.lower()
        and value == fixed_claim_units
    )


def filter_claims(
    transfers: list[TokenTransfer],
    distributor_address: str,
    token_address: str,
    fixed_claim_units: int,
) -> list[TokenTransfer]:
    matched = [
        tx for tx in transfers
        if is_faucet_claim(tx, distributor_address, token_address, fixed_claim_units)
    ]
    if len(matched) != len(transfers):
        log.debug("Claim filter kept %d of %d transfers", len(matched), len(transfers))
    return matched


def transfer_to_entry(tx: TokenTransfer) -> ClaimLedgerEntry:
    """Map a matched transfer to a ledger entry (feed time is unix seconds).

    Raises FeedError for a timestamp no datetime can represent, so the
    caller treats the payload as malformed.
    """
    return ClaimLedgerEntry(
        id=tx.hash[:ENTRY_ID_LENGTH],
        wallet_address=tx.to_address,
        amount=format_units(int(tx.value), _decimals(tx)),
        transaction_hash=tx.hash,
        claimed_at=_claimed_at_ms(tx),
    )


def transfer_amount(tx: TokenTransfer) -> Decimal:
    return Decimal(int(tx.value)).scaleb(-_decimals(tx))
