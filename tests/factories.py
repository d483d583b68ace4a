"""Synthetic feed data factories for testing."""

from __future__ import annotations

from arc_miner.models.records import TokenTransfer

FAUCET = "0xBd736A5D744A6364dd74B12Bb679d66360d7AeD9"
TOKEN = "0x3600000000000000000000000000000000000000"
WALLET = "0x157b1af849D0A48Fa7622AE44BB6606447C1ed57"
OTHER_WALLET = "0x9999999999999999999999999999999999999999"


def make_tx_hash(n: int = 1) -> str:
    return "0x" + f"{n:064x}"


def make_row(
    n: int = 1,
    from_address: str = FAUCET,
    to_address: str = WALLET,
    value: str = "200000000",
    token_decimal: str = "6",
    timestamp: str = "1700000000",
    contract_address: str = TOKEN,
    token_symbol: str = "USDC",
) -> dict:
    """Explorer tokentx row as JSON."""
    return {
        "hash": make_tx_hash(n),
        "from": from_address,
        "to": to_address,
        "value": value,
        "tokenSymbol": token_symbol,
        "tokenDecimal": token_decimal,
        "timeStamp": timestamp,
        "contractAddress": contract_address,
    }


def make_transfer(n: int = 1, **overrides) -> TokenTransfer:
    row = make_row(n, **overrides)
    return TokenTransfer(
        hash=row["hash"],
        from_address=row["from"],
        to_address=row["to"],
        value=row["value"],
        token_symbol=row["tokenSymbol"],
        token_decimal=row["tokenDecimal"],
        timestamp=row["timeStamp"],
        contract_address=row["contractAddress"],
    )


def make_payload(rows: list[dict], status: str = "1", message: str = "OK") -> dict:
    return {"status": status, "message": message, "result": rows}
