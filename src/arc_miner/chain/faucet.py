"""Faucet contract client - claimInfo() reads and claim() submission via web3.py."""

from __future__ import annotations

import asyncio
import logging

import aiohttp
from eth_account import Account
from web3 import AsyncWeb3
from web3.exceptions import ContractLogicError, TimeExhausted, Web3Exception

from arc_miner.chain.contracts import ERC20_ABI, FAUCET_ABI
from arc_miner.errors import NetworkError
from arc_miner.models.records import ClaimInfo, ClaimResult

log = logging.getLogger(__name__)

_CONNECTION_ERRORS = (aiohttp.ClientError, OSError, asyncio.TimeoutError)


def _classify_error(exc: Exception) -> str:
    """Map a web3 failure to a ClaimResult error kind."""
    if isinstance(exc, TimeExhausted):
        return "timeout"
    if isinstance(exc, _CONNECTION_ERRORS):
        return "network"
    msg = str(exc).lower()
    if "user rejected" in msg or "denied" in msg:
        return "rejected"
    return "reverted" if isinstance(exc, ContractLogicError) else "rejected"


def _provider(rpc_url: str) -> AsyncWeb3:
    return AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(rpc_url))


class Web3FaucetClient:
    """Talks to the faucet contract that enforces per-wallet lifetime caps.

    Reads need no key. claim() is signed locally with ``wallet_secret`` and
    the call waits for the receipt before reporting success.
    """

    def __init__(
        self,
        rpc_url: str,
        faucet_address: str,
        chain_id: int,
        wallet_secret: str = "",
        claim_timeout: float = 120,
        w3: AsyncWeb3 | None = None,
    ) -> None:
        self._w3 = w3 or _provider(rpc_url)
        self._chain_id = chain_id
        self._claim_timeout = claim_timeout
        self._account = Account.from_key(wallet_secret) if wallet_secret else None
        self._contract = self._w3.eth.contract(
            address=AsyncWeb3.to_checksum_address(faucet_address), abi=FAUCET_ABI,
        )

    @property
    def address(self) -> str:
        return self._account.address if self._account else ""

    async def claim_info(self, wallet: str) -> ClaimInfo:
        try:
            total, remaining, next_ts = await self._contract.functions.claimInfo(
                AsyncWeb3.to_checksum_address(wallet)
            ).call()
        except _CONNECTION_ERRORS as exc:
            raise NetworkError(f"claimInfo failed: {exc}") from exc
        return ClaimInfo(
            total_claimed=int(total),
            remaining_allowance=int(remaining),
            next_claim_timestamp=int(next_ts),
        )

    async def submit_claim(self) -> ClaimResult:
        """Build, sign, send and confirm a claim() transaction."""
        if self._account is None:
            return ClaimResult(
                success=False, error="no wallet secret configured", error_kind="rejected",
            )

        sender = self._account.address
        log.info("Submitting claim() from %s", sender)
        tx_hash: str | None = None

        try:
            nonce = await self._w3.eth.get_transaction_count(sender)
            tx = await self._contract.functions.claim().build_transaction({
                "from": sender,
                "nonce": nonce,
                "chainId": self._chain_id,
            })
            signed = self._account.sign_transaction(tx)
            raw_hash = await self._w3.eth.send_raw_transaction(signed.raw_transaction)
            tx_hash = AsyncWeb3.to_hex(raw_hash)
            log.info("claim() sent (tx=%s), waiting for receipt", tx_hash[:16])

            receipt = await self._w3.eth.wait_for_transaction_receipt(
                raw_hash, timeout=self._claim_timeout,
            )

        except (ContractLogicError, TimeExhausted, Web3Exception, ValueError) as exc:
            kind = _classify_error(exc)
            log.warning("claim() failed: %s (%s)", kind, exc)
            return ClaimResult(success=False, tx_hash=tx_hash, error=str(exc), error_kind=kind)

        except _CONNECTION_ERRORS as exc:
            log.error("claim() network error: %s", exc)
            return ClaimResult(
                success=False, tx_hash=tx_hash, error=str(exc) or "network error",
                error_kind="network",
            )

        if receipt["status"] != 1:
            log.error("claim() reverted (tx=%s)", tx_hash[:16])
            return ClaimResult(
                success=False, tx_hash=tx_hash, error="transaction reverted",
                error_kind="reverted",
            )

        log.info("claim() confirmed in block %s (tx=%s)", receipt["blockNumber"], tx_hash[:16])
        return ClaimResult(success=True, tx_hash=tx_hash)


class Web3TokenReader:
    """Reads ERC-20 balances for display (the faucet's remaining pool)."""

    def __init__(self, rpc_url: str, token_address: str, w3: AsyncWeb3 | None = None) -> None:
        self._w3 = w3 or _provider(rpc_url)
        self._contract = self._w3.eth.contract(
            address=AsyncWeb3.to_checksum_address(token_address), abi=ERC20_ABI,
        )

    async def balance_of(self, address: str) -> int:
        try:
            balance = await self._contract.functions.balanceOf(
                AsyncWeb3.to_checksum_address(address)
            ).call()
        except _CONNECTION_ERRORS as exc:
            raise NetworkError(f"balanceOf failed: {exc}") from exc
        return int(balance)
