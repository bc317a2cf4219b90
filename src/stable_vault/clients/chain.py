"""Web3 client that reads chain state and signs transactions for the vault account.

This module provides the single place where the vault touches an RPC endpoint:
- read calls, retried with exponential backoff on connection errors
- signed transactions, sent once and awaited until a receipt is mined
"""

from __future__ import annotations

import asyncio
from typing import Any

import backoff
from eth_account import Account
from eth_account.signers.local import LocalAccount
from eth_typing import URI, ChecksumAddress
from web3 import Web3
from web3.contract.contract import Contract, ContractFunction
from web3.exceptions import ProviderConnectionError, Web3Exception
from web3.types import TxReceipt

from ..logger import get_logger

logger = get_logger(__name__)


class TransactionReverted(Exception):
    """Raised when a mined transaction has a failed status."""

    def __init__(self, tx_hash: str):
        super().__init__(f"Transaction {tx_hash} reverted")
        self.tx_hash = tx_hash


# Anything that can go wrong between building a transaction and its receipt:
# reverts, RPC errors (nonce, underpriced), receipt timeouts, dropped connections
TX_FAILURES = (Web3Exception, TransactionReverted, OSError)


class ChainClient:
    """Thin async wrapper around a Web3 HTTP provider and a local signer.

    Reads go through ``call`` and may be retried; writes go through
    ``transact`` and are never retried, a failed write surfaces to the caller.
    """

    def __init__(
        self,
        rpc_url: str,
        private_key: str | None = None,
        *,
        receipt_timeout: float = 120.0,
        w3: Web3 | None = None,
    ):
        self.w3 = w3 or Web3(
            Web3.HTTPProvider(URI(rpc_url), request_kwargs={"timeout": 15})
        )
        self.account: LocalAccount | None = (
            Account.from_key(private_key) if private_key else None  # pyrefly: ignore
        )
        self.receipt_timeout = receipt_timeout

    @property
    def address(self) -> ChecksumAddress:
        """Address of the signing account."""
        return self._require_account().address

    def _require_account(self) -> LocalAccount:
        if self.account is None:
            raise ValueError("private_key must be configured to sign transactions")
        return self.account

    def contract(self, address: str, abi: list[dict]) -> Contract:
        return self.w3.eth.contract(address=Web3.to_checksum_address(address), abi=abi)

    @backoff.on_exception(
        backoff.expo,
        ProviderConnectionError,
        max_time=30,
        jitter=backoff.full_jitter,
    )
    async def call(self, fn: ContractFunction, **kwargs: Any) -> Any:
        """Execute a read-only contract call in a worker thread."""
        return await asyncio.to_thread(fn.call, **kwargs)

    @backoff.on_exception(
        backoff.expo,
        ProviderConnectionError,
        max_time=30,
        jitter=backoff.full_jitter,
    )
    async def native_balance(self, address: str) -> int:
        return int(
            await asyncio.to_thread(
                self.w3.eth.get_balance, Web3.to_checksum_address(address)
            )
        )

    @backoff.on_exception(
        backoff.expo,
        ProviderConnectionError,
        max_time=30,
        jitter=backoff.full_jitter,
    )
    async def latest_timestamp(self) -> int:
        block = await asyncio.to_thread(self.w3.eth.get_block, "latest")
        return int(block["timestamp"])

    async def transact(self, fn: ContractFunction, value: int = 0) -> TxReceipt:
        """Sign, send and wait for a contract transaction.

        Raises:
            ContractLogicError: If gas estimation reverts.
            TimeExhausted: If no receipt arrives within ``receipt_timeout``.
            TransactionReverted: If the receipt status is not 1.
        """
        return await asyncio.to_thread(self._transact_sync, fn, value)

    def _transact_sync(self, fn: ContractFunction, value: int) -> TxReceipt:
        account = self._require_account()
        nonce = self.w3.eth.get_transaction_count(account.address, "pending")
        tx = fn.build_transaction(
            {"from": account.address, "nonce": nonce, "value": value}
        )
        signed = account.sign_transaction(tx)
        tx_hash = self.w3.eth.send_raw_transaction(signed.raw_transaction)
        logger.debug("Sent %s (nonce %d): %s", fn.fn_name, nonce, tx_hash.hex())

        receipt = self.w3.eth.wait_for_transaction_receipt(
            tx_hash, timeout=self.receipt_timeout
        )
        if receipt["status"] != 1:
            raise TransactionReverted(tx_hash.hex())
        logger.debug(
            "Mined %s in block %d (gas used %d)",
            fn.fn_name,
            receipt["blockNumber"],
            receipt["gasUsed"],
        )
        return receipt
