from __future__ import annotations

import logging

from web3 import Web3
from web3.exceptions import BadFunctionCallOutput, ContractLogicError

from ...abi import ERC20_ABI, WRAPPED_NATIVE_ABI
from ...clients.chain import TX_FAILURES, ChainClient
from .base import BaseTokenAdapter, BaseWrappedNativeAdapter

logger = logging.getLogger(__name__)

class ERC20TokenAdapter(BaseTokenAdapter):
    """ERC-20 token held by the client's signing account."""

    abi: list[dict] = ERC20_ABI

    def __init__(self, client: ChainClient, token_address: str, symbol: str = ""):
        self.client = client
        self._address = Web3.to_checksum_address(token_address)
        self.symbol = symbol or self._address[:8]
        self.contract = client.contract(self._address, self.abi)

    @property
    def address(self) -> str:
        return self._address

    @property
    def adapter_name(self) -> str:
        return "erc20"

    async def balance_of(self, holder: str) -> int:
        try:
            balance = await self.client.call(
                self.contract.functions.balanceOf(Web3.to_checksum_address(holder))
            )
        except BadFunctionCallOutput as e:
            raise ValueError(f"{self.symbol} balanceOf failed: {e}") from e
        return int(balance)

    async def allowance(self, owner: str, spender: str) -> int:
        allowance = await self.client.call(
            self.contract.functions.allowance(
                Web3.to_checksum_address(owner), Web3.to_checksum_address(spender)
            )
        )
        return int(allowance)

    async def transfer(self, to: str, amount: int) -> bool:
        fn = self.contract.functions.transfer(Web3.to_checksum_address(to), amount)
        return await self._send(fn, f"transfer {amount} to {to}")

    async def can_transfer(self, to: str, amount: int) -> bool:
        fn = self.contract.functions.transfer(Web3.to_checksum_address(to), amount)
        try:
            ok = await self.client.call(fn, transaction={"from": self.client.address})
        except (ContractLogicError, BadFunctionCallOutput) as e:
            logger.warning(
                "%s transfer %d to %s would revert: %s", self.symbol, amount, to, e
            )
            return False
        return bool(ok)

    async def approve(self, spender: str, amount: int) -> bool:
        fn = self.contract.functions.approve(Web3.to_checksum_address(spender), amount)
        return await self._send(fn, f"approve {amount} for {spender}")

    async def _send(self, fn, description: str, value: int = 0) -> bool:
        try:
            await self.client.transact(fn, value=value)
        except TX_FAILURES as e:
            logger.warning("%s %s failed: %s", self.symbol, description, e)
            return False
        logger.debug("%s %s succeeded", self.symbol, description)
        return True


class WrappedNativeTokenAdapter(ERC20TokenAdapter, BaseWrappedNativeAdapter):
    """WETH-style token: ERC-20 plus payable ``deposit``."""

    abi = WRAPPED_NATIVE_ABI

    @property
    def adapter_name(self) -> str:
        return "wrapped_native"

    async def native_balance_of(self, holder: str) -> int:
        return await self.client.native_balance(holder)

    async def deposit(self, amount: int) -> bool:
        return await self._send(
            self.contract.functions.deposit(), f"deposit {amount}", value=amount
        )
