from __future__ import annotations

import logging

from web3 import Web3

from ...abi import QUOTER_ABI, SWAP_ROUTER_ABI
from ...clients.chain import TX_FAILURES, ChainClient
from ...domain import SwapParams
from ...errors import SwapFailure
from .base import BaseQuoter, BaseSwapRouter

logger = logging.getLogger(__name__)


class UniswapV3Router(BaseSwapRouter):
    """Adapter for the Uniswap V3 ``ISwapRouter.exactInputSingle`` entrypoint."""

    def __init__(self, client: ChainClient, router_address: str):
        self.client = client
        self._address = Web3.to_checksum_address(router_address)
        self.contract = client.contract(self._address, SWAP_ROUTER_ABI)

    @property
    def address(self) -> str:
        return self._address

    @property
    def adapter_name(self) -> str:
        return "uniswap_v3"

    async def exact_input_single(self, params: SwapParams) -> int:
        """Simulate, then send, an ``exactInputSingle`` transaction.

        The simulation surfaces reverts (expired deadline, empty pool,
        missing allowance, output below minimum) before anything is signed.
        """
        fn = self.contract.functions.exactInputSingle(
            (
                Web3.to_checksum_address(params.token_in),
                Web3.to_checksum_address(params.token_out),
                params.fee,
                Web3.to_checksum_address(params.recipient),
                params.deadline,
                params.amount_in,
                params.amount_out_minimum,
                params.sqrt_price_limit_x96,
            )
        )
        try:
            expected_out = await self.client.call(
                fn, transaction={"from": self.client.address}
            )
            await self.client.transact(fn)
        except TX_FAILURES as e:
            raise SwapFailure(f"Swap failed: {e}") from e

        logger.debug(
            "exactInputSingle %d %s -> %s (expected out %d)",
            params.amount_in,
            params.token_in,
            params.token_out,
            expected_out,
        )
        return int(expected_out)


class UniswapV3Quoter(BaseQuoter):
    """Adapter for the Uniswap V3 ``Quoter.quoteExactInputSingle`` call."""

    def __init__(self, client: ChainClient, quoter_address: str):
        self.client = client
        self.contract = client.contract(quoter_address, QUOTER_ABI)

    @property
    def adapter_name(self) -> str:
        return "uniswap_v3_quoter"

    async def quote(
        self,
        token_in: str,
        token_out: str,
        fee: int,
        amount_in: int,
        sqrt_price_limit_x96: int = 0,
    ) -> int:
        # The quoter is non-view on-chain but is only ever eth_call'ed here
        amount_out = await self.client.call(
            self.contract.functions.quoteExactInputSingle(
                Web3.to_checksum_address(token_in),
                Web3.to_checksum_address(token_out),
                fee,
                amount_in,
                sqrt_price_limit_x96,
            )
        )
        return int(amount_out)
