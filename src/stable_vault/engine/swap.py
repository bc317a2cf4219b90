from __future__ import annotations

import logging
from typing import Callable

from ..adapters.swap_adapters.base import BaseSwapRouter
from ..adapters.token_adapters.base import BaseTokenAdapter
from ..constants import DEFAULT_POOL_FEE, DEFAULT_TRADE_DEADLINE_SECONDS
from ..domain import SwapFill, SwapParams
from ..errors import (
    ApprovalFailure,
    InsufficientBalance,
    InvalidAmount,
    SwapFailure,
)

logger = logging.getLogger(__name__)


class SwapVenue:
    """Bounded single-pool exchange between the vault's two assets.

    Each swap grants the router an allowance of exactly the input amount,
    calls the router once and measures what actually arrived. If the router
    call fails for any reason the allowance is revoked and the failure is
    raised as ``SwapFailure``, so a failed swap leaves no standing approval
    behind.
    """

    def __init__(
        self,
        router: BaseSwapRouter,
        *,
        stable: BaseTokenAdapter,
        volatile: BaseTokenAdapter,
        vault_address: str,
        clock: Callable[[], int],
        pool_fee: int = DEFAULT_POOL_FEE,
        deadline_seconds: int = DEFAULT_TRADE_DEADLINE_SECONDS,
    ):
        self.router = router
        self.stable = stable
        self.volatile = volatile
        self.vault_address = vault_address
        self.clock = clock
        self.pool_fee = pool_fee
        self.deadline_seconds = deadline_seconds

    async def sell(self, volatile_amount_in: int, min_amount_out: int = 0) -> SwapFill:
        """Swap exactly ``volatile_amount_in`` volatile units for stable."""
        return await self._swap(
            self.volatile, self.stable, volatile_amount_in, min_amount_out
        )

    async def buy(self, stable_amount_in: int, min_amount_out: int = 0) -> SwapFill:
        """Spend exactly ``stable_amount_in`` stable units on volatile."""
        return await self._swap(
            self.stable, self.volatile, stable_amount_in, min_amount_out
        )

    async def _swap(
        self,
        token_in: BaseTokenAdapter,
        token_out: BaseTokenAdapter,
        amount_in: int,
        min_amount_out: int,
    ) -> SwapFill:
        if amount_in <= 0:
            raise InvalidAmount(f"Swap amount must be positive, got {amount_in}")

        held = await token_in.balance_of(self.vault_address)
        if amount_in > held:
            raise InsufficientBalance(
                f"Swap needs {amount_in} of {token_in.address} but vault holds {held}"
            )

        out_before = await token_out.balance_of(self.vault_address)

        if not await token_in.approve(self.router.address, amount_in):
            raise ApprovalFailure(
                f"{token_in.address} rejected approval of {amount_in} for {self.router.address}"
            )

        params = SwapParams(
            token_in=token_in.address,
            token_out=token_out.address,
            fee=self.pool_fee,
            recipient=self.vault_address,
            deadline=self.clock() + self.deadline_seconds,
            amount_in=amount_in,
            amount_out_minimum=min_amount_out,
        )
        logger.info(
            "Swapping %d %s for %s via %s (min out %d, deadline %d)",
            amount_in,
            token_in.address,
            token_out.address,
            self.router.adapter_name,
            min_amount_out,
            params.deadline,
        )

        try:
            await self.router.exact_input_single(params)
        except SwapFailure:
            await self._revoke_allowance(token_in)
            raise
        except Exception as e:
            await self._revoke_allowance(token_in)
            raise SwapFailure(f"Swap failed: {e}") from e

        out_after = await token_out.balance_of(self.vault_address)
        fill = SwapFill(
            token_in=token_in.address,
            token_out=token_out.address,
            amount_in=amount_in,
            amount_out=out_after - out_before,
        )
        logger.info("Swap filled: %d in, %d out", fill.amount_in, fill.amount_out)
        return fill

    async def _revoke_allowance(self, token: BaseTokenAdapter) -> None:
        try:
            revoked = await token.approve(self.router.address, 0)
        except Exception as e:
            revoked = False
            logger.error("Allowance revocation raised: %s", e)
        if not revoked:
            logger.error(
                "Could not revoke %s allowance for %s after failed swap",
                token.address,
                self.router.address,
            )
