from __future__ import annotations

from abc import ABC, abstractmethod

from ...domain import SwapParams


class BaseSwapRouter(ABC):
    """Abstract venue that executes exact-input, single-pool swaps."""

    @property
    @abstractmethod
    def address(self) -> str:
        """Address the vault must approve as spender."""
        ...

    @property
    @abstractmethod
    def adapter_name(self) -> str:
        ...

    @abstractmethod
    async def exact_input_single(self, params: SwapParams) -> int:
        """Execute the swap and return the venue-reported output amount.

        Raises:
            SwapFailure: If the venue rejects or does not complete the swap.
        """
        ...


class BaseQuoter(ABC):
    """Abstract read-only quote source backed by the venue's pricing curve."""

    @property
    @abstractmethod
    def adapter_name(self) -> str:
        ...

    @abstractmethod
    async def quote(
        self,
        token_in: str,
        token_out: str,
        fee: int,
        amount_in: int,
        sqrt_price_limit_x96: int = 0,
    ) -> int:
        """Simulated output for ``amount_in``. Never changes venue state."""
        ...
