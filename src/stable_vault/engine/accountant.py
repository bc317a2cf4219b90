from __future__ import annotations

import asyncio

from ..adapters.token_adapters.base import BaseTokenAdapter
from ..domain import BalanceSnapshot
from ..processors.allocation import calculate_total_value


class PortfolioAccountant:
    """Stateless view over the vault's stable and volatile balances."""

    def __init__(
        self,
        stable: BaseTokenAdapter,
        volatile: BaseTokenAdapter,
        vault_address: str,
    ):
        self.stable = stable
        self.volatile = volatile
        self.vault_address = vault_address

    async def snapshot(self) -> BalanceSnapshot:
        """Read both balances live; nothing is cached between calls."""
        stable_balance, volatile_balance = await asyncio.gather(
            self.stable.balance_of(self.vault_address),
            self.volatile.balance_of(self.vault_address),
        )
        return BalanceSnapshot(stable=stable_balance, volatile=volatile_balance)

    @staticmethod
    def total_value(snapshot: BalanceSnapshot, price: int) -> int:
        return calculate_total_value(snapshot, price)
