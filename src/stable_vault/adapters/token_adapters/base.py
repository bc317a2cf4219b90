from __future__ import annotations

from abc import ABC, abstractmethod


class BaseTokenAdapter(ABC):
    """Abstract fungible-balance holder (ERC-20 semantics)."""

    @property
    @abstractmethod
    def address(self) -> str:
        """Token contract address."""
        ...

    @property
    @abstractmethod
    def adapter_name(self) -> str:
        """Return the name of this adapter."""
        ...

    @abstractmethod
    async def balance_of(self, holder: str) -> int:
        """Return the balance of ``holder`` in base units."""
        ...

    @abstractmethod
    async def transfer(self, to: str, amount: int) -> bool:
        """Move ``amount`` from the vault to ``to``. False when the token rejects it."""
        ...

    @abstractmethod
    async def can_transfer(self, to: str, amount: int) -> bool:
        """Whether ``transfer(to, amount)`` would succeed right now. Sends nothing."""
        ...

    @abstractmethod
    async def approve(self, spender: str, amount: int) -> bool:
        """Set the allowance of ``spender`` to exactly ``amount``."""
        ...

    @abstractmethod
    async def allowance(self, owner: str, spender: str) -> int:
        ...


class BaseWrappedNativeAdapter(BaseTokenAdapter):
    """Token that mints 1:1 against native currency via ``deposit``."""

    @abstractmethod
    async def native_balance_of(self, holder: str) -> int:
        """Return the unwrapped native balance of ``holder``."""
        ...

    @abstractmethod
    async def deposit(self, amount: int) -> bool:
        """Wrap ``amount`` of the vault's native balance."""
        ...
