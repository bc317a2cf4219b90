from __future__ import annotations

from abc import ABC, abstractmethod

from ...domain import RoundData


class BasePriceSource(ABC):
    """Abstract read-only price source for the volatile asset."""

    @property
    @abstractmethod
    def adapter_name(self) -> str:
        """Return the name of this adapter."""
        ...

    @abstractmethod
    async def latest_round_data(self) -> RoundData:
        """Return the most recent answer of the feed."""
        ...

    @abstractmethod
    async def decimals(self) -> int:
        """Number of decimals the feed answers in."""
        ...
