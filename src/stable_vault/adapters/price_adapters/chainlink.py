from __future__ import annotations

import logging

from ...abi import AGGREGATOR_V3_ABI
from ...clients.chain import ChainClient
from ...domain import RoundData
from .base import BasePriceSource

logger = logging.getLogger(__name__)


class ChainlinkPriceSource(BasePriceSource):
    """Adapter for a Chainlink AggregatorV3 price feed."""

    def __init__(self, client: ChainClient, feed_address: str):
        self.client = client
        self.feed_address = feed_address
        self.contract = client.contract(feed_address, AGGREGATOR_V3_ABI)
        self._decimals: int | None = None

    @property
    def adapter_name(self) -> str:
        return "chainlink"

    async def latest_round_data(self) -> RoundData:
        (
            round_id,
            answer,
            started_at,
            updated_at,
            answered_in_round,
        ) = await self.client.call(self.contract.functions.latestRoundData())
        logger.debug(
            "Feed %s round %d answer %d (updated %d)",
            self.feed_address,
            round_id,
            answer,
            updated_at,
        )
        return RoundData(
            round_id=int(round_id),
            answer=int(answer),
            started_at=int(started_at),
            updated_at=int(updated_at),
            answered_in_round=int(answered_in_round),
        )

    async def decimals(self) -> int:
        if self._decimals is None:
            self._decimals = int(
                await self.client.call(self.contract.functions.decimals())
            )
        return self._decimals
