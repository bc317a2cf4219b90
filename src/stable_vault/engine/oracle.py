from __future__ import annotations

import logging
from typing import Callable

from ..adapters.price_adapters.base import BasePriceSource
from ..adapters.swap_adapters.base import BaseQuoter
from ..constants import DEFAULT_POOL_FEE, DEFAULT_QUOTE_PROBE_AMOUNT
from ..errors import InvalidAmount, InvalidPrice
from ..units import scale_to_18, value_of_volatile

logger = logging.getLogger(__name__)


def price_deviation_percentage(reference_price: int, actual_price: int) -> float:
    """Absolute deviation of ``actual_price`` from ``reference_price`` in percent."""
    if reference_price == 0:
        raise ValueError("reference_price cannot be zero")
    return abs((actual_price - reference_price) / reference_price * 100)


class PriceOracle:
    """Authoritative price for decisions plus an informational market quote.

    ``authoritative_price`` is the only price the engine acts on. It is read
    from the price source on every call and normalised to 18 decimals.
    ``market_quote`` asks the swap venue what a probe trade would return and
    is used for telemetry only.
    """

    def __init__(
        self,
        source: BasePriceSource,
        quoter: BaseQuoter | None,
        *,
        volatile_token: str,
        stable_token: str,
        clock: Callable[[], int],
        pool_fee: int = DEFAULT_POOL_FEE,
        quote_probe_amount: int = DEFAULT_QUOTE_PROBE_AMOUNT,
        max_price_age_seconds: int | None = None,
        warning_tolerance_percentage: float = 1.0,
    ):
        self.source = source
        self.quoter = quoter
        self.volatile_token = volatile_token
        self.stable_token = stable_token
        self.clock = clock
        self.pool_fee = pool_fee
        self.quote_probe_amount = quote_probe_amount
        self.max_price_age_seconds = max_price_age_seconds
        self.warning_tolerance_percentage = warning_tolerance_percentage

    async def authoritative_price(self) -> int:
        round_data = await self.source.latest_round_data()
        if round_data.answer <= 0:
            raise InvalidPrice(
                f"{self.source.adapter_name} returned non-positive answer {round_data.answer}"
            )

        if self.max_price_age_seconds is not None:
            age = self.clock() - round_data.updated_at
            if age > self.max_price_age_seconds:
                raise InvalidPrice(
                    f"Price is stale: updated {age}s ago (max {self.max_price_age_seconds}s)"
                )

        decimals = await self.source.decimals()
        return scale_to_18(round_data.answer, decimals)

    async def market_quote(self, amount_in: int | None = None) -> int:
        """Stable units the venue would pay for ``amount_in`` volatile units."""
        if self.quoter is None:
            raise ValueError("No quoter configured for market quotes")
        amount = self.quote_probe_amount if amount_in is None else amount_in
        if amount <= 0:
            raise InvalidAmount(f"Quote amount must be positive, got {amount}")

        amount_out = await self.quoter.quote(
            self.volatile_token, self.stable_token, self.pool_fee, amount, 0
        )
        logger.debug("Market quote: %d volatile -> %d stable", amount, amount_out)
        return amount_out

    async def check_market_deviation(self, amount_in: int, amount_out: int) -> float | None:
        """Log how far a market quote sits from the authoritative price.

        Returns the deviation in percent, or None when the oracle is unusable.
        """
        try:
            price = await self.authoritative_price()
        except InvalidPrice as e:
            logger.warning("Skipping quote deviation check: %s", e)
            return None

        reference_out = value_of_volatile(amount_in, price)
        if reference_out == 0:
            return None
        deviation = price_deviation_percentage(reference_out, amount_out)
        if deviation > self.warning_tolerance_percentage:
            logger.warning(
                "Market quote is %.2f%% off the oracle price (warning threshold: %s%%)",
                deviation,
                self.warning_tolerance_percentage,
            )
        else:
            logger.debug("Market quote within %.2f%% of the oracle price", deviation)
        return deviation
