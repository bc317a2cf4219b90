from __future__ import annotations

import logging
from enum import Enum

from ..constants import PERCENT_DENOMINATOR
from ..domain import RebalanceOutcome, TradeDirection
from ..processors.allocation import plan_rebalance
from ..units import apply_bps
from .accountant import PortfolioAccountant
from .oracle import PriceOracle
from .swap import SwapVenue

logger = logging.getLogger(__name__)


class RebalancePhase(str, Enum):
    IDLE = "idle"
    DECIDING = "deciding"
    EXECUTING = "executing"
    SETTLED = "settled"


class RebalanceEngine:
    """Decides and executes at most one corrective trade per call.

    The trade is sized entirely from balances and price read before the
    venue is touched. The venue call is the only point where control leaves
    the vault; after it succeeds balances are read again, and if it fails
    the call is abandoned with nothing to undo.
    """

    def __init__(
        self,
        accountant: PortfolioAccountant,
        oracle: PriceOracle,
        venue: SwapVenue,
        *,
        target_stable_percentage: int,
        min_output_bps: int = 0,
    ):
        if not 0 <= target_stable_percentage <= PERCENT_DENOMINATOR:
            raise ValueError(
                f"target_stable_percentage must be within 0..100, got {target_stable_percentage}"
            )
        self.accountant = accountant
        self.oracle = oracle
        self.venue = venue
        self.target_stable_percentage = target_stable_percentage
        self.min_output_bps = min_output_bps
        self.phase = RebalancePhase.IDLE

    def _enter(self, phase: RebalancePhase) -> None:
        logger.debug("Rebalance phase %s -> %s", self.phase.value, phase.value)
        self.phase = phase

    async def rebalance(self) -> RebalanceOutcome:
        try:
            self._enter(RebalancePhase.DECIDING)
            before = await self.accountant.snapshot()
            price = await self.oracle.authoritative_price()
            plan = plan_rebalance(before, price, self.target_stable_percentage)
            logger.info(
                "Allocation %d%% stable (target %d%%) at price %d: %s %d",
                plan.current_stable_percentage,
                self.target_stable_percentage,
                price,
                plan.direction.value,
                plan.amount_in,
            )

            if plan.is_noop:
                self._enter(RebalancePhase.SETTLED)
                return RebalanceOutcome(price=price, plan=plan, before=before, after=before)

            self._enter(RebalancePhase.EXECUTING)
            min_out = apply_bps(plan.expected_out, self.min_output_bps)
            if plan.direction is TradeDirection.SELL_VOLATILE:
                fill = await self.venue.sell(plan.amount_in, min_out)
            else:
                fill = await self.venue.buy(plan.amount_in, min_out)

            after = await self.accountant.snapshot()
            self._enter(RebalancePhase.SETTLED)
            return RebalanceOutcome(
                price=price, plan=plan, before=before, after=after, fill=fill
            )
        finally:
            self.phase = RebalancePhase.IDLE
