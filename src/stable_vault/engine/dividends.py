from __future__ import annotations

import logging
from typing import Callable

from ..adapters.token_adapters.base import BaseTokenAdapter
from ..constants import PERCENT_DENOMINATOR
from ..errors import (
    NothingToDistribute,
    ScheduleNotConfigured,
    ScheduleNotDue,
    TransferFailed,
    ZeroAddress,
)
from .access import is_zero_address

logger = logging.getLogger(__name__)


def format_time_remaining(seconds: int) -> str:
    """Format seconds into human-readable time (e.g. "2h 15m", "45m 30s", "30s")."""
    if seconds >= 3600:
        hours = seconds // 3600
        mins = (seconds % 3600) // 60
        return f"{hours}h {mins}m"
    elif seconds >= 60:
        mins = seconds // 60
        secs = seconds % 60
        return f"{mins}m {secs}s"
    else:
        return f"{seconds}s"


class DividendScheduler:
    """Pays a fixed share of the stable balance to the principal on a cadence.

    Nothing runs in the background: the schedule only moves when
    ``distribute`` is invoked at or after the due time. Each payout
    re-anchors the next due time to the moment it executed, so missed
    periods are skipped rather than paid in arrears.
    """

    def __init__(
        self,
        stable: BaseTokenAdapter,
        *,
        vault_address: str,
        dividend_percentage: int,
        interval_seconds: int,
        next_dividend_time: int,
        clock: Callable[[], int],
    ):
        if not 0 <= dividend_percentage <= PERCENT_DENOMINATOR:
            raise ValueError(
                f"dividend_percentage must be within 0..100, got {dividend_percentage}"
            )
        if interval_seconds < 0:
            raise ValueError(f"interval_seconds must be >= 0, got {interval_seconds}")
        self.stable = stable
        self.vault_address = vault_address
        self.dividend_percentage = dividend_percentage
        self.interval_seconds = interval_seconds
        self.next_dividend_time = next_dividend_time
        self.clock = clock

    def seconds_until_due(self) -> int:
        return max(0, self.next_dividend_time - self.clock())

    async def distribute(self, principal: str | None) -> int:
        """Transfer the due dividend to ``principal`` and advance the schedule.

        Returns:
            The amount of stable units paid.
        """
        now = self.clock()
        if now < self.next_dividend_time:
            remaining = format_time_remaining(self.next_dividend_time - now)
            raise ScheduleNotDue(f"Dividend distribution not yet due ({remaining} remaining)")
        if self.interval_seconds <= 0:
            raise ScheduleNotConfigured()
        if is_zero_address(principal):
            raise ZeroAddress("Principal address is not set")

        balance = await self.stable.balance_of(self.vault_address)
        payout = balance * self.dividend_percentage // PERCENT_DENOMINATOR
        if payout == 0:
            raise NothingToDistribute(
                f"{self.dividend_percentage}% of stable balance {balance} rounds to zero"
            )

        if not await self.stable.transfer(principal, payout):
            raise TransferFailed(f"Dividend transfer of {payout} to {principal} failed")

        self.next_dividend_time = now + self.interval_seconds
        logger.info(
            "Paid dividend of %d to %s; next due at %d",
            payout,
            principal,
            self.next_dividend_time,
        )
        return payout
