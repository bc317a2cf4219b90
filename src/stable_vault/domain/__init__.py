"""Domain models for the vault."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class BalanceSnapshot:
    """Stable and volatile balances held by the vault, read at one moment."""

    stable: int
    volatile: int


@dataclass(frozen=True)
class RoundData:
    """One answer from an aggregator-style price source."""

    round_id: int
    answer: int
    started_at: int
    updated_at: int
    answered_in_round: int


class TradeDirection(str, Enum):
    NONE = "none"
    SELL_VOLATILE = "sell_volatile"
    BUY_VOLATILE = "buy_volatile"


@dataclass(frozen=True)
class TradePlan:
    """A single corrective trade, sized before any external call is made."""

    direction: TradeDirection
    amount_in: int = 0
    expected_out: int = 0
    current_stable_percentage: int = 0

    @property
    def is_noop(self) -> bool:
        return self.direction is TradeDirection.NONE


@dataclass(frozen=True)
class SwapParams:
    """Exact-input, single-pool swap request handed to a router."""

    token_in: str
    token_out: str
    fee: int
    recipient: str
    deadline: int
    amount_in: int
    amount_out_minimum: int
    sqrt_price_limit_x96: int = 0


@dataclass(frozen=True)
class SwapFill:
    """Realized result of a swap, measured from balance deltas."""

    token_in: str
    token_out: str
    amount_in: int
    amount_out: int


@dataclass(frozen=True)
class RebalanceOutcome:
    """Result of one settled rebalance call."""

    price: int
    plan: TradePlan
    before: BalanceSnapshot
    after: BalanceSnapshot
    fill: SwapFill | None = None
