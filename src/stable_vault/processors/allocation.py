from __future__ import annotations

from ..constants import PERCENT_DENOMINATOR
from ..domain import BalanceSnapshot, TradeDirection, TradePlan
from ..errors import DivisionBoundaryError, InvalidPrice, NothingToTrade
from ..units import value_of_volatile, volatile_for_value


def calculate_total_value(snapshot: BalanceSnapshot, price: int) -> int:
    """Total base-currency value of the vault.

    ``price`` is 18-decimal base units per whole volatile unit; the stable
    balance counts 1:1.
    """
    return snapshot.stable + value_of_volatile(snapshot.volatile, price)


def stable_percentage(snapshot: BalanceSnapshot, total_value: int) -> int:
    """Share of ``total_value`` held in the stable asset, truncated to a whole percent."""
    if total_value == 0:
        raise DivisionBoundaryError("Total value is zero, cannot compute allocation")
    return snapshot.stable * PERCENT_DENOMINATOR // total_value


def plan_rebalance(
    snapshot: BalanceSnapshot, price: int, target_stable_percentage: int
) -> TradePlan:
    """Size the single trade that moves the stable share to the target.

    Returns a plan with ``TradeDirection.NONE`` when the truncated stable
    percentage already equals the target.

    Raises:
        InvalidPrice: If ``price`` is not strictly positive.
        DivisionBoundaryError: If the vault holds no value.
        NothingToTrade: If the computed trade size is zero.
    """
    if price <= 0:
        raise InvalidPrice(f"Price must be positive, got {price}")

    total = calculate_total_value(snapshot, price)
    current = stable_percentage(snapshot, total)
    target_stable_value = target_stable_percentage * total // PERCENT_DENOMINATOR

    if current < target_stable_percentage:
        deficit = target_stable_value - snapshot.stable
        volatile_to_sell = min(volatile_for_value(deficit, price), snapshot.volatile)
        if volatile_to_sell <= 0:
            raise NothingToTrade("Stable deficit is below one volatile unit")
        return TradePlan(
            direction=TradeDirection.SELL_VOLATILE,
            amount_in=volatile_to_sell,
            expected_out=value_of_volatile(volatile_to_sell, price),
            current_stable_percentage=current,
        )

    if current > target_stable_percentage:
        excess = snapshot.stable - target_stable_value
        if excess <= 0:
            raise NothingToTrade("No excess stable balance to spend")
        return TradePlan(
            direction=TradeDirection.BUY_VOLATILE,
            amount_in=excess,
            expected_out=volatile_for_value(excess, price),
            current_stable_percentage=current,
        )

    return TradePlan(direction=TradeDirection.NONE, current_stable_percentage=current)
