from __future__ import annotations

from decimal import Decimal

from .constants import BPS_DENOMINATOR, PRICE_SCALE


def scale_to_18(value: int, decimals: int) -> int:
    """Scale an integer amount to 18 decimals.

    Args:
        value: Integer amount expressed with ``decimals`` decimal places.
        decimals: Current decimal precision of ``value``.

    Returns:
        The amount scaled to 18-decimal precision.

    Notes:
        - If ``decimals`` < 18, multiplies by 10**(18 - decimals).
        - If ``decimals`` > 18, uses integer division (truncates toward zero).
    """
    if decimals == 18:
        return value
    if decimals < 18:
        return value * (10 ** (18 - decimals))
    return value // (10 ** (decimals - 18))


def value_of_volatile(amount: int, price: int) -> int:
    """Base-currency value of ``amount`` volatile units at an 18-decimal price."""
    return amount * price // PRICE_SCALE


def volatile_for_value(value: int, price: int) -> int:
    """Volatile units worth ``value`` base-currency units (truncating)."""
    return value * PRICE_SCALE // price


def apply_bps(amount: int, bps: int) -> int:
    """Return ``amount * bps / 10_000`` rounded down."""
    return amount * bps // BPS_DENOMINATOR


def format_units(amount: int, decimals: int = 18) -> str:
    """Render an integer token amount as a human-readable decimal string."""
    return f"{Decimal(amount) / Decimal(10**decimals):f}"
