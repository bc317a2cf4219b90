from __future__ import annotations

from .allocation import calculate_total_value, plan_rebalance, stable_percentage

__all__ = [
    "calculate_total_value",
    "plan_rebalance",
    "stable_percentage",
]
