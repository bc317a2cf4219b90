from __future__ import annotations

from .access import AccessGuard
from .accountant import PortfolioAccountant
from .dividends import DividendScheduler
from .oracle import PriceOracle
from .rebalance import RebalanceEngine, RebalancePhase
from .swap import SwapVenue
from .vault import Vault, VaultPolicy, VaultStatus

__all__ = [
    "AccessGuard",
    "DividendScheduler",
    "PortfolioAccountant",
    "PriceOracle",
    "RebalanceEngine",
    "RebalancePhase",
    "SwapVenue",
    "Vault",
    "VaultPolicy",
    "VaultStatus",
]
