from __future__ import annotations

from .base import BasePriceSource
from .chainlink import ChainlinkPriceSource

__all__ = ["BasePriceSource", "ChainlinkPriceSource"]
