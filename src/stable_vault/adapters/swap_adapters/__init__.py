from __future__ import annotations

from .base import BaseQuoter, BaseSwapRouter
from .uniswap_v3 import UniswapV3Quoter, UniswapV3Router

__all__ = ["BaseQuoter", "BaseSwapRouter", "UniswapV3Quoter", "UniswapV3Router"]
