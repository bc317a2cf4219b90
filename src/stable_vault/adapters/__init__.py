from __future__ import annotations

from .price_adapters import BasePriceSource, ChainlinkPriceSource
from .swap_adapters import BaseQuoter, BaseSwapRouter, UniswapV3Quoter, UniswapV3Router
from .token_adapters import (
    BaseTokenAdapter,
    BaseWrappedNativeAdapter,
    ERC20TokenAdapter,
    WrappedNativeTokenAdapter,
)

__all__ = [
    "BasePriceSource",
    "BaseQuoter",
    "BaseSwapRouter",
    "BaseTokenAdapter",
    "BaseWrappedNativeAdapter",
    "ChainlinkPriceSource",
    "ERC20TokenAdapter",
    "UniswapV3Quoter",
    "UniswapV3Router",
    "WrappedNativeTokenAdapter",
]
