from __future__ import annotations

from .base import BaseTokenAdapter, BaseWrappedNativeAdapter
from .erc20 import ERC20TokenAdapter, WrappedNativeTokenAdapter

__all__ = [
    "BaseTokenAdapter",
    "BaseWrappedNativeAdapter",
    "ERC20TokenAdapter",
    "WrappedNativeTokenAdapter",
]
