from __future__ import annotations

from .chain import TX_FAILURES, ChainClient, TransactionReverted

__all__ = ["TX_FAILURES", "ChainClient", "TransactionReverted"]
