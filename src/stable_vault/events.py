"""Events published by vault operations."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Callable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VaultEvent:
    @property
    def name(self) -> str:
        return type(self).__name__

    def to_dict(self) -> dict[str, object]:
        return {"event": self.name, **asdict(self)}


@dataclass(frozen=True)
class PriceUpdated(VaultEvent):
    price: int


@dataclass(frozen=True)
class Rebalanced(VaultEvent):
    stable_balance: int
    volatile_balance: int


@dataclass(frozen=True)
class DividendsDistributed(VaultEvent):
    amount: int


@dataclass(frozen=True)
class OwnershipTransferred(VaultEvent):
    previous_principal: str
    new_principal: str


@dataclass(frozen=True)
class Bought(VaultEvent):
    amount_in: int
    amount_out: int


@dataclass(frozen=True)
class Sold(VaultEvent):
    amount_in: int
    amount_out: int


@dataclass(frozen=True)
class NativeWrapped(VaultEvent):
    amount: int


@dataclass(frozen=True)
class AccountClosed(VaultEvent):
    stable_amount: int
    volatile_amount: int


Subscriber = Callable[[VaultEvent], None]


class EventLog:
    """Ordered record of published events with optional subscribers."""

    def __init__(self) -> None:
        self._events: list[VaultEvent] = []
        self._subscribers: list[Subscriber] = []

    def subscribe(self, subscriber: Subscriber) -> None:
        self._subscribers.append(subscriber)

    def publish(self, events: list[VaultEvent]) -> None:
        """Append a committed batch of events and notify subscribers."""
        for event in events:
            self._events.append(event)
            logger.info("Event %s: %s", event.name, event.to_dict())
            for subscriber in self._subscribers:
                subscriber(event)

    @property
    def events(self) -> list[VaultEvent]:
        return list(self._events)

    def of_type(self, event_type: type[VaultEvent]) -> list[VaultEvent]:
        return [e for e in self._events if isinstance(e, event_type)]

    def __len__(self) -> int:
        return len(self._events)
