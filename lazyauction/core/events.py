"""
Auction notifications.

Events raised during a call are buffered and only published once the call
has completed successfully, so subscribers never see a reverted operation.
"""

from dataclasses import dataclass
from typing import Callable, List, Union

from lazyauction.utils.logger import get_logger

logger = get_logger("events")


@dataclass(frozen=True)
class HighestBidIncreased:
    bidder: str
    amount: int


@dataclass(frozen=True)
class AssetCreated:
    owner: str
    asset_id: int


@dataclass(frozen=True)
class OwnershipTransferred:
    from_address: str
    to_address: str
    asset_id: int


@dataclass(frozen=True)
class AuctionEnded:
    winner: str
    amount: int


AuctionEvent = Union[HighestBidIncreased, AssetCreated, OwnershipTransferred, AuctionEnded]
Subscriber = Callable[[AuctionEvent], None]


class EventLog:
    """Ordered record of published events with optional subscribers."""

    def __init__(self):
        self.events: List[AuctionEvent] = []
        self._subscribers: List[Subscriber] = []

    def subscribe(self, callback: Subscriber) -> None:
        self._subscribers.append(callback)

    def publish(self, events: List[AuctionEvent]) -> None:
        for event in events:
            self.events.append(event)
            for callback in self._subscribers:
                try:
                    callback(event)
                except Exception:
                    logger.exception(f"Subscriber failed on {type(event).__name__}")

    def of_type(self, event_type: type) -> List[AuctionEvent]:
        return [e for e in self.events if isinstance(e, event_type)]

    def __len__(self) -> int:
        return len(self.events)
