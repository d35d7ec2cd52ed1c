"""
Payout collaborator.

The auction releases funds through a PayoutChannel: the winning bid to the
issuer at settlement, and refunds to outbid participants on withdrawal.
"""

from collections import defaultdict
from typing import Dict, List, Protocol, Tuple

from lazyauction.crypto import normalize_address


class PayoutChannel(Protocol):
    def send(self, recipient: str, amount: int) -> None:
        ...


class AccountBook:
    """In-memory payout channel recording what each address received."""

    def __init__(self):
        self.received: Dict[str, int] = defaultdict(int)
        self.transfers: List[Tuple[str, int]] = []

    def send(self, recipient: str, amount: int) -> None:
        recipient = normalize_address(recipient)
        self.received[recipient] += amount
        self.transfers.append((recipient, amount))

    def balance_of(self, address: str) -> int:
        return self.received.get(normalize_address(address), 0)
