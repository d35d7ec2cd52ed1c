"""
Escrow Ledger - Funds held on behalf of bidders.

Every accepted bid is credited to its bidder and stays here until either
settlement consumes the winning amount or the bidder withdraws after close.

Conservation:
------------
    sum(pending balances) + released == deposited

where `released` counts the settlement payment and all withdrawals.
A zero balance reads the same whether the participant never bid or has
already been paid out.
"""

from collections import defaultdict
from dataclasses import dataclass
from typing import Dict

from lazyauction.core.errors import InsufficientEscrow
from lazyauction.crypto import normalize_address
from lazyauction.utils.logger import get_logger

logger = get_logger("escrow")


@dataclass(frozen=True)
class EscrowSnapshot:
    """Point-in-time copy of the ledger, used to roll back a failed call."""
    balances: Dict[str, int]
    deposited: int
    released: int


class EscrowLedger:
    """
    Per-participant pending balances.

    Attributes:
        deposited: Total amount ever credited
        released: Total amount debited or drained
    """

    def __init__(self):
        self._balances: Dict[str, int] = defaultdict(int)
        self.deposited = 0
        self.released = 0

    # =========================================================================
    # Access
    # =========================================================================

    def balance_of(self, participant: str) -> int:
        return self._balances.get(normalize_address(participant), 0)

    @property
    def total_held(self) -> int:
        return sum(self._balances.values())

    def participants(self) -> Dict[str, int]:
        """Participants with a nonzero balance."""
        return {p: v for p, v in self._balances.items() if v > 0}

    # =========================================================================
    # Mutation
    # =========================================================================

    def credit(self, participant: str, amount: int) -> int:
        """
        Add amount to the participant's balance.

        Returns:
            The new balance
        """
        if amount < 0:
            raise ValueError(f"Credit amount must be non-negative, got {amount}")
        participant = normalize_address(participant)
        self._balances[participant] += amount
        self.deposited += amount
        logger.debug(f"Credited {amount} to {participant} (balance={self._balances[participant]})")
        return self._balances[participant]

    def debit(self, participant: str, amount: int) -> int:
        """
        Remove amount from the participant's balance.

        Raises:
            InsufficientEscrow: if amount exceeds the balance
        """
        if amount < 0:
            raise ValueError(f"Debit amount must be non-negative, got {amount}")
        participant = normalize_address(participant)
        balance = self._balances.get(participant, 0)
        if amount > balance:
            raise InsufficientEscrow(f"Cannot debit {amount} from {participant}: balance is {balance}")
        self._balances[participant] = balance - amount
        self.released += amount
        logger.debug(f"Debited {amount} from {participant} (balance={balance - amount})")
        return balance - amount

    def drain(self, participant: str) -> int:
        """Zero the participant's balance and return what it held."""
        participant = normalize_address(participant)
        amount = self._balances.get(participant, 0)
        if amount:
            self._balances[participant] = 0
            self.released += amount
            logger.debug(f"Drained {amount} from {participant}")
        return amount

    # =========================================================================
    # Rollback
    # =========================================================================

    def snapshot(self) -> EscrowSnapshot:
        return EscrowSnapshot(
            balances=dict(self._balances),
            deposited=self.deposited,
            released=self.released,
        )

    def restore(self, snapshot: EscrowSnapshot) -> None:
        self._balances = defaultdict(int, snapshot.balances)
        self.deposited = snapshot.deposited
        self.released = snapshot.released

    def __repr__(self) -> str:
        return f"EscrowLedger(held={self.total_held}, deposited={self.deposited}, released={self.released})"
