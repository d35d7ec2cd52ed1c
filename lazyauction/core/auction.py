"""
Auction - Lazy-mint auction state machine.

Lifecycle:
---------
    Open --(auction_end)--> Ended

The auction accepts bids until its deadline. Every bid carries an
issuer-signed voucher that is verified on the spot; accepted payments are
escrowed per bidder. Outbid funds are not refunded immediately: they stay in
escrow until the auction is finalized, after which each loser withdraws.

Settlement:
----------
auction_end() marks the auction ended and debits the winning amount from the
winner's escrow entry *before* touching any collaborator. The asset is then
minted to the issuer, transferred to the winner, and the winning amount is
paid to the issuer. A collaborator that calls back into the auction during
settlement finds it already ended, and withdrawals are refused until the
outermost call has returned. A settlement that reverted after the mint is
resumed on retry instead of minting twice.

Revert Semantics:
----------------
Each call either completes or leaves no trace: if a collaborator raises, state
and escrow are restored and the buffered events are dropped.
"""

from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import Iterator, List, Optional

from lazyauction.core.assets import AssetError, AssetIssuer
from lazyauction.core.clock import Clock, SystemClock
from lazyauction.core.config import AuctionConfig
from lazyauction.core.errors import (
    AuctionEndAlreadyCalled,
    AuctionError,
    AuctionHasAlreadyEnded,
    AuctionIsStillGoingOn,
    BidderHasNotParticipatedInAuction,
    BidIsLessThanMinimumPriceOfNFT,
    BidIsNotHigher,
    NobodyParticipatedInBid,
    SettlementInProgress,
    WinnerCannotReclaimBid,
)
from lazyauction.core.escrow import EscrowLedger
from lazyauction.core.events import (
    AssetCreated,
    AuctionEnded,
    AuctionEvent,
    EventLog,
    HighestBidIncreased,
    OwnershipTransferred,
)
from lazyauction.core.payouts import PayoutChannel
from lazyauction.core.voucher import Recoverer, Voucher, VoucherDomain, VoucherVerifier
from lazyauction.crypto import normalize_address, recover_address
from lazyauction.utils.logger import get_logger

logger = get_logger("auction")


# =============================================================================
# Auction State
# =============================================================================


@dataclass
class AuctionState:
    """
    Mutable state of the single auction.

    Attributes:
        issuer: Address that signs vouchers and receives the winning bid
        deadline: Timestamp at which bidding closes
        highest_bid: Current highest accepted payment
        highest_bidder: Address of the current highest bidder
        ended: Set once by auction_end(), never cleared
        voucher: Voucher of the current highest bid, redeemed at settlement
    """
    issuer: str
    deadline: int
    highest_bid: int = 0
    highest_bidder: Optional[str] = None
    ended: bool = False
    voucher: Optional[Voucher] = None


# =============================================================================
# Lazy-Mint Auction
# =============================================================================


class LazyMintAuction:
    """
    Single-asset auction settled by minting from an issuer voucher.

    Attributes:
        state: Current auction state
        escrow: Pending balances of bidders
        verifier: Voucher signature verifier
        events: Published notifications
    """

    def __init__(
        self,
        issuer: str,
        bidding_time: int,
        domain: VoucherDomain,
        asset_issuer: AssetIssuer,
        payouts: PayoutChannel,
        clock: Optional[Clock] = None,
        recover: Recoverer = recover_address,
    ):
        """
        Open a new auction.

        Args:
            issuer: Authorized voucher signer
            bidding_time: Seconds from now until bidding closes
            domain: Auction instance identity bound into vouchers
            asset_issuer: Mints and transfers the asset
            payouts: Releases escrowed funds
            clock: Time source (defaults to wall-clock)
            recover: Signature recovery primitive
        """
        if bidding_time < 0:
            raise ValueError(f"bidding_time must be non-negative, got {bidding_time}")

        self.clock = clock or SystemClock()
        self.asset_issuer = asset_issuer
        self.payouts = payouts

        issuer = normalize_address(issuer)
        self.state = AuctionState(issuer=issuer, deadline=self.clock.now() + bidding_time)
        self.escrow = EscrowLedger()
        self.verifier = VoucherVerifier(issuer, domain, recover=recover)
        self.events = EventLog()
        self._in_flight = False

        logger.info(f"Auction opened: issuer={issuer}, deadline={self.state.deadline}")

    @classmethod
    def from_config(
        cls,
        config: AuctionConfig,
        asset_issuer: AssetIssuer,
        payouts: PayoutChannel,
        clock: Optional[Clock] = None,
    ) -> "LazyMintAuction":
        return cls(
            issuer=config.issuer,
            bidding_time=config.bidding_time,
            domain=config.domain(),
            asset_issuer=asset_issuer,
            payouts=payouts,
            clock=clock,
        )

    # =========================================================================
    # Bidding
    # =========================================================================

    def bid(self, participant: str, voucher: Voucher, payment: int) -> None:
        """
        Place a bid of `payment` backed by an issuer voucher.

        A participant may raise their own bid; each accepted payment adds to
        their escrow balance.

        Raises:
            AuctionEndAlreadyCalled: auction already finalized
            AuctionHasAlreadyEnded: deadline has passed
            InvalidSignature: voucher not signed by the issuer
            BidIsLessThanMinimumPriceOfNFT: payment below the voucher floor
            BidIsNotHigher: payment does not exceed the highest bid
        """
        participant = normalize_address(participant)
        if payment < 0:
            raise ValueError(f"payment must be non-negative, got {payment}")

        with self._rejecting("bid", participant):
            if self.state.ended:
                raise AuctionEndAlreadyCalled()
            if self.clock.now() >= self.state.deadline:
                raise AuctionHasAlreadyEnded()

            self.verifier.verify(voucher)

            if payment < voucher.minimum_price:
                raise BidIsLessThanMinimumPriceOfNFT(
                    f"Bid {payment} is below minimum price {voucher.minimum_price}"
                )
            if payment <= self.state.highest_bid:
                raise BidIsNotHigher(
                    f"Bid {payment} does not exceed highest bid {self.state.highest_bid}"
                )

        with self._atomic() as pending:
            self.escrow.credit(participant, payment)
            self.state.highest_bid = payment
            self.state.highest_bidder = participant
            self.state.voucher = voucher
            pending.append(HighestBidIncreased(bidder=participant, amount=payment))

        logger.info(f"Highest bid increased: {payment} by {participant}")

    # =========================================================================
    # Settlement
    # =========================================================================

    def auction_end(self) -> None:
        """
        Finalize the auction: mint to the issuer, transfer to the winner and
        pay the winning bid to the issuer.

        Raises:
            AuctionEndAlreadyCalled: already finalized
            NobodyParticipatedInBid: no bid was ever accepted
            AssetError: the asset is already held by someone other than the
                issuer or the winner
        """
        with self._rejecting("auction_end"):
            if self.state.ended:
                raise AuctionEndAlreadyCalled()
            if self.state.highest_bidder is None:
                raise NobodyParticipatedInBid()

        if self.clock.now() < self.state.deadline:
            logger.warning(f"Auction finalized before deadline {self.state.deadline}")

        with self._atomic() as pending:
            issuer = self.state.issuer
            winner = self.state.highest_bidder
            amount = self.state.highest_bid
            voucher = self.state.voucher

            # Effects
            self.state.ended = True
            self.escrow.debit(winner, amount)

            # Interactions. A previously reverted attempt may have left the
            # asset minted (or already transferred); resume from there.
            owner = self.asset_issuer.owner_of(voucher.asset_id)
            if owner is None:
                self.asset_issuer.create(issuer, voucher.asset_id, voucher.metadata_uri)
                owner = issuer
            pending.append(AssetCreated(owner=issuer, asset_id=voucher.asset_id))

            if owner == issuer:
                self.asset_issuer.transfer(issuer, winner, voucher.asset_id)
            elif owner != winner:
                raise AssetError(f"Asset {voucher.asset_id} is owned by {owner}, cannot settle")
            pending.append(
                OwnershipTransferred(from_address=issuer, to_address=winner, asset_id=voucher.asset_id)
            )

            self.payouts.send(issuer, amount)
            pending.append(AuctionEnded(winner=winner, amount=amount))

        logger.info(f"Auction ended: asset {voucher.asset_id} sold to {winner} for {amount}")

    # =========================================================================
    # Withdrawal
    # =========================================================================

    def withdraw_funds_after_auction_end(self, participant: str) -> int:
        """
        Pay an outbid participant their full escrow balance.

        Returns:
            Amount paid out

        Raises:
            AuctionIsStillGoingOn: auction not finalized yet
            SettlementInProgress: called back from inside another payout
            WinnerCannotReclaimBid: participant won the auction
            BidderHasNotParticipatedInAuction: nothing to withdraw
        """
        participant = normalize_address(participant)

        with self._rejecting("withdraw", participant):
            if not self.state.ended:
                raise AuctionIsStillGoingOn()
            if self._in_flight:
                raise SettlementInProgress()
            if participant == self.state.highest_bidder:
                raise WinnerCannotReclaimBid()
            if self.escrow.balance_of(participant) == 0:
                raise BidderHasNotParticipatedInAuction()

        with self._atomic():
            amount = self.escrow.drain(participant)
            self.payouts.send(participant, amount)

        logger.info(f"Withdrawal: {amount} returned to {participant}")
        return amount

    # =========================================================================
    # Views
    # =========================================================================

    @property
    def highest_bid(self) -> int:
        return self.state.highest_bid

    @property
    def highest_bidder(self) -> Optional[str]:
        return self.state.highest_bidder

    @property
    def ended(self) -> bool:
        return self.state.ended

    def balance_of(self, participant: str) -> int:
        return self.escrow.balance_of(participant)

    def time_remaining(self) -> int:
        return max(0, self.state.deadline - self.clock.now())

    def stats(self) -> dict:
        return {
            "issuer": self.state.issuer,
            "deadline": self.state.deadline,
            "time_remaining": self.time_remaining(),
            "highest_bid": self.state.highest_bid,
            "highest_bidder": self.state.highest_bidder,
            "ended": self.state.ended,
            "escrow_held": self.escrow.total_held,
            "events": len(self.events),
        }

    def __repr__(self) -> str:
        status = "ended" if self.state.ended else "open"
        return f"LazyMintAuction({status}, highest={self.state.highest_bid}, bidder={self.state.highest_bidder})"

    # =========================================================================
    # Internals
    # =========================================================================

    @contextmanager
    def _rejecting(self, operation: str, participant: Optional[str] = None) -> Iterator[None]:
        try:
            yield
        except AuctionError as e:
            who = f" from {participant}" if participant else ""
            logger.debug(f"Rejected {operation}{who}: {e.name}")
            raise

    @contextmanager
    def _atomic(self) -> Iterator[List[AuctionEvent]]:
        # No other call may commit while this one is open, otherwise a
        # restore below would erase it.
        saved_state = replace(self.state)
        saved_escrow = self.escrow.snapshot()
        pending: List[AuctionEvent] = []
        self._in_flight = True
        try:
            yield pending
        except Exception:
            self.state = saved_state
            self.escrow.restore(saved_escrow)
            logger.error("Operation reverted; state restored")
            raise
        finally:
            self._in_flight = False
        self.events.publish(pending)
