"""
Typed failure conditions raised by the auction engine.

Every error is raised synchronously from the failing operation, before any
state is mutated, and is never retried internally.
"""


class AuctionError(Exception):
    """Base class for all auction failures."""

    message = "Auction operation failed"

    def __init__(self, message: str = ""):
        super().__init__(message or self.message)

    @property
    def name(self) -> str:
        return type(self).__name__


# =============================================================================
# Taxonomy
# =============================================================================


class TimingError(AuctionError):
    """The bidding window has closed."""


class StateError(AuctionError):
    """The auction is in the wrong lifecycle state for this call."""


class AuthorizationError(AuctionError):
    """The issuer did not authorize this sale."""


class BidValidationError(AuctionError):
    """The bid amount is not acceptable."""


class ParticipantError(AuctionError):
    """The caller may not withdraw."""


# =============================================================================
# Concrete conditions
# =============================================================================


class AuctionHasAlreadyEnded(TimingError):
    message = "Auction has already ended"


class AuctionEndAlreadyCalled(StateError):
    message = "Auction end has already been called"


class AuctionIsStillGoingOn(StateError):
    message = "Auction is still going on"


class NobodyParticipatedInBid(StateError):
    message = "Nobody participated in the bid but auction ended!"


class InsufficientEscrow(StateError):
    message = "Escrow balance is lower than the requested debit"


class InvalidSignature(AuthorizationError):
    message = "Signature invalid or unauthorized"


class BidIsLessThanMinimumPriceOfNFT(BidValidationError):
    message = "Bid is less than the minimum price of the NFT"


class BidIsNotHigher(BidValidationError):
    message = "There is already a higher or equal bid"


class WinnerCannotReclaimBid(ParticipantError):
    message = "Winner cannot reclaim the bid amount!"


class BidderHasNotParticipatedInAuction(ParticipantError):
    message = "Bidder has not participated in the auction"


class SettlementInProgress(StateError):
    message = "Another auction call is still paying out"
