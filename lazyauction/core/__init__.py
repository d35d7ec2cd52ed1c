"""Auction engine: vouchers, escrow and the auction state machine"""
from lazyauction.core.errors import (
    AuctionError,
    TimingError,
    StateError,
    AuthorizationError,
    BidValidationError,
    ParticipantError,
    AuctionHasAlreadyEnded,
    AuctionEndAlreadyCalled,
    AuctionIsStillGoingOn,
    NobodyParticipatedInBid,
    InsufficientEscrow,
    SettlementInProgress,
    InvalidSignature,
    BidIsLessThanMinimumPriceOfNFT,
    BidIsNotHigher,
    WinnerCannotReclaimBid,
    BidderHasNotParticipatedInAuction,
)
from lazyauction.core.voucher import Voucher, VoucherDomain, VoucherVerifier, sign_voucher
from lazyauction.core.escrow import EscrowLedger
from lazyauction.core.events import (
    EventLog,
    HighestBidIncreased,
    AssetCreated,
    OwnershipTransferred,
    AuctionEnded,
)
from lazyauction.core.clock import SystemClock, ManualClock
from lazyauction.core.assets import AssetRegistry, AssetError
from lazyauction.core.payouts import AccountBook
from lazyauction.core.config import AuctionConfig, load_config
from lazyauction.core.auction import LazyMintAuction, AuctionState

__all__ = [
    "AuctionError",
    "TimingError",
    "StateError",
    "AuthorizationError",
    "BidValidationError",
    "ParticipantError",
    "AuctionHasAlreadyEnded",
    "AuctionEndAlreadyCalled",
    "AuctionIsStillGoingOn",
    "NobodyParticipatedInBid",
    "InsufficientEscrow",
    "SettlementInProgress",
    "InvalidSignature",
    "BidIsLessThanMinimumPriceOfNFT",
    "BidIsNotHigher",
    "WinnerCannotReclaimBid",
    "BidderHasNotParticipatedInAuction",
    "Voucher",
    "VoucherDomain",
    "VoucherVerifier",
    "sign_voucher",
    "EscrowLedger",
    "EventLog",
    "HighestBidIncreased",
    "AssetCreated",
    "OwnershipTransferred",
    "AuctionEnded",
    "SystemClock",
    "ManualClock",
    "AssetRegistry",
    "AssetError",
    "AccountBook",
    "AuctionConfig",
    "load_config",
    "LazyMintAuction",
    "AuctionState",
]
