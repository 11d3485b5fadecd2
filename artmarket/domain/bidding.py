"""Bid validation rules per auction type."""

from __future__ import annotations

from dataclasses import dataclass, replace

from .cards import AuctionType
from .exceptions import InvariantViolation, RejectionReason
from .game import Auction, Bid


@dataclass(frozen=True, slots=True)
class BidDecision:
    reason: RejectionReason | None = None

    @property
    def accepted(self) -> bool:
        return self.reason is None


ACCEPTED = BidDecision()


def validate_bid(
    auction: Auction,
    bidder_id: str,
    amount: int,
    balance: int,
    *,
    allow_sealed_overwrite: bool = False,
) -> BidDecision:
    """Check a bid against ``auction`` without touching any state."""
    if bidder_id == auction.seller_id:
        return BidDecision(RejectionReason.SELLER_CANNOT_BID)
    if amount <= 0:
        return BidDecision(RejectionReason.NOT_POSITIVE)
    if amount > balance:
        return BidDecision(RejectionReason.INSUFFICIENT_FUNDS)

    match auction.auction_type:
        case AuctionType.OPEN | AuctionType.DOUBLE:
            highest = auction.highest_bid
            if highest is not None and amount <= highest.amount:
                return BidDecision(RejectionReason.TOO_LOW)
            if highest is not None and highest.player_id == bidder_id:
                return BidDecision(RejectionReason.ALREADY_HIGHEST)
            return ACCEPTED
        case AuctionType.SEALED:
            if auction.bid_of(bidder_id) is not None and not allow_sealed_overwrite:
                return BidDecision(RejectionReason.DUPLICATE_BID)
            return ACCEPTED
        case AuctionType.ONCE:
            if auction.bid_of(bidder_id) is not None:
                return BidDecision(RejectionReason.DUPLICATE_BID)
            return ACCEPTED
        case AuctionType.FIXED:
            if auction.fixed_price is None:
                return BidDecision(RejectionReason.PRICE_NOT_SET)
            if auction.highest_bid is not None:
                if auction.highest_bid.player_id == bidder_id:
                    return BidDecision(RejectionReason.DUPLICATE_BID)
                return BidDecision(RejectionReason.ALREADY_SOLD)
            if amount != auction.fixed_price:
                return BidDecision(RejectionReason.PRICE_MISMATCH)
            return ACCEPTED
        case _:
            raise InvariantViolation(f"Unhandled auction type {auction.auction_type!r}")


def apply_bid(auction: Auction, bid: Bid, *, allow_sealed_overwrite: bool = False) -> Auction:
    """Record an already validated bid on the auction."""
    match auction.auction_type:
        case AuctionType.OPEN | AuctionType.DOUBLE | AuctionType.FIXED:
            return replace(auction, bids=auction.bids + (bid,), highest_bid=bid)
        case AuctionType.SEALED if allow_sealed_overwrite and auction.bid_of(bid.player_id) is not None:
            bids = tuple(bid if b.player_id == bid.player_id else b for b in auction.bids)
            return replace(auction, bids=bids)
        case AuctionType.SEALED | AuctionType.ONCE:
            return replace(auction, bids=auction.bids + (bid,))
        case _:
            raise InvariantViolation(f"Unhandled auction type {auction.auction_type!r}")
