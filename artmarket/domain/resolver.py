"""Winner and clearing price determination."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .cards import AuctionType
from .exceptions import InvariantViolation, PreconditionFailed
from .game import Auction, Bid, Player


@dataclass(frozen=True, slots=True)
class AuctionResult:
    auction_id: str
    winner_id: str | None
    price: int
    tied_bidders: tuple[str, ...] = ()

    @property
    def awaiting_tie_break(self) -> bool:
        return self.winner_id is None and len(self.tied_bidders) > 1


def resolve(
    auction: Auction, players: Sequence[Player], forced_winner: str | None = None
) -> AuctionResult:
    """Decide who wins ``auction`` and what they pay.

    ``forced_winner`` settles a sealed tie and must name one of the tied
    bidders.
    """
    if not auction.bids:
        return AuctionResult(auction.auction_id, None, 0)

    match auction.auction_type:
        case AuctionType.OPEN | AuctionType.DOUBLE:
            highest = auction.highest_bid or max(auction.bids, key=lambda bid: bid.amount)
            return AuctionResult(auction.auction_id, highest.player_id, highest.amount)
        case AuctionType.FIXED:
            if auction.highest_bid is None or auction.fixed_price is None:
                return AuctionResult(auction.auction_id, None, 0)
            return AuctionResult(
                auction.auction_id, auction.highest_bid.player_id, auction.fixed_price
            )
        case AuctionType.SEALED:
            top = _top_bids(auction.bids)
            price = top[0].amount
            if len(top) == 1:
                return AuctionResult(auction.auction_id, top[0].player_id, price)
            tied = tuple(bid.player_id for bid in top)
            if forced_winner is None:
                return AuctionResult(auction.auction_id, None, price, tied_bidders=tied)
            if forced_winner not in tied:
                raise PreconditionFailed(
                    f"Player {forced_winner} is not among the tied bidders {', '.join(tied)}"
                )
            return AuctionResult(auction.auction_id, forced_winner, price, tied_bidders=tied)
        case AuctionType.ONCE:
            top = _top_bids(auction.bids)
            winner = min(top, key=lambda bid: seat_distance(players, auction.seller_id, bid.player_id))
            return AuctionResult(auction.auction_id, winner.player_id, winner.amount)
        case _:
            raise InvariantViolation(f"Unhandled auction type {auction.auction_type!r}")


def seat_distance(players: Sequence[Player], from_uid: str, to_uid: str) -> int:
    """Forward seats from ``from_uid`` to ``to_uid`` around the table."""
    seats = [player.uid for player in players]
    try:
        start = seats.index(from_uid)
        end = seats.index(to_uid)
    except ValueError as exc:
        raise InvariantViolation(f"Unknown seat in distance {from_uid} -> {to_uid}") from exc
    return (end - start) % len(seats)


def _top_bids(bids: Sequence[Bid]) -> list[Bid]:
    best = max(bid.amount for bid in bids)
    return [bid for bid in bids if bid.amount == best]
