"""Apply auction outcomes to the game: money, collections, counts and turn."""

from __future__ import annotations

import logging
from dataclasses import replace

from .exceptions import InvariantViolation, PreconditionFailed
from .game import Game
from .resolver import AuctionResult

logger = logging.getLogger(__name__)


def next_turn(game: Game, after_uid: str) -> str | None:
    """First seat after ``after_uid`` that still holds cards.

    Falls back to the plain next seat when every hand is empty; the round
    check closes the round in that case.
    """
    if not game.players:
        return None
    count = len(game.players)
    start = game.seat_of(after_uid)
    for offset in range(1, count + 1):
        candidate = game.players[(start + offset) % count]
        if candidate.hand:
            return candidate.uid
    return game.players[(start + 1) % count].uid


def settle(game: Game, result: AuctionResult) -> Game:
    """Transfer the clearing price and the cards, then clear the auction.

    Re-applying the same result is a no-op: once the auction is cleared, or
    replaced by another one, the result no longer matches.
    """
    auction = game.auction
    if auction is None or auction.auction_id != result.auction_id:
        logger.debug("Ignoring stale settlement for auction %s", result.auction_id)
        return game

    if result.awaiting_tie_break:
        if auction.tied_bidders == result.tied_bidders and auction.resolved:
            return game
        return replace(game, auction=replace(auction, tied_bidders=result.tied_bidders, resolved=True))

    seller_id = auction.seller_id
    if game.player(seller_id) is None:
        raise _violation(f"Seller {seller_id} of auction {auction.auction_id} is not seated")

    if result.winner_id is None:
        return replace(
            game,
            auction=None,
            discard_pile=game.discard_pile + auction.cards,
            turn_player_id=next_turn(game, seller_id),
        )

    winner = game.player(result.winner_id)
    if winner is None or auction.bid_of(result.winner_id) is None:
        raise _violation(f"Winner {result.winner_id} has no bid in auction {auction.auction_id}")
    if result.price < 0:
        raise _violation(f"Negative clearing price {result.price} in auction {auction.auction_id}")
    if winner.money - result.price < 0:
        raise _violation(
            f"Settling auction {auction.auction_id} would leave {winner.uid} at "
            f"{winner.money - result.price}"
        )

    updated = game.with_player(
        replace(winner, money=winner.money - result.price, collection=winner.collection + auction.cards)
    )
    seller = updated.player(seller_id)
    updated = updated.with_player(replace(seller, money=seller.money + result.price))

    counts = dict(game.artist_counts)
    for card in auction.cards:
        counts[card.artist] = counts.get(card.artist, 0) + 1

    logger.info(
        "Auction %s settled: %s pays %s to %s for %s card(s)",
        auction.auction_id,
        winner.uid,
        result.price,
        seller_id,
        len(auction.cards),
    )
    return replace(
        updated,
        auction=None,
        artist_counts=counts,
        turn_player_id=next_turn(updated, seller_id),
    )


def cancel_auction(game: Game, uid: str) -> Game:
    """Seller withdraws the active auction; its cards go to the discard pile."""
    auction = game.auction
    if auction is None:
        return game
    if auction.seller_id != uid:
        raise PreconditionFailed("Only the seller can cancel the auction")
    return replace(
        game,
        auction=None,
        discard_pile=game.discard_pile + auction.cards,
        turn_player_id=next_turn(game, uid),
    )


def _violation(message: str) -> InvariantViolation:
    logger.error(message)
    return InvariantViolation(message)
