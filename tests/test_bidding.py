from random import Random

import pytest

from artmarket.config import RulesConfig
from artmarket.domain.bidding import apply_bid, validate_bid
from artmarket.domain.cards import AuctionType
from artmarket.domain.commands import PlaceBid, place_bid
from artmarket.domain.exceptions import RejectionReason, ValidationRejected
from artmarket.domain.game import Bid


def _auction(factory, auction_type, **kwargs):
    return factory.with_auction(factory.game(), auction_type, **kwargs).auction


@pytest.mark.parametrize("auction_type", list(AuctionType))
def test_seller_cannot_bid(factory, auction_type):
    auction = _auction(factory, auction_type, fixed_price=10)
    decision = validate_bid(auction, "seller", 10, 100)
    assert decision.reason is RejectionReason.SELLER_CANNOT_BID


@pytest.mark.parametrize("amount", [0, -5])
def test_non_positive_amount_rejected(factory, amount):
    auction = _auction(factory, AuctionType.OPEN)
    assert validate_bid(auction, "alice", amount, 100).reason is RejectionReason.NOT_POSITIVE


def test_bid_above_balance_rejected(factory):
    auction = _auction(factory, AuctionType.SEALED)
    assert validate_bid(auction, "alice", 101, 100).reason is RejectionReason.INSUFFICIENT_FUNDS
    assert validate_bid(auction, "alice", 100, 100).accepted


@pytest.mark.parametrize("auction_type", [AuctionType.OPEN, AuctionType.DOUBLE])
def test_open_bid_must_beat_highest(factory, auction_type):
    auction = _auction(factory, auction_type, bids=[("alice", 20)])
    assert validate_bid(auction, "bob", 20, 100).reason is RejectionReason.TOO_LOW
    assert validate_bid(auction, "bob", 15, 100).reason is RejectionReason.TOO_LOW
    assert validate_bid(auction, "bob", 21, 100).accepted


def test_open_highest_bidder_cannot_outbid_self(factory):
    auction = _auction(factory, AuctionType.OPEN, bids=[("alice", 20)])
    assert validate_bid(auction, "alice", 30, 100).reason is RejectionReason.ALREADY_HIGHEST


def test_sealed_rejects_second_bid_by_default(factory):
    auction = _auction(factory, AuctionType.SEALED, bids=[("alice", 20)])
    assert validate_bid(auction, "alice", 30, 100).reason is RejectionReason.DUPLICATE_BID
    assert validate_bid(auction, "bob", 5, 100).accepted


def test_sealed_overwrite_replaces_previous_bid(factory):
    auction = _auction(factory, AuctionType.SEALED, bids=[("alice", 20), ("bob", 25)])
    assert validate_bid(auction, "alice", 10, 100, allow_sealed_overwrite=True).accepted

    updated = apply_bid(auction, Bid("alice", 10), allow_sealed_overwrite=True)
    assert updated.bids == (Bid("alice", 10), Bid("bob", 25))
    assert updated.highest_bid is None


def test_once_allows_single_bid_per_player(factory):
    auction = _auction(factory, AuctionType.ONCE, bids=[("alice", 20)])
    assert validate_bid(auction, "alice", 30, 100).reason is RejectionReason.DUPLICATE_BID
    assert validate_bid(
        auction, "alice", 30, 100, allow_sealed_overwrite=True
    ).reason is RejectionReason.DUPLICATE_BID
    # Lower than the others is fine: once-around bids are independent.
    assert validate_bid(auction, "bob", 5, 100).accepted


def test_fixed_requires_announced_price(factory):
    auction = _auction(factory, AuctionType.FIXED)
    assert validate_bid(auction, "alice", 10, 100).reason is RejectionReason.PRICE_NOT_SET


def test_fixed_requires_exact_price(factory):
    auction = _auction(factory, AuctionType.FIXED, fixed_price=15)
    assert validate_bid(auction, "alice", 14, 100).reason is RejectionReason.PRICE_MISMATCH
    assert validate_bid(auction, "alice", 15, 100).accepted
    assert validate_bid(auction, "alice", 15, 10).reason is RejectionReason.INSUFFICIENT_FUNDS


def test_fixed_sells_to_first_taker_only(factory):
    auction = _auction(factory, AuctionType.FIXED, fixed_price=15, bids=[("alice", 15)])
    assert validate_bid(auction, "bob", 15, 100).reason is RejectionReason.ALREADY_SOLD
    assert validate_bid(auction, "alice", 15, 100).reason is RejectionReason.DUPLICATE_BID


def test_apply_bid_tracks_highest_for_open(factory):
    auction = _auction(factory, AuctionType.OPEN)
    auction = apply_bid(auction, Bid("alice", 5))
    auction = apply_bid(auction, Bid("bob", 9))
    assert auction.highest_bid == Bid("bob", 9)
    assert len(auction.bids) == 2


def test_apply_bid_keeps_sealed_bids_hidden_from_highest(factory):
    auction = _auction(factory, AuctionType.SEALED)
    auction = apply_bid(auction, Bid("alice", 5))
    assert auction.highest_bid is None
    assert auction.bids == (Bid("alice", 5),)


def test_accepted_open_bids_strictly_increase(factory):
    rng = Random(11)
    rules = RulesConfig()
    game = factory.with_auction(factory.game(money=500), AuctionType.OPEN)
    accepted = []
    for _ in range(200):
        uid = rng.choice(["alice", "bob", "carol"])
        highest = game.auction.highest_bid
        amount = (highest.amount if highest else 0) + rng.randint(-5, 10)
        try:
            game = place_bid(game, PlaceBid(uid=uid, amount=amount), rules)
        except ValidationRejected:
            continue
        accepted.append(game.auction.highest_bid)

    assert len(accepted) > 10
    amounts = [bid.amount for bid in accepted]
    assert amounts == sorted(set(amounts))
    for previous, current in zip(accepted, accepted[1:]):
        assert previous.player_id != current.player_id
    assert game.auction.highest_bid == game.auction.bids[-1]
