from collections import Counter
from itertools import permutations
from random import Random

import pytest

from artmarket.config import DEFAULT_ARTISTS
from artmarket.domain.cards import AuctionType
from artmarket.domain.deck import (
    deal_initial_hands,
    generate_deck,
    replenish_hands,
    shuffle,
)
from artmarket.domain.exceptions import InsufficientCardsError
from artmarket.testing.factory import PlayerFactory


def test_generate_deck_builds_artists_times_multiplicity():
    deck = generate_deck(DEFAULT_ARTISTS, 12)
    assert len(deck) == 60
    assert len({card.card_id for card in deck}) == 60
    assert Counter(card.artist for card in deck) == {artist: 12 for artist in DEFAULT_ARTISTS}


def test_generate_deck_assigns_auction_types_cyclically():
    deck = generate_deck(("Karl",), 7)
    assert [card.auction_type for card in deck] == [
        AuctionType.OPEN,
        AuctionType.SEALED,
        AuctionType.ONCE,
        AuctionType.DOUBLE,
        AuctionType.FIXED,
        AuctionType.OPEN,
        AuctionType.SEALED,
    ]
    assert generate_deck(("Karl",), 7) == deck


def test_shuffle_is_a_permutation_and_leaves_input_alone():
    deck = generate_deck(DEFAULT_ARTISTS, 12)
    shuffled = shuffle(deck, Random(3))
    assert sorted(c.card_id for c in shuffled) == sorted(c.card_id for c in deck)
    assert shuffled != list(deck)
    assert shuffle(deck, Random(3)) == shuffled


def test_shuffle_is_unbiased():
    rng = Random(1)
    counts = Counter(tuple(shuffle("abc", rng)) for _ in range(6000))
    assert set(counts) == set(permutations("abc"))
    for permutation, seen in counts.items():
        assert 850 < seen < 1150, permutation


def test_deal_uses_whole_deck_for_six_players():
    players = PlayerFactory().batch([f"p{i}" for i in range(6)])
    deck = generate_deck(DEFAULT_ARTISTS, 12)
    dealt, remaining = deal_initial_hands(players, deck, 10)
    assert remaining == ()
    assert all(len(player.hand) == 10 for player in dealt)
    assert dealt[2].hand == deck[20:30]


def test_deal_fails_for_seven_players():
    players = PlayerFactory().batch([f"p{i}" for i in range(7)])
    with pytest.raises(InsufficientCardsError) as info:
        deal_initial_hands(players, generate_deck(DEFAULT_ARTISTS, 12), 10)
    assert info.value.requested == 70
    assert info.value.available == 60


def test_replenish_deals_full_batch_when_deck_allows():
    players = PlayerFactory().batch(["a", "b", "c", "d"])
    deck = generate_deck(DEFAULT_ARTISTS, 4)
    dealt, remaining = replenish_hands(players, deck, 5)
    assert [len(p.hand) for p in dealt] == [5, 5, 5, 5]
    assert remaining == ()


def test_replenish_shares_a_short_deck_evenly():
    players = PlayerFactory().batch(["a", "b", "c", "d"])
    deck = generate_deck(("Karl",), 7)
    dealt, remaining = replenish_hands(players, deck, 5)
    assert [len(p.hand) for p in dealt] == [1, 1, 1, 1]
    assert len(remaining) == 3


def test_replenish_with_empty_deck_is_noop():
    players = PlayerFactory().batch(["a", "b"])
    dealt, remaining = replenish_hands(players, (), 5)
    assert dealt == players
    assert remaining == ()
