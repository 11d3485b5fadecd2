"""Deck construction and dealing."""

from __future__ import annotations

from dataclasses import replace
from random import Random
from typing import Iterable, Sequence, TypeVar

from .cards import AUCTION_TYPES, Card
from .exceptions import InsufficientCardsError
from .game import Player

T = TypeVar("T")


def generate_deck(artists: Sequence[str], cards_per_artist: int) -> tuple[Card, ...]:
    """Build ``len(artists) * cards_per_artist`` cards.

    Auction types are assigned cyclically within each artist so every table
    sees the same mix of mechanisms.
    """
    deck: list[Card] = []
    serial = 1
    for artist in artists:
        for index in range(cards_per_artist):
            deck.append(
                Card(
                    card_id=f"card-{serial:03d}",
                    artist=artist,
                    auction_type=AUCTION_TYPES[index % len(AUCTION_TYPES)],
                )
            )
            serial += 1
    return tuple(deck)


def shuffle(items: Iterable[T], rng: Random | None = None) -> list[T]:
    """Return a uniformly shuffled copy (Fisher-Yates)."""
    rng = rng or Random()
    pool = list(items)
    for i in range(len(pool) - 1, 0, -1):
        j = rng.randrange(i + 1)
        pool[i], pool[j] = pool[j], pool[i]
    return pool


def deal_initial_hands(
    players: Sequence[Player], deck: Sequence[Card], cards_per_player: int
) -> tuple[tuple[Player, ...], tuple[Card, ...]]:
    """Give each seat a contiguous slice of ``deck``; return players and the rest."""
    requested = len(players) * cards_per_player
    if requested > len(deck):
        raise InsufficientCardsError(requested, len(deck))
    dealt: list[Player] = []
    for seat, player in enumerate(players):
        start = seat * cards_per_player
        hand = tuple(deck[start : start + cards_per_player])
        dealt.append(replace(player, hand=player.hand + hand))
    return tuple(dealt), tuple(deck[requested:])


def replenish_hands(
    players: Sequence[Player], deck: Sequence[Card], cards_per_round: int
) -> tuple[tuple[Player, ...], tuple[Card, ...]]:
    """Deal the next round's cards, the same number to every seat.

    Never asks for more than the deck holds: when the remaining deck cannot
    cover ``cards_per_round`` for everybody, each seat gets an equal share
    and the remainder stays in the deck.
    """
    if not players:
        return tuple(players), tuple(deck)
    per_player = min(cards_per_round, len(deck) // len(players))
    if per_player <= 0:
        return tuple(players), tuple(deck)
    return deal_initial_hands(players, deck, per_player)
