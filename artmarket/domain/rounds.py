"""Round end detection, artist valuation and payouts."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import Mapping, Sequence

from .cards import Card
from .deck import replenish_hands
from .game import Game, GameStatus, Player, RoundResult
from ..config import RulesConfig

logger = logging.getLogger(__name__)


class PayoutStrategy(ABC):
    """Decide which held cards are paid at the end of a round."""

    @abstractmethod
    def paid_cards(self, player: Player) -> Sequence[Card]:
        """Return the cards of ``player`` that earn their artist's value."""

    def card_values(
        self, round_values: Mapping[str, int], totals: Mapping[str, int]
    ) -> Mapping[str, int]:
        """Price per card for this payout; ``totals`` already include this round."""
        return round_values


@dataclass(slots=True)
class RoundPayoutStrategy(PayoutStrategy):
    """Pay only for cards won during the round being closed."""

    def paid_cards(self, player: Player) -> Sequence[Card]:
        return player.collection


@dataclass(slots=True)
class CumulativePayoutStrategy(PayoutStrategy):
    """Pay for every card the player ever won, earlier rounds included."""

    def paid_cards(self, player: Player) -> Sequence[Card]:
        return player.sold + player.collection


@dataclass(slots=True)
class AccumulatedValuePayoutStrategy(PayoutStrategy):
    """Pay cards won this round at the artist's running total over all rounds.

    Only artists ranked in the closing round pay anything.
    """

    def paid_cards(self, player: Player) -> Sequence[Card]:
        return player.collection

    def card_values(
        self, round_values: Mapping[str, int], totals: Mapping[str, int]
    ) -> Mapping[str, int]:
        return {artist: totals.get(artist, value) for artist, value in round_values.items()}


def payout_strategy_for(rules: RulesConfig) -> PayoutStrategy:
    if rules.payout_mode == "cumulative":
        return CumulativePayoutStrategy()
    if rules.payout_mode == "accumulated":
        return AccumulatedValuePayoutStrategy()
    return RoundPayoutStrategy()


def round_should_end(game: Game, rules: RulesConfig) -> bool:
    if game.status is not GameStatus.IN_PROGRESS:
        return False
    if any(count >= rules.round_end_threshold for count in game.artist_counts.values()):
        return True
    return game.auction is None and not any(player.hand for player in game.players)


def rank_artists(counts: Mapping[str, int], artist_order: Sequence[str]) -> list[str]:
    """Artists with at least one sale, most sold first.

    Equal counts keep the configured artist order; unknown artists go last in
    alphabetical order.
    """
    order = {artist: index for index, artist in enumerate(artist_order)}
    played = [artist for artist, count in counts.items() if count > 0]
    return sorted(
        played,
        key=lambda artist: (-counts[artist], order.get(artist, len(order)), artist),
    )


def artist_values(counts: Mapping[str, int], rules: RulesConfig) -> dict[str, int]:
    ranking = rank_artists(counts, rules.artists)
    return {artist: value for artist, value in zip(ranking, rules.payouts)}


def accumulate_values(
    totals: Mapping[str, int], round_values: Mapping[str, int]
) -> dict[str, int]:
    """Add this round's artist values onto the running totals."""
    updated = dict(totals)
    for artist, value in round_values.items():
        updated[artist] = updated.get(artist, 0) + value
    return updated


def pay_players(
    players: Sequence[Player], values: Mapping[str, int], strategy: PayoutStrategy
) -> tuple[tuple[Player, ...], dict[str, int]]:
    paid: list[Player] = []
    payouts: dict[str, int] = {}
    for player in players:
        amount = sum(values.get(card.artist, 0) for card in strategy.paid_cards(player))
        payouts[player.uid] = amount
        paid.append(
            replace(
                player,
                money=player.money + amount,
                collection=(),
                sold=player.sold + player.collection,
            )
        )
    return tuple(paid), payouts


def check_and_advance_round(
    game: Game, rules: RulesConfig, *, strategy: PayoutStrategy | None = None
) -> Game:
    """Close the round when it is over: value artists, pay out, then redeal or finish."""
    if not round_should_end(game, rules):
        return game

    strategy = strategy or payout_strategy_for(rules)
    values = artist_values(game.artist_counts, rules)
    totals = accumulate_values(game.artist_totals, values)
    players, payouts = pay_players(game.players, strategy.card_values(values, totals), strategy)
    result = RoundResult(
        round=game.round,
        artist_counts=dict(game.artist_counts),
        artist_values=values,
        payouts=payouts,
    )
    logger.info("Round %s closed in game %s with values %s", game.round, game.game_id, values)

    discard = game.discard_pile
    if game.auction is not None:
        discard = discard + game.auction.cards

    closed = replace(
        game,
        players=players,
        artist_values=values,
        artist_totals=totals,
        auction=None,
        discard_pile=discard,
        round_results=game.round_results + (result,),
    )

    if game.round >= rules.max_rounds:
        logger.info("Game %s finished after round %s", game.game_id, game.round)
        return replace(closed, status=GameStatus.FINISHED, turn_player_id=None)

    players, deck = replenish_hands(closed.players, closed.deck, rules.cards_per_round)
    advanced = replace(
        closed,
        players=players,
        deck=deck,
        round=game.round + 1,
        artist_counts={},
    )
    if not any(player.hand for player in advanced.players):
        logger.info("Game %s finished early: no cards left to auction", game.game_id)
        return replace(closed, status=GameStatus.FINISHED, turn_player_id=None)
    return replace(advanced, turn_player_id=_first_seat_with_cards(advanced))


def _first_seat_with_cards(game: Game) -> str | None:
    for player in game.players:
        if player.hand:
            return player.uid
    return None
