from dataclasses import replace

from artmarket.config import RulesConfig
from artmarket.domain.cards import AuctionType
from artmarket.domain.game import GameStatus
from artmarket.domain.rounds import (
    AccumulatedValuePayoutStrategy,
    CumulativePayoutStrategy,
    artist_values,
    check_and_advance_round,
    payout_strategy_for,
    rank_artists,
    round_should_end,
)


def _collect(factory, game, uid, *artists):
    player = game.player(uid)
    cards = tuple(factory.card(artist) for artist in artists)
    return game.with_player(replace(player, collection=player.collection + cards))


def test_round_continues_below_threshold(factory):
    rules = RulesConfig()
    game = factory.game(artist_counts={"Karl": 4, "Yoko": 4})
    assert not round_should_end(game, rules)
    assert check_and_advance_round(game, rules) is game


def test_round_ends_when_hands_are_empty(factory):
    game = factory.game()
    game = replace(game, players=tuple(replace(p, hand=()) for p in game.players))
    assert round_should_end(game, RulesConfig())


def test_round_waits_for_running_auction_when_hands_are_empty(factory):
    game = factory.game()
    game = replace(game, players=tuple(replace(p, hand=()) for p in game.players))
    game = factory.with_auction(game, AuctionType.OPEN)
    assert not round_should_end(game, RulesConfig())


def test_top_three_artists_get_payouts(factory):
    rules = RulesConfig()
    counts = {"Karl": 5, "Yoko": 3, "Krypto": 1}
    assert artist_values(counts, rules) == {"Karl": 30, "Yoko": 20, "Krypto": 10}


def test_unsold_artists_are_not_valued():
    rules = RulesConfig()
    assert artist_values({"Karl": 5, "Yoko": 0}, rules) == {"Karl": 30}


def test_equal_counts_follow_artist_order():
    order = ("Krypto", "Yoko", "Karl", "Christin P.", "Lite Metal")
    assert rank_artists({"Yoko": 3, "Krypto": 3, "Karl": 5}, order) == ["Karl", "Krypto", "Yoko"]
    assert rank_artists({"Zed": 1, "Abe": 1, "Karl": 1}, order) == ["Karl", "Abe", "Zed"]


def test_close_round_pays_value_times_cards(factory):
    rules = RulesConfig()
    game = factory.game(artist_counts={"Karl": 5, "Yoko": 3, "Krypto": 1})
    game = _collect(factory, game, "alice", "Karl", "Karl", "Yoko")
    game = _collect(factory, game, "bob", "Krypto", "Christin P.")
    game = replace(game, deck=tuple(factory.card("Karl") for _ in range(8)))

    advanced = check_and_advance_round(game, rules)

    assert advanced.player("alice").money == 180
    assert advanced.player("bob").money == 110
    assert advanced.player("seller").money == 100
    assert advanced.round == 2
    assert advanced.artist_counts == {}
    assert advanced.artist_values == {"Karl": 30, "Yoko": 20, "Krypto": 10}
    assert advanced.status is GameStatus.IN_PROGRESS

    result = advanced.round_results[-1]
    assert result.round == 1
    assert result.payouts == {"seller": 0, "alice": 80, "bob": 10, "carol": 0}

    alice = advanced.player("alice")
    assert alice.collection == ()
    assert len(alice.sold) == 3
    # 8 cards among 4 players: two each on top of the 3 already held.
    assert [len(p.hand) for p in advanced.players] == [5, 5, 5, 5]
    assert advanced.deck == ()
    assert advanced.turn_player_id == "seller"


def test_close_round_discards_running_auction(factory):
    rules = RulesConfig()
    game = factory.with_auction(factory.game(artist_counts={"Karl": 5}), AuctionType.OPEN)
    card = game.auction.card
    advanced = check_and_advance_round(game, rules)
    assert advanced.auction is None
    assert card in advanced.discard_pile


def test_round_payout_ignores_earlier_rounds(factory):
    rules = RulesConfig()
    game = factory.game(artist_counts={"Karl": 5})
    old = factory.card("Karl")
    game = game.with_player(replace(game.player("carol"), sold=(old,)))
    advanced = check_and_advance_round(game, rules)
    assert advanced.player("carol").money == 100


def test_cumulative_payout_counts_earlier_rounds(factory):
    rules = RulesConfig(payout_mode="cumulative")
    game = factory.game(artist_counts={"Karl": 5})
    old = factory.card("Karl")
    game = game.with_player(replace(game.player("carol"), sold=(old,)))
    game = _collect(factory, game, "carol", "Karl")

    advanced = check_and_advance_round(game, rules)
    assert advanced.player("carol").money == 160

    explicit = check_and_advance_round(game, RulesConfig(), strategy=CumulativePayoutStrategy())
    assert explicit.player("carol").money == 160


def _two_rounds(factory, rules):
    first = factory.game(artist_counts={"Karl": 5, "Yoko": 3, "Krypto": 1})
    first = replace(first, deck=tuple(factory.card("Karl") for _ in range(8)))
    second = check_and_advance_round(first, rules)
    second = replace(second, artist_counts={"Karl": 5, "Yoko": 1})
    second = _collect(factory, second, "alice", "Karl", "Karl")
    second = _collect(factory, second, "bob", "Krypto")
    return second, check_and_advance_round(second, rules)


def test_artist_totals_accumulate_across_rounds(factory):
    second, third = _two_rounds(factory, RulesConfig())

    assert second.artist_totals == {"Karl": 30, "Yoko": 20, "Krypto": 10}
    assert third.round == 3
    assert third.artist_values == {"Karl": 30, "Yoko": 20}
    assert third.artist_totals == {"Karl": 60, "Yoko": 40, "Krypto": 10}
    # Round mode still pays this round's value only.
    assert third.player("alice").money == 160


def test_accumulated_payout_uses_running_totals(factory):
    rules = RulesConfig(payout_mode="accumulated")
    assert isinstance(payout_strategy_for(rules), AccumulatedValuePayoutStrategy)

    _, third = _two_rounds(factory, rules)

    assert third.player("alice").money == 220
    # Krypto went unranked this round, so its earlier value does not pay.
    assert third.player("bob").money == 100
    assert third.round_results[-1].payouts["alice"] == 120


def test_artist_totals_survive_game_end(factory):
    game = factory.game(artist_counts={"Karl": 5}, round=4)
    game = replace(game, artist_totals={"Karl": 50, "Yoko": 20})
    finished = check_and_advance_round(game, RulesConfig(max_rounds=4))
    assert finished.status is GameStatus.FINISHED
    assert finished.artist_totals == {"Karl": 80, "Yoko": 20}


def test_last_round_finishes_game(factory):
    rules = RulesConfig(max_rounds=4)
    game = factory.game(artist_counts={"Karl": 5}, round=4)
    game = _collect(factory, game, "bob", "Karl")

    finished = check_and_advance_round(game, rules)

    assert finished.status is GameStatus.FINISHED
    assert finished.round == 4
    assert finished.turn_player_id is None
    assert finished.player("bob").money == 130
    assert check_and_advance_round(finished, rules) is finished


def test_game_finishes_early_without_cards(factory):
    rules = RulesConfig()
    game = factory.game(artist_counts={"Karl": 1})
    game = replace(game, players=tuple(replace(p, hand=()) for p in game.players), deck=())

    finished = check_and_advance_round(game, rules)

    assert finished.status is GameStatus.FINISHED
    assert finished.round == 1
    assert len(finished.round_results) == 1
