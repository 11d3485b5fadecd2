"""Pure reducers turning a game and a command into the next game.

Reducers never mutate their input and never touch storage. The service runs
them inside a store transaction, so a reducer may be applied several times
against fresh snapshots before one of its results is committed.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Sequence, Union

from .bidding import apply_bid, validate_bid
from .cards import AuctionType, Card
from .deck import deal_initial_hands
from .exceptions import PreconditionFailed, RejectionReason, ValidationRejected
from .game import Auction, Bid, Game, GameStatus, Player
from .resolver import AuctionResult, resolve
from .rounds import PayoutStrategy, check_and_advance_round
from .settlement import cancel_auction, settle
from ..config import RulesConfig


@dataclass(frozen=True, slots=True)
class JoinGame:
    uid: str
    name: str


@dataclass(frozen=True, slots=True)
class StartGame:
    uid: str
    deck: Sequence[Card]


@dataclass(frozen=True, slots=True)
class OfferCard:
    uid: str
    card_id: str
    auction_id: str
    extra_card_id: str | None = None
    fixed_price: int | None = None


@dataclass(frozen=True, slots=True)
class SetFixedPrice:
    uid: str
    price: int


@dataclass(frozen=True, slots=True)
class PlaceBid:
    uid: str
    amount: int


@dataclass(frozen=True, slots=True)
class AcceptFixedPrice:
    uid: str


@dataclass(frozen=True, slots=True)
class FinishAuction:
    actor_uid: str | None = None
    forced_winner: str | None = None


@dataclass(frozen=True, slots=True)
class CancelAuction:
    uid: str


@dataclass(frozen=True, slots=True)
class AdvanceRound:
    strategy: PayoutStrategy | None = None


Command = Union[
    JoinGame,
    StartGame,
    OfferCard,
    SetFixedPrice,
    PlaceBid,
    AcceptFixedPrice,
    FinishAuction,
    CancelAuction,
    AdvanceRound,
]


def apply_command(game: Game, command: Command, rules: RulesConfig) -> Game:
    match command:
        case JoinGame():
            return join_game(game, command, rules)
        case StartGame():
            return start_game(game, command, rules)
        case OfferCard():
            return offer_card(game, command)
        case SetFixedPrice():
            return set_fixed_price(game, command)
        case PlaceBid():
            return place_bid(game, command, rules)
        case AcceptFixedPrice():
            return accept_fixed_price(game, command)
        case FinishAuction():
            finished, _ = finish_auction(game, command)
            return finished
        case CancelAuction():
            _require_in_progress(game)
            return cancel_auction(game, command.uid)
        case AdvanceRound():
            return check_and_advance_round(game, rules, strategy=command.strategy)
        case _:
            raise TypeError(f"Unknown command {command!r}")


def join_game(game: Game, command: JoinGame, rules: RulesConfig) -> Game:
    if game.status is not GameStatus.WAITING:
        raise PreconditionFailed("The game has already started")
    if game.player(command.uid) is not None:
        return game
    if len(game.players) >= rules.max_players:
        raise PreconditionFailed(f"The table is full ({rules.max_players} players)")
    player = Player(
        uid=command.uid,
        name=command.name,
        money=rules.starting_money,
        is_host=not game.players,
    )
    return replace(game, players=game.players + (player,))


def start_game(game: Game, command: StartGame, rules: RulesConfig) -> Game:
    if game.status is not GameStatus.WAITING:
        raise PreconditionFailed("The game has already started")
    host = game.player(command.uid)
    if host is None or not host.is_host:
        raise PreconditionFailed("Only the host can start the game")
    if len(game.players) < rules.min_players:
        raise PreconditionFailed(f"At least {rules.min_players} players are required")
    players, deck = deal_initial_hands(game.players, command.deck, rules.cards_per_player)
    return replace(
        game,
        status=GameStatus.IN_PROGRESS,
        players=players,
        deck=deck,
        round=1,
        artist_counts={},
        artist_values={},
        turn_player_id=players[0].uid,
    )


def offer_card(game: Game, command: OfferCard) -> Game:
    _require_in_progress(game)
    if game.auction is not None:
        raise PreconditionFailed("An auction is already running")
    if game.turn_player_id != command.uid:
        raise PreconditionFailed("It is not your turn")
    seller = _seated(game, command.uid)
    card = seller.card_in_hand(command.card_id)
    if card is None:
        raise PreconditionFailed(f"Card {command.card_id} is not in your hand")

    extra: Card | None = None
    if command.extra_card_id is not None:
        if card.auction_type is not AuctionType.DOUBLE:
            raise ValidationRejected(
                RejectionReason.WRONG_AUCTION_TYPE, "Only a double card can be paired"
            )
        extra = seller.card_in_hand(command.extra_card_id)
        if extra is None or extra.card_id == card.card_id:
            raise PreconditionFailed(f"Card {command.extra_card_id} is not in your hand")
        if extra.artist != card.artist or extra.auction_type is AuctionType.DOUBLE:
            raise ValidationRejected(
                RejectionReason.WRONG_AUCTION_TYPE,
                "A double card pairs with a non-double card of the same artist",
            )

    if command.fixed_price is not None:
        if card.auction_type is not AuctionType.FIXED:
            raise ValidationRejected(RejectionReason.WRONG_AUCTION_TYPE)
        if command.fixed_price <= 0:
            raise ValidationRejected(RejectionReason.NOT_POSITIVE)

    offered = {card.card_id} | ({extra.card_id} if extra else set())
    seller = replace(seller, hand=tuple(c for c in seller.hand if c.card_id not in offered))
    auction = Auction(
        auction_id=command.auction_id,
        auction_type=card.auction_type,
        card=card,
        seller_id=command.uid,
        extra_card=extra,
        fixed_price=command.fixed_price,
    )
    return replace(game.with_player(seller), auction=auction)


def set_fixed_price(game: Game, command: SetFixedPrice) -> Game:
    auction = _active_auction(game)
    if auction.seller_id != command.uid:
        raise PreconditionFailed("Only the seller can set the price")
    if auction.auction_type is not AuctionType.FIXED:
        raise ValidationRejected(RejectionReason.WRONG_AUCTION_TYPE)
    if auction.fixed_price is not None:
        raise PreconditionFailed("The price has already been announced")
    if command.price <= 0:
        raise ValidationRejected(RejectionReason.NOT_POSITIVE)
    return replace(game, auction=replace(auction, fixed_price=command.price))


def place_bid(game: Game, command: PlaceBid, rules: RulesConfig) -> Game:
    return _record_bid(
        game, command.uid, command.amount, allow_sealed_overwrite=rules.allow_sealed_overwrite
    )


def accept_fixed_price(game: Game, command: AcceptFixedPrice) -> Game:
    auction = _active_auction(game)
    if auction.auction_type is not AuctionType.FIXED:
        raise ValidationRejected(RejectionReason.WRONG_AUCTION_TYPE)
    if auction.fixed_price is None:
        raise ValidationRejected(RejectionReason.PRICE_NOT_SET)
    return _record_bid(game, command.uid, auction.fixed_price)


def finish_auction(game: Game, command: FinishAuction) -> tuple[Game, AuctionResult | None]:
    """Resolve and settle the active auction; ``(game, None)`` when there is none."""
    if game.auction is None:
        return game, None
    auction = game.auction
    if command.actor_uid is not None and command.actor_uid != auction.seller_id:
        raise PreconditionFailed("Only the seller can close the auction")
    if command.forced_winner is not None and auction.auction_type is not AuctionType.SEALED:
        raise ValidationRejected(RejectionReason.WRONG_AUCTION_TYPE)
    result = resolve(auction, game.players, forced_winner=command.forced_winner)
    return settle(game, result), result


def _record_bid(
    game: Game, uid: str, amount: int, *, allow_sealed_overwrite: bool = False
) -> Game:
    auction = _active_auction(game)
    if auction.resolved:
        raise PreconditionFailed("Bidding is closed for this auction")
    bidder = _seated(game, uid)
    decision = validate_bid(
        auction, uid, amount, bidder.money, allow_sealed_overwrite=allow_sealed_overwrite
    )
    if not decision.accepted:
        raise ValidationRejected(decision.reason)
    bid = Bid(player_id=uid, amount=amount)
    updated = apply_bid(auction, bid, allow_sealed_overwrite=allow_sealed_overwrite)
    return replace(game, auction=updated)


def _require_in_progress(game: Game) -> None:
    if game.status is not GameStatus.IN_PROGRESS:
        raise PreconditionFailed(f"Game {game.game_id} is {game.status.value}")


def _active_auction(game: Game) -> Auction:
    _require_in_progress(game)
    if game.auction is None:
        raise PreconditionFailed("There is no active auction")
    return game.auction


def _seated(game: Game, uid: str) -> Player:
    player = game.player(uid)
    if player is None:
        raise PreconditionFailed(f"Player {uid} is not seated in game {game.game_id}")
    return player
