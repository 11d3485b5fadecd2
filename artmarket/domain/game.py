"""Game aggregate and its embedded records.

The :class:`Game` is the single unit of consistency: players, the active
auction and the deck live inside it and are never written on their own.
Every record is immutable; reducers build new instances with
:func:`dataclasses.replace`.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Iterable, Mapping, Sequence

from .cards import AuctionType, Card


class GameStatus(str, Enum):
    WAITING = "waiting"
    IN_PROGRESS = "in-progress"
    FINISHED = "finished"


@dataclass(frozen=True, slots=True)
class Bid:
    player_id: str
    amount: int

    def to_document(self) -> dict[str, Any]:
        return {"playerId": self.player_id, "amount": self.amount}

    @classmethod
    def from_document(cls, data: Mapping[str, Any]) -> "Bid":
        return cls(player_id=data["playerId"], amount=int(data["amount"]))


@dataclass(frozen=True, slots=True)
class Auction:
    auction_id: str
    auction_type: AuctionType
    card: Card
    seller_id: str
    extra_card: Card | None = None
    bids: tuple[Bid, ...] = ()
    highest_bid: Bid | None = None
    fixed_price: int | None = None
    tied_bidders: tuple[str, ...] = ()
    resolved: bool = False

    @property
    def cards(self) -> tuple[Card, ...]:
        if self.extra_card is None:
            return (self.card,)
        return (self.card, self.extra_card)

    def bid_of(self, player_id: str) -> Bid | None:
        for bid in self.bids:
            if bid.player_id == player_id:
                return bid
        return None

    def to_document(self) -> dict[str, Any]:
        document: dict[str, Any] = {
            "id": self.auction_id,
            "type": self.auction_type.value,
            "card": self.card.to_document(),
            "hostPlayerId": self.seller_id,
            "bids": [bid.to_document() for bid in self.bids],
            "tiedBidders": list(self.tied_bidders),
            "resolved": self.resolved,
        }
        if self.extra_card is not None:
            document["extraCard"] = self.extra_card.to_document()
        if self.highest_bid is not None:
            document["highestBid"] = self.highest_bid.to_document()
        if self.fixed_price is not None:
            document["fixedPrice"] = self.fixed_price
        return document

    @classmethod
    def from_document(cls, data: Mapping[str, Any]) -> "Auction":
        extra = data.get("extraCard")
        highest = data.get("highestBid")
        fixed_price = data.get("fixedPrice")
        return cls(
            auction_id=data["id"],
            auction_type=AuctionType(data["type"]),
            card=Card.from_document(data["card"]),
            seller_id=data["hostPlayerId"],
            extra_card=Card.from_document(extra) if extra else None,
            bids=tuple(Bid.from_document(entry) for entry in data.get("bids", ())),
            highest_bid=Bid.from_document(highest) if highest else None,
            fixed_price=int(fixed_price) if fixed_price is not None else None,
            tied_bidders=tuple(data.get("tiedBidders", ())),
            resolved=bool(data.get("resolved", False)),
        )


@dataclass(frozen=True, slots=True)
class Player:
    uid: str
    name: str
    money: int
    hand: tuple[Card, ...] = ()
    collection: tuple[Card, ...] = ()
    sold: tuple[Card, ...] = ()
    is_host: bool = False

    def card_in_hand(self, card_id: str) -> Card | None:
        for card in self.hand:
            if card.card_id == card_id:
                return card
        return None

    def to_document(self) -> dict[str, Any]:
        return {
            "uid": self.uid,
            "name": self.name,
            "money": self.money,
            "hand": [card.to_document() for card in self.hand],
            "collection": [card.to_document() for card in self.collection],
            "soldCards": [card.to_document() for card in self.sold],
            "isHost": self.is_host,
        }

    @classmethod
    def from_document(cls, data: Mapping[str, Any]) -> "Player":
        return cls(
            uid=data["uid"],
            name=data.get("name", ""),
            money=int(data.get("money", 0)),
            hand=_cards(data.get("hand", ())),
            collection=_cards(data.get("collection", ())),
            sold=_cards(data.get("soldCards", ())),
            is_host=bool(data.get("isHost", False)),
        )


@dataclass(frozen=True, slots=True)
class RoundResult:
    """Valuation and payouts recorded when a round closes."""

    round: int
    artist_counts: Mapping[str, int]
    artist_values: Mapping[str, int]
    payouts: Mapping[str, int]

    def to_document(self) -> dict[str, Any]:
        return {
            "round": self.round,
            "artistCounts": dict(self.artist_counts),
            "artistValues": dict(self.artist_values),
            "payouts": dict(self.payouts),
        }

    @classmethod
    def from_document(cls, data: Mapping[str, Any]) -> "RoundResult":
        return cls(
            round=int(data["round"]),
            artist_counts=dict(data.get("artistCounts", {})),
            artist_values=dict(data.get("artistValues", {})),
            payouts=dict(data.get("payouts", {})),
        )


@dataclass(frozen=True, slots=True)
class Game:
    game_id: str
    status: GameStatus = GameStatus.WAITING
    players: tuple[Player, ...] = ()
    round: int = 1
    artist_counts: Mapping[str, int] = field(default_factory=dict)
    artist_values: Mapping[str, int] = field(default_factory=dict)
    artist_totals: Mapping[str, int] = field(default_factory=dict)
    deck: tuple[Card, ...] = ()
    discard_pile: tuple[Card, ...] = ()
    auction: Auction | None = None
    turn_player_id: str | None = None
    round_results: tuple[RoundResult, ...] = ()
    created_at: float | None = None

    def player(self, uid: str) -> Player | None:
        for player in self.players:
            if player.uid == uid:
                return player
        return None

    def seat_of(self, uid: str) -> int:
        for index, player in enumerate(self.players):
            if player.uid == uid:
                return index
        raise KeyError(f"Player {uid} is not seated in game {self.game_id}")

    def with_player(self, updated: Player) -> "Game":
        players = tuple(updated if p.uid == updated.uid else p for p in self.players)
        return replace(self, players=players)

    def to_document(self) -> dict[str, Any]:
        document: dict[str, Any] = {
            "id": self.game_id,
            "status": self.status.value,
            "players": [player.to_document() for player in self.players],
            "round": self.round,
            "artistCounts": dict(self.artist_counts),
            "artistValues": dict(self.artist_values),
            "artistTotals": dict(self.artist_totals),
            "deck": [card.to_document() for card in self.deck],
            "discardPile": [card.to_document() for card in self.discard_pile],
            "turnPlayerId": self.turn_player_id,
            "roundResults": [result.to_document() for result in self.round_results],
            "createdAt": self.created_at,
        }
        # No active auction means the key is absent, not null.
        if self.auction is not None:
            document["auction"] = self.auction.to_document()
        return document

    @classmethod
    def from_document(cls, data: Mapping[str, Any]) -> "Game":
        auction = data.get("auction")
        return cls(
            game_id=data["id"],
            status=GameStatus(data.get("status", GameStatus.WAITING.value)),
            players=tuple(Player.from_document(entry) for entry in data.get("players", ())),
            round=int(data.get("round", 1)),
            artist_counts={str(k): int(v) for k, v in data.get("artistCounts", {}).items()},
            artist_values={str(k): int(v) for k, v in data.get("artistValues", {}).items()},
            artist_totals={str(k): int(v) for k, v in data.get("artistTotals", {}).items()},
            deck=_cards(data.get("deck", ())),
            discard_pile=_cards(data.get("discardPile", ())),
            auction=Auction.from_document(auction) if auction else None,
            turn_player_id=data.get("turnPlayerId"),
            round_results=tuple(
                RoundResult.from_document(entry) for entry in data.get("roundResults", ())
            ),
            created_at=data.get("createdAt"),
        )


def _cards(entries: Iterable[Mapping[str, Any]]) -> tuple[Card, ...]:
    return tuple(Card.from_document(dict(entry)) for entry in entries)


def standings(players: Sequence[Player]) -> list[Player]:
    """Players ordered by money, richest first; seat order breaks ties."""
    return sorted(players, key=lambda player: -player.money)
