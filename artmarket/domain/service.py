"""Game orchestration: commands through store transactions, then events."""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from random import Random

from .cards import AuctionType
from .commands import (
    AcceptFixedPrice,
    AdvanceRound,
    CancelAuction,
    Command,
    FinishAuction,
    JoinGame,
    OfferCard,
    PlaceBid,
    SetFixedPrice,
    StartGame,
    apply_command,
    finish_auction,
)
from .deck import generate_deck, shuffle
from .events import (
    AUCTION_CANCELLED,
    AUCTION_OPENED,
    AUCTION_SETTLED,
    AUCTION_TIED,
    BID_ACCEPTED,
    GAME_FINISHED,
    GAME_STARTED,
    ROUND_COMPLETED,
    EventBus,
)
from .exceptions import PreconditionFailed
from .game import Auction, Game, GameStatus, Player, standings
from .resolver import AuctionResult
from .rounds import PayoutStrategy, payout_strategy_for
from ..config import RulesConfig
from ..storage.base import AuctionHistoryStore, GameStore, SettlementRecord

logger = logging.getLogger(__name__)

# Amounts of these bids stay hidden until the auction closes.
_HIDDEN_BIDS = frozenset({AuctionType.SEALED, AuctionType.ONCE})


@dataclass(slots=True)
class SettlementOutcome:
    game: Game
    result: AuctionResult | None

    @property
    def settled(self) -> bool:
        return self.result is not None and not self.result.awaiting_tie_break

    @property
    def awaiting_tie_break(self) -> bool:
        return self.result is not None and self.result.awaiting_tie_break


class GameService:
    """Expose game actions as atomic operations on the stored game."""

    def __init__(
        self,
        store: GameStore,
        history_store: AuctionHistoryStore,
        rules: RulesConfig,
        event_bus: EventBus,
        *,
        rng: Random | None = None,
        payout_strategy: PayoutStrategy | None = None,
    ) -> None:
        self._store = store
        self._history = history_store
        self._rules = rules
        self._events = event_bus
        self._rng = rng or Random()
        self._payout_strategy = payout_strategy or payout_strategy_for(rules)

    async def create_game(self, host_uid: str, host_name: str, *, game_id: str | None = None) -> Game:
        game = Game(game_id=game_id or uuid.uuid4().hex, created_at=time.time())
        game = apply_command(game, JoinGame(uid=host_uid, name=host_name), self._rules)
        await self._store.create(game)
        logger.info("Game %s created by %s", game.game_id, host_uid)
        return game

    async def fetch(self, game_id: str) -> Game:
        return await self._store.get(game_id)

    async def join_game(self, game_id: str, uid: str, name: str) -> Game:
        return await self._run(game_id, JoinGame(uid=uid, name=name))

    async def start_game(self, game_id: str, uid: str) -> Game:
        deck = shuffle(generate_deck(self._rules.artists, self._rules.cards_per_artist), self._rng)
        game = await self._run(game_id, StartGame(uid=uid, deck=tuple(deck)))
        logger.info("Game %s started with %s players", game_id, len(game.players))
        await self._events.publish(
            GAME_STARTED, {"game_id": game_id, "players": [p.uid for p in game.players]}
        )
        return game

    async def offer_card(
        self,
        game_id: str,
        uid: str,
        card_id: str,
        *,
        extra_card_id: str | None = None,
        fixed_price: int | None = None,
    ) -> Auction:
        command = OfferCard(
            uid=uid,
            card_id=card_id,
            auction_id=uuid.uuid4().hex,
            extra_card_id=extra_card_id,
            fixed_price=fixed_price,
        )
        auction = _auction_of(await self._run(game_id, command))
        await self._events.publish(
            AUCTION_OPENED,
            {
                "game_id": game_id,
                "auction_id": auction.auction_id,
                "seller_id": uid,
                "type": auction.auction_type.value,
                "cards": [card.card_id for card in auction.cards],
            },
        )
        return auction

    async def set_fixed_price(self, game_id: str, uid: str, price: int) -> Auction:
        return _auction_of(await self._run(game_id, SetFixedPrice(uid=uid, price=price)))

    async def place_bid(self, game_id: str, uid: str, amount: int) -> Auction:
        auction = _auction_of(await self._run(game_id, PlaceBid(uid=uid, amount=amount)))
        await self._publish_bid(game_id, auction, uid, amount)
        return auction

    async def accept_fixed_price(self, game_id: str, uid: str) -> Auction:
        auction = _auction_of(await self._run(game_id, AcceptFixedPrice(uid=uid)))
        await self._publish_bid(game_id, auction, uid, auction.fixed_price or 0)
        return auction

    async def finish_auction(
        self,
        game_id: str,
        *,
        actor_uid: str | None = None,
        forced_winner: str | None = None,
    ) -> SettlementOutcome:
        """Resolve and settle the active auction, then run the round check.

        Safe to call twice for the same auction: the second call finds no
        auction and returns an outcome without a result.
        """
        command = FinishAuction(actor_uid=actor_uid, forced_winner=forced_winner)
        captured: dict[str, tuple[Auction | None, AuctionResult | None]] = {}

        def mutate(game: Game) -> Game:
            updated, result = finish_auction(game, command)
            captured["last"] = (game.auction, result)
            return updated

        game = await self._store.transaction(game_id, mutate)
        auction, result = captured.get("last", (None, None))
        if result is None or auction is None:
            return SettlementOutcome(game=game, result=None)

        if result.awaiting_tie_break:
            await self._events.publish(
                AUCTION_TIED,
                {
                    "game_id": game_id,
                    "auction_id": auction.auction_id,
                    "tied_bidders": list(result.tied_bidders),
                    "amount": result.price,
                },
            )
            return SettlementOutcome(game=game, result=result)

        await self._history.add_record(
            SettlementRecord(
                game_id=game_id,
                auction_id=auction.auction_id,
                round=game.round,
                auction_type=auction.auction_type.value,
                card_ids=[card.card_id for card in auction.cards],
                seller_id=auction.seller_id,
                winner_id=result.winner_id,
                price=result.price,
                timestamp=datetime.now(timezone.utc),
            )
        )
        await self._events.publish(
            AUCTION_SETTLED,
            {
                "game_id": game_id,
                "auction_id": auction.auction_id,
                "winner_id": result.winner_id,
                "seller_id": auction.seller_id,
                "price": result.price,
            },
        )
        game = await self.check_round(game_id)
        return SettlementOutcome(game=game, result=result)

    async def resolve_tie(self, game_id: str, uid: str, winner_id: str) -> SettlementOutcome:
        """Seller picks the winner among tied sealed bidders."""
        return await self.finish_auction(game_id, actor_uid=uid, forced_winner=winner_id)

    async def cancel_auction(self, game_id: str, uid: str) -> Game:
        command = CancelAuction(uid=uid)
        cancelled: dict[str, Auction] = {}

        def mutate(game: Game) -> Game:
            updated = apply_command(game, command, self._rules)
            cancelled.clear()
            if game.auction is not None and updated.auction is None:
                cancelled["auction"] = game.auction
            return updated

        await self._store.transaction(game_id, mutate)
        auction = cancelled.get("auction")
        if auction is not None:
            await self._events.publish(
                AUCTION_CANCELLED,
                {"game_id": game_id, "auction_id": auction.auction_id, "seller_id": uid},
            )
        return await self.check_round(game_id)

    async def check_round(self, game_id: str) -> Game:
        """Close the round if it is over; harmless to call at any time."""
        advance = AdvanceRound(strategy=self._payout_strategy)
        closed: dict[str, Game] = {}

        def mutate(game: Game) -> Game:
            updated = apply_command(game, advance, self._rules)
            closed.clear()
            if updated is not game:
                closed["before"] = game
            return updated

        game = await self._store.transaction(game_id, mutate)
        if "before" not in closed:
            return game

        result = game.round_results[-1]
        await self._events.publish(
            ROUND_COMPLETED,
            {
                "game_id": game_id,
                "round": result.round,
                "artist_values": dict(result.artist_values),
                "artist_totals": dict(game.artist_totals),
                "payouts": dict(result.payouts),
            },
        )
        if game.status is GameStatus.FINISHED:
            ranking = standings(game.players)
            await self._events.publish(
                GAME_FINISHED,
                {
                    "game_id": game_id,
                    "winner_id": ranking[0].uid if ranking else None,
                    "money": {player.uid: player.money for player in ranking},
                },
            )
        return game

    async def standings(self, game_id: str) -> list[Player]:
        game = await self._store.get(game_id)
        return standings(game.players)

    async def history(self, game_id: str, limit: int = 20) -> list[SettlementRecord]:
        return list(await self._history.recent_for_game(game_id, limit))

    async def _run(self, game_id: str, command: Command) -> Game:
        return await self._store.transaction(
            game_id, lambda game: apply_command(game, command, self._rules)
        )

    async def _publish_bid(self, game_id: str, auction: Auction, uid: str, amount: int) -> None:
        await self._events.publish(
            BID_ACCEPTED,
            {
                "game_id": game_id,
                "auction_id": auction.auction_id,
                "player_id": uid,
                "amount": None if auction.auction_type in _HIDDEN_BIDS else amount,
            },
        )


def _auction_of(game: Game) -> Auction:
    if game.auction is None:
        raise PreconditionFailed(f"Game {game.game_id} has no active auction")
    return game.auction
