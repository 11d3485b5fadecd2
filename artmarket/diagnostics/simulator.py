"""Play whole games with random bidders to exercise rules and balance."""

from __future__ import annotations

from dataclasses import dataclass, field
from random import Random
from typing import Dict

from ..app import ArtMarketApp
from ..config import ArtMarketConfig, RulesConfig
from ..domain.cards import AuctionType
from ..domain.exceptions import ValidationRejected
from ..domain.game import Game, GameStatus, standings


@dataclass(slots=True)
class SimulationResult:
    players: int
    rounds: int = 0
    auctions: int = 0
    voided: int = 0
    ties: int = 0
    money: Dict[str, int] = field(default_factory=dict)
    winner: str | None = None
    artist_values: list[Dict[str, int]] = field(default_factory=list)


class GameSimulator:
    """Drive a full game through the service with random players."""

    def __init__(
        self,
        rules: RulesConfig | None = None,
        *,
        rng: Random | None = None,
        max_steps: int = 1000,
    ) -> None:
        self._rules = rules or RulesConfig()
        self._rng = rng or Random()
        self._max_steps = max_steps

    async def simulate(self, players: int = 4) -> SimulationResult:
        app = ArtMarketApp(ArtMarketConfig(rules=self._rules), rng=self._rng)
        service = app.game_service
        uids = [f"bot-{seat + 1}" for seat in range(players)]
        game = await service.create_game(uids[0], uids[0])
        for uid in uids[1:]:
            await service.join_game(game.game_id, uid, uid)
        game = await service.start_game(game.game_id, uids[0])

        result = SimulationResult(players=players)
        for _ in range(self._max_steps):
            if game.status is GameStatus.FINISHED:
                break
            game = await self._play_turn(app, game, result)
        else:
            raise RuntimeError(f"Game {game.game_id} did not finish in {self._max_steps} steps")

        result.rounds = len(game.round_results)
        result.artist_values = [dict(r.artist_values) for r in game.round_results]
        ranking = standings(game.players)
        result.money = {player.uid: player.money for player in ranking}
        result.winner = ranking[0].uid if ranking else None
        return result

    async def _play_turn(self, app: ArtMarketApp, game: Game, result: SimulationResult) -> Game:
        service = app.game_service
        seller = game.player(game.turn_player_id or "")
        if seller is None or not seller.hand:
            return await service.check_round(game.game_id)

        card = self._rng.choice(seller.hand)
        fixed_price = None
        if card.auction_type is AuctionType.FIXED:
            fixed_price = self._rng.randint(1, max(1, seller.money // 2 or 1))
        auction = await service.offer_card(
            game.game_id, seller.uid, card.card_id, fixed_price=fixed_price
        )

        bidders = [p for p in game.players if p.uid != seller.uid]
        self._rng.shuffle(bidders)
        if auction.auction_type is AuctionType.FIXED:
            for bidder in bidders:
                if bidder.money >= (auction.fixed_price or 0) and self._rng.random() < 0.5:
                    await service.accept_fixed_price(game.game_id, bidder.uid)
                    break
        elif auction.auction_type in (AuctionType.OPEN, AuctionType.DOUBLE):
            highest = 0
            for bidder in bidders * 2:
                amount = highest + self._rng.randint(1, 10)
                if amount > bidder.money or self._rng.random() < 0.3:
                    continue
                try:
                    await service.place_bid(game.game_id, bidder.uid, amount)
                except ValidationRejected:
                    continue
                highest = amount
        else:
            for bidder in bidders:
                if bidder.money <= 0 or self._rng.random() < 0.2:
                    continue
                await service.place_bid(
                    game.game_id, bidder.uid, self._rng.randint(1, min(bidder.money, 40))
                )

        outcome = await service.finish_auction(game.game_id, actor_uid=seller.uid)
        if outcome.awaiting_tie_break and outcome.result is not None:
            result.ties += 1
            choice = self._rng.choice(outcome.result.tied_bidders)
            outcome = await service.resolve_tie(game.game_id, seller.uid, choice)
        result.auctions += 1
        if outcome.result is not None and outcome.result.winner_id is None:
            result.voided += 1
        return outcome.game
