"""Example: a scripted three-player table with event listeners attached."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from artmarket import ArtMarketApp, ArtMarketConfig
from artmarket.domain.cards import AuctionType
from artmarket.domain.events import AUCTION_SETTLED, GAME_FINISHED, ROUND_COMPLETED
from artmarket.loaders import load_rules_from_json


async def announce_sale(payload) -> None:
    if payload["winner_id"] is None:
        print(f"Auction {payload['auction_id'][:8]} ended without a sale")
    else:
        print(f"{payload['winner_id']} pays {payload['price']} to {payload['seller_id']}")


async def announce_round(payload) -> None:
    values = ", ".join(f"{artist}={value}" for artist, value in payload["artist_values"].items())
    print(f"Round {payload['round']} closed: {values}")


async def announce_winner(payload) -> None:
    print(f"Game over, {payload['winner_id']} wins with {payload['money'][payload['winner_id']]}")


def build_app() -> ArtMarketApp:
    rules = load_rules_from_json(Path(__file__).with_name("rules") / "short_game.json")
    app = ArtMarketApp(ArtMarketConfig(rules=rules, rng_seed=2024))
    app.event_bus.subscribe(AUCTION_SETTLED, announce_sale)
    app.event_bus.subscribe(ROUND_COMPLETED, announce_round)
    app.event_bus.subscribe(GAME_FINISHED, announce_winner)
    return app


async def play() -> None:
    app = build_app()
    service = app.game_service
    game = await service.create_game("ann", "Ann")
    await service.join_game(game.game_id, "ben", "Ben")
    await service.join_game(game.game_id, "cat", "Cat")
    game = await service.start_game(game.game_id, "ann")

    while game.turn_player_id is not None:
        seller = game.player(game.turn_player_id)
        card = seller.hand[0]
        others = [p.uid for p in game.players if p.uid != seller.uid]
        await service.offer_card(
            game.game_id,
            seller.uid,
            card.card_id,
            fixed_price=3 if card.auction_type is AuctionType.FIXED else None,
        )
        if card.auction_type is AuctionType.FIXED:
            await service.accept_fixed_price(game.game_id, others[0])
        else:
            for step, uid in enumerate(others, start=1):
                await service.place_bid(game.game_id, uid, step)
        outcome = await service.finish_auction(game.game_id, actor_uid=seller.uid)
        game = outcome.game


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(play())
