"""Top level application object for ArtMarket tables."""

from __future__ import annotations

from random import Random
from typing import Any

from .config import ArtMarketConfig
from .domain.events import EventBus
from .domain.rounds import PayoutStrategy
from .domain.service import GameService
from .storage.base import AuctionHistoryStore, GameStore
from .storage.memory import InMemoryAuctionHistoryStore, InMemoryGameStore
from .storage.sqlalchemy import AsyncSQLAlchemyStorage


class ArtMarketApp:
    """Central dependency container used by hosts embedding the engine."""

    def __init__(
        self,
        config: ArtMarketConfig | None = None,
        *,
        game_store: GameStore | None = None,
        history_store: AuctionHistoryStore | None = None,
        event_bus: EventBus | None = None,
        rng: Random | None = None,
        payout_strategy: PayoutStrategy | None = None,
    ) -> None:
        self.config = config or ArtMarketConfig()
        self.event_bus = event_bus or EventBus()
        self._rng = rng or (
            Random(self.config.rng_seed) if self.config.rng_seed is not None else Random()
        )

        self._sqlalchemy_storage: AsyncSQLAlchemyStorage | None = None
        self.game_store, self.history_store = self._wire_storage(game_store, history_store)

        self.game_service = GameService(
            store=self.game_store,
            history_store=self.history_store,
            rules=self.config.rules,
            event_bus=self.event_bus,
            rng=self._rng,
            payout_strategy=payout_strategy,
        )

    def _wire_storage(
        self,
        game_store: GameStore | None,
        history_store: AuctionHistoryStore | None,
    ) -> tuple[GameStore, AuctionHistoryStore]:
        if game_store and history_store:
            return game_store, history_store

        backend = self.config.storage.backend
        attempts = self.config.transaction.max_attempts
        if backend == "memory":
            return (
                game_store or InMemoryGameStore(max_attempts=attempts),
                history_store or InMemoryAuctionHistoryStore(),
            )
        if backend == "sqlalchemy":
            dsn = self.config.storage.resolve_dsn()
            if not dsn:
                raise ValueError("SQLAlchemy backend requires a DSN")
            storage = AsyncSQLAlchemyStorage(dsn, echo=self.config.storage.echo_sql)
            self._sqlalchemy_storage = storage
            return (
                game_store or storage.game_store(max_attempts=attempts),
                history_store or storage.history_store(),
            )
        raise ValueError(f"Unsupported storage backend {backend}")

    def snapshot(self) -> dict[str, Any]:
        """Summarise the active rules and backend, for logs and the CLI."""
        rules = self.config.rules
        return {
            "storage": self.config.storage.backend,
            "artists": list(rules.artists),
            "deck_size": rules.deck_size,
            "payouts": list(rules.payouts),
            "payout_mode": rules.payout_mode,
            "max_rounds": rules.max_rounds,
        }

    async def init_backend(self) -> None:
        """Create the SQL tables when the SQLAlchemy backend is in use."""
        if self._sqlalchemy_storage:
            await self._sqlalchemy_storage.init_models()

    async def close(self) -> None:
        if self._sqlalchemy_storage:
            await self._sqlalchemy_storage.dispose()
