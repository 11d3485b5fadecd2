"""Storage abstractions used by the ArtMarket services."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Protocol, Sequence

from ..domain.exceptions import ConcurrencyConflict, GameNotFound
from ..domain.game import Game

logger = logging.getLogger(__name__)

Mutator = Callable[[Game], Game]


@dataclass(slots=True)
class SettlementRecord:
    game_id: str
    auction_id: str
    round: int
    auction_type: str
    card_ids: Sequence[str]
    seller_id: str
    winner_id: str | None
    price: int
    timestamp: datetime


class GameStore(Protocol):
    async def create(self, game: Game) -> Game:
        ...

    async def get(self, game_id: str) -> Game:
        ...

    async def transaction(self, game_id: str, mutate: Mutator) -> Game:
        ...


class AuctionHistoryStore(Protocol):
    async def add_record(self, record: SettlementRecord) -> None:
        ...

    async def recent_for_game(self, game_id: str, limit: int = 20) -> Sequence[SettlementRecord]:
        ...


class VersionedGameStore(ABC):
    """Optimistic read-modify-write over versioned game documents.

    ``transaction`` reads a document and its version, applies ``mutate`` to
    that snapshot and writes the result only if nobody else wrote in between.
    A lost race re-reads and re-applies ``mutate``; after ``max_attempts``
    losses it gives up with :class:`ConcurrencyConflict`. Exceptions raised by
    ``mutate`` propagate and nothing is written.
    """

    def __init__(self, *, max_attempts: int = 5) -> None:
        if max_attempts <= 0:
            raise ValueError("max_attempts must be positive")
        self._max_attempts = max_attempts

    @abstractmethod
    async def _read(self, game_id: str) -> tuple[dict[str, Any], int] | None:
        """Return the stored document and its version, or ``None``."""

    @abstractmethod
    async def _write(self, game_id: str, document: dict[str, Any], expected_version: int) -> bool:
        """Store ``document`` if the version is still ``expected_version``."""

    @abstractmethod
    async def _insert(self, game_id: str, document: dict[str, Any]) -> bool:
        """Store a new document; ``False`` if the id is taken."""

    async def create(self, game: Game) -> Game:
        if not await self._insert(game.game_id, game.to_document()):
            raise ValueError(f"Game {game.game_id} already exists")
        return game

    async def get(self, game_id: str) -> Game:
        snapshot = await self._read(game_id)
        if snapshot is None:
            raise GameNotFound(game_id)
        document, _ = snapshot
        return Game.from_document(document)

    async def transaction(self, game_id: str, mutate: Mutator) -> Game:
        for attempt in range(1, self._max_attempts + 1):
            snapshot = await self._read(game_id)
            if snapshot is None:
                raise GameNotFound(game_id)
            document, version = snapshot
            current = Game.from_document(document)
            updated = mutate(current)
            if updated is current:
                return current
            if await self._write(game_id, updated.to_document(), version):
                return updated
            logger.warning(
                "Game %s changed during transaction (attempt %s/%s), retrying",
                game_id,
                attempt,
                self._max_attempts,
            )
        raise ConcurrencyConflict(game_id, self._max_attempts)
