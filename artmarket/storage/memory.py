"""In-memory storage backend for ArtMarket."""

from __future__ import annotations

import asyncio
import copy
from collections import deque
from typing import Any, Deque, Sequence

from .base import AuctionHistoryStore, SettlementRecord, VersionedGameStore


class InMemoryGameStore(VersionedGameStore):
    def __init__(self, *, max_attempts: int = 5) -> None:
        super().__init__(max_attempts=max_attempts)
        self._documents: dict[str, tuple[dict[str, Any], int]] = {}
        self._lock = asyncio.Lock()

    async def _read(self, game_id: str) -> tuple[dict[str, Any], int] | None:
        async with self._lock:
            stored = self._documents.get(game_id)
            if stored is None:
                return None
            document, version = stored
            return copy.deepcopy(document), version

    async def _write(self, game_id: str, document: dict[str, Any], expected_version: int) -> bool:
        async with self._lock:
            stored = self._documents.get(game_id)
            if stored is None or stored[1] != expected_version:
                return False
            self._documents[game_id] = (copy.deepcopy(document), expected_version + 1)
            return True

    async def _insert(self, game_id: str, document: dict[str, Any]) -> bool:
        async with self._lock:
            if game_id in self._documents:
                return False
            self._documents[game_id] = (copy.deepcopy(document), 1)
            return True

    def version(self, game_id: str) -> int:
        return self._documents[game_id][1]

    def dump(self, game_id: str) -> dict[str, Any]:
        return copy.deepcopy(self._documents[game_id][0])


class InMemoryAuctionHistoryStore(AuctionHistoryStore):
    def __init__(self, *, maxlen: int = 5000) -> None:
        self._history: Deque[SettlementRecord] = deque(maxlen=maxlen)

    async def add_record(self, record: SettlementRecord) -> None:
        self._history.append(record)

    async def recent_for_game(self, game_id: str, limit: int = 20) -> Sequence[SettlementRecord]:
        filtered = [rec for rec in reversed(self._history) if rec.game_id == game_id]
        return filtered[:limit]
