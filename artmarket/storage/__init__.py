"""Storage backends for ArtMarket."""

from .base import AuctionHistoryStore, GameStore, SettlementRecord, VersionedGameStore
from .memory import InMemoryAuctionHistoryStore, InMemoryGameStore
from .sqlalchemy import AsyncSQLAlchemyStorage

__all__ = [
    "AuctionHistoryStore",
    "GameStore",
    "SettlementRecord",
    "VersionedGameStore",
    "InMemoryAuctionHistoryStore",
    "InMemoryGameStore",
    "AsyncSQLAlchemyStorage",
]
