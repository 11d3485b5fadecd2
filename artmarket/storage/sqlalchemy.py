"""SQLAlchemy storage backend for ArtMarket."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Sequence

from sqlalchemy import JSON, DateTime, Integer, String, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from .base import AuctionHistoryStore, SettlementRecord, VersionedGameStore


class Base(DeclarativeBase):
    pass


class GameTable(Base):
    __tablename__ = "artmarket_games"

    game_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    version: Mapped[int] = mapped_column(Integer, default=1)
    document: Mapped[dict] = mapped_column(JSON)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))


class SettlementTable(Base):
    __tablename__ = "artmarket_settlements"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    game_id: Mapped[str] = mapped_column(String(64), index=True)
    auction_id: Mapped[str] = mapped_column(String(64), unique=True)
    round: Mapped[int] = mapped_column(Integer)
    auction_type: Mapped[str] = mapped_column(String(16))
    card_ids: Mapped[list[str]] = mapped_column(JSON)
    seller_id: Mapped[str] = mapped_column(String(128))
    winner_id: Mapped[str | None] = mapped_column(String(128), nullable=True)
    price: Mapped[int] = mapped_column(Integer)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True))


class AsyncSQLAlchemyStorage:
    """Bundle of async stores backed by SQLAlchemy."""

    def __init__(self, dsn: str, *, echo: bool = False) -> None:
        self._engine = create_async_engine(dsn, echo=echo, future=True)
        self._session_factory = async_sessionmaker(self._engine, expire_on_commit=False)

    async def init_models(self) -> None:
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self._engine.dispose()

    def game_store(self, *, max_attempts: int = 5) -> "AsyncSQLAlchemyGameStore":
        return AsyncSQLAlchemyGameStore(self._session_factory, max_attempts=max_attempts)

    def history_store(self) -> "AsyncSQLAlchemyAuctionHistoryStore":
        return AsyncSQLAlchemyAuctionHistoryStore(self._session_factory)


class AsyncSQLAlchemyGameStore(VersionedGameStore):
    def __init__(
        self, session_factory: async_sessionmaker[AsyncSession], *, max_attempts: int = 5
    ) -> None:
        super().__init__(max_attempts=max_attempts)
        self._session_factory = session_factory

    async def _read(self, game_id: str) -> tuple[dict[str, Any], int] | None:
        async with self._session_factory() as session:
            row = await session.get(GameTable, game_id)
            if row is None:
                return None
            return dict(row.document), row.version

    async def _write(self, game_id: str, document: dict[str, Any], expected_version: int) -> bool:
        async with self._session_factory() as session:
            stmt = (
                update(GameTable)
                .where(GameTable.game_id == game_id, GameTable.version == expected_version)
                .values(
                    document=document,
                    version=expected_version + 1,
                    updated_at=datetime.now(timezone.utc),
                )
            )
            result = await session.execute(stmt)
            await session.commit()
            return result.rowcount == 1

    async def _insert(self, game_id: str, document: dict[str, Any]) -> bool:
        async with self._session_factory() as session:
            session.add(
                GameTable(
                    game_id=game_id,
                    version=1,
                    document=document,
                    updated_at=datetime.now(timezone.utc),
                )
            )
            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                return False
            return True


class AsyncSQLAlchemyAuctionHistoryStore(AuctionHistoryStore):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def add_record(self, record: SettlementRecord) -> None:
        async with self._session_factory() as session:
            session.add(
                SettlementTable(
                    game_id=record.game_id,
                    auction_id=record.auction_id,
                    round=record.round,
                    auction_type=record.auction_type,
                    card_ids=list(record.card_ids),
                    seller_id=record.seller_id,
                    winner_id=record.winner_id,
                    price=record.price,
                    timestamp=record.timestamp,
                )
            )
            await session.commit()

    async def recent_for_game(self, game_id: str, limit: int = 20) -> Sequence[SettlementRecord]:
        async with self._session_factory() as session:
            stmt = (
                select(SettlementTable)
                .where(SettlementTable.game_id == game_id)
                .order_by(SettlementTable.id.desc())
                .limit(limit)
            )
            rows = (await session.execute(stmt)).scalars().all()
            return [
                SettlementRecord(
                    game_id=row.game_id,
                    auction_id=row.auction_id,
                    round=row.round,
                    auction_type=row.auction_type,
                    card_ids=list(row.card_ids),
                    seller_id=row.seller_id,
                    winner_id=row.winner_id,
                    price=row.price,
                    timestamp=row.timestamp,
                )
                for row in rows
            ]
