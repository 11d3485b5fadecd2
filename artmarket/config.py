"""Configuration models for ArtMarket."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from typing import Literal, Sequence


StorageBackend = Literal["memory", "sqlalchemy"]
PayoutMode = Literal["round", "cumulative", "accumulated"]
PAYOUT_MODES: tuple[str, ...] = ("round", "cumulative", "accumulated")

DEFAULT_ARTISTS: tuple[str, ...] = ("Krypto", "Yoko", "Karl", "Christin P.", "Lite Metal")


@dataclass(slots=True)
class StorageConfig:
    """Configure where game documents are persisted."""

    backend: StorageBackend = "memory"
    dsn: str | None = None
    echo_sql: bool = False

    def resolve_dsn(self) -> str | None:
        if self.dsn:
            return self.dsn
        if self.backend == "sqlalchemy":
            return "sqlite+aiosqlite:///./artmarket.db"
        return None


@dataclass(slots=True)
class TransactionConfig:
    """Retry budget for optimistic transactions."""

    max_attempts: int = 5


@dataclass(slots=True)
class RulesConfig:
    """Table rules: deck composition, dealing, scoring and round limits."""

    artists: Sequence[str] = field(default_factory=lambda: DEFAULT_ARTISTS)
    cards_per_artist: int = 12
    cards_per_player: int = 10
    cards_per_round: int = 5
    starting_money: int = 100
    min_players: int = 2
    max_players: int = 6
    round_end_threshold: int = 5
    max_rounds: int = 4
    payouts: Sequence[int] = (30, 20, 10)
    payout_mode: PayoutMode = "round"
    allow_sealed_overwrite: bool = False

    @property
    def deck_size(self) -> int:
        return len(self.artists) * self.cards_per_artist


@dataclass(slots=True)
class ArtMarketConfig:
    """Top-level configuration container."""

    rules: RulesConfig = field(default_factory=RulesConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    transaction: TransactionConfig = field(default_factory=TransactionConfig)
    rng_seed: int | None = None

    @classmethod
    def from_env(cls) -> "ArtMarketConfig":
        """Create config from environment variables prefixed with ARTMARKET_."""
        prefix = "ARTMARKET_"
        defaults = RulesConfig()

        artists = tuple(
            name.strip()
            for name in os.getenv(f"{prefix}ARTISTS", ",".join(defaults.artists)).split(",")
            if name.strip()
        )
        payout_mode = os.getenv(f"{prefix}PAYOUT_MODE", defaults.payout_mode)
        if payout_mode not in PAYOUT_MODES:
            raise ValueError(f"Unsupported {prefix}PAYOUT_MODE '{payout_mode}'")

        rules = RulesConfig(
            artists=artists,
            cards_per_artist=int(os.getenv(f"{prefix}CARDS_PER_ARTIST", str(defaults.cards_per_artist))),
            cards_per_player=int(os.getenv(f"{prefix}CARDS_PER_PLAYER", str(defaults.cards_per_player))),
            cards_per_round=int(os.getenv(f"{prefix}CARDS_PER_ROUND", str(defaults.cards_per_round))),
            starting_money=int(os.getenv(f"{prefix}STARTING_MONEY", str(defaults.starting_money))),
            min_players=int(os.getenv(f"{prefix}MIN_PLAYERS", str(defaults.min_players))),
            max_players=int(os.getenv(f"{prefix}MAX_PLAYERS", str(defaults.max_players))),
            round_end_threshold=int(
                os.getenv(f"{prefix}ROUND_END_THRESHOLD", str(defaults.round_end_threshold))
            ),
            max_rounds=int(os.getenv(f"{prefix}MAX_ROUNDS", str(defaults.max_rounds))),
            payouts=_parse_payouts(os.getenv(f"{prefix}PAYOUTS")) or defaults.payouts,
            payout_mode=payout_mode,  # type: ignore[arg-type]
            allow_sealed_overwrite=_flag(os.getenv(f"{prefix}ALLOW_SEALED_OVERWRITE", "false")),
        )

        return cls(
            rules=rules,
            storage=StorageConfig(
                backend=os.getenv(f"{prefix}STORAGE_BACKEND", "memory"),  # type: ignore[arg-type]
                dsn=os.getenv(f"{prefix}STORAGE_DSN"),
                echo_sql=_flag(os.getenv(f"{prefix}STORAGE_ECHO_SQL", "false")),
            ),
            transaction=TransactionConfig(
                max_attempts=int(os.getenv(f"{prefix}TRANSACTION_MAX_ATTEMPTS", "5")),
            ),
            rng_seed=(
                int(os.getenv(f"{prefix}RNG_SEED")) if os.getenv(f"{prefix}RNG_SEED") else None
            ),
        )


def _flag(raw: str) -> bool:
    return raw.lower() in {"1", "true", "yes"}


def _parse_payouts(raw: str | None) -> tuple[int, ...]:
    if not raw:
        return ()
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError("Invalid JSON for ARTMARKET_PAYOUTS") from exc
    if not isinstance(data, list):
        raise ValueError("ARTMARKET_PAYOUTS must be a JSON array")
    return tuple(int(value) for value in data)
