"""ArtMarket auction engine public API."""

from .app import ArtMarketApp
from .config import ArtMarketConfig, RulesConfig
from .domain.service import GameService, SettlementOutcome

__all__ = [
    "ArtMarketApp",
    "ArtMarketConfig",
    "GameService",
    "RulesConfig",
    "SettlementOutcome",
]
