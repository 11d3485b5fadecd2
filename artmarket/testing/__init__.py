"""Testing utilities for ArtMarket."""

from .factory import GameFactory, PlayerFactory
from .fixtures import memory_app
from .test_client import TestClient

__all__ = [
    "GameFactory",
    "PlayerFactory",
    "memory_app",
    "TestClient",
]
