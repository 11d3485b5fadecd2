"""Pytest fixtures for ArtMarket."""

from __future__ import annotations

import pytest

from ..app import ArtMarketApp
from ..config import ArtMarketConfig


@pytest.fixture()
def memory_app() -> ArtMarketApp:
    return ArtMarketApp(ArtMarketConfig(rng_seed=7))

