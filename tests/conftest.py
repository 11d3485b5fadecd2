import pytest

from artmarket.testing.factory import GameFactory
from artmarket.testing.fixtures import memory_app  # noqa: F401


@pytest.fixture()
def factory():
    return GameFactory()
