import pytest

from empire.core.game import GameWorld


@pytest.fixture
def game():
    return GameWorld(seed=1234, speed=1.0, max_planets=10)
