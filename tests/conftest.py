import os

import numpy as np
import pytest

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

from math_devil.config import GameConfig
from math_devil.engine import GameEngine


@pytest.fixture
def config():
    return GameConfig()


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def results():
    return []


@pytest.fixture
def engine(config, results):
    def on_game_end(level, score, coins):
        results.append((level, score, coins))

    return GameEngine(config, on_game_end=on_game_end, rng=np.random.default_rng(7))
