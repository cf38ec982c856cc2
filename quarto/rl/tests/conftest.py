"""
Pytest configuration and shared fixtures for player and self-play tests.
"""
import pytest

from quarto.game.environment import QuartoEnvironment
from quarto.rl.qlearning.constants import QL_TEST_SEED


@pytest.fixture
def seed():
    """Seed for every player RNG (deterministic exploration)."""
    return QL_TEST_SEED


@pytest.fixture
def env():
    return QuartoEnvironment()


@pytest.fixture
def opening(env):
    """First state of a game and the state after one move, with their actions."""
    state_1, actions_1 = env.reset()
    state_2, _, _, actions_2 = env.step(actions_1[0])
    state_3, _, _, actions_3 = env.step(actions_2[0])
    return [(state_1, actions_1), (state_2, actions_2), (state_3, actions_3)]
