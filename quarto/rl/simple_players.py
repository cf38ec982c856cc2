"""
Non-learning players used as opponents and evaluators.
"""
import random
from typing import List, Optional, TypeVar

from quarto.rl.interfaces import Player

A = TypeVar('A')


class DummyPlayer(Player):
    """Always plays the first legal action."""

    def take_action(self, state, actions: List[A]) -> A:
        if not actions:
            raise ValueError("No legal actions to choose from")
        return actions[0]


class RandomPlayer(Player):
    """Plays uniformly among the legal actions."""

    def __init__(self, seed: Optional[int] = None):
        self.rng = random.Random(seed)

    def take_action(self, state, actions: List[A]) -> A:
        if not actions:
            raise ValueError("No legal actions to choose from")
        return self.rng.choice(actions)


class OpponentWrapper(Player):
    """
    Mixes a wrapped player's policy with random play.

    With probability `epsilon` a uniform random action is taken, otherwise
    the decision is delegated to `inner`. Keeps frozen self-play opponents
    from replaying one fixed line.
    """

    def __init__(self, inner: Player, epsilon: float, seed: Optional[int] = None):
        self.inner = inner
        self.epsilon = epsilon
        self.rng = random.Random(seed)

    def take_action(self, state, actions: List[A]) -> A:
        if not actions:
            raise ValueError("No legal actions to choose from")
        if self.rng.random() < self.epsilon:
            return self.rng.choice(actions)
        return self.inner.take_action(state, actions)

    def reset_stats(self) -> None:
        self.inner.reset_stats()

    def stats(self):
        return self.inner.stats()
