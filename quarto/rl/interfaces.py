"""
Capability contracts shared by environments and players.

The self-play orchestrator only talks to these base classes, so any game that
implements Environment can be trained with any Player/LearningPlayer pair.
"""
import copy
from abc import ABC, abstractmethod
from typing import Any, Generic, List, Optional, Tuple, TypeVar


class State(ABC):
    """
    A game state usable as a Q-table key.

    Subclasses must implement structural __eq__ and __hash__ (frozen
    dataclasses do this for free).
    """

    @abstractmethod
    def game_depth(self) -> int:
        """Number of moves already played, used to bucket statistics."""
        pass


class Action(ABC):
    """An action applied to an environment. Actions behave as values."""

    def copy(self) -> 'Action':
        return copy.copy(self)


S = TypeVar('S', bound=State)
A = TypeVar('A', bound=Action)


class Environment(ABC, Generic[S, A]):

    @abstractmethod
    def reset(self) -> Tuple[S, List[A]]:
        """
        Start a new game.

        Returns:
            Tuple of (initial state, legal actions)
        """
        pass

    @abstractmethod
    def step(self, action: A) -> Tuple[S, float, bool, List[A]]:
        """
        Apply an action for the player to move.

        Args:
            action: One of the legal actions returned by the previous call

        Returns:
            Tuple of (new state, reward for the mover, done, legal actions).
            The action list is empty once done is True.
        """
        pass


class Player(ABC, Generic[S, A]):
    """
    Something that picks actions.

    The orchestrator calls start() for the first decision of a match, step()
    for every following one and end() once the match is over.
    """

    @abstractmethod
    def take_action(self, state: S, actions: List[A]) -> A:
        pass

    def start(self, state: S, actions: List[A]) -> A:
        return self.take_action(state, actions)

    def step(self, state: S, actions: List[A], reward: float) -> A:
        return self.take_action(state, actions)

    def end(self, state: S, reward: float) -> None:
        pass

    def reset_stats(self) -> None:
        pass

    def stats(self) -> Optional[Any]:
        return None


class LearningPlayer(Player[S, A]):
    """A player able to produce a frozen snapshot of itself for self-play."""

    @abstractmethod
    def freezed(self) -> Player[S, A]:
        """Return a non-learning copy sharing no mutable state with self."""
        pass

    def cycle_end(self) -> None:
        pass
