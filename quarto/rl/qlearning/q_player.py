"""
Tabular Q-learning player and its frozen snapshot.

The table maps a game state to a (visits, action values) entry. Action values
are indexed by position in the legal action list the player was given, which
is always the same for a given state.
"""
import random
from collections import defaultdict
from dataclasses import asdict, dataclass
from types import MappingProxyType
from typing import Dict, Hashable, List, Mapping, Optional, TypeVar, Union

import numpy as np
from rich.console import Console
from rich.table import Table

from quarto.rl.interfaces import LearningPlayer, Player
from quarto.rl.qlearning.constants import (
    QL_INITIAL_EPSILON,
    QL_MIN_EPSILON,
    QL_EPSILON_DECAY,
    QL_ALPHA,
    QL_GAMMA,
)

A = TypeVar('A')


@dataclass
class QEntry:
    visits: int
    values: np.ndarray


@dataclass(frozen=True)
class FrozenQEntry:
    """Snapshot entry; `values` is also marked read-only."""
    visits: int
    values: np.ndarray


@dataclass
class QLearningStats:
    episodes: int = 0
    total_actions: int = 0
    random_actions: int = 0
    dummy_actions: int = 0     # Greedy pick on an all-zero row
    learned_actions: int = 0   # Greedy pick on a row with some non-zero value

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


@dataclass
class QLearnedStats:
    total_actions: int = 0
    unseen_actions: int = 0    # State missing from the table
    dummy_actions: int = 0
    learned_actions: int = 0

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


def argmax_first(values: np.ndarray) -> int:
    """Index of the first maximum, so an all-zero row always yields 0."""
    return int(np.argmax(values))


def _check_actions(actions: List) -> None:
    if not actions:
        raise ValueError("No legal actions to choose from")


def summarize_table(q_table: Mapping[Hashable, Union[QEntry, FrozenQEntry]]) -> Dict:
    """
    Table size plus per-depth population and average visit count.

    Depth keys are strings so the summary can go straight to JSON.
    """
    population: Dict[int, int] = defaultdict(int)
    visits: Dict[int, int] = defaultdict(int)
    for state, entry in q_table.items():
        depth = state.game_depth()
        population[depth] += 1
        visits[depth] += entry.visits

    return {
        'q_table_size': len(q_table),
        'depth_population': {str(d): population[d] for d in sorted(population)},
        'depth_avg_visits': {str(d): visits[d] / population[d] for d in sorted(population)},
    }


class QLearningPlayer(LearningPlayer):
    """
    Epsilon-greedy Q-learning player.

    Each decision is remembered so that the next step()/end() call, which
    carries the reward of that decision, can update it.
    """

    def __init__(
        self,
        epsilon: float = QL_INITIAL_EPSILON,
        min_epsilon: float = QL_MIN_EPSILON,
        epsilon_decay: float = QL_EPSILON_DECAY,
        alpha: float = QL_ALPHA,
        gamma: float = QL_GAMMA,
        seed: Optional[int] = None,
        verbose: bool = False,
    ):
        """
        Initialize the player with an empty table.

        Args:
            epsilon: Initial probability of a random action
            min_epsilon: Floor for epsilon decay
            epsilon_decay: Multiplicative decay applied at the end of each episode
            alpha: Learning rate
            gamma: Discount factor
            seed: Optional seed for the exploration RNG
            verbose: Print a table summary on cycle_end()
        """
        self.q_table: Dict[Hashable, QEntry] = {}
        self.epsilon = epsilon
        self.min_epsilon = min_epsilon
        self.epsilon_decay = epsilon_decay
        self.alpha = alpha
        self.gamma = gamma
        self.verbose = verbose
        self.rng = random.Random(seed)
        self.console = Console()

        self._prev_state: Optional[Hashable] = None
        self._prev_action_index: Optional[int] = None
        self._stats = QLearningStats()

    def _entry(self, state, num_actions: int) -> QEntry:
        entry = self.q_table.get(state)
        if entry is None:
            entry = QEntry(visits=0, values=np.zeros(num_actions, dtype=np.float64))
            self.q_table[state] = entry
        return entry

    def take_action(self, state, actions: List[A]) -> A:
        _check_actions(actions)
        entry = self._entry(state, len(actions))

        self._stats.total_actions += 1
        if self.rng.random() < self.epsilon:
            action_index = self.rng.randrange(len(actions))
            self._stats.random_actions += 1
        else:
            action_index = argmax_first(entry.values)
            if np.any(entry.values):
                self._stats.learned_actions += 1
            else:
                self._stats.dummy_actions += 1

        self._prev_state = state
        self._prev_action_index = action_index
        return actions[action_index]

    def step(self, state, actions: List[A], reward: float) -> A:
        entry = self.q_table.get(state)
        best_next = float(entry.values.max()) if entry is not None else 0.0
        self._update(reward + self.gamma * best_next)
        return self.take_action(state, actions)

    def end(self, state, reward: float) -> None:
        """Apply the terminal reward and decay epsilon."""
        self._update(reward)
        self._prev_state = None
        self._prev_action_index = None
        self._stats.episodes += 1
        self.epsilon = max(self.min_epsilon, self.epsilon * self.epsilon_decay)

    def _update(self, target: float):
        if self._prev_state is None:
            raise RuntimeError("Reward received without a recorded decision; call start() first")
        # Rows are created by take_action(), so the entry always exists
        entry = self.q_table[self._prev_state]
        i = self._prev_action_index
        entry.values[i] += self.alpha * (target - entry.values[i])
        entry.visits += 1

    def freezed(self) -> 'QLearnedPlayer':
        snapshot = {
            state: QEntry(visits=entry.visits, values=entry.values.copy())
            for state, entry in self.q_table.items()
        }
        return QLearnedPlayer(snapshot)

    def table_summary(self) -> Dict:
        summary = summarize_table(self.q_table)
        summary['epsilon'] = self.epsilon
        return summary

    def cycle_end(self) -> None:
        if not self.verbose:
            return
        summary = self.table_summary()
        table = Table(title=f"Q-table: {summary['q_table_size']} states, epsilon={self.epsilon:.4f}")
        table.add_column("Depth", justify="right")
        table.add_column("States", justify="right")
        table.add_column("Avg visits", justify="right")
        for depth, count in summary['depth_population'].items():
            table.add_row(depth, str(count), f"{summary['depth_avg_visits'][depth]:.2f}")
        self.console.print(table)

    def reset_stats(self) -> None:
        self._stats = QLearningStats()

    def stats(self) -> QLearningStats:
        return self._stats


class QLearnedPlayer(Player):
    """
    Frozen, greedy view of a Q-table.

    Unseen states act as an all-zero row and resolve to the first action,
    exactly like a fresh row in QLearningPlayer.
    """

    def __init__(self, q_table: Dict[Hashable, QEntry]):
        frozen = {}
        for state, entry in q_table.items():
            entry.values.setflags(write=False)
            frozen[state] = FrozenQEntry(visits=entry.visits, values=entry.values)
        self.q_table: Mapping[Hashable, FrozenQEntry] = MappingProxyType(frozen)
        self._stats = QLearnedStats()

    def take_action(self, state, actions: List[A]) -> A:
        _check_actions(actions)
        self._stats.total_actions += 1

        entry = self.q_table.get(state)
        if entry is None:
            self._stats.unseen_actions += 1
            return actions[0]

        if np.any(entry.values):
            self._stats.learned_actions += 1
        else:
            self._stats.dummy_actions += 1
        return actions[argmax_first(entry.values)]

    def table_summary(self) -> Dict:
        return summarize_table(self.q_table)

    def reset_stats(self) -> None:
        self._stats = QLearnedStats()

    def stats(self) -> QLearnedStats:
        return self._stats
