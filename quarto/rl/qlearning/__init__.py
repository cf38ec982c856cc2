"""
Tabular Q-learning for Quarto.

QLearningPlayer learns online with epsilon-greedy exploration; freezed()
turns it into an immutable QLearnedPlayer used as a self-play opponent.
"""

from quarto.rl.qlearning.q_player import (
    FrozenQEntry,
    QEntry,
    QLearningPlayer,
    QLearnedPlayer,
    QLearningStats,
    QLearnedStats,
)
from quarto.rl.qlearning.constants import (
    QL_INITIAL_EPSILON,
    QL_MIN_EPSILON,
    QL_EPSILON_DECAY,
    QL_ALPHA,
    QL_GAMMA,
)

__all__ = [
    'FrozenQEntry',
    'QEntry',
    'QLearningPlayer',
    'QLearnedPlayer',
    'QLearningStats',
    'QLearnedStats',
    'QL_INITIAL_EPSILON',
    'QL_MIN_EPSILON',
    'QL_EPSILON_DECAY',
    'QL_ALPHA',
    'QL_GAMMA',
]
