"""
Quarto Self-Play Training Package.

Trains a learning player against frozen snapshots of itself:
- Duel the learner against the current frozen adversary
- Freeze a new snapshot and evaluate it against the previous one
- Evaluate the snapshot against a random player
- Append per-cycle statistics to a JSONL file
"""

from .constants import (
    TRAIN_EPISODES_PER_CYCLE,
    EVAL_EPISODES_PER_CYCLE,
    NUM_CYCLES,
    OPPONENT_EPSILON,
    EVAL_AGAINST_RANDOM,
    RUNS_BASE_DIR,
    STATS_FILE_NAME,
)
from .duel import run_match, run_duel
from .trainer import CycleResult, train

__version__ = "0.1.0"
