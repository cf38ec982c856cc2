"""
Constants for Quarto self-play training.

Each cycle trains the live learner against a frozen snapshot of itself, then
refreshes the snapshot and evaluates it against the previous one and against
a random player.
"""

from pathlib import Path

# =============================================================================
# Self-play cycles
# =============================================================================
TRAIN_EPISODES_PER_CYCLE = 10_000
EVAL_EPISODES_PER_CYCLE = 1_000
NUM_CYCLES = 10
OPPONENT_EPSILON = 0.1            # Random move probability of the frozen adversary
EVAL_AGAINST_RANDOM = True

# Offsets from the base seed, one RNG stream per role
ADVERSARY_SEED_OFFSET = 1_000     # Frozen adversary of cycle c uses seed + offset + c
RANDOM_EVAL_SEED_OFFSET = 2_000

# =============================================================================
# Output
# =============================================================================
BASE_DIR = Path(__file__).parent
RUNS_BASE_DIR = BASE_DIR / "runs"
RUN_PREFIX = "run_"
STATS_FILE_NAME = "stats.jsonl"
TENSORBOARD_DIR_NAME = "tensorboard"

# =============================================================================
# Tests
# =============================================================================
SELF_PLAY_TEST_SEED = 42
SELF_PLAY_TEST_CYCLES = 2
SELF_PLAY_TEST_EPISODES = 20
