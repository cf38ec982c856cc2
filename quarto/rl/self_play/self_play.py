"""
Console script for Quarto self-play Q-learning training.

Trains a QLearningPlayer against frozen snapshots of itself and writes one
statistics record per cycle to a JSONL file (optionally also to TensorBoard).
"""
import argparse
from datetime import datetime
from pathlib import Path
from typing import Optional

from torch.utils.tensorboard import SummaryWriter

from quarto.game.environment import QuartoEnvironment
from quarto.models.piece import Action
from quarto.rl.interfaces import Player
from quarto.rl.qlearning.constants import (
    QL_INITIAL_EPSILON,
    QL_MIN_EPSILON,
    QL_EPSILON_DECAY,
    QL_ALPHA,
    QL_GAMMA,
)
from quarto.rl.qlearning.q_player import QLearningPlayer
from quarto.rl.self_play.constants import (
    TRAIN_EPISODES_PER_CYCLE,
    EVAL_EPISODES_PER_CYCLE,
    NUM_CYCLES,
    OPPONENT_EPSILON,
    EVAL_AGAINST_RANDOM,
    RANDOM_EVAL_SEED_OFFSET,
    RUNS_BASE_DIR,
    RUN_PREFIX,
    STATS_FILE_NAME,
    TENSORBOARD_DIR_NAME,
)
from quarto.rl.self_play.duel import run_match
from quarto.rl.self_play.stats_sink import JsonlStatsSink
from quarto.rl.self_play.trainer import derive_seed, train
from quarto.rl.simple_players import RandomPlayer
from quarto.ui.terminal_ui import TerminalUI


class _DisplayEnvironment(QuartoEnvironment):
    """QuartoEnvironment that prints the board after every move."""

    def __init__(self, ui: TerminalUI):
        super().__init__()
        self.ui = ui
        self.move = 0

    def reset(self):
        self.move = 0
        return super().reset()

    def step(self, action: Action):
        result = super().step(action)
        self.move += 1
        self.ui.display_game_state(self.state, title=f"Move {self.move}: {action}")
        return result


def show_game(player: Player, seed: Optional[int] = None, ui: Optional[TerminalUI] = None) -> float:
    """
    Play and print one game of `player` (moving first) against a random player.

    Returns:
        Score of `player`
    """
    ui = ui or TerminalUI()
    env = _DisplayEnvironment(ui)
    score = run_match(env, player, RandomPlayer(seed=derive_seed(seed, RANDOM_EVAL_SEED_OFFSET)))
    ui.print_game_result(score, "Snapshot", "Random")
    return score


def new_run_dir(base_dir: Optional[Path] = None) -> Path:
    """
    Create a fresh timestamped run directory under `base_dir`.

    Runs started within the same second get a numeric suffix, so statistics
    of two runs never end up in the same file.
    """
    base_dir = Path(base_dir) if base_dir is not None else RUNS_BASE_DIR
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    run_dir = base_dir / f"{RUN_PREFIX}{timestamp}"
    suffix = 1
    while run_dir.exists():
        run_dir = base_dir / f"{RUN_PREFIX}{timestamp}_{suffix}"
        suffix += 1
    run_dir.mkdir(parents=True)
    return run_dir


def run_self_play_training(
    train_episodes: int = TRAIN_EPISODES_PER_CYCLE,
    eval_episodes: int = EVAL_EPISODES_PER_CYCLE,
    cycles: int = NUM_CYCLES,
    opponent_epsilon: float = OPPONENT_EPSILON,
    eval_random: bool = EVAL_AGAINST_RANDOM,
    epsilon: float = QL_INITIAL_EPSILON,
    min_epsilon: float = QL_MIN_EPSILON,
    epsilon_decay: float = QL_EPSILON_DECAY,
    alpha: float = QL_ALPHA,
    gamma: float = QL_GAMMA,
    run_dir: Optional[Path] = None,
    use_tensorboard: bool = False,
    seed: Optional[int] = None,
    verbose: bool = False,
):
    """
    Build the environment and learner, then run self-play training.

    Args:
        train_episodes: Training matches per cycle
        eval_episodes: Evaluation matches per duel
        cycles: Number of self-play cycles
        opponent_epsilon: Random move probability of the frozen adversary
        eval_random: Whether to evaluate each snapshot against a random player
        epsilon: Initial exploration rate of the learner
        min_epsilon: Exploration floor
        epsilon_decay: Per-episode exploration decay
        alpha: Learning rate
        gamma: Discount factor
        run_dir: Output directory (defaults to a timestamped dir under runs/)
        use_tensorboard: Also log per-cycle scalars to TensorBoard
        seed: Optional seed for every RNG involved
        verbose: Print progress

    Returns:
        Tuple of (learner, list of CycleResult, run directory)
    """
    if run_dir is None:
        run_dir = new_run_dir()
    run_dir = Path(run_dir)
    run_dir.mkdir(parents=True, exist_ok=True)

    stats_sink = JsonlStatsSink(run_dir / STATS_FILE_NAME)

    writer = None
    if use_tensorboard:
        writer = SummaryWriter(log_dir=str(run_dir / TENSORBOARD_DIR_NAME))

    if verbose:
        TerminalUI().print_training_header({
            "Train episodes per cycle": train_episodes,
            "Eval episodes per duel": eval_episodes,
            "Cycles": cycles,
            "Opponent epsilon": opponent_epsilon,
            "Epsilon": f"{epsilon} -> {min_epsilon} (decay {epsilon_decay})",
            "Alpha / Gamma": f"{alpha} / {gamma}",
            "Stats file": stats_sink.path,
            "TensorBoard": writer.log_dir if writer is not None else "off",
        })

    env = QuartoEnvironment()
    learner = QLearningPlayer(
        epsilon=epsilon,
        min_epsilon=min_epsilon,
        epsilon_decay=epsilon_decay,
        alpha=alpha,
        gamma=gamma,
        seed=seed,
        verbose=verbose,
    )

    try:
        results = train(
            env,
            learner,
            train_episodes=train_episodes,
            eval_episodes=eval_episodes,
            cycles=cycles,
            opponent_epsilon=opponent_epsilon,
            eval_random=eval_random,
            stats_sink=stats_sink,
            writer=writer,
            seed=seed,
            verbose=verbose,
        )
    finally:
        if writer is not None:
            writer.close()

    return learner, results, run_dir


def main():
    """Console script entry point."""
    parser = argparse.ArgumentParser(
        description="Train a tabular Q-learning Quarto player by self-play."
    )
    parser.add_argument("--train-episodes", type=int, default=TRAIN_EPISODES_PER_CYCLE,
                        help=f"Training matches per cycle (default: {TRAIN_EPISODES_PER_CYCLE})")
    parser.add_argument("--eval-episodes", type=int, default=EVAL_EPISODES_PER_CYCLE,
                        help=f"Evaluation matches per duel (default: {EVAL_EPISODES_PER_CYCLE})")
    parser.add_argument("--cycles", type=int, default=NUM_CYCLES,
                        help=f"Number of self-play cycles (default: {NUM_CYCLES})")
    parser.add_argument("--opponent-epsilon", type=float, default=OPPONENT_EPSILON,
                        help=f"Random move probability of the frozen adversary (default: {OPPONENT_EPSILON})")
    parser.add_argument("--no-eval-random", action="store_true",
                        help="Skip the evaluation against a random player")
    parser.add_argument("--epsilon", type=float, default=QL_INITIAL_EPSILON,
                        help=f"Initial exploration rate (default: {QL_INITIAL_EPSILON})")
    parser.add_argument("--min-epsilon", type=float, default=QL_MIN_EPSILON,
                        help=f"Exploration floor (default: {QL_MIN_EPSILON})")
    parser.add_argument("--epsilon-decay", type=float, default=QL_EPSILON_DECAY,
                        help=f"Per-episode exploration decay (default: {QL_EPSILON_DECAY})")
    parser.add_argument("--alpha", type=float, default=QL_ALPHA,
                        help=f"Learning rate (default: {QL_ALPHA})")
    parser.add_argument("--gamma", type=float, default=QL_GAMMA,
                        help=f"Discount factor (default: {QL_GAMMA})")
    parser.add_argument("--run-dir", type=Path, default=None,
                        help="Output directory (default: timestamped dir under runs/)")
    parser.add_argument("--tensorboard", action="store_true",
                        help="Log per-cycle scalars to TensorBoard")
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed for every RNG (default: random)")
    parser.add_argument("--show-game", action="store_true",
                        help="After training, print a game of the final snapshot against a random player")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Print progress during training")

    args = parser.parse_args()

    learner, results, run_dir = run_self_play_training(
        train_episodes=args.train_episodes,
        eval_episodes=args.eval_episodes,
        cycles=args.cycles,
        opponent_epsilon=args.opponent_epsilon,
        eval_random=not args.no_eval_random,
        epsilon=args.epsilon,
        min_epsilon=args.min_epsilon,
        epsilon_decay=args.epsilon_decay,
        alpha=args.alpha,
        gamma=args.gamma,
        run_dir=args.run_dir,
        use_tensorboard=args.tensorboard,
        seed=args.seed,
        verbose=args.verbose,
    )

    for result in results:
        random_part = ""
        if result.eval_random_score is not None:
            random_part = f", avg eval random score = {result.eval_random_score:.2f}"
        print(f"Cycle {result.cycle}/{args.cycles}: avg train score = {result.train_score:.2f}, "
              f"avg eval score = {result.eval_score:.2f}{random_part}")
    print(f"Statistics written to {run_dir / STATS_FILE_NAME}")

    if args.show_game:
        show_game(learner.freezed(), seed=args.seed)


if __name__ == "__main__":
    main()
