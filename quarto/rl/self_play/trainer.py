"""
Self-play training loop.

One learner never plays another learning agent: every cycle it trains against
a frozen (slightly randomized) snapshot of itself, then the snapshot is
refreshed and evaluated.
"""
import time
from dataclasses import asdict, dataclass, field, is_dataclass
from typing import Any, Callable, Dict, List, Optional

from quarto.rl.interfaces import Environment, LearningPlayer
from quarto.rl.self_play.constants import ADVERSARY_SEED_OFFSET, RANDOM_EVAL_SEED_OFFSET
from quarto.rl.self_play.duel import run_duel
from quarto.rl.self_play.stats_sink import JsonlStatsSink
from quarto.rl.simple_players import OpponentWrapper, RandomPlayer
from quarto.ui.terminal_ui import TerminalUI


@dataclass
class CycleResult:
    cycle: int
    train_score: float
    eval_score: float
    eval_random_score: Optional[float]
    record: Dict[str, Any] = field(default_factory=dict)


def derive_seed(seed: Optional[int], offset: int) -> Optional[int]:
    """Seed of a dedicated RNG stream, None stays None (unseeded)."""
    return None if seed is None else seed + offset


def _stats_to_dict(stats) -> Optional[Dict[str, Any]]:
    if stats is None:
        return None
    if hasattr(stats, 'to_dict'):
        return stats.to_dict()
    if is_dataclass(stats):
        return asdict(stats)
    return dict(stats)


def _log_cycle_to_tensorboard(writer, record: Dict[str, Any]):
    step = record['cycle']
    writer.add_scalar('Score/Train', record['train_score'], step)
    writer.add_scalar('Score/EvalPrevious', record['eval_score'], step)
    if record['eval_random_score'] is not None:
        writer.add_scalar('Score/EvalRandom', record['eval_random_score'], step)
    if record.get('q_table_size') is not None:
        writer.add_scalar('QTable/Size', record['q_table_size'], step)
    if record.get('epsilon') is not None:
        writer.add_scalar('QTable/Epsilon', record['epsilon'], step)
    for name, stats in (('Learner', record['learner_stats']), ('EvalRandom', record['eval_random_stats'])):
        if not stats:
            continue
        for key, value in stats.items():
            writer.add_scalar(f'Actions/{name}/{key}', value, step)
    writer.flush()


def train(
    env: Environment,
    learner: LearningPlayer,
    train_episodes: int,
    eval_episodes: int,
    cycles: int,
    opponent_epsilon: float,
    eval_random: bool = True,
    stats_sink: Optional[JsonlStatsSink] = None,
    writer=None,
    on_cycle_end: Optional[Callable[[CycleResult], None]] = None,
    seed: Optional[int] = None,
    verbose: bool = False,
) -> List[CycleResult]:
    """
    Train `learner` against frozen snapshots of itself.

    Per cycle:
      1. duel the learner against the wrapped frozen adversary (learning on)
      2. freeze a new snapshot of the learner
      3. duel the new snapshot against the previous one
      4. if eval_random, duel the new snapshot against a RandomPlayer
      5. the new snapshot becomes the adversary
      6. report statistics and call learner.cycle_end()

    Args:
        env: Environment shared by every match
        learner: Learning player being trained
        train_episodes: Training matches per cycle (even)
        eval_episodes: Evaluation matches per duel (even)
        cycles: Number of cycles
        opponent_epsilon: Random move probability of the frozen adversary
        eval_random: Whether to run the evaluation against a random player
        stats_sink: Optional sink receiving one record per cycle
        writer: Optional TensorBoard SummaryWriter
        on_cycle_end: Optional callback receiving each CycleResult
        seed: Optional base seed; the adversaries and the random evaluator
            draw from offset streams so they never mirror the learner
        verbose: Print a summary of each cycle

    Returns:
        One CycleResult per cycle
    """
    ui = TerminalUI() if verbose else None
    random_adversary = RandomPlayer(seed=derive_seed(seed, RANDOM_EVAL_SEED_OFFSET))
    adversary = OpponentWrapper(learner.freezed(), opponent_epsilon, seed=derive_seed(seed, ADVERSARY_SEED_OFFSET))
    results: List[CycleResult] = []
    start_time = time.time()

    for cycle in range(1, cycles + 1):
        learner.reset_stats()

        # Train against a fixed adversary
        train_score = run_duel(env, learner, adversary, train_episodes)

        # Evaluate the fresh snapshot against the previous one, no learning involved
        opponent_seed = derive_seed(seed, ADVERSARY_SEED_OFFSET + cycle)
        new_adversary = OpponentWrapper(learner.freezed(), opponent_epsilon, seed=opponent_seed)
        eval_score = run_duel(env, new_adversary.inner, adversary.inner, eval_episodes)

        eval_random_score = None
        eval_random_stats = None
        if eval_random:
            new_adversary.inner.reset_stats()
            eval_random_score = run_duel(env, new_adversary.inner, random_adversary, eval_episodes)
            eval_random_stats = _stats_to_dict(new_adversary.inner.stats())

        adversary = new_adversary

        record: Dict[str, Any] = {
            'cycle': cycle,
            'cycles': cycles,
            'train_episodes': train_episodes,
            'eval_episodes': eval_episodes,
            'total_train_episodes': cycle * train_episodes,
            'train_score': train_score,
            'eval_score': eval_score,
            'eval_random_score': eval_random_score,
            'learner_stats': _stats_to_dict(learner.stats()),
            'eval_random_stats': eval_random_stats,
            'q_table_size': None,
            'depth_population': None,
            'depth_avg_visits': None,
            'epsilon': getattr(learner, 'epsilon', None),
        }
        if hasattr(learner, 'table_summary'):
            record.update(learner.table_summary())
        record['elapsed_seconds'] = time.time() - start_time

        if stats_sink is not None:
            stats_sink.append(record)
        if writer is not None:
            _log_cycle_to_tensorboard(writer, record)
        if ui is not None:
            ui.print_cycle_summary(record)

        learner.cycle_end()

        result = CycleResult(
            cycle=cycle,
            train_score=train_score,
            eval_score=eval_score,
            eval_random_score=eval_random_score,
            record=record,
        )
        results.append(result)
        if on_cycle_end is not None:
            on_cycle_end(result)

    return results
