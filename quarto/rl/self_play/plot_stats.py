"""
Plot the per-cycle statistics written by self-play training.

Top: average train/eval scores per cycle. Bottom: Q-table growth and epsilon.
"""
import argparse
from pathlib import Path
from typing import Any, Dict, List, Optional

import matplotlib.pyplot as plt
import numpy as np

from quarto.rl.self_play.stats_sink import load_stats


def extract_series(records: List[Dict[str, Any]]) -> Dict[str, np.ndarray]:
    """
    Turn stats records into aligned numpy series.

    Missing values (e.g. a skipped random evaluation) become NaN so they
    leave gaps in the plot.
    """
    def column(key: str) -> np.ndarray:
        return np.array(
            [np.nan if r.get(key) is None else float(r[key]) for r in records],
            dtype=np.float64,
        )

    return {
        'cycle': column('cycle'),
        'train_score': column('train_score'),
        'eval_score': column('eval_score'),
        'eval_random_score': column('eval_random_score'),
        'q_table_size': column('q_table_size'),
        'epsilon': column('epsilon'),
    }


def plot_stats(records: List[Dict[str, Any]], title: str = "Quarto Self-Play", output: Optional[Path] = None):
    """
    Plot score curves and table growth.

    Args:
        records: Records loaded from a stats file
        title: Figure title
        output: Save the figure there instead of showing it
    """
    if not records:
        raise ValueError("No statistics records to plot")
    series = extract_series(records)
    cycles = series['cycle']

    fig, (ax_scores, ax_table) = plt.subplots(2, 1, figsize=(12, 9), sharex=True)

    ax_scores.plot(cycles, series['train_score'], linewidth=2, color='#2E86AB', marker='o', markersize=4,
                   label='Train (vs frozen self)')
    ax_scores.plot(cycles, series['eval_score'], linewidth=2, color='#A23B72', marker='s', markersize=4,
                   label='Eval (vs previous snapshot)')
    if not np.all(np.isnan(series['eval_random_score'])):
        ax_scores.plot(cycles, series['eval_random_score'], linewidth=2, color='#F18F01', marker='^',
                       markersize=4, label='Eval (vs random)')
    ax_scores.axhline(y=0, color='gray', linestyle='--', linewidth=1, alpha=0.5)
    ax_scores.set_ylabel('Average Score', fontsize=12, fontweight='bold')
    ax_scores.set_ylim(-100, 100)
    ax_scores.grid(True, alpha=0.3, linestyle=':', linewidth=0.5)
    ax_scores.legend(loc='best', fontsize=10)

    ax_table.plot(cycles, series['q_table_size'], linewidth=2, color='#3B1F2B', marker='o', markersize=4,
                  label='Q-table size')
    ax_table.set_xlabel('Cycle', fontsize=12, fontweight='bold')
    ax_table.set_ylabel('States', fontsize=12, fontweight='bold')
    ax_table.grid(True, alpha=0.3, linestyle=':', linewidth=0.5)

    ax_epsilon = ax_table.twinx()
    ax_epsilon.plot(cycles, series['epsilon'], linewidth=1.5, color='#C73E1D', linestyle='--', label='Epsilon')
    ax_epsilon.set_ylabel('Epsilon', fontsize=12, fontweight='bold')
    ax_epsilon.set_ylim(0, 1.05)

    handles = ax_table.get_legend_handles_labels()[0] + ax_epsilon.get_legend_handles_labels()[0]
    ax_table.legend(handles, [h.get_label() for h in handles], loc='best', fontsize=10)

    fig.suptitle(f'{title}\n({len(records)} cycles)', fontsize=14, fontweight='bold')
    fig.tight_layout()

    if output is not None:
        output = Path(output)
        output.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(output)
        plt.close(fig)
    else:
        plt.show()


def main():
    parser = argparse.ArgumentParser(
        description="Plot per-cycle statistics of a self-play training run."
    )
    parser.add_argument("stats_file", type=Path, help="Path to a stats.jsonl file")
    parser.add_argument("--output", "-o", type=Path, default=None,
                        help="Save the figure to this path instead of showing it")
    args = parser.parse_args()

    records = load_stats(args.stats_file)
    print(f"Loaded {len(records)} cycle records from {args.stats_file}")
    plot_stats(records, title=f"Quarto Self-Play ({args.stats_file.parent.name})", output=args.output)


if __name__ == "__main__":
    main()
