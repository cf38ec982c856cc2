from typing import Any, Dict, Optional

from rich.align import Align
from rich.box import ROUNDED
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from quarto.models.game_state import GameState
from quarto.models.piece import BOARD_SIZE, Piece, Position


def piece_markup(piece: Optional[Piece]) -> str:
    """
    Compact rich markup for a piece.

    Letters show the traits: H/s (hollow/solid), Q/r (square/round),
    S/t (short/tall); color shows black/white.
    """
    if piece is None:
        return "[dim]·[/dim]"
    text = (
        ("H" if piece.hollow else "s")
        + ("Q" if piece.square else "r")
        + ("S" if piece.short else "t")
    )
    color = "bold magenta" if piece.black else "bold white"
    return f"[{color}]{text}[/{color}] [dim]{piece}[/dim]"


class TerminalUI:
    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()
        self.total_width = 60

    def create_board_table(self, game_state: GameState) -> Table:
        table = Table(show_header=True, box=ROUNDED, padding=(0, 1))
        table.add_column("", style="dim", justify="right")
        for col in range(BOARD_SIZE):
            table.add_column(str(col), justify="center")
        for row in range(BOARD_SIZE):
            cells = [piece_markup(game_state.piece_at(Position(row, col))) for col in range(BOARD_SIZE)]
            table.add_row(str(row), *cells)
        return table

    def display_game_state(self, game_state: GameState, title: str = "Quarto"):
        """Print the board and the reserve piece."""
        header = (
            f"Depth: {game_state.game_depth()}  "
            f"Reserve: {piece_markup(game_state.reserve)}"
        )
        self.console.print(Panel(
            Align.center(self.create_board_table(game_state)),
            title=f"[bold]{title}[/bold]",
            subtitle=header,
            box=ROUNDED,
            width=self.total_width,
        ))

    def print_training_header(self, config: Dict[str, Any]):
        lines = "\n".join(f"{key}: {value}" for key, value in config.items())
        self.console.print(Panel(
            lines,
            title="[bold]Quarto Self-Play Training[/bold]",
            box=ROUNDED,
            padding=(0, 1),
            width=self.total_width,
        ))

    def print_cycle_summary(self, record: Dict[str, Any]):
        table = Table(
            title=f"Cycle {record['cycle']}/{record['cycles']}",
            box=ROUNDED,
            width=self.total_width,
        )
        table.add_column("Metric")
        table.add_column("Value", justify="right")

        table.add_row("Avg train score", f"{record['train_score']:+.2f}")
        table.add_row("Avg eval score (vs previous)", f"{record['eval_score']:+.2f}")
        if record.get('eval_random_score') is not None:
            score = record['eval_random_score']
            color = "green" if score > 0 else "red"
            table.add_row("Avg eval score (vs random)", f"[{color}]{score:+.2f}[/{color}]")
        if record.get('q_table_size') is not None:
            table.add_row("Q-table size", str(record['q_table_size']))
        if record.get('epsilon') is not None:
            table.add_row("Epsilon", f"{record['epsilon']:.4f}")
        for name in ('learner_stats', 'eval_random_stats'):
            stats = record.get(name)
            if stats:
                table.add_row(name, ", ".join(f"{k}={v}" for k, v in stats.items()))
        table.add_row("Elapsed", f"{record['elapsed_seconds']:.1f}s")
        self.console.print(table)

    def print_game_result(self, score: float, first_name: str, second_name: str):
        if score > 0:
            text, color = f"{first_name} wins", "green"
        elif score < 0:
            text, color = f"{second_name} wins", "red"
        else:
            text, color = "Draw", "yellow"
        self.console.print(Panel(
            Align.center(f"[bold {color}]{text}[/bold {color}] (score {score:+.0f})"),
            box=ROUNDED,
            width=self.total_width,
        ))
