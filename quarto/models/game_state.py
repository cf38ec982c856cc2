from dataclasses import dataclass, field, replace
from typing import Optional, Tuple

from quarto.models.piece import NUM_CELLS, NUM_PIECES, Piece, Position
from quarto.rl.interfaces import State

INITIAL_RESERVE = Piece.from_code(NUM_PIECES - 1)

Board = Tuple[Optional[Piece], ...]


def empty_board() -> Board:
    return (None,) * NUM_CELLS


@dataclass(frozen=True)
class GameState(State):
    """
    Board contents plus the piece waiting to be placed.

    Equality and hashing are structural, so two move orders that reach the
    same board with the same reserve share a Q-table entry.
    """
    board: Board = field(default_factory=empty_board)
    reserve: Piece = INITIAL_RESERVE

    def game_depth(self) -> int:
        return sum(1 for cell in self.board if cell is not None)

    def piece_at(self, position: Position) -> Optional[Piece]:
        return self.board[position.code]

    def place(self, position: Position) -> 'GameState':
        """Return a new state with the reserve piece put at `position`."""
        cells = list(self.board)
        cells[position.code] = self.reserve
        return replace(self, board=tuple(cells))

    def with_reserve(self, piece: Piece) -> 'GameState':
        return replace(self, reserve=piece)

    @property
    def is_full(self) -> bool:
        return all(cell is not None for cell in self.board)
