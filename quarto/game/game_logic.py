"""
Pure game logic functions for Quarto.

Stateless helpers implementing the win rule. QuartoEnvironment uses them after
every placement, and tests can call them on hand-built boards.
"""
from typing import List, Optional, Sequence, Tuple

from quarto.models.piece import BOARD_SIZE, PIECE_TRAITS, Piece, Position

WIN_REWARD = 100.0
DRAW_REWARD = 0.0

Line = Tuple[Position, ...]


def lines_through(position: Position) -> List[Line]:
    """
    Lines that can be completed by a piece at `position`.

    Always the row and the column; the diagonals only when the position lies
    on them.
    """
    row, col = position.row, position.col
    lines = [
        tuple(Position(row, c) for c in range(BOARD_SIZE)),
        tuple(Position(r, col) for r in range(BOARD_SIZE)),
    ]
    if position.on_main_diagonal:
        lines.append(tuple(Position(i, i) for i in range(BOARD_SIZE)))
    if position.on_anti_diagonal:
        lines.append(tuple(Position(BOARD_SIZE - 1 - i, i) for i in range(BOARD_SIZE)))
    return lines


def has_common_trait(pieces: Sequence[Optional[Piece]]) -> bool:
    """True when every cell is occupied and all pieces share at least one trait."""
    if any(piece is None for piece in pieces):
        return False
    first = pieces[0]
    for trait in PIECE_TRAITS:
        value = getattr(first, trait)
        if all(getattr(piece, trait) == value for piece in pieces[1:]):
            return True
    return False


def is_winning_line(board: Sequence[Optional[Piece]], line: Line) -> bool:
    return has_common_trait([board[position.code] for position in line])


def final_reward(board: Sequence[Optional[Piece]], position: Position) -> Optional[float]:
    """
    Terminal reward after a piece was placed at `position`.

    Args:
        board: 16 cells indexed by position code
        position: Cell that was just filled

    Returns:
        WIN_REWARD if a line through the position is won, DRAW_REWARD if the
        board is full, None if the game goes on
    """
    if any(is_winning_line(board, line) for line in lines_through(position)):
        return WIN_REWARD
    if all(cell is not None for cell in board):
        return DRAW_REWARD
    return None
