from dataclasses import dataclass

from quarto.rl.interfaces import Action as BaseAction

BOARD_SIZE = 4
NUM_CELLS = BOARD_SIZE * BOARD_SIZE
NUM_PIECES = 16

# Bit layout of a piece code
HOLLOW_BIT = 0
SQUARE_BIT = 1
SHORT_BIT = 2
BLACK_BIT = 3

PIECE_TRAITS = ("hollow", "square", "short", "black")


@dataclass(frozen=True)
class Piece:
    hollow: bool
    square: bool
    short: bool
    black: bool

    @classmethod
    def from_code(cls, code: int) -> 'Piece':
        if not 0 <= code < NUM_PIECES:
            raise ValueError(f"Piece code must be in [0, {NUM_PIECES}), got {code}")
        return cls(
            hollow=bool((code >> HOLLOW_BIT) & 1),
            square=bool((code >> SQUARE_BIT) & 1),
            short=bool((code >> SHORT_BIT) & 1),
            black=bool((code >> BLACK_BIT) & 1),
        )

    @property
    def code(self) -> int:
        return (
            (int(self.hollow) << HOLLOW_BIT)
            | (int(self.square) << SQUARE_BIT)
            | (int(self.short) << SHORT_BIT)
            | (int(self.black) << BLACK_BIT)
        )

    def __str__(self) -> str:
        return f"{self.code:X}"


@dataclass(frozen=True)
class Position:
    row: int
    col: int

    @classmethod
    def from_code(cls, code: int) -> 'Position':
        if not 0 <= code < NUM_CELLS:
            raise ValueError(f"Position code must be in [0, {NUM_CELLS}), got {code}")
        return cls(row=code // BOARD_SIZE, col=code % BOARD_SIZE)

    @property
    def code(self) -> int:
        return self.row * BOARD_SIZE + self.col

    @property
    def on_main_diagonal(self) -> bool:
        return self.row == self.col

    @property
    def on_anti_diagonal(self) -> bool:
        return self.row + self.col == BOARD_SIZE - 1

    def __str__(self) -> str:
        return f"({self.row},{self.col})"


@dataclass(frozen=True)
class Action(BaseAction):
    """Place the reserve piece at `position`, then hand `piece` to the opponent."""
    position: Position
    piece: Piece

    @classmethod
    def from_code(cls, code: int) -> 'Action':
        if not 0 <= code < NUM_CELLS * NUM_PIECES:
            raise ValueError(f"Action code must be in [0, {NUM_CELLS * NUM_PIECES}), got {code}")
        return cls(
            position=Position.from_code(code // NUM_PIECES),
            piece=Piece.from_code(code % NUM_PIECES),
        )

    @property
    def code(self) -> int:
        return self.position.code * NUM_PIECES + self.piece.code

    def __str__(self) -> str:
        return f"{self.position} give {self.piece}"


ALL_PIECES = tuple(Piece.from_code(code) for code in range(NUM_PIECES))
ALL_POSITIONS = tuple(Position.from_code(code) for code in range(NUM_CELLS))
ALL_ACTIONS = tuple(Action.from_code(code) for code in range(NUM_CELLS * NUM_PIECES))
