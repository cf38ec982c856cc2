from typing import List, Optional, Tuple

from quarto.game.game_logic import DRAW_REWARD, final_reward
from quarto.models.game_state import INITIAL_RESERVE, GameState
from quarto.models.piece import ALL_ACTIONS, ALL_PIECES, ALL_POSITIONS, NUM_PIECES, Action, Piece, Position
from quarto.rl.interfaces import Environment


class QuartoEnvironment(Environment[GameState, Action]):
    """
    Mutable Quarto session.

    Holds the current GameState plus the positions and pieces still available.
    Rewards returned by step() are absolute for the mover; the orchestrator
    turns them into per-player scores.
    """

    def __init__(self):
        self.state = GameState()
        self.available_positions: List[Position] = []
        self.available_pieces: List[Piece] = []

    def reset(self) -> Tuple[GameState, List[Action]]:
        self.state = GameState()
        self.available_positions = list(ALL_POSITIONS)
        self.available_pieces = [piece for piece in ALL_PIECES if piece != INITIAL_RESERVE]
        return self.state, self.legal_actions()

    def step(self, action: Action) -> Tuple[GameState, float, bool, List[Action]]:
        """
        Place the reserve piece, hand over the chosen piece and check the result.

        When the mover hands over the last piece, the final placement is
        forced: it is played automatically and a win there counts against
        the mover (the returned reward is negated).

        Args:
            action: One of the actions returned by the last reset()/step()

        Returns:
            Tuple of (state, reward, done, legal actions)
        """
        self._apply_position(action.position)
        self._remove_piece(action.piece)
        self.state = self.state.with_reserve(action.piece)

        reward = self.final_reward(action.position)
        if reward is not None:
            return self.state, reward, True, []

        if not self.available_pieces:
            last_position = self.available_positions[0]
            self._apply_position(last_position)
            forced_reward = self.final_reward(last_position)
            reward = -forced_reward if forced_reward else DRAW_REWARD
            return self.state, reward, True, []

        return self.state, 0.0, False, self.legal_actions()

    def legal_actions(self) -> List[Action]:
        return [
            ALL_ACTIONS[position.code * NUM_PIECES + piece.code]
            for position in self.available_positions
            for piece in self.available_pieces
        ]

    def final_reward(self, position: Position) -> Optional[float]:
        return final_reward(self.state.board, position)

    def get_state(self) -> GameState:
        return self.state

    def _apply_position(self, position: Position):
        assert position in self.available_positions, f"Position {position} is not available"
        self.available_positions.remove(position)
        self.state = self.state.place(position)

    def _remove_piece(self, piece: Piece):
        assert piece in self.available_pieces, f"Piece {piece} is not available"
        self.available_pieces.remove(piece)
