"""
Pytest tests for QuartoEnvironment reset/step semantics.
"""
import pytest

from quarto.game.environment import QuartoEnvironment
from quarto.game.game_logic import WIN_REWARD
from quarto.models.game_state import INITIAL_RESERVE, GameState
from quarto.models.piece import Action, Piece, Position


def act(row: int, col: int, piece_code: int) -> Action:
    return Action(position=Position(row, col), piece=Piece.from_code(piece_code))


def no_win_code(row: int, col: int) -> int:
    r0, r1 = row & 1, row >> 1
    c0, c1 = col & 1, col >> 1
    return (r0 ^ c1) | ((r1 ^ c0) << 1) | ((r0 ^ c0 ^ c1) << 2) | ((r1 ^ c0 ^ c1) << 3)


def test_reset_offers_240_actions():
    env = QuartoEnvironment()
    state, actions = env.reset()

    assert len(actions) == 16 * 15
    assert len(set(actions)) == len(actions)
    assert state.reserve == INITIAL_RESERVE
    assert state.game_depth() == 0
    assert all(action.piece != INITIAL_RESERVE for action in actions)


def test_reset_repopulates_after_a_game():
    env = QuartoEnvironment()
    env.reset()
    env.step(act(0, 0, 0))
    env.step(act(1, 1, 1))

    state, actions = env.reset()
    assert len(env.available_positions) == 16
    assert len(env.available_pieces) == 15
    assert len(actions) == 240
    assert state == GameState()


def test_step_places_reserve_and_hands_over_piece():
    env = QuartoEnvironment()
    env.reset()

    state, reward, done, actions = env.step(act(2, 1, 5))

    assert state.piece_at(Position(2, 1)) == INITIAL_RESERVE
    assert state.reserve == Piece.from_code(5)
    assert state.game_depth() == 1
    assert reward == 0.0
    assert not done
    assert len(actions) == 15 * 14
    assert Position(2, 1) not in env.available_positions
    assert Piece.from_code(5) not in env.available_pieces


def test_row_win_ends_the_game():
    env = QuartoEnvironment()
    env.reset()

    for col, next_piece in enumerate((14, 13, 12)):
        _, reward, done, _ = env.step(act(0, col, next_piece))
        assert reward == 0.0
        assert not done

    # Row 0 holds 15, 14, 13, 12: all black and short
    state, reward, done, actions = env.step(act(0, 3, 0))
    assert reward == WIN_REWARD
    assert done
    assert actions == []
    assert state.game_depth() == 4


def test_reused_position_is_an_invariant_violation():
    env = QuartoEnvironment()
    env.reset()
    env.step(act(0, 0, 3))
    with pytest.raises(AssertionError):
        env.step(act(0, 0, 4))


def test_unavailable_piece_is_an_invariant_violation():
    env = QuartoEnvironment()
    env.reset()
    with pytest.raises(AssertionError):
        env.step(act(0, 0, INITIAL_RESERVE.code))


def test_same_board_reached_by_different_orders_is_the_same_state():
    env_a = QuartoEnvironment()
    env_a.reset()
    env_a.step(act(0, 0, 0))
    env_a.step(act(3, 3, 1))
    state_a, _, _, _ = env_a.step(act(1, 2, 2))

    env_b = QuartoEnvironment()
    env_b.reset()
    env_b.step(act(0, 0, 1))
    env_b.step(act(1, 2, 0))
    state_b, _, _, _ = env_b.step(act(3, 3, 2))

    assert state_a == state_b
    assert hash(state_a) == hash(state_b)
    assert state_a.game_depth() == 3


def test_full_board_without_line_is_a_draw():
    """Play the whole no-win layout; the 16th piece is placed automatically."""
    env = QuartoEnvironment()
    env.reset()

    target = {no_win_code(r, c): Position(r, c) for r in range(4) for c in range(4)}
    order = [INITIAL_RESERVE.code] + [code for code in range(16) if code != INITIAL_RESERVE.code]

    for i in range(15):
        placed, given = order[i], order[i + 1]
        state, reward, done, actions = env.step(Action(target[placed], Piece.from_code(given)))
        if i < 14:
            assert not done
            assert reward == 0.0

    assert done
    assert reward == 0.0
    assert actions == []
    assert state.is_full
    assert state.game_depth() == 16
    assert env.available_positions == []
    assert env.available_pieces == []


def test_forced_final_placement_win_counts_against_mover():
    env = QuartoEnvironment()
    env.reset()

    # Two cells left, one piece left: (0, 3) gets the last piece automatically
    cells = [None] * 16
    for col, code in enumerate((8, 9, 14)):
        cells[Position(0, col).code] = Piece.from_code(code)
    env.state = GameState(board=tuple(cells), reserve=Piece.from_code(0))
    env.available_positions = [Position(3, 3), Position(0, 3)]
    env.available_pieces = [Piece.from_code(11)]

    state, reward, done, actions = env.step(act(3, 3, 11))

    assert done
    assert reward == -WIN_REWARD
    assert actions == []
    assert state.piece_at(Position(0, 3)) == Piece.from_code(11)
