"""
Pytest tests for QLearningPlayer and its frozen QLearnedPlayer snapshot.
"""
from dataclasses import FrozenInstanceError

import numpy as np
import pytest

from quarto.rl.qlearning.q_player import QLearnedPlayer, QLearningPlayer, argmax_first
from quarto.rl.self_play.duel import run_match
from quarto.rl.simple_players import RandomPlayer


def greedy_player(**kwargs) -> QLearningPlayer:
    kwargs.setdefault('epsilon', 0.0)
    kwargs.setdefault('min_epsilon', 0.0)
    return QLearningPlayer(**kwargs)


def test_argmax_first_breaks_ties_on_earliest_index():
    assert argmax_first(np.zeros(5)) == 0
    assert argmax_first(np.array([0.0, 3.0, 3.0, 1.0])) == 1
    assert argmax_first(np.array([-1.0, -2.0])) == 0


def test_take_action_initializes_zero_row(opening):
    state, actions = opening[0]
    player = greedy_player()

    action = player.take_action(state, actions)

    assert action == actions[0]
    entry = player.q_table[state]
    assert len(entry.values) == len(actions)
    assert not np.any(entry.values)
    assert entry.visits == 0, "Lookups must not count as visits"


def test_step_and_end_apply_q_learning_update(opening):
    (s1, a1), (s2, a2), (s3, _) = opening
    player = greedy_player(alpha=0.5, gamma=1.0)

    player.start(s1, a1)
    player.step(s2, a2, 10.0)
    # target = 10 + max(unseen s2) = 10
    assert player.q_table[s1].values[0] == pytest.approx(5.0)
    assert player.q_table[s1].visits == 1

    player.end(s3, -100.0)
    assert player.q_table[s2].values[0] == pytest.approx(-50.0)
    assert player.q_table[s2].visits == 1
    assert s3 not in player.q_table

    # Second episode bootstraps on the s2 row, whose max is still 0
    player.start(s1, a1)
    player.step(s2, a2, 0.0)
    assert player.q_table[s1].values[0] == pytest.approx(2.5)
    assert player.q_table[s1].visits == 2


def test_gamma_discounts_bootstrap(opening):
    (s1, a1), (s2, a2), _ = opening
    player = greedy_player(alpha=1.0, gamma=0.5)
    player.start(s2, a2)
    player.end(s2, 40.0)            # s2 row index 0 becomes 40

    player.start(s1, a1)
    player.step(s2, a2, 0.0)
    assert player.q_table[s1].values[0] == pytest.approx(20.0)


def test_visits_unchanged_by_lookups(opening):
    (s1, a1), _, _ = opening
    player = greedy_player()
    player.start(s1, a1)
    player.end(s1, 1.0)
    visits = player.q_table[s1].visits

    for _ in range(5):
        player.take_action(s1, a1)
    assert player.q_table[s1].visits == visits


def test_epsilon_decay_is_monotonic_with_floor(opening):
    state, actions = opening[0]
    player = QLearningPlayer(epsilon=1.0, min_epsilon=0.2, epsilon_decay=0.5)
    previous = player.epsilon
    for _ in range(10):
        player.start(state, actions)
        player.end(state, 0.0)
        assert player.epsilon <= previous
        assert player.epsilon >= 0.2
        previous = player.epsilon
    assert player.epsilon == pytest.approx(0.2)


def test_rows_keep_their_length_after_random_matches(env, seed):
    player = QLearningPlayer(epsilon=0.5, seed=seed)
    opponent = RandomPlayer(seed=seed)
    for _ in range(10):
        run_match(env, player, opponent)
        run_match(env, opponent, player)

    assert player.q_table
    for state, entry in player.q_table.items():
        depth = state.game_depth()
        assert len(entry.values) == (16 - depth) * (15 - depth)
        assert entry.visits >= 0


def test_stats_tally_decisions(opening, seed):
    (s1, a1), (s2, a2), _ = opening

    explorer = QLearningPlayer(epsilon=1.0, min_epsilon=1.0, seed=seed)
    for _ in range(4):
        explorer.take_action(s1, a1)
    stats = explorer.stats()
    assert stats.total_actions == 4
    assert stats.random_actions == 4

    player = greedy_player()
    player.start(s1, a1)            # zero row -> dummy
    player.step(s2, a2, 5.0)        # zero row -> dummy, s1 row updated
    player.take_action(s1, a1)      # non-zero row -> learned
    stats = player.stats()
    assert (stats.total_actions, stats.dummy_actions, stats.learned_actions) == (3, 2, 1)

    player.reset_stats()
    assert player.stats().total_actions == 0


def test_empty_action_list_rejected(opening):
    state, _ = opening[0]
    with pytest.raises(ValueError):
        greedy_player().take_action(state, [])


def test_freezed_copies_table_without_aliasing(opening):
    (s1, a1), _, _ = opening
    player = greedy_player(alpha=1.0)
    player.start(s1, a1)
    player.end(s1, 7.0)

    frozen = player.freezed()
    assert isinstance(frozen, QLearnedPlayer)
    assert frozen.q_table[s1].values[0] == 7.0

    player.start(s1, a1)
    player.end(s1, -3.0)
    assert player.q_table[s1].values[0] == -3.0
    assert frozen.q_table[s1].values[0] == 7.0, "Snapshot must not see later learning"

    with pytest.raises(ValueError):
        frozen.q_table[s1].values[0] = 1.0
    with pytest.raises(TypeError):
        frozen.q_table[s1] = None


def test_frozen_play_is_deterministic(opening):
    (s1, a1), (s2, a2), _ = opening
    player = greedy_player()
    player.take_action(s1, a1)
    player.q_table[s1].values[3] = 2.0
    player.q_table[s1].values[7] = 2.0

    frozen = player.freezed()
    assert frozen.take_action(s1, a1) == a1[3]
    assert frozen.take_action(s1, a1) == a1[3]
    assert frozen.take_action(s2, a2) == a2[0], "Unseen states play the first action"

    stats = frozen.stats()
    assert (stats.total_actions, stats.learned_actions, stats.unseen_actions) == (3, 2, 1)


def test_frozen_zero_row_matches_learner_tie_break(opening):
    (s1, a1), _, _ = opening
    player = greedy_player()
    learner_choice = player.take_action(s1, a1)
    assert player.freezed().take_action(s1, a1) == learner_choice == a1[0]


def test_table_summary_buckets_by_depth(env, seed):
    player = QLearningPlayer(seed=seed)
    opponent = RandomPlayer(seed=seed)
    run_match(env, player, opponent)

    summary = player.table_summary()
    assert summary['q_table_size'] == len(player.q_table)
    assert sum(summary['depth_population'].values()) == len(player.q_table)
    assert set(summary['depth_population']) == set(summary['depth_avg_visits'])
    assert all(isinstance(depth, str) for depth in summary['depth_population'])
    assert summary['epsilon'] == player.epsilon


def test_cycle_end_does_not_touch_values(env, seed):
    player = QLearningPlayer(seed=seed, verbose=True)
    opponent = RandomPlayer(seed=seed)
    for _ in range(3):
        run_match(env, player, opponent)
    before = {state: entry.values.copy() for state, entry in player.q_table.items()}

    player.cycle_end()

    assert before.keys() == player.q_table.keys()
    for state, values in before.items():
        np.testing.assert_array_equal(values, player.q_table[state].values)


@pytest.mark.parametrize("call", ["step", "end"])
def test_reward_without_decision_is_an_error(opening, call):
    (s1, a1), _, _ = opening
    player = greedy_player()

    with pytest.raises(RuntimeError):
        if call == "step":
            player.step(s1, a1, 1.0)
        else:
            player.end(s1, 1.0)
    assert s1 not in player.q_table or player.q_table[s1].visits == 0


def test_end_forgets_decision(opening):
    (s1, a1), _, _ = opening
    player = greedy_player()
    player.start(s1, a1)
    player.end(s1, 1.0)

    with pytest.raises(RuntimeError):
        player.end(s1, 1.0)


def test_frozen_entries_are_fully_read_only(opening):
    (s1, a1), _, _ = opening
    player = greedy_player()
    player.start(s1, a1)
    player.end(s1, 1.0)

    frozen = player.freezed()
    with pytest.raises(FrozenInstanceError):
        frozen.q_table[s1].visits = 10
    assert frozen.q_table[s1].visits == 1
    assert player.q_table[s1].visits == 1
