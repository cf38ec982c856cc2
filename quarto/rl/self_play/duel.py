"""
Match and duel runners for two-player zero-sum games.

Rewards coming out of Environment.step() are absolute for the mover. Here
they are turned into relative rewards for each player and into a net score
for the first player.
"""
from typing import List

from quarto.rl.interfaces import Environment, Player


def run_match(env: Environment, player_1: Player, player_2: Player) -> float:
    """
    Play one match, player_1 moving first.

    Every player receives, at each of its decisions, its own last reward minus
    the opponent's last reward. When the game ends the mover gets its reward
    through end(), and the other player gets its own last reward minus it.

    Args:
        env: Environment to play in (reset at the start)
        player_1: Player moving first
        player_2: Player moving second

    Returns:
        Net score of player_1; the score of player_2 is its negation
    """
    players = (player_1, player_2)
    last_rewards: List[float] = [0.0, 0.0]
    started = [False, False]
    score = 0.0

    state, actions = env.reset()
    mover = 0
    while True:
        if not actions:
            raise RuntimeError("Environment returned no legal actions for a game in progress")

        player = players[mover]
        other = 1 - mover
        if started[mover]:
            action = player.step(state, actions, last_rewards[mover] - last_rewards[other])
        else:
            action = player.start(state, actions)
            started[mover] = True

        state, reward, done, actions = env.step(action)
        last_rewards[mover] = reward
        score += reward if mover == 0 else -reward

        if done:
            player.end(state, reward)
            if started[other]:
                players[other].end(state, last_rewards[other] - reward)
            return score

        mover = other


def run_duel(env: Environment, player_1: Player, player_2: Player, episodes: int) -> float:
    """
    Play `episodes` matches, swapping the starting player every match.

    Args:
        env: Environment to play in
        player_1: Player whose score is reported
        player_2: Opponent
        episodes: Number of matches, must be even and positive

    Returns:
        Average per-match score of player_1
    """
    if episodes <= 0 or episodes % 2 != 0:
        raise ValueError(f"episodes must be a positive even number, got {episodes}")

    score = 0.0
    for _ in range(episodes // 2):
        score += run_match(env, player_1, player_2)
        score -= run_match(env, player_2, player_1)
    return score / episodes
