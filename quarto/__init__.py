"""
Quarto self-play reinforcement learning.

Game engine, tabular Q-learning player and the self-play orchestrator that
trains it against frozen snapshots of itself.
"""

__version__ = "0.1.0"
