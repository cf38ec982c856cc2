"""
Constants for the tabular Q-learning player.
"""

QL_INITIAL_EPSILON = 1.0       # Start fully exploratory
QL_MIN_EPSILON = 0.1
QL_EPSILON_DECAY = 0.99995     # Applied once per finished episode
QL_ALPHA = 0.1                 # Learning rate
QL_GAMMA = 1.0                 # Episodes are short and only the terminal reward is non-zero

QL_TEST_SEED = 42
