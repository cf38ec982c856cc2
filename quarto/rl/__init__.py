"""
Agents and training for Quarto.

interfaces defines the Environment/Player contracts; qlearning holds the
tabular learner and self_play the orchestrator driving it.
"""
