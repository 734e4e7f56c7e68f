"""xo package.

Tabular reinforcement learning for tic-tac-toe: a board model, symmetry-aware
table keys, epsilon-greedy play, Monte-Carlo and Q-learning agents, and a
session driver for playing against them.

Convenience imports are exposed for common workflows.
"""

from .agents import RandomAgent, make_agent
from .board import Board
from .errors import InvalidAction, InvalidBoardSize, InvalidChar, MisalignedPlayer
from .monte_carlo import MonteCarloAgent
from .q_learning import QLearningAgent
from .rewards import terminal_only
from .session import GameSession
from .symmetry import canonical_key

__all__ = [
    "Board",
    "canonical_key",
    "MonteCarloAgent",
    "QLearningAgent",
    "RandomAgent",
    "make_agent",
    "terminal_only",
    "GameSession",
    "InvalidAction",
    "MisalignedPlayer",
    "InvalidChar",
    "InvalidBoardSize",
]
