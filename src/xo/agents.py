"""
The agent capability set and a factory over the available learners.

Every agent exposes `player`, `policy(board, horizon=None)` and
`learn(board, reward_fn)`; the driver needs nothing else.
"""
from __future__ import annotations

from typing import Optional, Protocol

import numpy as np

from .board import PLAYER_O, Board
from .config import AgentConfig
from .monte_carlo import MonteCarloAgent
from .policy import check_turn, legal_or_raise
from .q_learning import QLearningAgent
from .rewards import RewardFn

AGENT_KINDS = ("mc", "q", "random")


class Agent(Protocol):
    player: str

    def policy(self, board: Board, horizon: Optional[int] = None) -> int:
        ...

    def learn(self, board: Board, reward_fn: RewardFn) -> None:
        ...


class RandomAgent:
    """Always plays a uniformly random legal move and never learns."""

    def __init__(self, player: str = PLAYER_O, rng: Optional[np.random.Generator] = None) -> None:
        self.player = player
        self.rng = rng if rng is not None else np.random.default_rng()

    def policy(self, board: Board, horizon: Optional[int] = None) -> int:
        check_turn(board, self.player, horizon)
        return int(self.rng.choice(legal_or_raise(board, horizon)))

    def learn(self, board: Board, reward_fn: RewardFn) -> None:
        return None


def make_agent(
    kind: str,
    player: str = PLAYER_O,
    config: Optional[AgentConfig] = None,
    rng: Optional[np.random.Generator] = None,
) -> Agent:
    cfg = (config or AgentConfig()).validate()
    if kind == "mc":
        return MonteCarloAgent(player, epsilon=cfg.epsilon, discount=cfg.discount,
                               default_q=cfg.default_q, rng=rng)
    if kind == "q":
        return QLearningAgent(player, epsilon=cfg.epsilon, discount=cfg.discount,
                              alpha=cfg.alpha, default_q=cfg.default_q, rng=rng)
    if kind == "random":
        return RandomAgent(player, rng=rng)
    raise ValueError(f"Unknown agent kind: {kind!r} (expected one of {AGENT_KINDS})")
