"""
Every-visit Monte-Carlo control over a symmetry-aware action-value table.

Rewards are buffered once per `learn` call; when the episode ends the agent
walks its own plies backward, accumulates the discounted return and folds it
into the running mean of each visited key.
"""
from __future__ import annotations

import logging
from typing import List, Optional

import numpy as np

from .board import PLAYER_O, Board
from .policy import epsilon_greedy
from .rewards import RewardFn
from .symmetry import canonical_key
from .table import ActionValueTable

logger = logging.getLogger(__name__)


class MonteCarloAgent:
    def __init__(
        self,
        player: str = PLAYER_O,
        epsilon: float = 0.1,
        discount: float = 1.0,
        default_q: float = 0.0,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        self.player = player
        self.epsilon = epsilon
        self.discount = discount
        self.table = ActionValueTable(default_q)
        self.rng = rng if rng is not None else np.random.default_rng()
        self.rewards: List[float] = []

    def policy(self, board: Board, horizon: Optional[int] = None) -> int:
        return epsilon_greedy(board, self.player, self.table, self.epsilon, self.rng, horizon)

    def learn(self, board: Board, reward_fn: RewardFn) -> None:
        self.rewards.append(reward_fn(board, self.player, None))
        if not board.terminal_outcome():
            return

        history = board.history
        actions = board.actions
        total = 0.0
        j = len(self.rewards) - 1
        for i in reversed(board.plies_of(self.player)):
            key = canonical_key(history[i], actions[i], self.table)
            r = self.rewards[j] if j >= 0 else 0.0
            total = r + self.discount * total
            self.table.record_return(key, total)
            j -= 1
        logger.debug("Monte-Carlo update for %s over %d rewards, table size %d",
                     self.player, len(self.rewards), len(self.table))
        self.rewards = []
