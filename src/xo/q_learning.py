"""
Off-policy one-step Q-learning applied at the end of each episode.

The agent also learns from its opponent's moves. Updates are applied offline
once the episode is over; since no state can occur twice in one game this
gives the same result as updating after every move.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

import numpy as np

from .board import PLAYER_O, PLAYERS, Board
from .policy import epsilon_greedy
from .rewards import RewardFn
from .symmetry import canonical_key
from .table import ActionValueTable

logger = logging.getLogger(__name__)

GREEDY = -1.0


class QLearningAgent:
    def __init__(
        self,
        player: str = PLAYER_O,
        epsilon: float = 0.1,
        discount: float = 1.0,
        alpha: float = 0.1,
        default_q: float = 0.0,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        if alpha < 0:
            raise ValueError(f"alpha must be >= 0, got {alpha}")
        self.player = player
        self.epsilon = epsilon
        self.discount = discount
        self.alpha = alpha
        self.table = ActionValueTable(default_q)
        self.rng = rng if rng is not None else np.random.default_rng()

    def policy(self, board: Board, horizon: Optional[int] = None) -> int:
        return epsilon_greedy(board, self.player, self.table, self.epsilon, self.rng, horizon)

    @contextmanager
    def greedy(self) -> Iterator[None]:
        """Disable exploration for the duration of the block."""
        stored = self.epsilon
        self.epsilon = GREEDY
        try:
            yield
        finally:
            self.epsilon = stored

    def _value(self, state, action: int) -> tuple:
        key = canonical_key(state, action, self.table)
        return key, self.table.get(key)

    def update_q(self, board: Board, token: str, reward_fn: RewardFn) -> None:
        """Apply TD updates along the plies `token` played this episode."""
        plies = board.plies_of(token)
        if not plies:
            return
        history = board.history
        actions = board.actions

        for i in plies[:-1]:
            reward = reward_fn(board, token, i + 2)
            old_key, old_q = self._value(history[i], actions[i])
            future_action = self.policy(board, i + 2)
            future_key, future_q = self._value(history[i + 2], future_action)
            new_q = old_q + self.alpha * (reward + self.discount * future_q - old_q)
            self.table.set(old_key, new_q)
            logger.debug("player: %s, oldKey: %s, oldQ: %s, futureKey: %s, futureQ: %s, "
                         "reward: %s, newQ: %s", token, old_key, old_q, future_key, future_q,
                         reward, new_q)

        end = plies[-1]
        terminal_reward = reward_fn(board, token, None)
        terminal_key, terminal_q = self._value(history[end], actions[end])
        new_q = terminal_q + self.alpha * (terminal_reward - terminal_q)
        self.table.set(terminal_key, new_q)
        logger.debug("player: %s, terminalKey: %s, terminalQ: %s, terminalReward: %s, newQ: %s",
                     token, terminal_key, terminal_q, terminal_reward, new_q)

    def learn(self, board: Board, reward_fn: RewardFn) -> None:
        if not board.terminal_outcome():
            return
        with self.greedy():
            for token in PLAYERS:
                self.update_q(board, token, reward_fn)
