"""
Human-vs-agent session: the driver that feeds the learning core.

One GameSession owns the live board, the agent and the reward function; the
agent learns after every exchange of moves and once more when it ends a game.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional

import numpy as np

from .agents import Agent
from .board import DRAW, PLAYER_O, PLAYER_X, PLAYERS, Board, other_player
from .config import coerce_fraction, coerce_rate
from .errors import MisalignedPlayer
from .rewards import RewardFn, terminal_only

logger = logging.getLogger(__name__)


@dataclass
class Tallies:
    episodes: int = 0
    wins: int = 0
    losses: int = 0
    draws: int = 0

    def as_dict(self) -> Dict[str, int]:
        return {"episodes": self.episodes, "wins": self.wins,
                "losses": self.losses, "draws": self.draws}


class GameSession:
    """Control flow of a series of episodes between a human and an agent.

    Tallies are from the human's point of view.
    """

    def __init__(
        self,
        agent: Agent,
        reward_fn: RewardFn = terminal_only,
        human: str = PLAYER_X,
        board: Optional[Board] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        if human not in PLAYERS:
            raise ValueError(f"human must be one of {PLAYERS}, got {human!r}")
        self.board = board if board is not None else Board()
        self.agent = agent
        self.reward_fn = reward_fn
        self.human = human
        self.agent.player = other_player(human)
        self.rng = rng if rng is not None else np.random.default_rng()
        self.tallies = Tallies()
        if not self.outcome and self.board.current_player == self.agent.player:
            self.computer_move()

    @property
    def outcome(self) -> str:
        return self.board.terminal_outcome()

    def computer_move(self) -> int:
        index = self.agent.policy(self.board)
        self.board.apply_move(index)
        logger.debug("agent %s played %d", self.agent.player, index)
        return index

    def human_move(self, index: int) -> str:
        """Play the human's move, then the agent's reply; return the outcome so far."""
        if self.board.current_player != self.human:
            raise MisalignedPlayer(f"Human plays {self.human} but it is"
                                   f" player {self.board.current_player}'s turn.")
        self.board.apply_move(index)
        if len(self.board.actions) > 1:
            # the agent needs an exchange of moves before there is anything to learn
            self.agent.learn(self.board, self.reward_fn)
        outcome = self.outcome
        if not outcome:
            self.computer_move()
            outcome = self.outcome
            if outcome:
                self.agent.learn(self.board, self.reward_fn)
        if outcome:
            self._record(outcome)
        return outcome

    def _record(self, outcome: str) -> None:
        self.tallies.episodes += 1
        if outcome == DRAW:
            self.tallies.draws += 1
        elif outcome == self.human:
            self.tallies.wins += 1
        else:
            self.tallies.losses += 1
        logger.info("episode %d finished: %s", self.tallies.episodes,
                    "draw" if outcome == DRAW else f"{outcome} wins")

    def new_episode(self, human: Optional[str] = None) -> None:
        """Reset the board; pick sides (fair coin unless given); agent opens as X."""
        if human is None:
            human = PLAYER_O if self.rng.random() < 0.5 else PLAYER_X
        if human not in PLAYERS:
            raise ValueError(f"human must be one of {PLAYERS}, got {human!r}")
        self.board.reset(PLAYER_X)
        self.human = human
        self.agent.player = other_player(human)
        logger.debug("new episode: human=%s agent=%s", self.human, self.agent.player)
        if self.agent.player == PLAYER_X:
            self.computer_move()

    def update_hyperparameters(
        self,
        epsilon: object = None,
        discount: object = None,
        alpha: object = None,
    ) -> Dict[str, float]:
        """Apply raw (possibly string) values; invalid ones keep the current value."""
        applied: Dict[str, float] = {}
        for name, raw, coerce in (("epsilon", epsilon, coerce_fraction),
                                  ("discount", discount, coerce_fraction),
                                  ("alpha", alpha, coerce_rate)):
            if raw is None:
                continue
            if not hasattr(self.agent, name):
                logger.warning("%s agent has no %s", type(self.agent).__name__, name)
                continue
            value = coerce(raw, getattr(self.agent, name), name)
            setattr(self.agent, name, value)
            applied[name] = value
        return applied
