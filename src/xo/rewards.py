"""
Reward functions handed to agents by the driver.

A reward function has the signature ``reward(board, player, horizon) -> float``
and evaluates the position at ``board.history[horizon]`` (latest state when
horizon is None) from ``player``'s point of view.
"""
from __future__ import annotations

from typing import Callable, Optional

from .board import DRAW, Board

RewardFn = Callable[[Board, str, Optional[int]], float]


def terminal_only(board: Board, player: str, horizon: Optional[int] = None) -> float:
    """+1 for a win, -1 for a loss, 0 for a draw or an unfinished game."""
    outcome = board.terminal_outcome(horizon)
    if outcome == player:
        return 1.0
    if outcome == DRAW or not outcome:
        return 0.0
    return -1.0
