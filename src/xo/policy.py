"""
Epsilon-greedy action selection shared by all learning agents.
"""
from __future__ import annotations

from typing import List, Optional

import numpy as np

from .board import Board
from .errors import InvalidAction, MisalignedPlayer
from .symmetry import canonical_key
from .table import ActionValueTable

TIE_TOLERANCE = 1.0e-4


def check_turn(board: Board, player: str, horizon: Optional[int]) -> None:
    if horizon is None and player != board.current_player:
        raise MisalignedPlayer(f"Agent should be player {player} but it is"
                               f" player {board.current_player}'s turn.")


def legal_or_raise(board: Board, horizon: Optional[int]) -> List[int]:
    actions = board.legal_actions(horizon)
    if not actions:
        raise InvalidAction("There is nowhere left to make a move!")
    return actions


def action_values(board: Board, table: ActionValueTable, actions: List[int],
                  horizon: Optional[int] = None) -> List[float]:
    state = board.state_at(horizon)
    return [table.get(canonical_key(state, a, table)) for a in actions]


def epsilon_greedy(
    board: Board,
    player: str,
    table: ActionValueTable,
    epsilon: float,
    rng: np.random.Generator,
    horizon: Optional[int] = None,
) -> int:
    """Pick an action for `player` at the live state or at history[horizon].

    With probability epsilon a uniformly random legal action is returned;
    otherwise a random one among those valued within TIE_TOLERANCE of the best.
    """
    check_turn(board, player, horizon)
    actions = legal_or_raise(board, horizon)
    if rng.random() < epsilon:
        return int(rng.choice(actions))
    values = action_values(board, table, actions, horizon)
    best = max(values)
    best_actions = [a for a, v in zip(actions, values) if best - v < TIE_TOLERANCE]
    return int(rng.choice(best_actions))
