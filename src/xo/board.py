"""
Board model: state, move history, legal actions and terminal outcome.
Teaching notes:
- State is a tuple of 9 cells in raster order: 'X', 'O' or the empty marker ('_').
- X always moves first in a fresh episode unless the driver says otherwise.
- History keeps an immutable snapshot per ply, so learners can look back at
  any earlier position through a `horizon` index.
"""
from __future__ import annotations

from numbers import Integral
from typing import Iterable, List, Optional, Sequence, Tuple

from .errors import InvalidAction, InvalidBoardSize, InvalidChar

PLAYER_X = 'X'
PLAYER_O = 'O'
PLAYERS = (PLAYER_X, PLAYER_O)
DRAW = 'draw'
NO_OUTCOME = ''
BOARD_SIZE = 9

WIN_PATTERNS = [
    [0, 1, 2], [3, 4, 5], [6, 7, 8],
    [0, 3, 6], [1, 4, 7], [2, 5, 8],
    [0, 4, 8], [2, 4, 6]
]

State = Tuple[str, ...]


def other_player(player: str) -> str:
    return PLAYER_O if player == PLAYER_X else PLAYER_X


def line_winners(cells: Sequence[str]) -> set:
    """Return the set of tokens owning at least one full line."""
    wins = set()
    for a, b, c in WIN_PATTERNS:
        v = cells[a]
        if v in PLAYERS and v == cells[b] and v == cells[c]:
            wins.add(v)
    return wins


def outcome_of(cells: Sequence[str], empty: str = '_') -> str:
    wins = line_winners(cells)
    if len(wins) == 1:
        return next(iter(wins))
    if wins:
        # both tokens own a line; only reachable through Board.from_cells
        return DRAW
    if empty not in cells:
        return DRAW
    return NO_OUTCOME


class Board:
    """A single tic-tac-toe game with its full state/action history."""

    def __init__(self, empty: str = '_') -> None:
        if not isinstance(empty, str) or len(empty) != 1:
            raise InvalidChar(f"Empty marker must be a single character, got {empty!r}.")
        if empty in PLAYERS:
            raise InvalidChar(f"Empty marker {empty!r} collides with a player token.")
        self.empty = empty
        self.reset()

    @classmethod
    def from_cells(cls, cells: Iterable[str], empty: str = '_') -> 'Board':
        """Start a board at an arbitrary position (history begins there)."""
        board = cls(empty)
        cells = tuple(cells)
        if len(cells) != BOARD_SIZE:
            raise InvalidBoardSize(f"A board has {BOARD_SIZE} cells but {len(cells)} were given.")
        for c in cells:
            if c not in PLAYERS and c != empty:
                raise InvalidChar(f"Cell {c!r} is neither {PLAYER_X!r}, {PLAYER_O!r} nor {empty!r}.")
        board._state = list(cells)
        board._history = [cells]
        x, o = cells.count(PLAYER_X), cells.count(PLAYER_O)
        board._current = PLAYER_X if x == o else PLAYER_O
        return board

    # -- geometry helpers -------------------------------------------------

    @staticmethod
    def unroll(row: int, col: int) -> int:
        return row * 3 + col

    @staticmethod
    def roll(index: int) -> Tuple[int, int]:
        return index // 3, index % 3

    @staticmethod
    def to_action_array(index: int, marker: str = 'A', empty: Optional[str] = None) -> tuple:
        """One-hot marker board for an action index."""
        arr = [empty] * BOARD_SIZE
        arr[index] = marker
        return tuple(arr)

    @staticmethod
    def to_action_index(action_array: Sequence, empty: Optional[str] = None) -> Optional[int]:
        for i, v in enumerate(action_array):
            if v != empty:
                return i
        return None

    # -- state ------------------------------------------------------------

    @property
    def state(self) -> State:
        return tuple(self._state)

    @property
    def history(self) -> List[State]:
        return list(self._history)

    @property
    def actions(self) -> List[int]:
        return list(self._actions)

    @property
    def current_player(self) -> str:
        return self._current

    def state_at(self, horizon: Optional[int] = None) -> State:
        if horizon is None:
            return self.state
        return self._history[horizon]

    def mover(self, ply: int) -> str:
        """Token that played action number `ply`."""
        return self._history[ply + 1][self._actions[ply]]

    def plies_of(self, player: str) -> List[int]:
        return [i for i in range(len(self._actions)) if self.mover(i) == player]

    # -- rules ------------------------------------------------------------

    def legal_actions(self, horizon: Optional[int] = None) -> List[int]:
        cells = self.state_at(horizon)
        return [i for i, v in enumerate(cells) if v == self.empty]

    def terminal_outcome(self, horizon: Optional[int] = None) -> str:
        return outcome_of(self.state_at(horizon), self.empty)

    def apply_move(self, index: int) -> None:
        if isinstance(index, bool) or not isinstance(index, Integral) or not 0 <= index < BOARD_SIZE:
            raise InvalidAction(f"Position {index!r} must be in [0, {BOARD_SIZE}).")
        index = int(index)
        if self._state[index] != self.empty:
            raise InvalidAction(f"Invalid move! Position {index} is already taken.")
        if self.terminal_outcome():
            raise InvalidAction("Game is already complete!")
        self._state[index] = self._current
        self._current = other_player(self._current)
        self._actions.append(index)
        self._history.append(tuple(self._state))

    def reset(self, starting_player: str = PLAYER_X) -> None:
        if starting_player not in PLAYERS:
            raise InvalidChar(f"Starting player must be one of {PLAYERS}, got {starting_player!r}.")
        self._state = [self.empty] * BOARD_SIZE
        self._history = [tuple(self._state)]
        self._actions = []
        self._current = starting_player

    # -- display ----------------------------------------------------------

    def render(self, horizon: Optional[int] = None) -> str:
        cells = self.state_at(horizon)
        rows = []
        for r in range(3):
            row = [' ' if cells[self.unroll(r, c)] == self.empty else cells[self.unroll(r, c)]
                   for c in range(3)]
            rows.append('|'.join(row) + '\n')
        return '-----\n'.join(rows)

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"Board({''.join(self._state)!r}, to_move={self._current!r})"
