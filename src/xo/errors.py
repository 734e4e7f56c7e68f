"""
Error types raised by the board and the agents.

All of them signal driver/programmer mistakes and are raised immediately;
nothing in the core retries or recovers from them.
"""


class XOError(Exception):
    """Base class for all xo errors."""


class InvalidAction(XOError, ValueError):
    """Illegal move index, occupied cell, move after game end, or no move left."""


class MisalignedPlayer(XOError, RuntimeError):
    """An agent was asked to move for the live state on the other player's turn."""


class InvalidChar(XOError, ValueError):
    """Bad cell token, e.g. an empty marker that is not a single character."""


class InvalidBoardSize(XOError, ValueError):
    """A board was built from something other than 9 cells."""
