"""
Symmetry handling and table keys for (state, action) pairs.
Teaching notes:
- There are 8 symmetries of the square (4 rotations, each optionally after a
  mirror across the vertical axis). Symmetric positions deserve one learned value.
- Instead of normalizing every position to a canonical form, a key is resolved
  lazily: the first symmetric variant already present in the table wins, and a
  brand-new position keeps its literal key. Which representative a class ends up
  with therefore depends on write order.
- Actions transform with the board; we track them with a one-hot marker board.
"""
from __future__ import annotations

import logging
from typing import Container, Dict, List, Sequence, Tuple

from .board import Board

logger = logging.getLogger(__name__)

_ROT90 = (6, 3, 0, 7, 4, 1, 8, 5, 2)
_MIRROR = (2, 1, 0, 5, 4, 3, 8, 7, 6)

ALL_SYMS = ['id', 'rot90', 'rot180', 'rot270',
            'mirror', 'mirror_rot90', 'mirror_rot180', 'mirror_rot270']

# Lookup order for an existing key: rotations first, then the mirrored rotations.
# The bare mirror comes last so that every group element is reachable.
SEARCH_ORDER = ['rot90', 'rot180', 'rot270',
                'mirror_rot90', 'mirror_rot180', 'mirror_rot270', 'mirror']


def literal_hash(state: Sequence[str], action: int) -> str:
    """Cell tokens in raster order followed by the action index, e.g. 'X___O____6'."""
    return ''.join(state) + str(action)


def rot90(cells: Sequence, n: int = 1) -> tuple:
    """Rotate a 3x3 board clockwise by n * 90 degrees."""
    out = tuple(cells)
    for _ in range(n % 4):
        out = tuple(out[i] for i in _ROT90)
    return out


def mirror(cells: Sequence) -> tuple:
    """Reflect across the vertical axis (column c -> 2 - c)."""
    return tuple(cells[i] for i in _MIRROR)


def transform_board(cells: Sequence, kind: str) -> tuple:
    if kind == 'id':
        return tuple(cells)
    if kind.startswith('rot'):
        return rot90(cells, int(kind[3:]) // 90)
    if kind == 'mirror':
        return mirror(cells)
    if kind.startswith('mirror_rot'):
        return rot90(mirror(cells), int(kind[len('mirror_rot'):]) // 90)
    raise ValueError(f"Unknown transformation: {kind}")


def sym_index_map(kind: str) -> List[int]:
    mapping = []
    for i in range(9):
        moved = transform_board(Board.to_action_array(i), kind)
        mapping.append(Board.to_action_index(moved))
    return mapping


SYMM_INDEX_MAPS: Dict[str, List[int]] = {k: sym_index_map(k) for k in ALL_SYMS}


def apply_action_transform(action: int, kind: str) -> int:
    return SYMM_INDEX_MAPS[kind][action]


def orbit(state: Sequence[str], action: int) -> List[Tuple[str, str]]:
    """(symmetry name, literal key) for all 8 images of a state/action pair."""
    return [(k, literal_hash(transform_board(state, k), apply_action_transform(action, k)))
            for k in ALL_SYMS]


def canonical_key(state: Sequence[str], action: int, known: Container[str]) -> str:
    """Table key for a state/action pair.

    Returns the first symmetric variant already in `known` (in SEARCH_ORDER),
    otherwise the literal key of the pair itself.
    """
    action_array = Board.to_action_array(action)
    for kind in SEARCH_ORDER:
        index = Board.to_action_index(transform_board(action_array, kind))
        key = literal_hash(transform_board(state, kind), index)
        if key in known:
            logger.debug("%s MATCHES %s (%s)", literal_hash(state, action), key, kind)
            return key
    return literal_hash(state, action)
