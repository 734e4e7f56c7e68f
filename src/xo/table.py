"""
Tabular action-value function keyed by symmetry-resolved state/action strings.
"""
from __future__ import annotations

import logging
from typing import Dict, Iterator, Tuple

logger = logging.getLogger(__name__)


class ActionValueTable:
    """Mean return estimate and visit count per key.

    Unseen keys read as `default` without being written; entries appear on
    the first update and are never removed.
    """

    def __init__(self, default: float = 0.0) -> None:
        self.default = default
        self._values: Dict[str, float] = {}
        self._counts: Dict[str, int] = {}

    def get(self, key: str) -> float:
        return self._values.get(key, self.default)

    def count(self, key: str) -> int:
        return self._counts.get(key, 0)

    def set(self, key: str, value: float) -> None:
        self._values[key] = value

    def record_return(self, key: str, g: float) -> float:
        """Fold one more observed return into the running mean for `key`."""
        q = self.get(key)
        n = self.count(key)
        new = q * n / (n + 1) + g / (n + 1)
        self._values[key] = new
        self._counts[key] = n + 1
        logger.debug("key: %s, q: %s, Q: %s, n: %d", key, q, new, n + 1)
        return new

    def items(self) -> Iterator[Tuple[str, float]]:
        return iter(self._values.items())

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)
