from __future__ import annotations

from abc import ABC, abstractmethod
from typing import MutableSequence, Optional, TypeVar

import numpy as np

T = TypeVar("T")


class Randomizer(ABC):
    """Randomness capability injected into a game.

    Every draw a game makes (dice, board layout, turn order, deck order,
    robber steals) goes through one instance so that a seed replays a match.
    """

    @abstractmethod
    def uniform_int(self, minimum: int, maximum: int) -> int:
        """Return an integer in ``[minimum, maximum]``, both inclusive."""

    def shuffle(self, items: MutableSequence[T]) -> None:
        # Fisher-Yates, in place.
        remaining = len(items)
        while remaining > 1:
            swap_index = self.uniform_int(0, remaining - 1)
            remaining -= 1
            items[remaining], items[swap_index] = items[swap_index], items[remaining]


class SeededRandom(Randomizer):
    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._rng = np.random.default_rng(seed)

    def uniform_int(self, minimum: int, maximum: int) -> int:
        if maximum < minimum:
            raise ValueError(f"Empty range [{minimum}, {maximum}]")
        return int(self._rng.integers(minimum, maximum, endpoint=True))
