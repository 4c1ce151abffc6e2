"""Owned pseudo-random source shared by every generator in one engine run."""
from __future__ import annotations

import math

import numpy as np


class RandomSource:
    """
    Thin wrapper over ``np.random.Generator``.

    One instance is threaded through the regime process, every series generator
    and the event scan, so a seed pins down the whole draw.
    """

    def __init__(self, seed: int | None = None, rng: np.random.Generator | None = None):
        self.seed = seed
        self._rng = rng if rng is not None else np.random.default_rng(seed)

    def random(self) -> float:
        """Uniform draw in [0, 1)."""
        return float(self._rng.random())

    def uniform(self, low: float = 0.0, high: float = 1.0) -> float:
        """Uniform draw in [low, high)."""
        return low + (high - low) * self.random()

    def gaussian(self) -> float:
        """Standard normal draw via the Box-Muller transform."""
        u = 0.0
        v = 0.0
        # log(0) guard
        while u == 0.0:
            u = self.random()
        while v == 0.0:
            v = self.random()
        return math.sqrt(-2.0 * math.log(u)) * math.cos(2.0 * math.pi * v)
