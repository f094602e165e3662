"""
Uniform random sources for reservoir priorities.

A source must return values strictly inside (0, 1): the reservoir divides by the
draw, so 0 is excluded here rather than handled downstream.
"""

import random
from typing import Optional


class RandomSource:
    def sample_open01(self) -> float:
        raise NotImplementedError


class SeededRandom(RandomSource):
    """
    Private random.Random per reservoir.
    seed=None seeds from OS entropy; an int makes the draw sequence reproducible.
    """

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._rng = random.Random(seed)

    def sample_open01(self) -> float:
        # random() is [0, 1); redraw the (rare) exact zero
        u = self._rng.random()
        while u == 0.0:
            u = self._rng.random()
        return u
