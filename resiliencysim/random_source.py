"""Deterministic random source shared by every stochastic draw of a trial.

A single RandomSource is created per trial and handed to every component
that samples randomness (arrival gaps, request keys, latency draws and
availability coin-flips). Two trials built with the same seed therefore
produce the same event sequence and the same outcomes.
"""

from __future__ import annotations

import logging
import random

logger = logging.getLogger(__name__)

DEFAULT_SEED = 42


class RandomSource:
    """Seeded uniform/normal/exponential draws.

    Args:
        seed: Seed for the underlying generator.
    """

    def __init__(self, seed: int = DEFAULT_SEED):
        self._seed = seed
        self._rng = random.Random(seed)

    @property
    def seed(self) -> int:
        return self._seed

    def reseed(self, seed: int | None = None) -> None:
        """Restart the sequence, optionally with a new seed."""
        if seed is not None:
            self._seed = seed
        self._rng.seed(self._seed)
        logger.debug("RandomSource reseeded with %d", self._seed)

    def discard(self, count: int) -> None:
        """Throw away the next ``count`` uniform draws."""
        for _ in range(count):
            self._rng.random()

    def random(self) -> float:
        """Uniform draw in [0, 1)."""
        return self._rng.random()

    def uniform(self, low: float, high: float) -> float:
        return self._rng.uniform(low, high)

    def normal(self, mean: float, std: float) -> float:
        """Gaussian draw; ``std`` of zero returns ``mean``."""
        if std <= 0:
            return mean
        return self._rng.normalvariate(mean, std)

    def exponential(self, rate: float) -> float:
        """Exponential draw with the given rate (mean ``1 / rate``)."""
        return self._rng.expovariate(rate)
