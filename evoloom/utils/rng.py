"""Seeded random source shared by every stochastic component of a run."""

from __future__ import annotations

import numpy as np

__all__ = ["RandomSource", "create_random_source"]

RandomSource = np.random.Generator


def create_random_source(seed: int | RandomSource | None = None) -> RandomSource:
    """Return a generator for *seed*; an existing generator is passed through."""
    if isinstance(seed, np.random.Generator):
        return seed
    return np.random.default_rng(seed)
