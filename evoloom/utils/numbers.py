from __future__ import annotations

from abc import ABC, abstractmethod

from evoloom.utils.rng import RandomSource

__all__ = ["NumberGenerator", "ConstantGenerator", "UniformGenerator"]


class NumberGenerator(ABC):
    """Source of numeric values re-sampled on every call."""

    @abstractmethod
    def next_value(self, rng: RandomSource) -> float:
        """Return the next value, drawing any randomness from *rng*."""


class ConstantGenerator(NumberGenerator):
    def __init__(self, value: float):
        self.value = float(value)

    def next_value(self, rng: RandomSource) -> float:
        return self.value

    def __repr__(self) -> str:
        return f"ConstantGenerator({self.value})"


class UniformGenerator(NumberGenerator):
    """Uniformly distributed values in ``[low, high)``."""

    def __init__(self, low: float, high: float):
        if low >= high:
            raise ValueError(f"low must be less than high, got {low} >= {high}")
        self.low = float(low)
        self.high = float(high)

    def next_value(self, rng: RandomSource) -> float:
        return float(rng.uniform(self.low, self.high))

    def __repr__(self) -> str:
        return f"UniformGenerator({self.low}, {self.high})"
