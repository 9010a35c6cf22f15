from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, Sequence, TypeVar

from loguru import logger

from evoloom.exceptions import ConfigurationError
from evoloom.utils.rng import RandomSource

T = TypeVar("T")


class CandidateFactory(ABC, Generic[T]):
    """Creates the initial population of a run."""

    @abstractmethod
    def generate_random_candidate(self, rng: RandomSource) -> T:
        """Create one random candidate using *rng*."""

    def generate_initial_population(
        self,
        size: int,
        rng: RandomSource,
        seed_candidates: Sequence[T] | None = None,
    ) -> list[T]:
        """Create *size* candidates.

        Seed candidates, if given, come first and the remaining slots are
        filled with random candidates.
        """
        seeds = list(seed_candidates or [])
        if len(seeds) > size:
            raise ConfigurationError(
                f"Too many seed candidates for population size {size}: got {len(seeds)}"
            )

        population = seeds + [
            self.generate_random_candidate(rng) for _ in range(size - len(seeds))
        ]
        logger.debug(
            "[{}] Initial population | seeded={}, random={}",
            type(self).__name__,
            len(seeds),
            size - len(seeds),
        )
        return population
