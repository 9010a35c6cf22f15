from __future__ import annotations

from typing import Sequence

from evoloom.evolution.operators.base import EvolutionaryOperator
from evoloom.utils.rng import RandomSource


class StringMutation(EvolutionaryOperator[str]):
    """Replaces each character, with a fixed probability, by a random alphabet character."""

    def __init__(self, alphabet: str, probability: float):
        if not alphabet:
            raise ValueError("alphabet cannot be empty")
        if not 0 <= probability <= 1:
            raise ValueError(f"probability must be in [0, 1], got {probability}")
        self.alphabet = alphabet
        self.probability = probability

    def apply(self, candidates: Sequence[str], rng: RandomSource) -> list[str]:
        return [self._mutate(candidate, rng) for candidate in candidates]

    def _mutate(self, candidate: str, rng: RandomSource) -> str:
        mask = rng.random(len(candidate)) < self.probability
        if not mask.any():
            return candidate
        replacements = rng.integers(0, len(self.alphabet), size=len(candidate))
        return "".join(
            self.alphabet[r] if hit else ch
            for ch, hit, r in zip(candidate, mask, replacements)
        )


class StringCrossover(EvolutionaryOperator[str]):
    """N-point crossover between pairs of parent strings.

    Parents are shuffled and paired off; each pair produces two children.
    With an odd number of parents the last one is copied through unchanged.
    """

    def __init__(self, crossover_points: int = 1, probability: float = 1.0):
        if crossover_points < 1:
            raise ValueError(f"crossover_points must be at least 1, got {crossover_points}")
        if not 0 <= probability <= 1:
            raise ValueError(f"probability must be in [0, 1], got {probability}")
        self.crossover_points = crossover_points
        self.probability = probability

    def apply(self, candidates: Sequence[str], rng: RandomSource) -> list[str]:
        shuffled = [candidates[i] for i in rng.permutation(len(candidates))]
        offspring: list[str] = []
        for i in range(0, len(shuffled) - 1, 2):
            parent1, parent2 = shuffled[i], shuffled[i + 1]
            if rng.random() < self.probability:
                offspring.extend(self._mate(parent1, parent2, rng))
            else:
                offspring.extend((parent1, parent2))
        if len(shuffled) % 2:
            offspring.append(shuffled[-1])
        return offspring

    def _mate(self, parent1: str, parent2: str, rng: RandomSource) -> tuple[str, str]:
        length = min(len(parent1), len(parent2))
        if length < 2:
            return parent1, parent2

        child1, child2 = parent1, parent2
        for _ in range(self.crossover_points):
            cut = int(rng.integers(1, length))
            child1, child2 = child1[:cut] + child2[cut:], child2[:cut] + child1[cut:]
        return child1, child2
