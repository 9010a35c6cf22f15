"""Shared fixtures and test doubles."""

from __future__ import annotations

import threading
from typing import Sequence

import numpy as np
from numpy.random import Generator
import pytest

from evoloom.evolution.factories import CandidateFactory
from evoloom.evolution.fitness import FitnessEvaluator
from evoloom.evolution.operators import EvolutionaryOperator


@pytest.fixture
def rng() -> Generator:
    """Seeded random generator."""

    return np.random.default_rng(seed=42)


class IntFactory(CandidateFactory[int]):
    """Random integers in [0, upper)."""

    def __init__(self, upper: int = 1000) -> None:
        self.upper = upper
        self.calls = 0

    def generate_random_candidate(self, rng: Generator) -> int:
        self.calls += 1
        return int(rng.integers(0, self.upper))


class ValueEvaluator(FitnessEvaluator[int]):
    """Fitness is the candidate's own value; records each generation it sees."""

    def __init__(self, natural: bool = True, fail_at_generation: int | None = None) -> None:
        self.natural = natural
        self.fail_at_generation = fail_at_generation
        self.generations: list[tuple[int, ...]] = []
        self._lock = threading.Lock()

    def evaluate(self, candidate: int, population: Sequence[int]) -> float:
        with self._lock:
            if not self.generations or self.generations[-1] is not population:
                self.generations.append(population)
            generation = len(self.generations) - 1
        if generation == self.fail_at_generation:
            raise RuntimeError(f"boom at generation {generation}")
        return float(candidate)

    def is_natural(self) -> bool:
        return self.natural


class ShiftOperator(EvolutionaryOperator[int]):
    """Adds a random positive offset to every candidate."""

    def apply(self, candidates: Sequence[int], rng: Generator) -> list[int]:
        return [c + int(rng.integers(1, 10)) for c in candidates]


class DropOneOperator(EvolutionaryOperator):
    """Violates count preservation by dropping the last candidate."""

    def apply(self, candidates, rng):
        return list(candidates)[:-1]


class TagOperator(EvolutionaryOperator[str]):
    def __init__(self, tag: str) -> None:
        self.tag = tag

    def apply(self, candidates: Sequence[str], rng: Generator) -> list[str]:
        return [c + self.tag for c in candidates]
