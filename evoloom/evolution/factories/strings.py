from __future__ import annotations

from evoloom.evolution.factories.base import CandidateFactory
from evoloom.utils.rng import RandomSource


class StringFactory(CandidateFactory[str]):
    """Random fixed-length strings drawn from an alphabet."""

    def __init__(self, alphabet: str, length: int):
        if not alphabet:
            raise ValueError("alphabet cannot be empty")
        if length < 0:
            raise ValueError(f"length must be non-negative, got {length}")
        self.alphabet = alphabet
        self.length = length

    def generate_random_candidate(self, rng: RandomSource) -> str:
        indices = rng.integers(0, len(self.alphabet), size=self.length)
        return "".join(self.alphabet[i] for i in indices)
