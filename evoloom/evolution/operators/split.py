from __future__ import annotations

import math
from typing import Sequence, TypeVar

from loguru import logger

from evoloom.evolution.operators.base import EvolutionaryOperator, apply_checked
from evoloom.exceptions import ConfigurationError
from evoloom.utils.numbers import ConstantGenerator, NumberGenerator
from evoloom.utils.rng import RandomSource

T = TypeVar("T")


class SplitEvolution(EvolutionaryOperator[T]):
    """Splits the population into two streams evolved by different operators.

    A share of the candidates (``weight``) goes to ``operator1`` and the rest
    to ``operator2``; the outputs are concatenated in that order. Which
    candidates go where is decided by a random permutation, so ordering
    artifacts of earlier operators do not leak into the split. Deeper schemes
    are built by nesting SplitEvolution and EvolutionPipeline operators.
    """

    def __init__(
        self,
        operator1: EvolutionaryOperator[T],
        operator2: EvolutionaryOperator[T],
        weight: float | NumberGenerator,
    ):
        if isinstance(weight, NumberGenerator):
            # Trusted to stay within (0, 1); not re-checked per call.
            self.weight = weight
        else:
            if not 0 < weight < 1:
                raise ConfigurationError(
                    f"Split ratio must be greater than 0 and less than 1, got {weight}"
                )
            self.weight = ConstantGenerator(weight)
        self.operator1 = operator1
        self.operator2 = operator2

    def apply(self, candidates: Sequence[T], rng: RandomSource) -> list[T]:
        ratio = self.weight.next_value(rng)
        total = len(candidates)
        size = int(math.floor(ratio * total + 0.5))

        order = rng.permutation(total)
        shuffled = [candidates[i] for i in order]

        logger.debug(
            "[SplitEvolution] ratio={:.3f} | {} -> {}/{}",
            ratio,
            total,
            size,
            total - size,
        )
        result = apply_checked(self.operator1, shuffled[:size], rng)
        result.extend(apply_checked(self.operator2, shuffled[size:], rng))
        return result
