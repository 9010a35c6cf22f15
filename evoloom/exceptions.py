from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from evoloom.evolution.engine.statistics import GenerationStatistics


class EvoLoomError(Exception):
    """Base for all evoloom exceptions."""

    pass


class ConfigurationError(EvoLoomError):
    """Invalid run parameters, detected before any generation runs."""

    pass


class EvolutionError(EvoLoomError):
    """Failure that terminates a run after it has started.

    Carries the generation being processed and the statistics of the last
    generation that completed, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        generation: int | None = None,
        last_statistics: GenerationStatistics | None = None,
    ):
        super().__init__(message)
        self.generation = generation
        self.last_statistics = last_statistics


class EvaluationError(EvolutionError):
    """A fitness evaluation call failed or returned a non-finite score."""

    def __init__(self, message: str, *, candidate_index: int | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.candidate_index = candidate_index


class OperatorError(EvolutionError):
    """An evolutionary operator broke its count-preservation contract."""

    pass


class ObserverError(EvoLoomError):
    """An observer callback raised; reported but never aborts the run."""

    def __init__(self, message: str, *, observer: Any = None, generation: int | None = None):
        super().__init__(message)
        self.observer = observer
        self.generation = generation
