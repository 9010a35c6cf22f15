from __future__ import annotations

"""Concurrent fitness evaluation.

`EvaluationCoordinator` scores every candidate of a generation on a thread
pool and hands back a ranked, immutable population. Workers only see the
evaluator and a frozen snapshot of the generation; they never touch the run's
random source.
"""

import asyncio
from concurrent.futures import ThreadPoolExecutor
import math
import os
import time
from typing import Generic, Sequence, TypeVar

from loguru import logger

from evoloom.evolution.fitness import FitnessEvaluator
from evoloom.evolution.models import EvaluatedCandidate, Population, rank_population
from evoloom.exceptions import EvaluationError

__all__ = ["EvaluationCoordinator"]

T = TypeVar("T")


class EvaluationCoordinator(Generic[T]):
    """Runs a FitnessEvaluator over whole generations.

    Use as a context manager so the worker pool is shut down with the run.
    ``max_workers=1`` evaluates inline on the calling thread.
    """

    def __init__(self, evaluator: FitnessEvaluator[T], max_workers: int | None = None):
        if max_workers is not None and max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")
        self.evaluator = evaluator
        self.max_workers = max_workers or os.cpu_count() or 1
        self._executor: ThreadPoolExecutor | None = None

    @property
    def natural(self) -> bool:
        return self.evaluator.is_natural()

    # ------------------------------------------------------------------
    # Executor management
    # ------------------------------------------------------------------

    def _get_executor(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self.max_workers,
                thread_name_prefix="evoloom-eval",
            )
            logger.debug(
                "[EvaluationCoordinator] Created ThreadPoolExecutor with {} workers",
                self.max_workers,
            )
        return self._executor

    def shutdown(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True, cancel_futures=True)
            self._executor = None

    def __enter__(self) -> "EvaluationCoordinator[T]":
        return self

    def __exit__(self, *exc_info) -> None:
        self.shutdown()

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    async def evaluate(self, candidates: Sequence[T]) -> Population:
        """Score every candidate and return them ranked best-first."""
        snapshot = tuple(candidates)
        t0 = time.monotonic()

        if self.max_workers == 1:
            scores = [
                self._score(i, candidate, snapshot)
                for i, candidate in enumerate(snapshot)
            ]
        else:
            loop = asyncio.get_running_loop()
            executor = self._get_executor()
            futures = [
                loop.run_in_executor(executor, self._score, i, candidate, snapshot)
                for i, candidate in enumerate(snapshot)
            ]
            try:
                scores = await asyncio.gather(*futures)
            except BaseException:
                # Drops queued evaluations; calls already running finish on their own.
                for future in futures:
                    future.cancel()
                raise

        logger.debug(
            "[EvaluationCoordinator] Evaluated {} candidate(s) in {:.3f}s",
            len(snapshot),
            time.monotonic() - t0,
        )
        evaluated = [
            EvaluatedCandidate(candidate, fitness)
            for candidate, fitness in zip(snapshot, scores)
        ]
        return rank_population(evaluated, self.natural)

    def _score(self, index: int, candidate: T, snapshot: tuple[T, ...]) -> float:
        try:
            fitness = float(self.evaluator.evaluate(candidate, snapshot))
        except Exception as exc:
            raise EvaluationError(
                f"Evaluation failed for candidate #{index}: {exc}",
                candidate_index=index,
            ) from exc

        if not math.isfinite(fitness):
            raise EvaluationError(
                f"Evaluator returned non-finite fitness {fitness} for candidate #{index}",
                candidate_index=index,
            )
        return fitness
