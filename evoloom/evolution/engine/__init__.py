from __future__ import annotations

from evoloom.evolution.engine.config import EngineConfig
from evoloom.evolution.engine.core import EngineState, EvolutionEngine, EvolutionResult
from evoloom.evolution.engine.evaluation import EvaluationCoordinator
from evoloom.evolution.engine.observers import (
    EvolutionObserver,
    HistoryObserver,
    LoggingObserver,
)
from evoloom.evolution.engine.statistics import GenerationStatistics
from evoloom.evolution.engine.termination import (
    ElapsedTime,
    GenerationCount,
    Stagnation,
    TargetCandidate,
    TargetFitness,
    TerminationCondition,
    UserAbort,
)
