from evoloom.evolution.fitness import FitnessEvaluator
from evoloom.evolution.models import EvaluatedCandidate, Population, rank_population
