from evoloom.evolution.selection.base import SelectionStrategy
from evoloom.evolution.selection.roulette import RouletteWheelSelection, selection_weights
from evoloom.evolution.selection.tournament import TournamentSelection, TruncationSelection
