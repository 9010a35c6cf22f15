from evoloom.evolution.factories.base import CandidateFactory
from evoloom.evolution.factories.strings import StringFactory
