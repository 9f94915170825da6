"""Generation pipeline components."""
from synthlead.agents.similarity import SimilarityEngine, similarity
from synthlead.agents.selector import StyleSelector
from synthlead.agents.generator import ContentGenerator
from synthlead.agents.gate import UniquenessGate
from synthlead.agents.factory import RecordFactory
from synthlead.agents.orchestrator import Orchestrator

__all__ = [
    "SimilarityEngine",
    "similarity",
    "StyleSelector",
    "ContentGenerator",
    "UniquenessGate",
    "RecordFactory",
    "Orchestrator",
]
