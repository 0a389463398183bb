"""Concrete collaborators for the alignment engine."""

from .greedy_starting_assembly_generator import GreedyStartingAssemblyGenerator
from .precomputed_scorer import PrecomputedScorer
from .shape_tanimoto_scorer import ShapeTanimotoScorer

__all__ = [
    "GreedyStartingAssemblyGenerator",
    "PrecomputedScorer",
    "ShapeTanimotoScorer",
]
