"""Scoring, register building, local search and orchestration services."""

from .assembly_scorer import AssemblyScorer
from .local_search import LocalSearchOptimizer, LocalSearchOutcome, TerminationReason
from .multi_aligner import MultiAligner
from .pose_register_builder import PoseRegisterBuilder

__all__ = [
    "AssemblyScorer",
    "LocalSearchOptimizer",
    "LocalSearchOutcome",
    "TerminationReason",
    "MultiAligner",
    "PoseRegisterBuilder",
]
