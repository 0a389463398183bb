"""Collaborator contracts of the alignment engine."""

from .pose_scorer import PoseScorer
from .starting_assembly_generator import StartingAssemblyGenerator

__all__ = ["PoseScorer", "StartingAssemblyGenerator"]
