"""Domain models, interfaces and implementations."""

from .models import (
    Ligand,
    LigandAlignmentAssembly,
    LigandPair,
    MultiAlignerResult,
    PairwiseAlignment,
    PosePair,
    PoseRegister,
    PoseRegisterCollection,
    UniquePoseID,
)
from .interfaces import PoseScorer, StartingAssemblyGenerator

__all__ = [
    "Ligand",
    "LigandAlignmentAssembly",
    "LigandPair",
    "MultiAlignerResult",
    "PairwiseAlignment",
    "PosePair",
    "PoseRegister",
    "PoseRegisterCollection",
    "UniquePoseID",
    "PoseScorer",
    "StartingAssemblyGenerator",
]
