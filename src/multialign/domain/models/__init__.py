"""Domain model classes."""

from .ligand import Ligand, UniquePoseID, ligands_from_molecules
from .pose_pair import LigandPair, PosePair
from .pairwise_alignment import PairwiseAlignment
from .pose_register import PoseRegister, PoseRegisterCollection
from .assembly import LigandAlignmentAssembly
from .result import MultiAlignerResult

__all__ = [
    "Ligand",
    "UniquePoseID",
    "ligands_from_molecules",
    "LigandPair",
    "PosePair",
    "PairwiseAlignment",
    "PoseRegister",
    "PoseRegisterCollection",
    "LigandAlignmentAssembly",
    "MultiAlignerResult",
]
