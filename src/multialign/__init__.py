"""Multi ligand alignment by pose assembly optimization."""

from .config import AlignerConfig, DeficitPeerMode
from .domain.implementations import (
    GreedyStartingAssemblyGenerator,
    PrecomputedScorer,
    ShapeTanimotoScorer,
)
from .domain.models import (
    Ligand,
    LigandAlignmentAssembly,
    LigandPair,
    MultiAlignerResult,
    PairwiseAlignment,
    PosePair,
    PoseRegister,
    PoseRegisterCollection,
    UniquePoseID,
    ligands_from_molecules,
)
from .exceptions import (
    ConfigurationError,
    DegenerateInputError,
    MissingScoreError,
    MultiAlignError,
)
from .services import AssemblyScorer, LocalSearchOptimizer, MultiAligner, PoseRegisterBuilder

__version__ = "0.1.0"

__all__ = [
    "AlignerConfig",
    "DeficitPeerMode",
    "GreedyStartingAssemblyGenerator",
    "PrecomputedScorer",
    "ShapeTanimotoScorer",
    "Ligand",
    "LigandAlignmentAssembly",
    "LigandPair",
    "MultiAlignerResult",
    "PairwiseAlignment",
    "PosePair",
    "PoseRegister",
    "PoseRegisterCollection",
    "UniquePoseID",
    "ligands_from_molecules",
    "ConfigurationError",
    "DegenerateInputError",
    "MissingScoreError",
    "MultiAlignError",
    "AssemblyScorer",
    "LocalSearchOptimizer",
    "MultiAligner",
    "PoseRegisterBuilder",
]
