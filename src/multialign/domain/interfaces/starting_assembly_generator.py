"""Interface for building starting assemblies for local search."""

from abc import ABC, abstractmethod
from typing import Sequence

from ..models.assembly import LigandAlignmentAssembly
from ..models.ligand import Ligand, UniquePoseID
from ..models.pose_register import PoseRegisterCollection


class StartingAssemblyGenerator(ABC):
    """Abstract base class for starting assembly strategies."""

    @abstractmethod
    def generate(
        self,
        seed_pose: UniquePoseID,
        registers: PoseRegisterCollection,
        ligands: Sequence[Ligand],
    ) -> LigandAlignmentAssembly:
        """
        Build one assembly seeded at the given pose.

        Implementations must be deterministic and must not raise when a
        ligand cannot be placed; such ligands are left unassigned and
        counted as missing.

        Args:
            seed_pose: Pose the assembly is built around
            registers: Pose registers of all ligand pairs
            ligands: All ligands to place

        Returns:
            A possibly partial LigandAlignmentAssembly
        """
        pass
