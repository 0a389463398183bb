"""Interface for geometric pose compatibility oracles."""

from abc import ABC, abstractmethod
from ..models.ligand import Ligand


class PoseScorer(ABC):
    """Abstract base class for scoring the compatibility of two poses."""

    @abstractmethod
    def score(self, ligand_a: Ligand, pose_a: int, ligand_b: Ligand, pose_b: int) -> float:
        """
        Score how well two poses of different ligands overlay.

        Args:
            ligand_a: First ligand
            pose_a: Pose index of the first ligand
            ligand_b: Second ligand
            pose_b: Pose index of the second ligand

        Returns:
            Symmetric compatibility score in [0, 1], higher is better

        Raises:
            MissingScoreError: If the pair cannot be scored
        """
        pass
