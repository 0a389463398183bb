"""Pose compatibility from RDKit shape Tanimoto distances."""

import logging
from rdkit.Chem import rdShapeHelpers

from ..interfaces.pose_scorer import PoseScorer
from ..models.ligand import Ligand
from ...exceptions import MissingScoreError


class ShapeTanimotoScorer(PoseScorer):
    """Scores two conformers as one minus their shape Tanimoto distance.

    Pose indices are positions in the molecule's conformer list; they are
    translated to RDKit conformer ids before scoring.
    """

    def __init__(self, grid_spacing: float = 0.5, vdw_scale: float = 0.8, ignore_hs: bool = True):
        """Initialize scorer.

        Args:
            grid_spacing: Grid spacing of the shape encoding in Angstroms
            vdw_scale: Scaling factor applied to van der Waals radii
            ignore_hs: Whether hydrogens are left out of the shape
        """
        self.grid_spacing = grid_spacing
        self.vdw_scale = vdw_scale
        self.ignore_hs = ignore_hs
        self.logger = logging.getLogger(__name__)

    def score(self, ligand_a: Ligand, pose_a: int, ligand_b: Ligand, pose_b: int) -> float:
        """Score two conformers by shape overlap."""
        pair = ((ligand_a.ligand_id, pose_a), (ligand_b.ligand_id, pose_b))
        if ligand_a.molecule is None or ligand_b.molecule is None:
            raise MissingScoreError(f"No molecule attached to ligands of {pair}", pair)

        try:
            conf_a = self._conformer_id(ligand_a, pose_a)
            conf_b = self._conformer_id(ligand_b, pose_b)
            distance = rdShapeHelpers.ShapeTanimotoDist(
                ligand_a.molecule,
                ligand_b.molecule,
                confId1=conf_a,
                confId2=conf_b,
                gridSpacing=self.grid_spacing,
                vdwScale=self.vdw_scale,
                ignoreHs=self.ignore_hs,
            )
        except (IndexError, RuntimeError, ValueError) as e:
            self.logger.error(f"Shape scoring failed for {pair}: {str(e)}")
            raise MissingScoreError(f"Shape scoring failed for {pair}: {str(e)}", pair) from e

        return 1.0 - distance

    @staticmethod
    def _conformer_id(ligand: Ligand, pose_id: int) -> int:
        conformers = ligand.molecule.GetConformers()
        if not 0 <= pose_id < len(conformers):
            raise IndexError(
                f"Ligand {ligand.ligand_id} has {len(conformers)} conformers, "
                f"pose {pose_id} requested"
            )
        return conformers[pose_id].GetId()

