"""Greedy construction of starting assemblies from pose registers."""

import logging
from typing import Optional, Sequence

from ..interfaces.starting_assembly_generator import StartingAssemblyGenerator
from ..models.assembly import LigandAlignmentAssembly
from ..models.ligand import Ligand, UniquePoseID
from ..models.pose_register import PoseRegisterCollection

logger = logging.getLogger(__name__)


class GreedyStartingAssemblyGenerator(StartingAssemblyGenerator):
    """Places ligands one by one around a seed pose.

    Ligands are visited in id order. Each gets the pose with the highest
    summed register score against every ligand placed so far. When no score
    is known against any placed ligand, the seed register's ideal partner of
    the seed pose is used; failing that the ligand is left missing.
    """

    def generate(
        self,
        seed_pose: UniquePoseID,
        registers: PoseRegisterCollection,
        ligands: Sequence[Ligand],
    ) -> LigandAlignmentAssembly:
        assembly = LigandAlignmentAssembly({seed_pose.ligand_id: seed_pose.pose_id})

        for ligand in ligands:
            if ligand.ligand_id == seed_pose.ligand_id:
                continue

            pose_id = self._best_pose(ligand, assembly, registers)
            if pose_id is None:
                pose_id = self._ideal_partner(ligand, seed_pose, registers)

            if pose_id is not None:
                assembly.insert_ligand_pose(ligand.ligand_id, pose_id)

        # every ligand left without a pose counts as missing
        assembly.missing_ligands_count = len(ligands) - len(assembly)
        logger.debug(
            f"Starting assembly for seed {seed_pose}: {len(assembly)} placed, "
            f"{assembly.missing_ligands_count} missing"
        )
        return assembly

    @staticmethod
    def _best_pose(
        ligand: Ligand,
        assembly: LigandAlignmentAssembly,
        registers: PoseRegisterCollection,
    ) -> Optional[int]:
        """Pick the pose most compatible with the placed ligands."""
        best_pose, best_total = None, None
        for pose_id in ligand.pose_ids:
            candidate = UniquePoseID(ligand.ligand_id, pose_id)
            total, known = 0.0, False
            for placed_id in assembly:
                register = registers.get(ligand.ligand_id, placed_id)
                if register is None:
                    continue
                score = register.score(
                    candidate, UniquePoseID(placed_id, assembly.require_pose(placed_id))
                )
                if score is not None:
                    total += score
                    known = True
            if known and (best_total is None or total > best_total):
                best_pose, best_total = pose_id, total
        return best_pose

    @staticmethod
    def _ideal_partner(
        ligand: Ligand, seed_pose: UniquePoseID, registers: PoseRegisterCollection
    ) -> Optional[int]:
        register = registers.get(ligand.ligand_id, seed_pose.ligand_id)
        pair = register.best_partner(seed_pose) if register is not None else None
        if pair is None:
            return None
        return pair.pose_of(ligand.ligand_id).pose_id
