# src/multialign/services/pose_register_builder.py
"""Service building pose registers from the pairwise score matrix."""

import logging
from typing import Sequence

from ..domain.models.ligand import Ligand
from ..domain.models.pairwise_alignment import PairwiseAlignment
from ..domain.models.pose_pair import LigandPair
from ..domain.models.pose_register import PoseRegister, PoseRegisterCollection

logger = logging.getLogger(__name__)


class PoseRegisterBuilder:
    """Builds one pose register per ligand pair."""

    @staticmethod
    def build_pose_registers(
        alignment: PairwiseAlignment, ligands: Sequence[Ligand]
    ) -> PoseRegisterCollection:
        """
        Collect the matrix entries of every ligand pair into its register.

        Ligand pairs without entries (a side without poses) get an empty
        register so that every pair can be looked up.

        Args:
            alignment: Pairwise pose score matrix
            ligands: All ligands of the run

        Returns:
            PoseRegisterCollection covering all ligand pairs
        """
        registers = {}
        for i, first in enumerate(ligands):
            for second in ligands[i + 1 :]:
                pair = LigandPair(first.ligand_id, second.ligand_id)
                registers[pair] = PoseRegister(pair)

        for pose_pair, score in alignment.items():
            register = registers.get(pose_pair.ligand_pair)
            if register is None:
                # entries of ligands outside this run are ignored
                continue
            register.add(pose_pair, score)

        empty = sum(1 for register in registers.values() if register.is_empty)
        if empty:
            logger.warning(f"{empty} of {len(registers)} pose registers are empty")
        logger.info(f"Built {len(registers)} pose registers")
        return PoseRegisterCollection(registers)
