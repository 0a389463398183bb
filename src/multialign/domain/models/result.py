#!/usr/bin/env python3
# src/multialign/domain/models/result.py

"""Domain model for the outcome of a multi ligand alignment."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .ligand import Ligand, UniquePoseID


@dataclass(frozen=True)
class MultiAlignerResult:
    """Best assembly found by the aligner, ready for an output writer."""

    score: float
    pose_ids_by_ligand_id: Dict[int, int]
    ligands: List[Ligand] = field(repr=False)
    missing_ligands_count: int = 0

    def pose_of(self, ligand_id: int) -> Optional[int]:
        return self.pose_ids_by_ligand_id.get(ligand_id)

    def chosen_poses(self) -> List[UniquePoseID]:
        """Chosen poses ordered by ligand id."""
        return [
            UniquePoseID(ligand_id, pose_id)
            for ligand_id, pose_id in sorted(self.pose_ids_by_ligand_id.items())
        ]
