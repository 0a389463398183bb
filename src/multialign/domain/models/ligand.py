#!/usr/bin/env python3
# src/multialign/domain/models/ligand.py

"""
Domain models for ligands and their candidate poses.
"""

from dataclasses import dataclass, field
from typing import Any, FrozenSet, Iterable, List


@dataclass(frozen=True, order=True)
class UniquePoseID:
    """Identifies one pose of one ligand."""

    ligand_id: int
    pose_id: int


@dataclass(frozen=True)
class Ligand:
    """A ligand with its enumerable set of candidate poses.

    The molecule is an opaque handle handed to the geometric oracle; the
    engine itself never inspects it.
    """

    ligand_id: int
    poses: FrozenSet[UniquePoseID] = frozenset()
    molecule: Any = field(default=None, compare=False, repr=False)

    def __post_init__(self):
        """Normalize the pose collection to a frozenset."""
        object.__setattr__(self, "poses", frozenset(self.poses))

    @property
    def num_poses(self) -> int:
        """Number of candidate poses."""
        return len(self.poses)

    @property
    def pose_ids(self) -> List[int]:
        """Ligand-internal pose indices in ascending order."""
        return sorted(pose.pose_id for pose in self.poses)

    def unique_pose(self, pose_id: int) -> UniquePoseID:
        """
        Get the unique identifier of one of this ligand's poses.

        Args:
            pose_id: Ligand-internal pose index

        Returns:
            UniquePoseID for the pose

        Raises:
            KeyError: If the ligand has no such pose
        """
        pose = UniquePoseID(self.ligand_id, pose_id)
        if pose not in self.poses:
            raise KeyError(f"Ligand {self.ligand_id} has no pose {pose_id}")
        return pose

    @classmethod
    def with_pose_count(
        cls, ligand_id: int, num_poses: int, molecule: Any = None
    ) -> "Ligand":
        """Create a ligand with dense pose indices 0..num_poses-1."""
        poses = frozenset(UniquePoseID(ligand_id, i) for i in range(num_poses))
        return cls(ligand_id=ligand_id, poses=poses, molecule=molecule)

    @classmethod
    def from_molecule(cls, molecule: Any, ligand_id: int) -> "Ligand":
        """
        Create a ligand whose poses are the conformers of an RDKit molecule.

        Args:
            molecule: RDKit molecule carrying embedded conformers
            ligand_id: Dense ligand identifier

        Returns:
            Ligand with one pose per conformer
        """
        return cls.with_pose_count(ligand_id, molecule.GetNumConformers(), molecule)


def ligands_from_molecules(molecules: Iterable[Any]) -> List[Ligand]:
    """Wrap molecules into ligands with dense ids in input order."""
    return [
        Ligand.from_molecule(molecule, ligand_id)
        for ligand_id, molecule in enumerate(molecules)
    ]
