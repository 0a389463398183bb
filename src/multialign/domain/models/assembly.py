#!/usr/bin/env python3
# src/multialign/domain/models/assembly.py

"""
Domain model for a (possibly partial) choice of one pose per ligand.
"""

from typing import Dict, Iterator, Mapping, Optional


class LigandAlignmentAssembly:
    """Mutable mapping from ligand id to the chosen pose index.

    A ligand without an entry is unassigned. The missing ligands count is
    bookkeeping maintained by whoever builds the assembly; assigning a
    previously unassigned ligand decrements it.
    """

    def __init__(
        self,
        initial_assembly: Optional[Mapping[int, int]] = None,
        missing_ligands_count: int = 0,
    ):
        """
        Initialize an assembly.

        Args:
            initial_assembly: Ligand ids mapped to pose indices
            missing_ligands_count: Number of ligands known to be missing
        """
        self._assembly: Dict[int, int] = dict(initial_assembly or {})
        self._missing_ligands_count = 0
        self.missing_ligands_count = missing_ligands_count

    @property
    def missing_ligands_count(self) -> int:
        return self._missing_ligands_count

    @missing_ligands_count.setter
    def missing_ligands_count(self, count: int) -> None:
        if count < 0:
            raise ValueError(f"Missing ligands count cannot be negative, got {count}")
        self._missing_ligands_count = count

    def increment_missing_ligands_count(self) -> None:
        self._missing_ligands_count += 1

    def pose_of(self, ligand_id: int) -> Optional[int]:
        """Return the pose index of a ligand or None if unassigned."""
        return self._assembly.get(ligand_id)

    def require_pose(self, ligand_id: int) -> int:
        """
        Return the pose index of a ligand that must be assigned.

        Raises:
            KeyError: If the ligand is unassigned
        """
        try:
            return self._assembly[ligand_id]
        except KeyError:
            raise KeyError(f"Ligand {ligand_id} has no pose in this assembly") from None

    def insert_ligand_pose(self, ligand_id: int, pose_id: int) -> bool:
        """
        Assign a pose to a ligand that has none yet.

        Args:
            ligand_id: Ligand to assign
            pose_id: Pose index to use

        Returns:
            True if inserted, False if the ligand already had a pose
        """
        if ligand_id in self._assembly:
            return False
        self._assembly[ligand_id] = pose_id
        self._mark_found()
        return True

    def swap_pose_for_ligand(self, ligand_id: int, pose_id: int) -> None:
        """Set the pose of a ligand, inserting it if unassigned."""
        if not self.insert_ligand_pose(ligand_id, pose_id):
            self._assembly[ligand_id] = pose_id

    def assembly_mapping(self) -> Dict[int, int]:
        """Return a copy of the ligand to pose mapping."""
        return dict(self._assembly)

    def copy(self) -> "LigandAlignmentAssembly":
        return LigandAlignmentAssembly(self._assembly, self._missing_ligands_count)

    def _mark_found(self) -> None:
        if self._missing_ligands_count > 0:
            self._missing_ligands_count -= 1

    def __contains__(self, ligand_id: int) -> bool:
        return ligand_id in self._assembly

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self._assembly))

    def __len__(self) -> int:
        return len(self._assembly)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LigandAlignmentAssembly):
            return NotImplemented
        return (
            self._assembly == other._assembly
            and self._missing_ligands_count == other._missing_ligands_count
        )

    def __repr__(self) -> str:
        return (
            f"LigandAlignmentAssembly({self._assembly}, "
            f"missing={self._missing_ligands_count})"
        )
