#!/usr/bin/env python3
# src/multialign/domain/models/pose_pair.py

"""
Unordered pairs of ligands and of poses.

Both pair types canonicalize on construction so that ``(a, b)`` and
``(b, a)`` are the same key.
"""

from dataclasses import dataclass

from .ligand import UniquePoseID


@dataclass(frozen=True)
class LigandPair:
    """Unordered pair of two distinct ligand ids."""

    first: int
    second: int

    def __post_init__(self):
        if self.first == self.second:
            raise ValueError(f"Ligand pair needs two distinct ligands, got {self.first}")
        if self.first > self.second:
            first, second = self.second, self.first
            object.__setattr__(self, "first", first)
            object.__setattr__(self, "second", second)

    def __contains__(self, ligand_id: int) -> bool:
        return ligand_id in (self.first, self.second)

    def other(self, ligand_id: int) -> int:
        """Return the ligand id paired with the given one."""
        if ligand_id == self.first:
            return self.second
        if ligand_id == self.second:
            return self.first
        raise KeyError(f"Ligand {ligand_id} is not part of {self}")


@dataclass(frozen=True)
class PosePair:
    """Unordered pair of poses belonging to two different ligands.

    The pose of the ligand with the lower id is always stored as ``first``.
    """

    first: UniquePoseID
    second: UniquePoseID

    def __post_init__(self):
        if self.first.ligand_id == self.second.ligand_id:
            raise ValueError(
                "Pose pair needs poses of two different ligands, "
                f"got both from ligand {self.first.ligand_id}"
            )
        if self.first.ligand_id > self.second.ligand_id:
            first, second = self.second, self.first
            object.__setattr__(self, "first", first)
            object.__setattr__(self, "second", second)

    @property
    def ligand_pair(self) -> LigandPair:
        """The ligands the two poses belong to."""
        return LigandPair(self.first.ligand_id, self.second.ligand_id)

    def pose_of(self, ligand_id: int) -> UniquePoseID:
        """Return the pose of the given ligand."""
        if self.first.ligand_id == ligand_id:
            return self.first
        if self.second.ligand_id == ligand_id:
            return self.second
        raise KeyError(f"Ligand {ligand_id} is not part of {self}")

    def partner_of(self, ligand_id: int) -> UniquePoseID:
        """Return the pose paired with the given ligand's pose."""
        return self.pose_of(self.ligand_pair.other(ligand_id))
