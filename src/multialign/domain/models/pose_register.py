#!/usr/bin/env python3
# src/multialign/domain/models/pose_register.py

"""
Pose registers: per ligand pair record of the ideal pose combination.
"""

from typing import Dict, Iterator, Optional, Tuple

from .ligand import UniquePoseID
from .pose_pair import LigandPair, PosePair


class PoseRegister:
    """Scores of one ligand pair and its highest scoring pose combination."""

    def __init__(self, ligand_pair: LigandPair):
        """
        Initialize an empty register.

        Args:
            ligand_pair: The ligand pair this register describes
        """
        self.ligand_pair = ligand_pair
        self._scores: Dict[PosePair, float] = {}
        self._best_pair: Optional[PosePair] = None
        self._best_partners: Dict[UniquePoseID, PosePair] = {}

    def add(self, pair: PosePair, score: float) -> None:
        """
        Record the score of one pose combination of this ligand pair.

        Args:
            pair: Pose pair of the register's ligands
            score: Compatibility score of the pair

        Raises:
            ValueError: If the pair belongs to another ligand pair
        """
        if pair.ligand_pair != self.ligand_pair:
            raise ValueError(f"{pair} does not belong to register {self.ligand_pair}")
        self._scores[pair] = score

        if self._best_pair is None or _ranks_higher(
            pair, score, self._best_pair, self._scores[self._best_pair]
        ):
            self._best_pair = pair

        for pose in (pair.first, pair.second):
            current = self._best_partners.get(pose)
            if current is None or _ranks_higher(
                pair, score, current, self._scores[current]
            ):
                self._best_partners[pose] = pair

    @property
    def is_empty(self) -> bool:
        return not self._scores

    def highest_scoring_pair(self) -> Optional[PosePair]:
        """Return the pose pair with the maximum score, None if empty."""
        return self._best_pair

    def highest_score(self) -> Optional[float]:
        """Return the maximum score of the ligand pair, None if empty."""
        if self._best_pair is None:
            return None
        return self._scores[self._best_pair]

    def best_partner(self, pose: UniquePoseID) -> Optional[PosePair]:
        """Return the highest scoring pair that contains the given pose."""
        return self._best_partners.get(pose)

    def score(self, first: UniquePoseID, second: UniquePoseID) -> Optional[float]:
        """Return the recorded score of two poses, None if unknown."""
        return self._scores.get(PosePair(first, second))

    def __iter__(self) -> Iterator[Tuple[PosePair, float]]:
        return iter(self._scores.items())

    def __len__(self) -> int:
        return len(self._scores)

    def __repr__(self) -> str:
        return (
            f"PoseRegister({self.ligand_pair.first}, {self.ligand_pair.second}, "
            f"best={self._best_pair}, entries={len(self._scores)})"
        )


class PoseRegisterCollection:
    """Lookup of pose registers by unordered ligand pair."""

    def __init__(self, registers: Optional[Dict[LigandPair, PoseRegister]] = None):
        self._registers: Dict[LigandPair, PoseRegister] = dict(registers or {})

    def add_register(self, register: PoseRegister) -> None:
        self._registers[register.ligand_pair] = register

    def register_for(self, first_ligand: int, second_ligand: int) -> PoseRegister:
        """
        Get the register of two ligands given in any order.

        Raises:
            KeyError: If no register was built for the pair
        """
        pair = LigandPair(first_ligand, second_ligand)
        try:
            return self._registers[pair]
        except KeyError:
            raise KeyError(f"No pose register for ligands {pair.first} and {pair.second}") from None

    def get(self, first_ligand: int, second_ligand: int) -> Optional[PoseRegister]:
        """Get the register of two ligands, None if it was never built."""
        return self._registers.get(LigandPair(first_ligand, second_ligand))

    def get_all_registers(self) -> Dict[LigandPair, PoseRegister]:
        return dict(self._registers)

    def __contains__(self, pair: LigandPair) -> bool:
        return pair in self._registers

    def __len__(self) -> int:
        return len(self._registers)


def _ranks_higher(
    pair: PosePair, score: float, other: PosePair, other_score: float
) -> bool:
    # equal scores: lower pose indices win so the result is order independent
    if score != other_score:
        return score > other_score
    return (pair.first.pose_id, pair.second.pose_id) < (
        other.first.pose_id,
        other.second.pose_id,
    )
