"""Pose compatibility looked up from precomputed score tables."""

from typing import Dict, Mapping, Optional, Sequence, Tuple

import numpy as np

from ..interfaces.pose_scorer import PoseScorer
from ..models.ligand import Ligand
from ...exceptions import MissingScoreError


class PrecomputedScorer(PoseScorer):
    """Oracle backed by one score table per ligand pair.

    The table for ligands ``(i, j)`` has shape ``(poses of i, poses of j)``.
    A table registered as ``(i, j)`` also answers ``(j, i)`` via its
    transpose.
    """

    def __init__(self, tables: Mapping[Tuple[int, int], Sequence[Sequence[float]]]):
        """
        Initialize scorer.

        Args:
            tables: Ligand id pairs mapped to 2D score tables

        Raises:
            ValueError: If a table is not two dimensional or pairs a ligand
                with itself
        """
        self._tables: Dict[Tuple[int, int], np.ndarray] = {}
        for (first, second), table in tables.items():
            if first == second:
                raise ValueError(f"Score table pairs ligand {first} with itself")
            array = np.asarray(table, dtype=float)
            if array.ndim != 2:
                raise ValueError(
                    f"Score table for ligands ({first}, {second}) must be 2D, "
                    f"got shape {array.shape}"
                )
            self._tables[(first, second)] = array

    @classmethod
    def random(
        cls, pose_counts: Sequence[int], seed: Optional[int] = None
    ) -> "PrecomputedScorer":
        """
        Create a scorer with uniformly random scores in [0, 1).

        Args:
            pose_counts: Number of poses per ligand, indexed by ligand id
            seed: Seed for numpy's random generator

        Returns:
            PrecomputedScorer covering every ligand pair
        """
        rng = np.random.default_rng(seed)
        tables = {}
        for first, first_count in enumerate(pose_counts):
            for second in range(first + 1, len(pose_counts)):
                tables[(first, second)] = rng.random((first_count, pose_counts[second]))
        return cls(tables)

    def table(self, first: int, second: int) -> Optional[np.ndarray]:
        """Return the table oriented as (first, second), None if unknown."""
        if (first, second) in self._tables:
            return self._tables[(first, second)]
        if (second, first) in self._tables:
            return self._tables[(second, first)].T
        return None

    def score(self, ligand_a: Ligand, pose_a: int, ligand_b: Ligand, pose_b: int) -> float:
        """Look up the score of two poses."""
        table = self.table(ligand_a.ligand_id, ligand_b.ligand_id)
        pair = ((ligand_a.ligand_id, pose_a), (ligand_b.ligand_id, pose_b))
        if table is None:
            raise MissingScoreError(f"No score table for {pair}", pair)
        if not (0 <= pose_a < table.shape[0] and 0 <= pose_b < table.shape[1]):
            raise MissingScoreError(f"Pose index out of table range for {pair}", pair)
        return float(table[pose_a, pose_b])
