# src/multialign/services/assembly_scorer.py
"""Service scoring ligand alignment assemblies."""

import logging
import math
from typing import Dict, Optional, Sequence

from ..config import DeficitPeerMode
from ..domain.interfaces.pose_scorer import PoseScorer
from ..domain.models.assembly import LigandAlignmentAssembly
from ..domain.models.ligand import Ligand, UniquePoseID
from ..domain.models.pairwise_alignment import PairwiseAlignment
from ..domain.models.pose_pair import PosePair
from ..domain.models.pose_register import PoseRegisterCollection
from ..exceptions import MissingScoreError

logger = logging.getLogger(__name__)


class AssemblyScorer:
    """Scores assemblies against a pairwise score matrix.

    Matrix entries that are missing are computed through the pose scorer on
    demand. Such values are not written back into the matrix.
    """

    def __init__(
        self,
        scores: PairwiseAlignment,
        ligands: Sequence[Ligand],
        pose_scorer: PoseScorer,
        deficit_peer_mode: DeficitPeerMode = DeficitPeerMode.ALL,
    ):
        """
        Initialize scorer.

        Args:
            scores: Pairwise pose score matrix
            ligands: All ligands, indexed by ligand id
            pose_scorer: Oracle used for entries missing from the matrix
            deficit_peer_mode: Whether unassigned peers enter the deficit
        """
        self._scores = scores
        self._ligands: Dict[int, Ligand] = {ligand.ligand_id: ligand for ligand in ligands}
        self._pose_scorer = pose_scorer
        self.deficit_peer_mode = deficit_peer_mode

    def calculate_assembly_score(self, assembly: LigandAlignmentAssembly) -> float:
        """
        Sum the pair scores of all ligands present in the assembly.

        Args:
            assembly: Assembly to score

        Returns:
            Total score; 0.0 when fewer than two ligands are assigned
        """
        present = [
            (ligand_id, assembly.pose_of(ligand_id))
            for ligand_id in sorted(self._ligands)
            if ligand_id in assembly
        ]

        assembly_score = 0.0
        for i, (first_id, first_pose) in enumerate(present):
            for second_id, second_pose in present[i + 1 :]:
                assembly_score += self.get_score_in_assembly(
                    first_id, second_id, first_pose, second_pose
                )
        return assembly_score

    def calculate_score_deficit(
        self,
        ligand_id: int,
        max_ligand_id: int,
        assembly: LigandAlignmentAssembly,
        registers: PoseRegisterCollection,
    ) -> float:
        """
        Measure how far a ligand's pairs fall short of their ideal scores.

        Every id in ``0..max_ligand_id`` other than ``ligand_id`` is a peer.
        A pair only contributes when its register's best score exceeds the
        current score; being better than the register never reduces the
        deficit.

        Args:
            ligand_id: Ligand to evaluate
            max_ligand_id: Highest ligand id to consider as a peer
            assembly: Current assembly
            registers: Pose registers holding the ideal score per pair

        Returns:
            Sum of ``ideal - current`` over contributing peers
        """
        score_deficit = 0.0
        own_pose = assembly.pose_of(ligand_id)

        for peer_id in range(max_ligand_id + 1):
            if peer_id == ligand_id:
                continue

            peer_pose = assembly.pose_of(peer_id)
            if self.deficit_peer_mode is DeficitPeerMode.ASSIGNED and (
                own_pose is None or peer_pose is None
            ):
                continue

            register = registers.get(ligand_id, peer_id)
            optimal_score = register.highest_score() if register is not None else None
            if optimal_score is None:
                continue

            if own_pose is None or peer_pose is None:
                score_in_assembly = 0.0
            else:
                score_in_assembly = self.get_score_in_assembly(
                    ligand_id, peer_id, own_pose, peer_pose
                )

            if optimal_score <= score_in_assembly:
                continue
            score_deficit += abs(optimal_score - score_in_assembly)

        return score_deficit

    def get_score_in_assembly(
        self,
        first_ligand_id: int,
        second_ligand_id: int,
        first_pose_id: int,
        second_pose_id: int,
    ) -> float:
        """Read a pair score from the matrix, computing it if missing."""
        pair = PosePair(
            UniquePoseID(first_ligand_id, first_pose_id),
            UniquePoseID(second_ligand_id, second_pose_id),
        )
        score = self._scores.get(pair)
        if score is None:
            logger.debug(f"No matrix entry for {pair}, scoring on demand")
            score = self.compute_score(pair)
        return score

    def compute_score(self, pair: PosePair) -> float:
        """
        Score a pose pair through the oracle.

        Raises:
            MissingScoreError: If the oracle fails or returns a non-finite value
        """
        first = self._ligand(pair.first.ligand_id)
        second = self._ligand(pair.second.ligand_id)
        try:
            score = self._pose_scorer.score(
                first, pair.first.pose_id, second, pair.second.pose_id
            )
        except MissingScoreError:
            raise
        except Exception as e:
            raise MissingScoreError(f"Could not score {pair}: {str(e)}", pair) from e

        if score is None or not math.isfinite(score):
            raise MissingScoreError(f"Oracle returned no usable score for {pair}", pair)
        return float(score)

    def _ligand(self, ligand_id: int) -> Ligand:
        ligand: Optional[Ligand] = self._ligands.get(ligand_id)
        if ligand is None:
            raise KeyError(f"Unknown ligand id {ligand_id}")
        return ligand
