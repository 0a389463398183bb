# src/multialign/services/local_search.py
"""First-improvement local search over ligand poses."""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..domain.models.assembly import LigandAlignmentAssembly
from ..domain.models.ligand import Ligand
from ..domain.models.pose_register import PoseRegisterCollection
from .assembly_scorer import AssemblyScorer

logger = logging.getLogger(__name__)


class TerminationReason(Enum):
    """Why a local search run stopped."""

    LOCAL_OPTIMUM = "local_optimum"
    ITERATION_LIMIT = "iteration_limit"
    TIME_LIMIT = "time_limit"


@dataclass
class LocalSearchOutcome:
    """Result of refining one assembly."""

    assembly: LigandAlignmentAssembly
    score: float
    swaps: int = 0
    iterations: int = 0
    terminated_by: TerminationReason = TerminationReason.LOCAL_OPTIMUM
    score_trace: List[float] = field(default_factory=list)


class LocalSearchOptimizer:
    """Refines an assembly one ligand pose at a time.

    Each step selects the available ligand with the largest score deficit and
    tries its other poses in ascending order. The first pose that strictly
    raises the assembly score is kept and every ligand becomes available
    again. A ligand whose poses bring no improvement is made unavailable.
    The run ends when no ligand is available or the largest deficit is 0.

    The optimizer holds no per-run state, so one instance may serve several
    worker threads at once.
    """

    def __init__(
        self,
        ligands: Sequence[Ligand],
        assembly_scorer: AssemblyScorer,
        registers: PoseRegisterCollection,
        max_iterations: Optional[int] = None,
        time_limit: Optional[float] = None,
    ):
        """
        Initialize optimizer.

        Args:
            ligands: All ligands, ordered by ligand id
            assembly_scorer: Scorer for assemblies and deficits
            registers: Pose registers of all ligand pairs
            max_iterations: Optional cap on selection steps per run
            time_limit: Optional wall-clock cap per run in seconds
        """
        self._ligands = list(ligands)
        self._scorer = assembly_scorer
        self._registers = registers
        self._max_ligand_id = max((ligand.ligand_id for ligand in self._ligands), default=0)
        self.max_iterations = max_iterations
        self.time_limit = time_limit

    def optimize(
        self, assembly: LigandAlignmentAssembly, score: Optional[float] = None
    ) -> LocalSearchOutcome:
        """
        Run local search on a private copy of an assembly.

        Args:
            assembly: Starting assembly, left unmodified
            score: Known score of the starting assembly, computed if omitted

        Returns:
            LocalSearchOutcome with the refined assembly and its score
        """
        current = assembly.copy()
        current_score = (
            score if score is not None else self._scorer.calculate_assembly_score(current)
        )
        outcome = LocalSearchOutcome(assembly=current, score=current_score)
        outcome.score_trace.append(current_score)

        available = np.ones(len(self._ligands), dtype=bool)
        started = time.perf_counter()

        while available.any():
            if self.max_iterations is not None and outcome.iterations >= self.max_iterations:
                outcome.terminated_by = TerminationReason.ITERATION_LIMIT
                break
            if self.time_limit is not None and time.perf_counter() - started >= self.time_limit:
                outcome.terminated_by = TerminationReason.TIME_LIMIT
                break
            outcome.iterations += 1

            worst_index, max_deficit = self._select_worst_ligand(current, available)
            if worst_index is None:
                # every remaining pair already reaches its register optimum
                break

            improved = self._try_swaps(self._ligands[worst_index], current, current_score)
            if improved is None:
                available[worst_index] = False
                continue

            current, current_score = improved
            outcome.swaps += 1
            outcome.score_trace.append(current_score)
            available[:] = True
            logger.debug(
                f"Swapped ligand {self._ligands[worst_index].ligand_id} "
                f"(deficit {max_deficit:.4f}), score now {current_score:.4f}"
            )

        outcome.assembly = current
        outcome.score = current_score
        return outcome

    def _select_worst_ligand(
        self, assembly: LigandAlignmentAssembly, available: np.ndarray
    ) -> Tuple[Optional[int], float]:
        """Return the index of the available ligand with the largest deficit."""
        worst_index, max_deficit = None, 0.0
        for index in np.flatnonzero(available):
            deficit = self._scorer.calculate_score_deficit(
                self._ligands[index].ligand_id,
                self._max_ligand_id,
                assembly,
                self._registers,
            )
            if max_deficit < deficit:
                worst_index, max_deficit = int(index), deficit
        return worst_index, max_deficit

    def _try_swaps(
        self,
        ligand: Ligand,
        assembly: LigandAlignmentAssembly,
        assembly_score: float,
    ) -> Optional[Tuple[LigandAlignmentAssembly, float]]:
        """Return the first strictly improving swap for a ligand, if any."""
        current_pose = assembly.pose_of(ligand.ligand_id)
        for pose_id in ligand.pose_ids:
            if pose_id == current_pose:
                continue
            candidate = assembly.copy()
            candidate.swap_pose_for_ligand(ligand.ligand_id, pose_id)
            candidate_score = self._scorer.calculate_assembly_score(candidate)
            if candidate_score > assembly_score:
                return candidate, candidate_score
        return None
