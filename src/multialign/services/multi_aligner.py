# src/multialign/services/multi_aligner.py
"""Service aligning many ligands by choosing one pose per ligand."""

import heapq
import logging
import threading
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from tqdm import tqdm

from ..config import AlignerConfig
from ..domain.implementations.greedy_starting_assembly_generator import (
    GreedyStartingAssemblyGenerator,
)
from ..domain.interfaces.pose_scorer import PoseScorer
from ..domain.interfaces.starting_assembly_generator import StartingAssemblyGenerator
from ..domain.models.assembly import LigandAlignmentAssembly
from ..domain.models.ligand import Ligand, UniquePoseID, ligands_from_molecules
from ..domain.models.pairwise_alignment import PairwiseAlignment
from ..domain.models.pose_pair import PosePair
from ..domain.models.pose_register import PoseRegisterCollection
from ..domain.models.result import MultiAlignerResult
from ..exceptions import DegenerateInputError
from ..utils.benchmarking import PerformanceStats, timer
from .assembly_scorer import AssemblyScorer
from .local_search import LocalSearchOptimizer
from .pose_register_builder import PoseRegisterBuilder

logger = logging.getLogger(__name__)

AssemblyWithScore = Tuple[LigandAlignmentAssembly, float]


class _BestAssembly:
    """Best assembly seen so far, shared between local search workers."""

    def __init__(self, assembly: LigandAlignmentAssembly, score: float):
        self.assembly = assembly
        self.score = score
        self._lock = threading.Lock()

    def offer(self, assembly: LigandAlignmentAssembly, score: float) -> bool:
        """Replace the best assembly if the offered one scores strictly higher."""
        if score <= self.score:
            return False
        with self._lock:
            if score <= self.score:
                return False
            self.assembly = assembly.copy()
            self.score = score
            return True


class MultiAligner:
    """Finds a high scoring assembly of poses for a set of ligands.

    A run builds the pairwise score matrix and the pose registers, seeds one
    starting assembly per pose, keeps the best ``max_starting_assemblies`` of
    them and refines those by local search on a worker pool.
    """

    def __init__(
        self,
        ligands: Sequence[Ligand],
        pose_scorer: PoseScorer,
        config: Optional[AlignerConfig] = None,
        starting_assembly_generator: Optional[StartingAssemblyGenerator] = None,
    ):
        """
        Initialize aligner.

        Args:
            ligands: Ligands with dense ids 0..N-1, in id order
            pose_scorer: Geometric oracle scoring two poses
            config: Run settings, defaults if omitted
            starting_assembly_generator: Strategy for starting assemblies

        Raises:
            DegenerateInputError: If the ligand list cannot be aligned
        """
        self._config = config or AlignerConfig()
        self._ligands: List[Ligand] = list(ligands)
        self._pose_scorer = pose_scorer
        self._generator = starting_assembly_generator or GreedyStartingAssemblyGenerator()
        self._validate_ligands()

        self._pairwise_alignments = PairwiseAlignment()
        self._pose_registers = PoseRegisterCollection()
        self.stats = PerformanceStats()

    @classmethod
    def from_molecules(
        cls,
        molecules: Iterable[Any],
        config: Optional[AlignerConfig] = None,
        **scorer_options: Any,
    ) -> "MultiAligner":
        """
        Create an aligner for RDKit molecules scored by shape overlap.

        Args:
            molecules: Molecules with embedded conformers, one per ligand
            config: Run settings
            **scorer_options: Passed on to ShapeTanimotoScorer

        Returns:
            MultiAligner whose poses are the molecules' conformers
        """
        from ..domain.implementations.shape_tanimoto_scorer import ShapeTanimotoScorer

        return cls(
            ligands_from_molecules(molecules),
            ShapeTanimotoScorer(**scorer_options),
            config=config,
        )

    @property
    def config(self) -> AlignerConfig:
        return self._config

    @property
    def ligands(self) -> List[Ligand]:
        return list(self._ligands)

    @property
    def pairwise_alignments(self) -> PairwiseAlignment:
        return self._pairwise_alignments

    @property
    def pose_registers(self) -> PoseRegisterCollection:
        return self._pose_registers

    def align_molecules(self) -> Optional[MultiAlignerResult]:
        """
        Run the complete alignment.

        Returns:
            MultiAlignerResult of the best assembly, or None if no starting
            assembly could be generated

        Raises:
            MissingScoreError: If the oracle cannot score a required pair
        """
        self.stats = PerformanceStats()

        with ThreadPoolExecutor(
            max_workers=self._config.n_threads, thread_name_prefix="multialign"
        ) as executor:
            self._prepare(executor)
            scorer = self._assembly_scorer()

            with timer("seeding", self.stats):
                starting_assemblies = self.collect_starting_assemblies(scorer)

            if not starting_assemblies:
                logger.warning("No starting assembly could be generated")
                return None

            with timer("local_search", self.stats):
                best = self._optimize_assemblies(starting_assemblies, scorer, executor)

        logger.info(f"Finished alignment optimization, best score {best.score:.4f}")
        logger.debug("Timings:\n" + self.stats.report())

        return MultiAlignerResult(
            score=best.score,
            pose_ids_by_ligand_id=best.assembly.assembly_mapping(),
            ligands=list(self._ligands),
            missing_ligands_count=best.assembly.missing_ligands_count,
        )

    def optimize_assembly(self, assembly: LigandAlignmentAssembly) -> LigandAlignmentAssembly:
        """
        Refine a single assembly by local search.

        The score matrix and pose registers are built first if no run has
        produced them yet.

        Args:
            assembly: Assembly to refine, left unmodified

        Returns:
            The refined assembly
        """
        if len(self._pose_registers) == 0 and len(self._ligands) > 1:
            with ThreadPoolExecutor(max_workers=self._config.n_threads) as executor:
                self._prepare(executor)
        return self._local_search(self._assembly_scorer()).optimize(assembly).assembly

    def ensure_pairwise_alignments(self, assembly: LigandAlignmentAssembly) -> int:
        """
        Add missing matrix entries for all pose pairs used by an assembly.

        Args:
            assembly: Assembly whose pose pairs must be in the matrix

        Returns:
            Number of entries added
        """
        scorer = self._assembly_scorer()
        assigned = [
            UniquePoseID(ligand_id, assembly.require_pose(ligand_id))
            for ligand_id in assembly
        ]

        added = 0
        for i, first in enumerate(assigned):
            for second in assigned[i + 1 :]:
                pair = PosePair(first, second)
                if pair in self._pairwise_alignments:
                    continue
                if self._pairwise_alignments.insert(pair, scorer.compute_score(pair)):
                    added += 1
        if added:
            logger.debug(f"Added {added} pairwise scores for assembly {assembly}")
        return added

    def calculate_alignment_scores(self, executor: Executor) -> PairwiseAlignment:
        """
        Score every pose combination of every ligand pair.

        Ligand pairs are processed one after another; the rows of pose
        combinations of one pair are spread over the executor.

        Args:
            executor: Worker pool to score on

        Returns:
            The pairwise score matrix
        """
        alignment = PairwiseAlignment()
        scorer = self._assembly_scorer(alignment)

        ligand_pairs = [
            (first, second)
            for i, first in enumerate(self._ligands)
            for second in self._ligands[i + 1 :]
        ]
        combinations = sum(first.num_poses * second.num_poses for first, second in ligand_pairs)
        logger.info(f"Calculating {combinations} combinations. This may take some time")

        for first, second in tqdm(
            ligand_pairs, desc="Pairwise scores", disable=not self._config.show_progress
        ):
            futures = [
                executor.submit(self._score_row, scorer, alignment, first, pose_id, second)
                for pose_id in first.pose_ids
            ]
            for future in futures:
                future.result()

        logger.info("Finished calculating pairwise alignments")
        return alignment

    def _prepare(self, executor: Executor) -> None:
        with timer("pairwise_scores", self.stats):
            self._pairwise_alignments = self.calculate_alignment_scores(executor)

        logger.info(
            f"Mols: {len(self._ligands)} | "
            f"Confs/Mol: {self._ligands[0].num_poses} | "
            f"total pairwise scores: {len(self._pairwise_alignments)}"
        )

        with timer("pose_registers", self.stats):
            self._pose_registers = PoseRegisterBuilder.build_pose_registers(
                self._pairwise_alignments, self._ligands
            )

    @staticmethod
    def _score_row(
        scorer: AssemblyScorer,
        alignment: PairwiseAlignment,
        first: Ligand,
        first_pose_id: int,
        second: Ligand,
    ) -> None:
        first_pose = UniquePoseID(first.ligand_id, first_pose_id)
        for second_pose_id in second.pose_ids:
            pair = PosePair(first_pose, UniquePoseID(second.ligand_id, second_pose_id))
            alignment.insert(pair, scorer.compute_score(pair))

    def collect_starting_assemblies(
        self, scorer: Optional[AssemblyScorer] = None
    ) -> List[AssemblyWithScore]:
        """
        Seed one assembly per pose and keep the best K of them.

        Uses the pose registers of the last prepared run.

        Args:
            scorer: Assembly scorer to rank with, built from the current
                matrix if omitted

        Returns:
            Up to K (assembly, score) pairs, best first
        """
        scorer = scorer or self._assembly_scorer()
        capacity = self._config.max_starting_assemblies
        heap: list = []
        seeds = [
            UniquePoseID(ligand.ligand_id, pose_id)
            for ligand in self._ligands
            for pose_id in ligand.pose_ids
        ]

        for sequence, seed in enumerate(
            tqdm(seeds, desc="Starting assemblies", disable=not self._config.show_progress)
        ):
            assembly = self._generator.generate(seed, self._pose_registers, self._ligands)
            score = scorer.calculate_assembly_score(assembly)
            # earlier seeds win ties inside the heap
            entry = (self._rank_key(assembly, score), -sequence, assembly, score)

            if len(heap) < capacity:
                heapq.heappush(heap, entry)
            elif entry[0] > heap[0][0]:
                heapq.heapreplace(heap, entry)

        ranked = sorted(heap, key=lambda item: (item[0], item[1]), reverse=True)
        logger.info(f"Kept {len(ranked)} of {len(seeds)} starting assemblies")
        return [(assembly, score) for _, _, assembly, score in ranked]

    def _rank_key(self, assembly: LigandAlignmentAssembly, score: float) -> tuple:
        if self._config.tie_break_on_missing:
            return (score, -assembly.missing_ligands_count)
        return (score,)

    def _optimize_assemblies(
        self,
        starting_assemblies: List[AssemblyWithScore],
        scorer: AssemblyScorer,
        executor: Executor,
    ) -> _BestAssembly:
        """Refine all starting assemblies in parallel and keep the best."""
        best_start, best_start_score = max(starting_assemblies, key=lambda item: item[1])
        best = _BestAssembly(best_start.copy(), best_start_score)
        optimizer = self._local_search(scorer)

        logger.info(f"Start optimization of {len(starting_assemblies)} alignment assemblies")
        futures = [
            executor.submit(self._refine, optimizer, scorer, best, index, assembly, score)
            for index, (assembly, score) in enumerate(starting_assemblies)
        ]
        for future in futures:
            future.result()
        return best

    def _refine(
        self,
        optimizer: LocalSearchOptimizer,
        scorer: AssemblyScorer,
        best: _BestAssembly,
        index: int,
        assembly: LigandAlignmentAssembly,
        score: float,
    ) -> None:
        if self._config.skip_incomplete_assemblies and assembly.missing_ligands_count != 0:
            logger.warning(f"Skipping assembly {index} because it is missing ligands")
            return

        logger.debug(f"Assembly {index} score before opt: {score:.4f}")
        with timer("local_search_run", self.stats):
            outcome = optimizer.optimize(assembly, score)
        final_score = scorer.calculate_assembly_score(outcome.assembly)
        logger.debug(
            f"Assembly {index} score after opt: {final_score:.4f} "
            f"({outcome.swaps} swaps, {outcome.terminated_by.value})"
        )
        if best.offer(outcome.assembly, final_score):
            logger.debug(f"Assembly {index} is the new best")

    def _assembly_scorer(self, alignment: Optional[PairwiseAlignment] = None) -> AssemblyScorer:
        return AssemblyScorer(
            alignment if alignment is not None else self._pairwise_alignments,
            self._ligands,
            self._pose_scorer,
            self._config.deficit_peer_mode,
        )

    def _local_search(self, scorer: AssemblyScorer) -> LocalSearchOptimizer:
        return LocalSearchOptimizer(
            self._ligands,
            scorer,
            self._pose_registers,
            max_iterations=self._config.max_local_search_iterations,
            time_limit=self._config.local_search_time_limit,
        )

    def _validate_ligands(self) -> None:
        """Reject ligand lists the engine cannot align meaningfully."""
        if not self._ligands:
            raise DegenerateInputError("No ligands to align")

        empty = []
        for expected_id, ligand in enumerate(self._ligands):
            if ligand.ligand_id != expected_id:
                raise DegenerateInputError(
                    f"Ligand ids must be dense and ordered, expected {expected_id} "
                    f"but found {ligand.ligand_id}"
                )
            foreign = [pose for pose in ligand.poses if pose.ligand_id != ligand.ligand_id]
            if foreign:
                raise DegenerateInputError(
                    f"Ligand {ligand.ligand_id} holds poses of other ligands: {foreign}"
                )
            if ligand.pose_ids != list(range(ligand.num_poses)):
                raise DegenerateInputError(
                    f"Pose indices of ligand {ligand.ligand_id} must be dense from 0"
                )
            if ligand.num_poses == 0:
                empty.append(ligand.ligand_id)

        if empty and not self._config.allow_empty_ligands:
            raise DegenerateInputError(f"Ligands without poses: {empty}")
        if empty:
            logger.warning(f"Ligands {empty} have no poses and will stay missing")
