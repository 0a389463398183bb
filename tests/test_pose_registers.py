import numpy as np
import pytest

from multialign import (
    GreedyStartingAssemblyGenerator,
    LigandPair,
    PairwiseAlignment,
    PosePair,
    PoseRegister,
    PoseRegisterBuilder,
    PoseRegisterCollection,
    PrecomputedScorer,
    UniquePoseID,
)


def build_alignment(scorer, ligands):
    alignment = PairwiseAlignment()
    for i, first in enumerate(ligands):
        for second in ligands[i + 1 :]:
            for p in first.pose_ids:
                for q in second.pose_ids:
                    alignment.insert(
                        (UniquePoseID(first.ligand_id, p), UniquePoseID(second.ligand_id, q)),
                        scorer.score(first, p, second, q),
                    )
    return alignment


class TestPoseRegister:
    def test_highest_scoring_pair_matches_planted_maximum(self, make_ligands):
        """The register picks the argmax of its ligand pair's scores."""
        rng = np.random.default_rng(7)
        table = rng.uniform(0.0, 0.9, size=(3, 4))
        table[2, 1] = 0.99
        scorer = PrecomputedScorer(
            {
                (0, 1): table,
                (0, 2): rng.uniform(0.0, 0.9, size=(3, 2)),
                (1, 2): rng.uniform(0.0, 0.9, size=(4, 2)),
            }
        )
        ligands = make_ligands(3, 4, 2)
        alignment = build_alignment(scorer, ligands)

        registers = PoseRegisterBuilder.build_pose_registers(alignment, ligands)
        register = registers.register_for(1, 0)

        expected = PosePair(UniquePoseID(0, 2), UniquePoseID(1, 1))
        assert register.highest_scoring_pair() == expected
        assert register.highest_score() == pytest.approx(0.99)

        restricted = {
            pair: score for pair, score in alignment.items() if pair.ligand_pair == LigandPair(0, 1)
        }
        assert max(restricted, key=restricted.get) == expected

    def test_one_register_per_ligand_pair(self, make_ligands, scenario_a_scorer):
        ligands = make_ligands(2, 2, 2)
        registers = PoseRegisterBuilder.build_pose_registers(
            build_alignment(scenario_a_scorer, ligands), ligands
        )
        assert len(registers) == 3
        assert all(len(register) == 4 for register in registers.get_all_registers().values())

    def test_empty_register_for_ligand_without_poses(self, make_ligands, scenario_a_scorer):
        ligands = make_ligands(2, 2, 0)
        scorer = PrecomputedScorer({(0, 1): [[0.2, 0.1], [0.3, 0.9]]})
        registers = PoseRegisterBuilder.build_pose_registers(
            build_alignment(scorer, ligands), ligands
        )
        register = registers.register_for(0, 2)
        assert register.is_empty
        assert register.highest_scoring_pair() is None
        assert register.highest_score() is None

    def test_best_partner_and_ties(self):
        register = PoseRegister(LigandPair(0, 1))
        register.add(PosePair(UniquePoseID(0, 1), UniquePoseID(1, 0)), 0.5)
        register.add(PosePair(UniquePoseID(0, 0), UniquePoseID(1, 1)), 0.5)
        register.add(PosePair(UniquePoseID(0, 0), UniquePoseID(1, 0)), 0.2)

        # ties resolve to the lowest pose indices
        assert register.highest_scoring_pair() == PosePair(UniquePoseID(0, 0), UniquePoseID(1, 1))
        assert register.best_partner(UniquePoseID(1, 0)) == PosePair(
            UniquePoseID(0, 1), UniquePoseID(1, 0)
        )
        assert register.score(UniquePoseID(1, 0), UniquePoseID(0, 0)) == 0.2
        assert register.score(UniquePoseID(1, 1), UniquePoseID(0, 1)) is None

    def test_rejects_foreign_pair(self):
        register = PoseRegister(LigandPair(0, 1))
        with pytest.raises(ValueError):
            register.add(PosePair(UniquePoseID(0, 0), UniquePoseID(2, 0)), 0.1)

    def test_collection_lookup(self):
        collection = PoseRegisterCollection()
        collection.add_register(PoseRegister(LigandPair(2, 0)))
        assert collection.register_for(0, 2) is collection.get(2, 0)
        assert collection.get(0, 1) is None
        with pytest.raises(KeyError):
            collection.register_for(0, 1)


class TestGreedyStartingAssemblyGenerator:
    """Starting assemblies built around a seed pose."""

    def _registers(self, scorer, ligands):
        return PoseRegisterBuilder.build_pose_registers(build_alignment(scorer, ligands), ligands)

    def test_seed_pose_is_kept(self, scenario_a_scorer, scenario_a_ligands):
        registers = self._registers(scenario_a_scorer, scenario_a_ligands)
        generator = GreedyStartingAssemblyGenerator()

        assembly = generator.generate(UniquePoseID(1, 0), registers, scenario_a_ligands)
        assert assembly.pose_of(1) == 0
        assert len(assembly) == 3
        assert assembly.missing_ligands_count == 0

    def test_greedy_choice(self, scenario_a_scorer, scenario_a_ligands):
        registers = self._registers(scenario_a_scorer, scenario_a_ligands)
        generator = GreedyStartingAssemblyGenerator()

        assert generator.generate(
            UniquePoseID(0, 0), registers, scenario_a_ligands
        ).assembly_mapping() == {0: 0, 1: 0, 2: 0}
        assert generator.generate(
            UniquePoseID(0, 1), registers, scenario_a_ligands
        ).assembly_mapping() == {0: 1, 1: 1, 2: 1}

    def test_deterministic(self, scenario_a_scorer, scenario_a_ligands):
        registers = self._registers(scenario_a_scorer, scenario_a_ligands)
        generator = GreedyStartingAssemblyGenerator()
        seed = UniquePoseID(2, 1)
        assert generator.generate(seed, registers, scenario_a_ligands) == generator.generate(
            seed, registers, scenario_a_ligands
        )

    @pytest.mark.parametrize(
        "pose_counts, tables, seed, expected",
        [
            ((2, 2, 0), (0, 1), UniquePoseID(0, 1), {0: 1, 1: 1}),
            ((2, 0, 2), (0, 2), UniquePoseID(0, 1), {0: 1, 2: 1}),
            ((2, 0, 2), (0, 2), UniquePoseID(0, 0), {0: 0, 2: 0}),
            ((0, 2, 2), (1, 2), UniquePoseID(1, 1), {1: 1, 2: 1}),
        ],
    )
    def test_ligand_without_poses_stays_missing(
        self, make_ligands, pose_counts, tables, seed, expected
    ):
        """The empty ligand is counted wherever it sits in the id order."""
        ligands = make_ligands(*pose_counts)
        scorer = PrecomputedScorer({tables: [[0.2, 0.1], [0.3, 0.9]]})
        registers = self._registers(scorer, ligands)

        assembly = GreedyStartingAssemblyGenerator().generate(seed, registers, ligands)
        assert assembly.assembly_mapping() == expected
        assert assembly.missing_ligands_count == 1

    def test_every_unplaced_ligand_is_counted(self, make_ligands):
        ligands = make_ligands(2, 0, 0, 2)
        scorer = PrecomputedScorer({(0, 3): [[0.2, 0.1], [0.3, 0.9]]})
        registers = self._registers(scorer, ligands)

        assembly = GreedyStartingAssemblyGenerator().generate(UniquePoseID(3, 0), registers, ligands)
        assert assembly.assembly_mapping() == {0: 1, 3: 0}
        assert assembly.missing_ligands_count == 2

    def test_missing_registers_do_not_raise(self, make_ligands):
        ligands = make_ligands(2, 2)
        assembly = GreedyStartingAssemblyGenerator().generate(
            UniquePoseID(0, 0), PoseRegisterCollection(), ligands
        )
        assert assembly.pose_of(1) is None
        assert assembly.missing_ligands_count == 1
