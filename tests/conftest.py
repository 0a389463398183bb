from itertools import product

import pytest

from multialign import AlignerConfig, Ligand, PrecomputedScorer

# Three ligands with two poses each. Choosing pose 1 everywhere scores
# 0.9 + 0.8 + 0.7 = 2.4, the unique maximum over all 8 assignments.
SCENARIO_A_TABLES = {
    (0, 1): [[0.2, 0.1], [0.3, 0.9]],
    (0, 2): [[0.1, 0.2], [0.4, 0.8]],
    (1, 2): [[0.3, 0.1], [0.2, 0.7]],
}


def _make_ligands(*pose_counts):
    return [Ligand.with_pose_count(i, count) for i, count in enumerate(pose_counts)]


def _brute_force_best(scorer, ligands):
    best = 0.0
    for poses in product(*(ligand.pose_ids for ligand in ligands)):
        total = 0.0
        for i, first in enumerate(ligands):
            for j in range(i + 1, len(ligands)):
                total += scorer.score(first, poses[i], ligands[j], poses[j])
        best = max(best, total)
    return best


@pytest.fixture
def make_ligands():
    """Build ligands with dense ids from pose counts."""
    return _make_ligands


@pytest.fixture
def brute_force_best():
    """Best score over every full assignment, for small instances."""
    return _brute_force_best


@pytest.fixture
def scenario_a_scorer():
    return PrecomputedScorer(SCENARIO_A_TABLES)


@pytest.fixture
def scenario_a_ligands():
    return _make_ligands(2, 2, 2)


@pytest.fixture
def scenario_a_best():
    return 2.4, {0: 1, 1: 1, 2: 1}


@pytest.fixture
def small_config():
    return AlignerConfig(max_starting_assemblies=4, n_threads=2)
