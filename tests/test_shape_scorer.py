import pytest
from rdkit import Chem
from rdkit.Chem import AllChem

from multialign import (
    AlignerConfig,
    Ligand,
    MissingScoreError,
    MultiAligner,
    ShapeTanimotoScorer,
    ligands_from_molecules,
)


def embedded(smiles, num_confs=3, seed=42):
    mol = Chem.AddHs(Chem.MolFromSmiles(smiles))
    conf_ids = AllChem.EmbedMultipleConfs(mol, numConfs=num_confs, randomSeed=seed)
    assert len(conf_ids) == num_confs
    return mol


@pytest.fixture(scope="module")
def molecules():
    return [embedded("CCO"), embedded("CCN"), embedded("CC(=O)O")]


class TestShapeTanimotoScorer:
    def test_ligands_from_molecules(self, molecules):
        ligands = ligands_from_molecules(molecules)
        assert [ligand.ligand_id for ligand in ligands] == [0, 1, 2]
        assert all(ligand.num_poses == 3 for ligand in ligands)
        assert ligands[1].molecule is molecules[1]

    def test_identical_pose_scores_one(self, molecules):
        ligand = Ligand.from_molecule(molecules[0], 0)
        twin = Ligand.from_molecule(molecules[0], 1)
        assert ShapeTanimotoScorer().score(ligand, 1, twin, 1) == pytest.approx(1.0)

    def test_scores_are_symmetric_and_bounded(self, molecules):
        first, second = ligands_from_molecules(molecules)[:2]
        scorer = ShapeTanimotoScorer()

        forward = scorer.score(first, 0, second, 2)
        backward = scorer.score(second, 2, first, 0)
        assert forward == pytest.approx(backward)
        assert 0.0 <= forward <= 1.0

    def test_unknown_conformer(self, molecules):
        first, second = ligands_from_molecules(molecules)[:2]
        with pytest.raises(MissingScoreError):
            ShapeTanimotoScorer().score(first, 0, second, 7)

    def test_ligand_without_molecule(self, molecules):
        first = Ligand.from_molecule(molecules[0], 0)
        with pytest.raises(MissingScoreError):
            ShapeTanimotoScorer().score(first, 0, Ligand.with_pose_count(1, 3), 0)


def test_align_conformers(molecules):
    aligner = MultiAligner.from_molecules(
        molecules, AlignerConfig(max_starting_assemblies=3, n_threads=2), grid_spacing=0.5
    )
    result = aligner.align_molecules()

    assert result.missing_ligands_count == 0
    assert sorted(result.pose_ids_by_ligand_id) == [0, 1, 2]
    assert 0.0 <= result.score <= 3.0
    assert len(aligner.pairwise_alignments) == 27
