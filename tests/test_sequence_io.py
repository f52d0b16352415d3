"""Tests for FASTA/GenBank I/O and the directory genome loader."""

import pytest

from kmer_projector.core.exceptions import SequenceFormatError
from kmer_projector.locations.location import Location
from kmer_projector.schemas.genome import Feature
from kmer_projector.services.loader import DirectoryGenomeLoader
from kmer_projector.utils.sequence_io import (
    read_contigs_fasta,
    read_fasta_pairs,
    read_genbank_genome,
    write_fasta_pairs,
    write_genbank_genome,
    write_protein_fasta,
)

from synthetic import filler


def test_read_contigs_fasta(tmp_path):
    path = tmp_path / "contigs.fa"
    write_fasta_pairs([("c1", "acgtacgt"), ("c2", filler(30))], path)
    genome = read_contigs_fasta(path, genome_id="new.1", name="Test organism", close_genomes=["ref.1", "ref.2"])
    assert genome.id == "new.1"
    assert [c.id for c in genome.contigs] == ["c1", "c2"]
    assert genome.contig("c1").sequence == "ACGTACGT"
    assert [c.genome_id for c in genome.close_genomes] == ["ref.1", "ref.2"]
    assert genome.genetic_code == 11


def test_missing_or_empty_fasta(tmp_path):
    with pytest.raises(SequenceFormatError):
        read_fasta_pairs(tmp_path / "absent.fa")
    empty = tmp_path / "empty.fa"
    empty.write_text("")
    with pytest.raises(SequenceFormatError):
        read_contigs_fasta(empty, genome_id="x.1")


def test_genbank_round_trip(tmp_path, reference_a):
    reference_a.add_feature(Feature(
        id="fig|ref.1.peg.3",
        location=Location("ref.1_c1", "-", 10, 39),
        function="Reverse protein",
        protein_translation="MAAAAAAAA",
    ))
    path = tmp_path / "ref.1.gbk"
    write_genbank_genome(reference_a, path)
    genome = read_genbank_genome(path)

    assert genome.id == "ref.1"
    assert genome.name == reference_a.name
    assert genome.genetic_code == 11
    assert genome.contig("ref.1_c1").sequence == reference_a.contig("ref.1_c1").sequence
    assert len(genome.features) == 3
    for original in reference_a.features:
        loaded = genome.feature(original.id)
        assert loaded.location == original.location
        assert loaded.function == original.function
        assert loaded.protein_translation == original.protein_translation


def test_genbank_missing_file(tmp_path):
    with pytest.raises(SequenceFormatError):
        read_genbank_genome(tmp_path / "absent.gbk")


def test_write_protein_fasta(tmp_path, reference_a):
    path = tmp_path / "proteins.faa"
    write_protein_fasta(reference_a, path)
    pairs = read_fasta_pairs(path)
    assert [name for name, _ in pairs] == ["fig|ref.1.peg.1", "fig|ref.1.peg.2"]
    assert pairs[0][1] == reference_a.feature("fig|ref.1.peg.1").protein_translation


class TestDirectoryGenomeLoader:
    def test_loads_and_caches(self, tmp_path, reference_a):
        write_genbank_genome(reference_a, tmp_path / "ref.1.gbk")
        loader = DirectoryGenomeLoader(tmp_path)
        genome = loader.load("ref.1")
        assert genome is not None
        assert len(list(genome.pegs())) == 2
        assert loader.load("ref.1") is genome
        assert loader.load("ref.9") is None

    def test_bad_directory(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            DirectoryGenomeLoader(tmp_path / "nowhere")
