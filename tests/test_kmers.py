"""Tests for the contig and feature kmer indexes."""

import pytest

from kmer_projector.core.exceptions import ConfigurationError
from kmer_projector.kmers.factory import AGGRESSIVE, STRICT, get_policy
from kmer_projector.kmers.reference import ContigKmerIndex, FeatureKmerIndex, KmerReference
from kmer_projector.locations.location import Location
from kmer_projector.schemas.genome import Contig, Feature, Genome
from kmer_projector.utils.translation import DnaTranslator

from synthetic import filler, new_genome, random_gene


def _protein_genome(proteins):
    features = [
        Feature(id=fid, location=Location("c1", "+", 1, 30), function=f"{fid} function", protein_translation=prot)
        for fid, prot in proteins
    ]
    return Genome(id="prot.1", contigs=[Contig(id="c1", sequence=filler(30))], features=features)


class TestKmerReference:
    def test_location_spans_kmer_codons(self):
        ref = KmerReference("GDQM", "contig2", 10, "+")
        loc = ref.get_loc()
        assert loc.contig_id == "contig2"
        assert loc.left == 10
        assert loc.right == 21
        assert loc.length == 12

    def test_equality_uses_kmer_only(self):
        a = KmerReference("GDQM", "contig2", 10, "+")
        b = KmerReference("GDQM", "contig9", 400, "-")
        c = KmerReference("GDQW", "contig2", 10, "+")
        assert a == b
        assert hash(a) == hash(b)
        assert a != c
        assert len({a, b, c}) == 2


class TestContigKmerIndex:
    def test_final_window_on_both_strands(self):
        genome = Genome(id="tiny", contigs=[Contig(id="c1", sequence="ATGAAAGATTGG")])
        index = ContigKmerIndex.build(genome, kmer_size=4)
        assert set(index) == {"MKDW", "PIFH"}
        assert index.get("MKDW") == [Location("c1", "+", 1, 12)]
        assert index.get("PIFH") == [Location("c1", "-", 1, 12)]

    def test_every_location_translates_to_its_kmer(self, gene_a, gene_b):
        genome = new_genome("idx.1", [
            filler(31) + gene_a + filler(50),
            "GA" + gene_b + filler(17),
        ])
        index = ContigKmerIndex.build(genome, kmer_size=5)
        xlator = DnaTranslator(genome.genetic_code)
        assert len(index) > 0
        frames = set()
        for kmer in index:
            for loc in index.get(kmer):
                assert loc.length == 15
                assert xlator.translate(genome.dna(loc)) == kmer
                frames.add(loc.frame)
        assert len(frames) == 6

    def test_stops_and_ambiguity_are_skipped(self):
        genome = Genome(id="stops", contigs=[Contig(id="c1", sequence="GCCTAAGCCNNNGCCGCCGCCGCC")])
        index = ContigKmerIndex.build(genome, kmer_size=3)
        assert all("*" not in kmer and "X" not in kmer for kmer in index)
        assert "AAA" in index

    def test_add_files_reference_location_under_kmer(self):
        index = ContigKmerIndex(kmer_size=4)
        index.add(KmerReference("GDQM", "contig2", 10, "+"))
        index.add(KmerReference("GDQM", "contig2", 40, "-"))
        assert len(index) == 1
        assert index.get("GDQM") == [
            Location("contig2", "+", 10, 21),
            Location("contig2", "-", 40, 51),
        ]


class TestKmerPolicy:
    def test_strict_drops_repeated_kmers(self, gene_a):
        genome = new_genome("rep.1", [gene_a + filler(30) + gene_a])
        kmer = DnaTranslator().translate(gene_a)[10:18]
        aggressive = AGGRESSIVE.find_kmers(genome, 8)
        strict = STRICT.find_kmers(genome, 8)
        assert len(aggressive.get(kmer)) == 2
        assert kmer not in strict
        assert len(strict) < len(aggressive)
        assert all(len(strict.get(k)) == 1 for k in strict)

    def test_get_policy(self):
        assert get_policy("strict") is STRICT
        assert get_policy("AGGRESSIVE") is AGGRESSIVE
        with pytest.raises(ConfigurationError):
            get_policy("greedy")


class TestFeatureKmerIndex:
    def test_only_unique_kmers_survive(self):
        genome = _protein_genome([
            ("peg.1", "MKDWEKLS"),
            ("peg.2", "MKDWQRNT"),
            ("peg.3", "GGGGGG"),
            ("peg.4", "ACDXEFGH"),
            ("peg.5", None),
        ])
        index = FeatureKmerIndex.build(genome, kmer_size=4)
        # Shared between pegs.
        assert "MKDW" not in index
        # Repeated within one peg.
        assert "GGGG" not in index
        assert not any("X" in fk.kmer for fk in index)
        assert len(index) == 9
        assert index.total_kmers == 11
        hit = index.get("WEKL")
        assert hit.feature_id == "peg.1"
        assert hit.offset == 4
        assert index.get("QRNT").offset == 5
        assert index.get("EFGH").feature_id == "peg.4"

    def test_non_pegs_are_ignored(self):
        genome = _protein_genome([("peg.1", "MKDWEKLS")])
        genome.add_feature(Feature(
            id="rna.1", location=Location("c1", "+", 1, 30), protein_translation="EKLSVV", type="rna",
        ))
        index = FeatureKmerIndex.build(genome, kmer_size=4)
        assert index.get("EKLS").feature_id == "peg.1"
        assert "KLSV" not in index
