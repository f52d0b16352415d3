import pytest

from kmer_projector.schemas.genome import Contig, Genome
from kmer_projector.services.loader import InMemoryGenomeLoader
from kmer_projector.utils.translation import reverse_complement

from synthetic import random_gene, reference_genome, write_codons

# Plus-strand ORF at 1249..1428, with an in-frame stop upstream at 1201.
ORF_CONTIG = write_codons(2000, starts=[1249], stops=[1201, 1426])


@pytest.fixture
def gene_a() -> str:
    return random_gene(100, seed=1)


@pytest.fixture
def gene_b() -> str:
    return random_gene(80, seed=2)


@pytest.fixture
def orf_genome() -> Genome:
    return Genome(id="orf.1", contigs=[Contig(id="c1", sequence=ORF_CONTIG)])


@pytest.fixture
def minus_orf_genome() -> Genome:
    """The reverse complement of `orf_genome`, so its ORF sits on the minus strand."""
    return Genome(id="orf.2", contigs=[Contig(id="c1", sequence=reverse_complement(ORF_CONTIG))])


@pytest.fixture
def overlap_genome() -> Genome:
    """
    Three plus-strand ORFs: 301..603 (frame +1), 452..754 (frame +2) overlapping
    it, and a separate one at 1201..1353.
    """
    seq = write_codons(2000, starts=[301, 452, 1201], stops=[601, 752, 1351])
    return Genome(id="ovl.1", contigs=[Contig(id="c1", sequence=seq)])


@pytest.fixture
def reference_a(gene_a, gene_b) -> Genome:
    return reference_genome("ref.1", [gene_a, gene_b], ["Alpha protein", "Beta protein"])


@pytest.fixture
def loader_a(reference_a) -> InMemoryGenomeLoader:
    return InMemoryGenomeLoader([reference_a])
