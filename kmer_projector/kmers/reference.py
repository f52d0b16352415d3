"""
Protein kmer indexes over genomes.

Two indexes are built, and they are deliberately different types:

- ContigKmerIndex maps each kmer of the six-frame translation of a genome's
  contigs to the DNA locations where it occurs.
- FeatureKmerIndex maps each kmer that occurs exactly once among a genome's
  proteins to the feature that contains it.
"""
from __future__ import annotations

import logging
from collections import Counter, defaultdict
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional

from kmer_projector.locations.location import Location
from kmer_projector.schemas.genome import Genome
from kmer_projector.utils.translation import AMBIGUITY_CHAR, STOP_CHAR, DnaTranslator

logger = logging.getLogger(__name__)

DEFAULT_KMER_SIZE = 8


class KmerReference:
    """
    A protein kmer at a specific place.

    Equality and hashing use only the kmer text, so a set of references is a
    set of distinct sequences and the location rides along as data.
    """

    __slots__ = ("kmer", "loc")

    def __init__(self, kmer: str, seq_id: str, begin: int, strand: str, kmer_size: Optional[int] = None):
        k = kmer_size or len(kmer)
        self.kmer = kmer
        self.loc = Location.create(seq_id, strand, begin, begin + k * 3 - 1)

    def get_loc(self) -> Location:
        return self.loc

    def __eq__(self, other) -> bool:
        if not isinstance(other, KmerReference):
            return NotImplemented
        return self.kmer == other.kmer

    def __hash__(self) -> int:
        return hash(self.kmer)

    def __repr__(self) -> str:
        return f"KmerReference(kmer={self.kmer!r}, loc={self.loc})"


def _usable(kmer: str) -> bool:
    return AMBIGUITY_CHAR not in kmer and STOP_CHAR not in kmer


class ContigKmerIndex:
    """Multi-valued map from kmer text to contig locations."""

    def __init__(self, kmer_size: int = DEFAULT_KMER_SIZE):
        self.kmer_size = kmer_size
        self._kmers: Dict[str, List[Location]] = defaultdict(list)

    @classmethod
    def build(cls, genome: Genome, kmer_size: int = DEFAULT_KMER_SIZE) -> "ContigKmerIndex":
        """Index every usable kmer in all six reading frames of the genome's contigs."""
        index = cls(kmer_size)
        xlator = DnaTranslator(genome.genetic_code)
        k = kmer_size
        span = k * 3
        for contig in genome.contigs:
            n = len(contig)
            # Minus-strand positions are measured on the reverse complement, so
            # the left edge counts back from the contig end.
            minus_base = n - span + 2
            for frame in (1, 2, 3):
                protein = xlator.translate(contig.sequence, frame)
                for i in range(len(protein) - k + 1):
                    kmer = protein[i:i + k]
                    if _usable(kmer):
                        left = i * 3 + frame
                        index.add(KmerReference(kmer, contig.id, left, "+", k))
                protein = xlator.translate(contig.rsequence, frame)
                for i in range(len(protein) - k + 1):
                    kmer = protein[i:i + k]
                    if _usable(kmer):
                        left = minus_base - (i * 3 + frame)
                        index.add(KmerReference(kmer, contig.id, left, "-", k))
        return index

    def add(self, ref: KmerReference) -> None:
        self._kmers[ref.kmer].append(ref.get_loc())

    def get(self, kmer: str) -> Optional[List[Location]]:
        return self._kmers.get(kmer)

    def discard_repeats(self) -> None:
        """Drop every kmer found in more than one place."""
        repeats = [kmer for kmer, locs in self._kmers.items() if len(locs) > 1]
        for kmer in repeats:
            del self._kmers[kmer]

    def __contains__(self, kmer: str) -> bool:
        return kmer in self._kmers

    def __len__(self) -> int:
        return len(self._kmers)

    def __iter__(self) -> Iterator[str]:
        return iter(self._kmers)


@dataclass(frozen=True)
class FeatureKmer:
    """A kmer known to occur once among a genome's proteins."""
    kmer: str
    feature_id: str
    offset: int  # 1-based position of the kmer in the protein


class FeatureKmerIndex:
    """Kmers unique to a single place in a genome's proteins."""

    def __init__(self, kmer_size: int, kmers: Dict[str, FeatureKmer], total_kmers: int):
        self.kmer_size = kmer_size
        self._kmers = kmers
        self.total_kmers = total_kmers

    @classmethod
    def build(cls, genome: Genome, kmer_size: int = DEFAULT_KMER_SIZE) -> "FeatureKmerIndex":
        counts: Counter = Counter()
        first_seen: Dict[str, FeatureKmer] = {}
        k = kmer_size
        for feat in genome.pegs():
            prot = feat.protein_translation
            if not prot:
                continue
            for i in range(len(prot) - k + 1):
                kmer = prot[i:i + k]
                if _usable(kmer):
                    counts[kmer] += 1
                    if kmer not in first_seen:
                        first_seen[kmer] = FeatureKmer(kmer, feat.id, i + 1)
        unique = {kmer: first_seen[kmer] for kmer, count in counts.items() if count == 1}
        logger.info(
            "%d total protein kmers found in the features of %s. %d were unique.",
            len(counts), genome.id, len(unique),
        )
        return cls(kmer_size, unique, len(counts))

    def get(self, kmer: str) -> Optional[FeatureKmer]:
        return self._kmers.get(kmer)

    def __iter__(self) -> Iterator[FeatureKmer]:
        return iter(self._kmers.values())

    def __contains__(self, kmer: str) -> bool:
        return kmer in self._kmers

    def __len__(self) -> int:
        return len(self._kmers)
