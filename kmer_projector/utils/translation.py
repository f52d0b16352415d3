#!/usr/bin/env python3
"""DNA translation helpers backed by Biopython codon tables."""
from __future__ import annotations

from functools import lru_cache
from typing import FrozenSet, Optional, Tuple

from Bio.Data import CodonTable
from Bio.Seq import Seq

from kmer_projector.core.exceptions import ConfigurationError

# Biopython translation table 11 = Bacterial/Archaeal/Plant Plastid genetic code.
BACTERIAL_CODON_TABLE = 11
AMBIGUITY_CHAR = "X"
STOP_CHAR = "*"
_UNAMBIGUOUS = frozenset("ACGT")


@lru_cache(maxsize=None)
def codon_sets(genetic_code: int) -> Tuple[FrozenSet[str], FrozenSet[str]]:
    """Return the (start, stop) codon sets of an NCBI genetic code."""
    try:
        table = CodonTable.unambiguous_dna_by_id[genetic_code]
    except KeyError:
        raise ConfigurationError(f"Unknown genetic code: {genetic_code}") from None
    return frozenset(table.start_codons), frozenset(table.stop_codons)


def reverse_complement(dna: str) -> str:
    return str(Seq(dna).reverse_complement())


class DnaTranslator:
    """Translate DNA in a fixed genetic code."""

    def __init__(self, genetic_code: int = BACTERIAL_CODON_TABLE):
        self.genetic_code = genetic_code
        self.starts, self.stops = codon_sets(genetic_code)

    def is_start(self, codon: str) -> bool:
        return codon.upper() in self.starts

    def is_stop(self, codon: str) -> bool:
        """True for a stop codon, including IUPAC codons that can only be a stop (TAR, TRA)."""
        codon = codon.upper()
        if codon in self.stops:
            return True
        if len(codon) != 3 or set(codon) <= _UNAMBIGUOUS:
            return False
        return self.translate(codon) == STOP_CHAR

    def translate(self, dna: str, frame: int = 1, end: Optional[int] = None) -> str:
        """
        Translate `dna` starting at 1-based position `frame` up to position `end`.

        Trailing bases that do not fill a codon are dropped. Stops come back as
        '*' and ambiguous codons as 'X'.
        """
        if end is None:
            end = len(dna)
        chunk = dna[frame - 1:end]
        chunk = chunk[:len(chunk) - (len(chunk) % 3)]
        if not chunk:
            return ""
        return str(Seq(chunk.upper()).translate(table=self.genetic_code))

    def peg_translate(self, dna: str) -> str:
        """Translate a coding sequence, turning an alternative start into M and dropping a final stop."""
        protein = self.translate(dna)
        if protein.endswith(STOP_CHAR):
            protein = protein[:-1]
        if protein and self.is_start(dna[:3]):
            protein = "M" + protein[1:]
        return protein
