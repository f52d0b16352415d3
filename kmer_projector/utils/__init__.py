"""
Utility modules for sequence handling.

Modules:
- translation: Genetic-code aware DNA translation
- sequence_io: FASTA/GenBank glue (import directly)
"""

from kmer_projector.utils.translation import (
    DnaTranslator,
    codon_sets,
    reverse_complement,
    BACTERIAL_CODON_TABLE,
)

__all__ = [
    "DnaTranslator",
    "codon_sets",
    "reverse_complement",
    "BACTERIAL_CODON_TABLE",
]
