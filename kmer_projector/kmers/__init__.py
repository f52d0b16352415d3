"""
Protein kmer indexes and contig kmer retrieval policies.
"""

from kmer_projector.kmers.reference import (
    DEFAULT_KMER_SIZE,
    ContigKmerIndex,
    FeatureKmer,
    FeatureKmerIndex,
    KmerReference,
)
from kmer_projector.kmers.factory import AGGRESSIVE, STRICT, KmerPolicy, get_policy

__all__ = [
    "DEFAULT_KMER_SIZE",
    "ContigKmerIndex",
    "FeatureKmer",
    "FeatureKmerIndex",
    "KmerReference",
    "AGGRESSIVE",
    "STRICT",
    "KmerPolicy",
    "get_policy",
]
