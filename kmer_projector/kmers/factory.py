"""
Contig kmer retrieval policies.

Both policies index the contigs the same way; they differ only in the
post-filter. STRICT keeps kmers that occur in one place in the genome,
AGGRESSIVE keeps them all.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Literal

from kmer_projector.core.exceptions import ConfigurationError
from kmer_projector.kmers.reference import DEFAULT_KMER_SIZE, ContigKmerIndex
from kmer_projector.schemas.genome import Genome

logger = logging.getLogger(__name__)

KmerAlgorithm = Literal["strict", "aggressive"]


@dataclass(frozen=True)
class KmerPolicy:
    name: str
    unique_only: bool

    def find_kmers(self, genome: Genome, kmer_size: int = DEFAULT_KMER_SIZE) -> ContigKmerIndex:
        """Return the contig kmer index of `genome` under this policy."""
        index = ContigKmerIndex.build(genome, kmer_size)
        if self.unique_only:
            before = len(index)
            index.discard_repeats()
            logger.debug("Strict kmer policy kept %d of %d kmers.", len(index), before)
        return index


STRICT = KmerPolicy("strict", unique_only=True)
AGGRESSIVE = KmerPolicy("aggressive", unique_only=False)

_POLICIES: Dict[str, KmerPolicy] = {
    STRICT.name: STRICT,
    AGGRESSIVE.name: AGGRESSIVE,
}


def get_policy(name: str) -> KmerPolicy:
    policy = _POLICIES.get(name.lower())
    if policy is None:
        raise ConfigurationError(f"Unsupported contig kmer algorithm: {name}")
    return policy
