"""
Run statistics.

Counters live in explicit accumulators handed around with each run, so batch
annotation can aggregate them without any process-wide state.
"""
from __future__ import annotations

import threading
from typing import List, Optional

from pydantic import BaseModel, Field, PrivateAttr


class ProposalCounts(BaseModel):
    """Outcome tallies of a PegProposalList."""
    made: int = 0
    rejected: int = 0  # location could not be extended to a start and stop
    weak: int = 0
    small: int = 0
    merged: int = 0
    kept: int = 0


class AnnotationStats(BaseModel):
    """What happened while annotating one genome."""
    genome_id: str
    contig_kmers: int = 0
    references_used: List[str] = Field(default_factory=list)
    references_skipped: List[str] = Field(default_factory=list)
    reference_proteins: int = 0
    connections: int = 0
    pairs_examined: int = 0
    too_few_kmers: int = 0
    proposals_attempted: int = 0
    proposals: ProposalCounts = Field(default_factory=ProposalCounts)
    overlaps_discarded: int = 0
    features_created: int = 0


class RunTotals(BaseModel):
    """Aggregate counters shared by the genomes of a batch. Updates are locked."""
    genomes_annotated: int = 0
    genomes_failed: int = 0
    reference_proteins: int = 0
    proposals_made: int = 0
    proposals_kept: int = 0
    overlaps_discarded: int = 0
    features_created: int = 0

    _lock: threading.Lock = PrivateAttr(default_factory=threading.Lock)

    def record(self, stats: AnnotationStats) -> None:
        with self._lock:
            self.genomes_annotated += 1
            self.reference_proteins += stats.reference_proteins
            self.proposals_made += stats.proposals.made
            self.proposals_kept += stats.proposals.kept
            self.overlaps_discarded += stats.overlaps_discarded
            self.features_created += stats.features_created

    def record_failure(self, stats: Optional[AnnotationStats] = None) -> None:
        with self._lock:
            self.genomes_failed += 1
            if stats is not None:
                self.reference_proteins += stats.reference_proteins
                self.proposals_made += stats.proposals.made
