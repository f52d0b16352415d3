"""
Proposed protein annotations on ORFs.

A proposal is a location already stretched to a start and a stop, a function,
and a strength (evidence base pairs over final length). Two proposals name the
same ORF when they share contig, end and strand; a PegProposalList keeps only
the best proposal for each ORF and presents them in contig order.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, Iterator, Optional, Tuple

from kmer_projector.core.exceptions import NoValidExtension
from kmer_projector.locations.location import Location
from kmer_projector.schemas.stats import ProposalCounts

if TYPE_CHECKING:
    from kmer_projector.schemas.genome import Genome

logger = logging.getLogger(__name__)


class PegProposal:
    """A candidate gene call."""

    __slots__ = ("loc", "function", "strength")

    def __init__(self, loc: Location, function: str, strength: float):
        self.loc = loc
        self.function = function
        self.strength = strength

    @classmethod
    def create(cls, genome: "Genome", loc: Location, function: str, evidence: float) -> "PegProposal":
        """
        Extend `loc` to a start and a stop and score it.

        Raises NoValidExtension when the location cannot be extended.
        """
        real_loc = loc.extend(genome)
        return cls(real_loc, function, evidence / real_loc.length)

    @property
    def key(self) -> Tuple[str, int, str]:
        """ORF identity: contig, end point and strand."""
        return (self.loc.contig_id, self.loc.end, self.loc.strand)

    def sort_key(self) -> Tuple[str, int, int, str]:
        # Shorter proposals sort first when the left edges tie.
        return (self.loc.contig_id, self.loc.left, self.loc.length, self.loc.strand)

    def better_than(self, other: "PegProposal") -> bool:
        """Higher strength wins; at equal strength the longer call wins."""
        if self.strength > other.strength:
            return True
        return self.strength == other.strength and self.loc.length > other.loc.length

    def merge(self, other: "PegProposal") -> None:
        """Take over the location, function and strength of a proposal for the same ORF."""
        self.loc = other.loc
        self.function = other.function
        self.strength = other.strength

    def __eq__(self, other) -> bool:
        if not isinstance(other, PegProposal):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def __lt__(self, other: "PegProposal") -> bool:
        return self.sort_key() < other.sort_key()

    def __repr__(self) -> str:
        return f"PegProposal({self.loc}, {self.function!r}, strength={self.strength:.4f})"


class PegProposalList:
    """
    The proposals for one genome, at most one per ORF.

    Only proposals meeting the strength and evidence minimums are kept.
    Iteration yields the survivors in contig order, which is the order their
    features should be numbered in.
    """

    def __init__(self, genome: "Genome", min_strength: float, min_evidence: int = 0):
        self.genome = genome
        self.min_strength = min_strength
        self.min_evidence = min_evidence
        self.counts = ProposalCounts()
        self._proposals: Dict[Tuple[str, int, str], PegProposal] = {}

    def propose(self, loc: Location, function: str, evidence: int) -> Optional[PegProposal]:
        """
        Propose a peg.

        Args:
            loc: Location of the evidence
            function: Proposed functional assignment
            evidence: Base pairs of evidence; strength is this over the final length

        Returns:
            The new or updated proposal, or None if the proposal did not take
        """
        self.counts.made += 1
        try:
            candidate = PegProposal.create(self.genome, loc, function, evidence)
        except NoValidExtension as exc:
            logger.debug("Rejected proposal at %s: %s", loc, exc)
            self.counts.rejected += 1
            return None
        if candidate.strength < self.min_strength:
            self.counts.weak += 1
            return None
        if evidence < self.min_evidence:
            self.counts.small += 1
            return None
        existing = self._proposals.get(candidate.key)
        if existing is None:
            self._proposals[candidate.key] = candidate
            self.counts.kept = len(self._proposals)
            return candidate
        if candidate.better_than(existing):
            existing.merge(candidate)
            self.counts.merged += 1
            return existing
        return None

    @property
    def made_count(self) -> int:
        return self.counts.made

    @property
    def rejected_count(self) -> int:
        return self.counts.rejected

    @property
    def weak_count(self) -> int:
        return self.counts.weak

    @property
    def small_count(self) -> int:
        return self.counts.small

    @property
    def merge_count(self) -> int:
        return self.counts.merged

    @property
    def proposal_count(self) -> int:
        return len(self._proposals)

    def __len__(self) -> int:
        return len(self._proposals)

    def __iter__(self) -> Iterator[PegProposal]:
        return iter(sorted(self._proposals.values(), key=PegProposal.sort_key))
