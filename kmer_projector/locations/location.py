"""
Strand- and frame-aware genomic intervals.

Coordinates are 1-based and inclusive: a location covers `left..right` on its
contig and `left <= right` always holds. `begin` and `end` are strand-relative,
so on the minus strand `begin == right`.
"""
from __future__ import annotations

import sys
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Tuple

from kmer_projector.core.exceptions import InvalidLocation, NoValidExtension
from kmer_projector.utils.translation import DnaTranslator

if TYPE_CHECKING:
    from kmer_projector.schemas.genome import Genome

STRANDS = ("+", "-")


class Frame(Enum):
    """Reading lane of a position: three offsets on each strand, plus an unset sentinel."""
    P0 = 0
    P1 = 1
    P2 = 2
    M0 = 3
    M1 = 4
    M2 = 5
    XX = 6

    @property
    def idx(self) -> int:
        return self.value

    @property
    def label(self) -> str:
        return _FRAME_LABELS[self]

    @classmethod
    def all(cls) -> Tuple["Frame", ...]:
        """The six real lanes, in index order."""
        return (cls.P0, cls.P1, cls.P2, cls.M0, cls.M1, cls.M2)

    @classmethod
    def of(cls, strand: str, offset: int) -> "Frame":
        if strand == "+":
            return cls.all()[offset % 3]
        if strand == "-":
            return cls.all()[3 + offset % 3]
        return cls.XX


N_FRAMES = 6

_FRAME_LABELS = {
    Frame.P0: "+1",
    Frame.P1: "+2",
    Frame.P2: "+3",
    Frame.M0: "-1",
    Frame.M1: "-2",
    Frame.M2: "-3",
    Frame.XX: "0",
}


@dataclass(frozen=True)
class Location:
    contig_id: str
    strand: str
    left: int
    right: int

    def __post_init__(self):
        if self.strand not in STRANDS:
            raise InvalidLocation(f"invalid strand {self.strand!r}", self.contig_id)
        if self.left > self.right:
            raise InvalidLocation(f"left edge {self.left} is past right edge {self.right}", self.contig_id)

    @classmethod
    def create(cls, contig_id: str, strand: str, left: int, right: int) -> "Location":
        return cls(contig_id, strand, left, right)

    @property
    def begin(self) -> int:
        return self.left if self.strand == "+" else self.right

    @property
    def end(self) -> int:
        return self.right if self.strand == "+" else self.left

    @property
    def length(self) -> int:
        return self.right - self.left + 1

    @property
    def frame(self) -> Frame:
        if self.strand == "+":
            return Frame.of("+", self.left - 1)
        return Frame.of("-", self.right - 1)

    def distance(self, other: "Location") -> int:
        """
        Return the number of bases between two locations.

        The result is negative if and only if the locations overlap on the same
        contig; only its sign is meaningful in that case. Strand is ignored.
        Locations on different contigs are infinitely far apart.
        """
        if self.contig_id != other.contig_id:
            return sys.maxsize
        if self.left <= other.left:
            return other.left - self.right - 1
        return self.left - other.right - 1

    def overlaps(self, other: "Location") -> bool:
        return self.distance(other) < 0

    def sequence(self, genome: "Genome") -> str:
        """Strand-relative DNA covered by this location."""
        contig = genome.contig(self.contig_id)
        if contig is None:
            raise InvalidLocation("contig not found in genome", self.contig_id)
        if self.strand == "-":
            n = len(contig)
            return contig.rsequence[n - self.right:n - self.left + 1]
        return contig.sequence[self.left - 1:self.right]

    def extend(self, genome: "Genome") -> "Location":
        """
        Stretch this location to the nearest in-frame start upstream and stop downstream.

        The new begin is the first start codon found walking upstream from the
        begin codon (inclusive). The new end is the last base of the first stop
        codon at or after the final codon of this location. Raises
        NoValidExtension if a stop is met before a start, if a stop interrupts
        the interval, or if the contig edge is reached first.
        """
        contig = genome.contig(self.contig_id)
        if contig is None:
            raise NoValidExtension(f"contig {self.contig_id} not in genome {genome.id}")
        xlator = DnaTranslator(genome.genetic_code)
        n = len(contig)
        if self.strand == "+":
            seq = contig.sequence
            s_begin = self.left
        else:
            seq = contig.rsequence
            s_begin = n - self.right + 1
        last = s_begin + max(self.length // 3 - 1, 0) * 3

        def codon(pos: int) -> str:
            return seq[pos - 1:pos + 2]

        # Walk upstream for a start.
        pos = s_begin
        while True:
            if pos < 1 or pos + 2 > n:
                raise NoValidExtension(f"no start codon upstream of {self}")
            current = codon(pos)
            if xlator.is_start(current):
                new_begin = pos
                break
            if xlator.is_stop(current):
                raise NoValidExtension(f"stop codon upstream of {self} before any start")
            pos -= 3
        # The interval itself must be open.
        for pos in range(s_begin, last, 3):
            if xlator.is_stop(codon(pos)):
                raise NoValidExtension(f"internal stop codon at strand position {pos} in {self}")
        # Walk downstream for a stop.
        pos = last
        while True:
            if pos + 2 > n:
                raise NoValidExtension(f"no stop codon downstream of {self}")
            if xlator.is_stop(codon(pos)):
                new_end = pos + 2
                break
            pos += 3
        if self.strand == "+":
            return Location(self.contig_id, "+", new_begin, new_end)
        return Location(self.contig_id, "-", n - new_end + 1, n - new_begin + 1)

    def __str__(self) -> str:
        return f"{self.contig_id}_{self.begin}{self.strand}{self.length}"
