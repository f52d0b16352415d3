"""
Genome model consumed by the projection core.

A genome carries its contigs, any features already called on it, the genetic
code, and a ranked list of close reference genomes. Reference genomes are the
same model loaded with protein translations on their features.
"""
from __future__ import annotations

import re
from typing import Dict, Iterator, List, Optional

from pydantic import BaseModel, Field, PrivateAttr, field_validator

from kmer_projector.locations.location import Location
from kmer_projector.utils.translation import BACTERIAL_CODON_TABLE, reverse_complement

_NON_IUPAC = re.compile(r"[^ACGTURYSWKMBDHVN]")
PEG_TYPES = {"CDS", "peg"}


class Contig(BaseModel):
    """A DNA sequence of the genome."""
    id: str
    sequence: str
    description: str = ""

    _rsequence: Optional[str] = PrivateAttr(default=None)

    @field_validator("sequence")
    @classmethod
    def _normalize_sequence(cls, value: str) -> str:
        # Anything outside the IUPAC nucleotide alphabet translates as an ambiguity.
        return _NON_IUPAC.sub("N", value.upper().replace("U", "T"))

    @property
    def rsequence(self) -> str:
        """Reverse complement of the contig."""
        if self._rsequence is None:
            self._rsequence = reverse_complement(self.sequence)
        return self._rsequence

    def __len__(self) -> int:
        return len(self.sequence)


class Feature(BaseModel):
    """An annotated feature. Pegs carry a protein translation."""
    id: str
    location: Location
    function: str = ""
    protein_translation: Optional[str] = None
    type: str = "CDS"

    @property
    def protein_length(self) -> int:
        return len(self.protein_translation) if self.protein_translation else 0

    @property
    def is_peg(self) -> bool:
        return self.type in PEG_TYPES


class CloseGenome(BaseModel):
    """A reference genome judged close to the one being annotated."""
    genome_id: str
    name: str = ""
    closeness: float = 0.0


class Genome(BaseModel):
    id: str
    name: str = ""
    genetic_code: int = BACTERIAL_CODON_TABLE
    contigs: List[Contig] = Field(default_factory=list)
    features: List[Feature] = Field(default_factory=list)
    close_genomes: List[CloseGenome] = Field(default_factory=list)

    _contig_map: Dict[str, Contig] = PrivateAttr(default_factory=dict)
    _feature_map: Dict[str, Feature] = PrivateAttr(default_factory=dict)

    def model_post_init(self, __context) -> None:
        self._contig_map = {contig.id: contig for contig in self.contigs}
        self._feature_map = {feat.id: feat for feat in self.features}

    def contig(self, contig_id: str) -> Optional[Contig]:
        return self._contig_map.get(contig_id)

    def feature(self, feature_id: str) -> Optional[Feature]:
        return self._feature_map.get(feature_id)

    def pegs(self) -> Iterator[Feature]:
        return (feat for feat in self.features if feat.is_peg)

    def add_contig(self, contig: Contig) -> None:
        if contig.id in self._contig_map:
            raise ValueError(f"Contig {contig.id} already exists in genome {self.id}")
        self.contigs.append(contig)
        self._contig_map[contig.id] = contig

    def add_feature(self, feature: Feature) -> None:
        """Register a new feature; IDs must be unique within the genome."""
        if feature.id in self._feature_map:
            raise ValueError(f"Feature {feature.id} already exists in genome {self.id}")
        self.features.append(feature)
        self._feature_map[feature.id] = feature

    def dna(self, loc: Location) -> str:
        return loc.sequence(self)

    @property
    def length(self) -> int:
        return sum(len(contig) for contig in self.contigs)

    def __str__(self) -> str:
        return f"{self.id} ({self.name})" if self.name else self.id
