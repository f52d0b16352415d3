"""
Exception types for kmer annotation projection.

Per-candidate rejections (bad extension, weak or thin evidence, lost overlap)
are counted, not raised. Only configuration problems, bad inputs and a genome
with nothing to annotate escape as exceptions.
"""
from __future__ import annotations


class AnnotationError(Exception):
    """Base exception for all projection errors."""


class ConfigurationError(AnnotationError):
    """Invalid run parameters (kmer size, strength, fuzz factor, algorithm)."""


class InvalidLocation(AnnotationError, ValueError):
    """A location whose left edge is past its right edge, or with a bad strand."""

    def __init__(self, message: str, contig_id: str = ""):
        super().__init__(message)
        self.contig_id = contig_id

    def __str__(self):
        if self.contig_id:
            return f"Invalid location on {self.contig_id}: {super().__str__()}"
        return super().__str__()


class NoValidExtension(AnnotationError):
    """No in-frame start/stop pair bounds the location within its contig."""


class GenomeNotFound(AnnotationError):
    """A reference genome could not be located by the loader."""

    def __init__(self, genome_id: str):
        super().__init__(f"Genome {genome_id} not found")
        self.genome_id = genome_id


class NoAnnotationsPossible(AnnotationError):
    """No viable proposal survived for the genome being annotated."""

    def __init__(self, genome_id: str, stats=None):
        super().__init__(f"No matching proteins found. Unable to annotate genome {genome_id}.")
        self.genome_id = genome_id
        self.stats = stats


class SequenceFormatError(AnnotationError):
    """Sequence input that could not be read."""

    def __init__(self, message: str, filename: str = ""):
        super().__init__(message)
        self.filename = filename

    def __str__(self):
        if self.filename:
            return f"Sequence error in {self.filename}: {super().__str__()}"
        return super().__str__()
