"""
Core projection modules.

Modules:
- annotator: Kmer projection of close-genome proteins onto a new genome
- batch: Parallel annotation of many genomes
- exceptions: Error taxonomy
"""

from kmer_projector.core.exceptions import (
    AnnotationError,
    ConfigurationError,
    GenomeNotFound,
    InvalidLocation,
    NoAnnotationsPossible,
    NoValidExtension,
    SequenceFormatError,
)

__all__ = [
    "AnnotationError",
    "ConfigurationError",
    "GenomeNotFound",
    "InvalidLocation",
    "NoAnnotationsPossible",
    "NoValidExtension",
    "SequenceFormatError",
]
