"""
kmer_projector - homology-based annotation projection for new genomes.

This package provides tools for:
- Six-frame protein kmer indexing of assembled contigs
- Matching unique protein kmers from ranked close reference genomes
- Proposing, scoring and merging candidate gene calls (pegs)
- Resolving overlapping calls into a consistent feature set
- Batch annotation of many genomes with shared run totals
"""

__version__ = "0.1.0"
