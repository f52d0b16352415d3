"""
Main entry point for kmer_projector.

Usage:
    python -m kmer_projector annotate --contigs new.fa --genome-id 1234.5 --close 111.1 222.2 \
        --ref-dir refs/ --output new.gbk
    python -m kmer_projector batch --manifest genomes.tsv --ref-dir refs/ --output-dir out/
"""

import sys

from kmer_projector.cli import main


if __name__ == "__main__":
    sys.exit(main() or 0)
