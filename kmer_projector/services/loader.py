"""
Reference genome loaders.

The annotator only needs `load(genome_id)`, returning a genome whose pegs carry
protein translations, or None when the genome cannot be found.
"""
import logging
import threading
from pathlib import Path
from typing import Dict, Iterable, Optional, Protocol

from kmer_projector.schemas.genome import Genome
from kmer_projector.utils.sequence_io import read_genbank_genome

logger = logging.getLogger(__name__)


class GenomeLoader(Protocol):
    def load(self, genome_id: str) -> Optional[Genome]:
        ...


class DirectoryGenomeLoader:
    """
    Load reference genomes from GenBank files named after their genome IDs.
    Loaded genomes are cached, since batch runs tend to share references.
    """
    GENBANK_EXTENSIONS = (".gbk", ".gb", ".gbff", ".genbank")

    def __init__(self, root: Path, cache: bool = True):
        if not root.is_dir():
            raise FileNotFoundError(f"Reference genome directory {root} not found or invalid.")
        self.root = root
        self._cache: Optional[Dict[str, Genome]] = {} if cache else None
        self._lock = threading.Lock()

    def find(self, genome_id: str) -> Optional[Path]:
        for ext in self.GENBANK_EXTENSIONS:
            path = self.root / f"{genome_id}{ext}"
            if path.exists():
                return path
        return None

    def load(self, genome_id: str) -> Optional[Genome]:
        with self._lock:
            if self._cache is not None and genome_id in self._cache:
                return self._cache[genome_id]
            path = self.find(genome_id)
            if path is None:
                return None
            logger.info("Loading reference genome %s from %s.", genome_id, path)
            genome = read_genbank_genome(path, genome_id=genome_id)
            if self._cache is not None:
                self._cache[genome_id] = genome
            return genome


class InMemoryGenomeLoader:
    """Serve reference genomes from a dictionary."""

    def __init__(self, genomes: Iterable[Genome] = ()):
        self._genomes: Dict[str, Genome] = {genome.id: genome for genome in genomes}

    def add(self, genome: Genome) -> None:
        self._genomes[genome.id] = genome

    def load(self, genome_id: str) -> Optional[Genome]:
        return self._genomes.get(genome_id)
