"""
Annotate many genomes at once.

Every genome gets its own annotator run, so nothing but the shared totals is
touched by more than one worker; those are updated under their lock.
"""
from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence

from kmer_projector.core.annotator import KmerAnnotator
from kmer_projector.core.exceptions import AnnotationError, NoAnnotationsPossible
from kmer_projector.schemas.config import AnnotationConfig
from kmer_projector.schemas.genome import Genome
from kmer_projector.schemas.stats import AnnotationStats, RunTotals
from kmer_projector.services.loader import GenomeLoader

logger = logging.getLogger(__name__)


@dataclass
class BatchResult:
    stats: Dict[str, AnnotationStats] = field(default_factory=dict)
    failures: Dict[str, str] = field(default_factory=dict)
    totals: RunTotals = field(default_factory=RunTotals)


class BatchAnnotator:
    """Run KmerAnnotator over a set of genomes with a thread pool."""

    def __init__(self, config: AnnotationConfig, loader: GenomeLoader, workers: Optional[int] = None):
        self.config = config
        self.loader = loader
        self.workers = workers or config.workers
        self.totals = RunTotals()

    def _annotate_one(self, genome: Genome) -> AnnotationStats:
        annotator = KmerAnnotator(self.config, self.loader)
        try:
            stats = annotator.annotate(genome)
        except NoAnnotationsPossible as exc:
            self.totals.record_failure(exc.stats)
            raise
        except Exception:
            self.totals.record_failure()
            raise
        self.totals.record(stats)
        return stats

    def run(
        self,
        genomes: Sequence[Genome],
        on_done: Optional[Callable[[Genome, Optional[AnnotationStats]], None]] = None,
    ) -> BatchResult:
        """
        Annotate `genomes` in place.

        A genome that fails is logged and listed in the result's failures; the
        rest of the batch carries on. `on_done` is called in completion order
        after each genome, with None for the stats of a failure.
        """
        result = BatchResult(totals=self.totals)
        start = time.time()
        logger.info("Annotating %d genomes with %d workers.", len(genomes), self.workers)
        with ThreadPoolExecutor(max_workers=self.workers) as pool:
            futures = {pool.submit(self._annotate_one, genome): genome for genome in genomes}
            for future in as_completed(futures):
                genome = futures[future]
                try:
                    stats = future.result()
                except AnnotationError as exc:
                    logger.error("Annotation of %s failed: %s", genome.id, exc)
                    result.failures[genome.id] = str(exc)
                    stats = None
                except Exception as exc:
                    logger.exception("Unexpected error annotating %s", genome.id)
                    result.failures[genome.id] = f"{type(exc).__name__}: {exc}"
                    stats = None
                else:
                    result.stats[genome.id] = stats
                if on_done is not None:
                    on_done(genome, stats)
        elapsed = time.time() - start
        done = self.totals.genomes_annotated
        logger.info(
            "Processing complete. %d genomes annotated, %d failed, %.2f seconds / genome.",
            done, self.totals.genomes_failed, elapsed / max(done, 1),
        )
        return result
