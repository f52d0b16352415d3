from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import pandas as pd

from kmer_projector.core.annotator import KmerAnnotator
from kmer_projector.core.batch import BatchAnnotator, BatchResult
from kmer_projector.schemas.config import AnnotationConfig
from kmer_projector.schemas.genome import Genome
from kmer_projector.schemas.stats import AnnotationStats
from kmer_projector.services.loader import GenomeLoader

FEATURE_COLUMNS = ["Feature", "Contig", "Strand", "Start", "End", "Length (nt)", "Protein (aa)", "Function"]


def features_table(genome: Genome, feature_ids: Optional[Iterable[str]] = None) -> pd.DataFrame:
    """Flat table of the genome's pegs, optionally limited to `feature_ids`."""
    wanted = set(feature_ids) if feature_ids is not None else None
    rows = []
    for feat in genome.pegs():
        if wanted is not None and feat.id not in wanted:
            continue
        loc = feat.location
        rows.append({
            "Feature": feat.id,
            "Contig": loc.contig_id,
            "Strand": loc.strand,
            # Strand-relative 1-based coordinates, as in the location model.
            "Start": loc.begin,
            "End": loc.end,
            "Length (nt)": loc.length,
            "Protein (aa)": feat.protein_length,
            "Function": feat.function,
        })
    return pd.DataFrame(rows, columns=FEATURE_COLUMNS)


def stats_table(stats: Iterable[AnnotationStats], failures: Optional[Dict[str, str]] = None) -> pd.DataFrame:
    """One row per genome: run counters plus the failure message, if any."""
    rows = []
    for item in stats:
        rows.append({
            "Genome": item.genome_id,
            "Status": "annotated",
            "Contig Kmers": item.contig_kmers,
            "References Used": len(item.references_used),
            "References Skipped": len(item.references_skipped),
            "Matches": item.connections,
            "Proposals Made": item.proposals.made,
            "Merged": item.proposals.merged,
            "Rejected": item.proposals.rejected,
            "Too Weak": item.proposals.weak,
            "Too Small": item.proposals.small,
            "Kept": item.proposals.kept,
            "Overlaps Discarded": item.overlaps_discarded,
            "Features": item.features_created,
            "Error": "",
        })
    for genome_id, message in (failures or {}).items():
        rows.append({"Genome": genome_id, "Status": "failed", "Error": message})
    return pd.DataFrame(rows)


class AnnotationService:
    """
    Service for running kmer projection and summarizing the results.
    """
    def __init__(self, config: AnnotationConfig, loader: GenomeLoader):
        self.config = config
        self.loader = loader

    def annotate_genome(self, genome: Genome) -> Tuple[AnnotationStats, pd.DataFrame]:
        """Annotate one genome in place and return its stats and new-feature table."""
        before = {feat.id for feat in genome.features}
        stats = KmerAnnotator(self.config, self.loader).annotate(genome)
        new_ids = [feat.id for feat in genome.features if feat.id not in before]
        return stats, features_table(genome, new_ids)

    def run_batch(self, genomes: Sequence[Genome], workers: Optional[int] = None) -> Tuple[BatchResult, pd.DataFrame]:
        """Annotate many genomes and return the batch result with a per-genome summary table."""
        batch = BatchAnnotator(self.config, self.loader, workers=workers)
        result = batch.run(genomes)
        ordered: List[AnnotationStats] = [result.stats[g.id] for g in genomes if g.id in result.stats]
        return result, stats_table(ordered, result.failures)
