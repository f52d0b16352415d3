"""
Kmer-based projection of proteins from close genomes onto a new genome.

The new genome needs its contigs, genetic code and ranked close-genome list.
For each close genome in turn, the kmers unique to one of its proteins are
matched against the six-frame kmers of the new contigs. The matches for each
(reference protein, frame) are swept into spans, the spans are stretched to
ORFs and proposed, and once every reference has been scanned the surviving
proposals are reduced to a non-overlapping set of new features.
"""
from __future__ import annotations

import logging
from typing import Optional

from kmer_projector.core.exceptions import GenomeNotFound, NoAnnotationsPossible
from kmer_projector.kmers.factory import get_policy
from kmer_projector.kmers.reference import ContigKmerIndex, FeatureKmerIndex
from kmer_projector.locations.framed_lists import FramedLocationLists
from kmer_projector.locations.location import Location
from kmer_projector.locations.proposals import PegProposal, PegProposalList
from kmer_projector.schemas.config import AnnotationConfig
from kmer_projector.schemas.genome import Feature, Genome
from kmer_projector.schemas.stats import AnnotationStats
from kmer_projector.services.loader import GenomeLoader
from kmer_projector.utils.translation import DnaTranslator

logger = logging.getLogger(__name__)

# Evidence is counted in protein kmers but proposals are scored over DNA length,
# so the user's strength threshold is divided by this before use. Tunable.
STRENGTH_SCALE = 3.0


class KmerAnnotator:
    """Annotate new genomes from close reference genomes."""

    def __init__(self, config: AnnotationConfig, loader: GenomeLoader):
        self.config = config
        self.loader = loader
        self.policy = get_policy(config.algorithm)

    @property
    def effective_strength(self) -> float:
        return self.config.min_strength / STRENGTH_SCALE

    def annotate(self, genome: Genome) -> AnnotationStats:
        """
        Add projected pegs to `genome`.

        Returns the run statistics. Raises NoAnnotationsPossible when no
        proposal survives.
        """
        stats = AnnotationStats(genome_id=genome.id)
        logger.info("Annotating proposed genome %s.", genome)
        logger.info("Minimum proposal strength is %s.", self.config.min_strength)
        proposals = PegProposalList(genome, self.effective_strength, self.config.min_evidence)
        contig_kmers = self.policy.find_kmers(genome, self.config.kmer_size)
        stats.contig_kmers = len(contig_kmers)
        logger.info("%d kmers found in genome.", len(contig_kmers))
        logger.info("%d close genomes available from input.", len(genome.close_genomes))
        framer = FramedLocationLists()
        for close in genome.close_genomes:
            if len(stats.references_used) >= self.config.max_genomes:
                break
            logger.info(
                "Retrieving close genome #%d %s: %s.",
                len(stats.references_used) + 1, close.genome_id, close.name,
            )
            ref_genome = self._load_reference(close.genome_id)
            if ref_genome is None:
                logger.warning("Genome %s not found-- skipping.", close.genome_id)
                stats.references_skipped.append(close.genome_id)
            else:
                stats.references_used.append(close.genome_id)
                self._scan_reference(ref_genome, contig_kmers, framer, proposals, stats)
            framer.clear()
        stats.proposals = proposals.counts.model_copy()
        logger.info(
            "%d proposals made, %d merged, %d rejected, %d too weak, %d too small, %d kept.",
            proposals.made_count, proposals.merge_count, proposals.rejected_count,
            proposals.weak_count, proposals.small_count, proposals.proposal_count,
        )
        self._finalize(genome, proposals, stats)
        logger.info(
            "Processing complete. %d features created in %s. %d overlaps discarded.",
            stats.features_created, genome.id, stats.overlaps_discarded,
        )
        return stats

    def _load_reference(self, genome_id: str) -> Optional[Genome]:
        try:
            return self.loader.load(genome_id)
        except GenomeNotFound:
            return None

    def _scan_reference(
        self,
        ref_genome: Genome,
        contig_kmers: ContigKmerIndex,
        framer: FramedLocationLists,
        proposals: PegProposalList,
        stats: AnnotationStats,
    ) -> None:
        """Connect the reference's unique protein kmers to the contigs and propose pegs."""
        logger.info("Scanning for kmers in %s.", ref_genome)
        stats.reference_proteins += sum(1 for peg in ref_genome.pegs() if peg.protein_translation)
        peg_kmers = FeatureKmerIndex.build(ref_genome, self.config.kmer_size)
        for peg_kmer in peg_kmers:
            kmer_locs = contig_kmers.get(peg_kmer.kmer)
            if kmer_locs:
                for kmer_loc in kmer_locs:
                    framer.connect(peg_kmer.feature_id, kmer_loc)
        logger.info("%d matching kmers found.", framer.size())
        stats.connections += framer.size()

        pegs_found = 0
        low_kmer_count = 0
        proposal_count = 0
        fuzz = self.config.max_fuzz
        strength = self.effective_strength
        for report in framer:
            peg = ref_genome.feature(report.target_id)
            if peg is None:
                logger.debug("Feature %s missing from %s.", report.target_id, ref_genome.id)
                continue
            pegs_found += 1
            # Protein lengths are scaled to base pairs to match the contig locations.
            peg_len = peg.protein_length * 3
            max_len = int(peg_len * fuzz + 1)
            min_kmers = int(peg_len * strength)
            loc_list = report.locations
            if min_kmers > len(loc_list):
                low_kmer_count += 1
                continue
            last_start = len(loc_list) - max(min_kmers, 1)
            for i in range(last_start + 1):
                first_loc = loc_list[i]
                # The first location counts as evidence.
                evidence = 1
                best_edge = first_loc.right
                for loc in loc_list.contig_range(i, first_loc.left + max_len):
                    evidence += 1
                    best_edge = max(best_edge, loc.right)
                whole_loc = Location(first_loc.contig_id, first_loc.strand, first_loc.left, best_edge)
                proposals.propose(whole_loc, peg.function, evidence)
                proposal_count += 1
        logger.info(
            "%d peg/frame pairs examined, %d had too few kmers, %d proposals were made.",
            pegs_found, low_kmer_count, proposal_count,
        )
        stats.pairs_examined += pegs_found
        stats.too_few_kmers += low_kmer_count
        stats.proposals_attempted += proposal_count

    def _finalize(self, genome: Genome, proposals: PegProposalList, stats: AnnotationStats) -> None:
        """
        Turn the proposals into features.

        Proposals arrive in location order. One is held in reserve; an
        overlapping successor (usually the same locus in another frame) keeps
        only the better of the two, and a non-overlapping one releases the
        reserve as a feature.
        """
        p_iter = iter(proposals)
        reserve = next(p_iter, None)
        if reserve is None:
            raise NoAnnotationsPossible(genome.id, stats)
        xlator = DnaTranslator(genome.genetic_code)
        logger.info("Using genetic code %d.", genome.genetic_code)
        peg_num = 0
        for current in p_iter:
            if reserve.loc.distance(current.loc) < 0:
                stats.overlaps_discarded += 1
                if current.better_than(reserve):
                    reserve = current
            else:
                peg_num = self._make_feature(genome, reserve, xlator, peg_num)
                stats.features_created += 1
                reserve = current
        self._make_feature(genome, reserve, xlator, peg_num)
        stats.features_created += 1

    @staticmethod
    def _make_feature(genome: Genome, proposal: PegProposal, xlator: DnaTranslator, peg_num: int) -> int:
        """Store a proposal as a new peg and return the updated peg number."""
        peg_num += 1
        fid = f"fig|{genome.id}.peg.{peg_num}"
        # Numbers already taken by existing features are skipped.
        while genome.feature(fid) is not None:
            peg_num += 1
            fid = f"fig|{genome.id}.peg.{peg_num}"
        loc = proposal.loc
        # The stop codon is left out of the translation.
        dna = genome.dna(loc)
        protein = xlator.peg_translate(dna[:-3])
        genome.add_feature(Feature(
            id=fid,
            location=loc,
            function=proposal.function,
            protein_translation=protein,
        ))
        return peg_num
