from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import pandas as pd

from kmer_projector.config.settings_io import load_config
from kmer_projector.core.exceptions import AnnotationError, ConfigurationError, SequenceFormatError
from kmer_projector.schemas.genome import Genome
from kmer_projector.services.annotation_service import AnnotationService
from kmer_projector.services.loader import DirectoryGenomeLoader
from kmer_projector.utils.sequence_io import read_contigs_fasta, write_genbank_genome
from kmer_projector.utils.translation import BACTERIAL_CODON_TABLE

logger = logging.getLogger(__name__)

MANIFEST_COLUMNS = {"genome_id", "contigs", "close_genomes"}


def _add_parameter_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", type=Path, default=None, help="JSON settings file")
    parser.add_argument("-K", "--kmer", dest="kmer_size", type=int, default=None, help="protein kmer length (default: 8)")
    parser.add_argument(
        "-m", "--min-strength", type=float, default=None,
        help="minimum acceptable proposal strength, 0 to 1 (default: 0.20)",
    )
    parser.add_argument(
        "-f", "--fuzz", dest="max_fuzz", type=float, default=None,
        help="maximum length increase factor for proteins, > 1 (default: 1.5)",
    )
    parser.add_argument("--min-evidence", type=int, default=None, help="minimum evidence per proposal (default: 0)")
    parser.add_argument(
        "-n", "--num", dest="max_genomes", type=int, default=None,
        help="maximum number of close genomes to scan (default: 10)",
    )
    parser.add_argument(
        "--algorithm", choices=["strict", "aggressive"], default=None,
        help="algorithm for retrieving contig kmers (default: aggressive)",
    )
    parser.add_argument("--ref-dir", type=Path, required=True, help="directory of reference GenBank files")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"], default="INFO")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kmer-projector",
        description="Project protein annotations from close genomes onto new contigs using protein kmers.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    annotate = sub.add_parser("annotate", help="annotate one genome")
    annotate.add_argument("--contigs", type=Path, required=True, help="contig FASTA of the new genome")
    annotate.add_argument("--genome-id", required=True)
    annotate.add_argument("--name", default="")
    annotate.add_argument("--genetic-code", type=int, default=BACTERIAL_CODON_TABLE)
    annotate.add_argument("--close", nargs="+", required=True, metavar="GENOME_ID", help="close genomes, closest first")
    annotate.add_argument("--output", type=Path, required=True, help="annotated GenBank output")
    annotate.add_argument("--table", type=Path, default=None, help="optional TSV of the new features")
    _add_parameter_options(annotate)

    batch = sub.add_parser("batch", help="annotate the genomes listed in a manifest")
    batch.add_argument(
        "--manifest", type=Path, required=True,
        help="TSV with genome_id, contigs, close_genomes (comma separated) and optional name, genetic_code",
    )
    batch.add_argument("--output-dir", type=Path, required=True)
    batch.add_argument("--workers", type=int, default=None, help="genomes annotated in parallel")
    _add_parameter_options(batch)
    return parser


def _split_ids(value) -> List[str]:
    if not isinstance(value, str):
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def read_manifest(path: Path) -> List[Genome]:
    """Load the genomes listed in a batch manifest."""
    df = pd.read_csv(path, sep="\t", dtype=str)
    missing = MANIFEST_COLUMNS - set(df.columns)
    if missing:
        raise ConfigurationError(f"Manifest {path} is missing columns: {', '.join(sorted(missing))}")
    genomes = []
    for row in df.itertuples(index=False):
        contigs = Path(row.contigs)
        if not contigs.is_absolute():
            contigs = path.parent / contigs
        name = getattr(row, "name", "")
        code = getattr(row, "genetic_code", None)
        genomes.append(read_contigs_fasta(
            contigs,
            genome_id=row.genome_id,
            name=name if isinstance(name, str) else "",
            genetic_code=int(code) if isinstance(code, str) and code else BACTERIAL_CODON_TABLE,
            close_genomes=_split_ids(row.close_genomes),
        ))
    return genomes


def _run_annotate(args, service: AnnotationService) -> int:
    genome = read_contigs_fasta(
        args.contigs,
        genome_id=args.genome_id,
        name=args.name,
        genetic_code=args.genetic_code,
        close_genomes=args.close,
    )
    stats, table = service.annotate_genome(genome)
    args.output.parent.mkdir(parents=True, exist_ok=True)
    logger.info("Writing genome to %s.", args.output)
    write_genbank_genome(genome, args.output)
    if args.table is not None:
        table.to_csv(args.table, sep="\t", index=False)
    logger.info("%d features written for %s.", stats.features_created, genome.id)
    return 0


def _run_batch(args, service: AnnotationService) -> int:
    genomes = read_manifest(args.manifest)
    args.output_dir.mkdir(parents=True, exist_ok=True)
    result, summary = service.run_batch(genomes, workers=args.workers)
    for genome in genomes:
        if genome.id in result.stats:
            write_genbank_genome(genome, args.output_dir / f"{genome.id}.gbk")
    summary_path = args.output_dir / "batch_summary.tsv"
    summary.to_csv(summary_path, sep="\t", index=False)
    logger.info("Summary written to %s.", summary_path)
    return 1 if result.failures else 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level), format="%(asctime)s %(levelname)s %(message)s")

    try:
        config = load_config(
            args.config,
            kmer_size=args.kmer_size,
            min_strength=args.min_strength,
            max_fuzz=args.max_fuzz,
            min_evidence=args.min_evidence,
            max_genomes=args.max_genomes,
            algorithm=args.algorithm,
            workers=getattr(args, "workers", None),
        )
        loader = DirectoryGenomeLoader(args.ref_dir)
    except (ConfigurationError, FileNotFoundError) as exc:
        logger.error("%s", exc)
        return 2

    service = AnnotationService(config, loader)
    try:
        if args.command == "annotate":
            return _run_annotate(args, service)
        return _run_batch(args, service)
    except (SequenceFormatError, ConfigurationError) as exc:
        logger.error("%s", exc)
        return 2
    except AnnotationError as exc:
        logger.error("Annotation failed: %s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
