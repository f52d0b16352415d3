"""
Sequence I/O helpers backed by Biopython.

Only the glue the projector needs: contigs from FASTA, reference genomes from
GenBank, and the annotated genome back out as GenBank or protein FASTA.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from Bio import SeqIO
from Bio.Seq import Seq
from Bio.SeqFeature import SeqFeature, SimpleLocation
from Bio.SeqRecord import SeqRecord

from kmer_projector.core.exceptions import SequenceFormatError
from kmer_projector.locations.location import Location
from kmer_projector.schemas.genome import CloseGenome, Contig, Feature, Genome
from kmer_projector.utils.translation import BACTERIAL_CODON_TABLE

logger = logging.getLogger(__name__)


def read_fasta_pairs(path: Path) -> List[Tuple[str, str]]:
    """Return (id, sequence) pairs from a FASTA file."""
    if not path.exists():
        raise SequenceFormatError("file not found", str(path))
    records: List[Tuple[str, str]] = []
    for record in SeqIO.parse(str(path), "fasta"):
        seq = str(record.seq).upper()
        if not seq:
            continue
        records.append((record.id, seq))
    return records


def write_fasta_pairs(pairs: Sequence[Tuple[str, str]], path: Path) -> None:
    """Write (id, sequence) pairs to a FASTA file."""
    records = [SeqRecord(Seq(seq), id=str(name), description="") for name, seq in pairs]
    with path.open("w") as handle:
        SeqIO.write(records, handle, "fasta")


def iter_genbank_records(path: Path) -> Iterator[SeqRecord]:
    """Iterate GenBank records from a file."""
    return SeqIO.parse(str(path), "genbank")


def read_contigs_fasta(
    path: Path,
    genome_id: str,
    name: str = "",
    genetic_code: int = BACTERIAL_CODON_TABLE,
    close_genomes: Iterable[str] = (),
) -> Genome:
    """Build an unannotated genome from a contig FASTA file."""
    pairs = read_fasta_pairs(path)
    if not pairs:
        raise SequenceFormatError("no contigs found", str(path))
    return Genome(
        id=genome_id,
        name=name,
        genetic_code=genetic_code,
        contigs=[Contig(id=contig_id, sequence=seq) for contig_id, seq in pairs],
        close_genomes=[CloseGenome(genome_id=gid) for gid in close_genomes],
    )


def _first(qualifiers: dict, key: str) -> Optional[str]:
    values = qualifiers.get(key)
    return values[0] if values else None


def read_genbank_genome(path: Path, genome_id: Optional[str] = None) -> Genome:
    """
    Build a genome from a GenBank file, one contig per record.

    CDS features become pegs: the ID comes from locus_tag or protein_id, the
    function from product, and the protein from the translation qualifier.
    A transl_table qualifier on any CDS sets the genetic code.
    """
    if not path.exists():
        raise SequenceFormatError("file not found", str(path))
    gid = genome_id or path.stem
    genome = Genome(id=gid)
    peg_num = 0
    try:
        for record in iter_genbank_records(path):
            contig_id = record.id or record.name
            if not genome.name:
                genome.name = record.annotations.get("organism", "") or record.description
            genome.add_contig(Contig(id=contig_id, sequence=str(record.seq)))
            for feat in record.features:
                if feat.type != "CDS":
                    continue
                peg_num += 1
                qualifiers = feat.qualifiers
                fid = _first(qualifiers, "locus_tag") or _first(qualifiers, "protein_id") or f"fig|{gid}.peg.{peg_num}"
                if genome.feature(fid) is not None:
                    fid = f"{fid}.{peg_num}"
                table = _first(qualifiers, "transl_table")
                if table is not None:
                    genome.genetic_code = int(table)
                strand = "-" if feat.location.strand == -1 else "+"
                loc = Location(contig_id, strand, int(feat.location.start) + 1, int(feat.location.end))
                genome.add_feature(Feature(
                    id=fid,
                    location=loc,
                    function=_first(qualifiers, "product") or "hypothetical protein",
                    protein_translation=_first(qualifiers, "translation"),
                ))
    except (ValueError, AttributeError) as exc:
        raise SequenceFormatError(f"unreadable GenBank data: {exc}", str(path)) from exc
    if not genome.contigs:
        raise SequenceFormatError("no GenBank records found", str(path))
    return genome


def genome_to_records(genome: Genome) -> List[SeqRecord]:
    """Convert a genome and its features to Biopython records, one per contig."""
    records = {}
    for contig in genome.contigs:
        record = SeqRecord(
            Seq(contig.sequence),
            id=contig.id,
            name=contig.id,
            description=genome.name or genome.id,
            annotations={"molecule_type": "DNA", "organism": genome.name or genome.id},
        )
        records[contig.id] = record
    for feat in genome.features:
        record = records.get(feat.location.contig_id)
        if record is None:
            logger.warning("Feature %s is on unknown contig %s; not written.", feat.id, feat.location.contig_id)
            continue
        loc = feat.location
        qualifiers = {
            "locus_tag": [feat.id],
            "product": [feat.function],
            "transl_table": [str(genome.genetic_code)],
        }
        if feat.protein_translation:
            qualifiers["translation"] = [feat.protein_translation]
        record.features.append(SeqFeature(
            SimpleLocation(loc.left - 1, loc.right, strand=1 if loc.strand == "+" else -1),
            type=feat.type,
            qualifiers=qualifiers,
        ))
    for record in records.values():
        record.features.sort(key=lambda f: int(f.location.start))
    return list(records.values())


def write_genbank_genome(genome: Genome, path: Path) -> None:
    with path.open("w") as handle:
        SeqIO.write(genome_to_records(genome), handle, "genbank")


def write_protein_fasta(genome: Genome, path: Path) -> None:
    """Write the protein translations of the genome's pegs."""
    pairs = [(feat.id, feat.protein_translation) for feat in genome.pegs() if feat.protein_translation]
    write_fasta_pairs(pairs, path)
