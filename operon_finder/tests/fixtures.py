#!/usr/bin/env python3

"""
Shared builders for transcript and GTF test fixtures.
"""

from typing import List, Sequence, Tuple

from operon_finder.core.data_structures import Transcript


def split_exons(start: int, end: int, exon_count: int) -> Tuple[Tuple[int, int], ...]:
    """Evenly spaced exons covering start..end, separated by 10 bp introns."""
    if exon_count <= 1:
        return ((start, end),) if exon_count == 1 else ()
    step = (end - start + 1) // exon_count
    exons = []
    for i in range(exon_count):
        exon_start = start + i * step
        exon_end = end if i == exon_count - 1 else exon_start + step - 11
        exons.append((exon_start, exon_end))
    return tuple(exons)


def make_transcript(tid: str, start: int, end: int, coverage: float = 1.0,
                    fpkm: float = 1.0, exon_count: int = 2, strand: str = "+",
                    chrom: str = "chr1") -> Transcript:
    return Transcript(
        id=tid,
        gene_id=tid.rsplit('.', 1)[0],
        chrom=chrom,
        start=start,
        end=end,
        strand=strand,
        coverage=coverage,
        expression=fpkm,
        exons=split_exons(start, end, exon_count),
    )


def gtf_lines(transcript: Transcript) -> List[str]:
    """StringTie-style transcript and exon lines for one transcript."""
    attributes = (f'gene_id "{transcript.gene_id}"; transcript_id "{transcript.id}"; '
                  f'cov "{transcript.coverage:.6f}"; FPKM "{transcript.expression:.6f}";')
    lines = ["\t".join([transcript.chrom, "StringTie", "transcript", str(transcript.start),
                        str(transcript.end), "1000", transcript.strand, ".", attributes])]
    for number, (exon_start, exon_end) in enumerate(transcript.exons, 1):
        exon_attributes = (f'gene_id "{transcript.gene_id}"; transcript_id "{transcript.id}"; '
                           f'exon_number "{number}"; cov "{transcript.coverage:.6f}";')
        lines.append("\t".join([transcript.chrom, "StringTie", "exon", str(exon_start),
                                str(exon_end), "1000", transcript.strand, ".", exon_attributes]))
    return lines


def write_gtf(path: str, transcripts: Sequence[Transcript]) -> None:
    with open(path, 'w') as f:
        f.write("# StringTie version 2.2.1\n")
        for transcript in transcripts:
            for line in gtf_lines(transcript):
                f.write(line + "\n")


def sample_transcripts() -> List[Transcript]:
    """
    Two operons and one unrelated transcript.

    chr1 '+': STRG.1.1 spans STRG.2.1, STRG.3.1 and STRG.4.1.
    chr2 '-': STRG.10.1 spans STRG.11.1 and STRG.12.1.
    STRG.5.1 belongs to no operon.
    """
    return [
        make_transcript("STRG.1.1", 1000, 5000, coverage=2.0, fpkm=1.0, exon_count=1),
        make_transcript("STRG.2.1", 1100, 2000, coverage=10.0, fpkm=5.0, exon_count=2),
        make_transcript("STRG.3.1", 2500, 3500, coverage=12.0, fpkm=6.0, exon_count=2),
        make_transcript("STRG.4.1", 3600, 4900, coverage=8.0, fpkm=4.0, exon_count=3),
        make_transcript("STRG.5.1", 20000, 21000, coverage=5.0, fpkm=2.0, exon_count=2),
        make_transcript("STRG.10.1", 1000, 4000, coverage=1.0, fpkm=0.5, exon_count=2,
                        strand="-", chrom="chr2"),
        make_transcript("STRG.11.1", 1100, 1900, coverage=6.0, fpkm=3.0, exon_count=2,
                        strand="-", chrom="chr2"),
        make_transcript("STRG.12.1", 2400, 3900, coverage=7.0, fpkm=3.5, exon_count=2,
                        strand="-", chrom="chr2"),
    ]
