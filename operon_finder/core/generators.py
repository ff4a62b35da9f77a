#!/usr/bin/env python3

"""
Output generation for operon calls.

Writes the membership table, re-emits the original annotation lines of
four transcript subsets, and produces a plain-text processing report.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set, Tuple

from .data_structures import OperonMembership, OperonResult
from .exceptions import PipelineError
from .index import TranscriptIndex

TABLE_HEADER = "Operon\tOperonTrans\tContained_transcript"

# Annotation subsets, in the order they are written
OPERON_TRANSCRIPTS = "Operons"
OPERON_GENES = "OperonGenes"
OPERON_GENES_ALL = "OperonGenesALL"
CLEAN = "opCLEAN"


def annotation_sort_key(transcript_id: str) -> Tuple[int, Tuple[int, ...], str]:
    """Order ids by their dotted numeric suffix; ids without one sort last."""
    fields = transcript_id.split('.')[1:]
    numbers = []
    for value in fields:
        if not value.isdigit():
            break
        numbers.append(int(value))
    if not numbers:
        return (1, (), transcript_id)
    return (0, tuple(numbers), transcript_id)


def format_annotation_line(line: str) -> str:
    """Flatten a stored annotation line so it occupies one output line."""
    return line.rstrip('\n').replace('\n', ';')


def partition_transcript_ids(annotated_ids: Iterable[str],
                             memberships: Iterable[OperonMembership]) -> Dict[str, Set[str]]:
    """
    Split ids into the four re-emitted subsets.

    Containers and genes come from the final memberships; the remaining two
    subsets are drawn from every id with stored annotation lines.
    """
    operon_ids: Set[str] = set()
    gene_ids: Set[str] = set()
    for membership in memberships:
        operon_ids.add(membership.operon_transcript_id)
        gene_ids.add(membership.gene_id)

    all_ids = set(annotated_ids)
    return {
        OPERON_TRANSCRIPTS: operon_ids,
        OPERON_GENES: gene_ids,
        OPERON_GENES_ALL: {tid for tid in all_ids if tid in gene_ids and tid not in operon_ids},
        CLEAN: {tid for tid in all_ids if tid not in gene_ids and tid not in operon_ids},
    }


class OutputGenerator:
    """Generate all output files for one run."""

    def __init__(self, output_prefix: str, threshold: float,
                 write_annotation_files: bool = True, generate_reports: bool = True):
        self.output_prefix = output_prefix
        self.threshold = threshold
        self.write_annotation_files = write_annotation_files
        self.generate_reports = generate_reports

    def output_path(self, stem: str, extension: str) -> str:
        return f"{self.output_prefix}_{stem}.t{self.threshold:.2f}.{extension}"

    def generate_outputs(self, index: TranscriptIndex, result: OperonResult,
                         config: Optional[Mapping[str, Any]] = None,
                         performance: Optional[Mapping[str, Any]] = None) -> List[str]:
        """Write every enabled output and return the created paths."""
        parent = Path(self.output_prefix).parent
        try:
            parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PipelineError(f"Cannot create output directory {parent}: {e}")

        output_files = [self.write_membership_table(result.memberships)]

        if self.write_annotation_files:
            output_files.extend(self.write_annotation_subsets(index, result.memberships))

        if self.generate_reports and result.summary is not None:
            output_files.append(self.write_report(index, result, config, performance))

        return output_files

    def write_membership_table(self, memberships: Iterable[OperonMembership]) -> str:
        tsv_path = self.output_path("operons_found", "tsv")
        with open(tsv_path, 'w') as f:
            f.write(TABLE_HEADER + "\n")
            for membership in memberships:
                f.write(membership.to_row() + "\n")
        logging.info(f"Output written to {tsv_path}")
        return tsv_path

    def write_annotation_subsets(self, index: TranscriptIndex,
                                 memberships: Iterable[OperonMembership]) -> List[str]:
        subsets = partition_transcript_ids(index.annotated_ids, memberships)
        paths = []
        for stem, ids in subsets.items():
            path = self.output_path(stem, "gtf")
            self._write_annotation_file(path, index, ids)
            paths.append(path)
        logging.info("GTF files written successfully.")
        return paths

    def _write_annotation_file(self, path: str, index: TranscriptIndex, ids: Set[str]) -> None:
        with open(path, 'w') as f:
            for tid in sorted(ids, key=annotation_sort_key):
                for line in index.raw_lines(tid):
                    f.write(format_annotation_line(line) + "\n")
        logging.debug(f"Wrote {len(ids)} transcript(s) to {path}")

    def write_report(self, index: TranscriptIndex, result: OperonResult,
                     config: Optional[Mapping[str, Any]] = None,
                     performance: Optional[Mapping[str, Any]] = None) -> str:
        """Write a human-readable processing report."""
        report_path = self.output_path("summary", "txt")
        summary = result.summary

        with open(report_path, 'w') as f:
            f.write("Operon Finder - Processing Report\n")
            f.write("=" * 50 + "\n\n")

            f.write("INPUT STATISTICS\n")
            f.write("-" * 20 + "\n")
            f.write(f"Chromosomes: {len(index.chromosomes):,}\n")
            f.write(f"Total transcripts: {index.transcript_count:,}\n")
            f.write(f"Coverage threshold: {self.threshold:.2f}\n\n")

            f.write("PUTATIVE OPERONS\n")
            f.write("-" * 20 + "\n")
            for (chrom, strand), count in summary.putative_operons.items():
                f.write(f"Chromosome {chrom} strand {strand}: {count}\n")
            f.write(f"Candidate containers: {len(result.candidates):,}\n")
            f.write(f"Operon clusters: {len(result.clusters):,}\n\n")

            f.write("RESULTS\n")
            f.write("-" * 20 + "\n")
            f.write(f"Total number of OPRNs found: {summary.operon_count}\n")
            f.write(f"Total number of OpGs found: {summary.membership_count}\n")
            f.write("Summary of operons by gene number:\n")
            for line in summary.histogram_lines():
                f.write(f"  {line}\n")

            if performance:
                f.write("\nPERFORMANCE METRICS\n")
                f.write("-" * 20 + "\n")
                f.write(f"Total processing time: {performance['total_elapsed_time']:.2f} seconds\n")
                f.write(f"Peak memory usage: {performance['peak_memory_mb']:.1f} MB\n")
                for stage_name, stage in performance.get('stages', {}).items():
                    f.write(f"{stage_name}: {stage['elapsed_time']:.2f}s "
                            f"({stage['operations_count']} operations)\n")

            if config:
                f.write("\nConfiguration used:\n")
                for key, value in config.items():
                    f.write(f"  {key}: {value}\n")

        logging.info(f"Generated processing report: {report_path}")
        return report_path
