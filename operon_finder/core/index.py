#!/usr/bin/env python3

"""
Read-only transcript index.

Groups transcript records by chromosome (sorted by name, input order
within a chromosome), attaches exon coordinates and raw annotation lines
per transcript id, and exposes the result as immutable views.
"""

import logging
from collections import defaultdict
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Mapping, Tuple

from .data_structures import AnnotationRecord, Transcript

INDEXED_FEATURES = ('transcript', 'exon')


class TranscriptIndex:
    """Transcripts grouped by chromosome, with raw lines keyed by id."""

    def __init__(self, transcripts_by_chrom: Dict[str, List[Transcript]],
                 raw_lines_by_id: Dict[str, Tuple[str, ...]]):
        self._by_chrom = MappingProxyType(
            {chrom: tuple(transcripts_by_chrom[chrom]) for chrom in sorted(transcripts_by_chrom)}
        )
        self._raw_lines = MappingProxyType(dict(raw_lines_by_id))

    @classmethod
    def from_records(cls, records: Iterable[AnnotationRecord]) -> 'TranscriptIndex':
        """Build the index from parsed transcript and exon records."""
        transcript_records: List[AnnotationRecord] = []
        exons_by_id: Dict[str, List[Tuple[int, int]]] = defaultdict(list)
        raw_lines_by_id: Dict[str, List[str]] = defaultdict(list)

        for record in records:
            if record.feature not in INDEXED_FEATURES:
                continue
            if record.feature == 'transcript':
                transcript_records.append(record)
            else:
                exons_by_id[record.transcript_id].append((record.start, record.end))
            raw_lines_by_id[record.transcript_id].append(record.line)

        transcripts_by_chrom: Dict[str, List[Transcript]] = defaultdict(list)
        for record in transcript_records:
            tid = record.transcript_id
            transcripts_by_chrom[record.chrom].append(Transcript(
                id=tid,
                gene_id=record.gene_id,
                chrom=record.chrom,
                start=record.start,
                end=record.end,
                strand=record.strand,
                coverage=record.coverage,
                expression=record.fpkm,
                exons=tuple(exons_by_id.get(tid, ())),
                annotation_lines=tuple(raw_lines_by_id[tid]),
            ))

        index = cls(transcripts_by_chrom,
                    {tid: tuple(lines) for tid, lines in raw_lines_by_id.items()})
        logging.info(f"Indexed {index.transcript_count} transcripts "
                     f"on {len(index.chromosomes)} chromosomes")
        return index

    @property
    def chromosomes(self) -> Tuple[str, ...]:
        return tuple(self._by_chrom)

    @property
    def transcript_count(self) -> int:
        return sum(len(transcripts) for transcripts in self._by_chrom.values())

    def items(self) -> Iterator[Tuple[str, Tuple[Transcript, ...]]]:
        return iter(self._by_chrom.items())

    def raw_lines(self, transcript_id: str) -> Tuple[str, ...]:
        return self._raw_lines.get(transcript_id, ())

    @property
    def annotated_ids(self) -> Mapping[str, Tuple[str, ...]]:
        """Every id with stored annotation lines, including exon-only ids."""
        return self._raw_lines
