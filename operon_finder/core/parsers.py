#!/usr/bin/env python3

"""
GTF parsing for assembled transcript annotations.

Turns each data line into an AnnotationRecord carrying the column values,
the attribute dictionary and the raw text for later re-emission.
"""

import logging
from collections import Counter
from typing import Dict, Iterator, List

from .data_structures import AnnotationRecord
from .exceptions import ParseError

GTF_COLUMNS = 9


class GtfParser:
    """Parse GTF files line by line with O(n) complexity."""

    def __init__(self, file_path: str):
        self.file_path = file_path
        self.feature_counts: Counter = Counter()

    def parse(self) -> List[AnnotationRecord]:
        """Parse the whole file into a list of records."""
        logging.info(f"Parsing GTF file: {self.file_path}")
        records = list(self.iter_records())
        logging.info(f"Parsed {len(records)} records "
                     f"({self.feature_counts['transcript']} transcripts, "
                     f"{self.feature_counts['exon']} exons)")
        return records

    def iter_records(self) -> Iterator[AnnotationRecord]:
        """Yield one record per data line; comments and blank lines are skipped."""
        self.feature_counts.clear()
        try:
            with open(self.file_path, 'r') as f:
                for line_num, line in enumerate(f, 1):
                    line = line.rstrip('\r\n')
                    if not line.strip() or line.startswith('#'):
                        continue

                    record = self.parse_line(line, line_num)
                    self.feature_counts[record.feature] += 1
                    yield record

        except FileNotFoundError:
            raise ParseError(f"Annotation file not found: {self.file_path}")
        except UnicodeDecodeError as e:
            raise ParseError(f"Annotation file is not valid text: {e}", self.file_path)
        except OSError as e:
            raise ParseError(f"Failed to read annotation file: {e}", self.file_path)

    def parse_line(self, line: str, line_num: int = 0) -> AnnotationRecord:
        """Parse a single GTF data line."""
        parts = line.split('\t')
        if len(parts) != GTF_COLUMNS:
            raise ParseError(f"Expected {GTF_COLUMNS} tab-separated columns, found {len(parts)}",
                             self.file_path, line_num)

        chrom, _source, feature, start, end, _score, strand, _frame, attributes = parts
        try:
            start, end = int(start), int(end)
        except ValueError:
            raise ParseError(f"Invalid coordinates: {start}-{end}", self.file_path, line_num)

        if start < 1 or start > end:
            raise ParseError(f"Invalid coordinates: {start}-{end}", self.file_path, line_num)

        return AnnotationRecord(
            feature=feature,
            chrom=chrom,
            start=start,
            end=end,
            strand=strand,
            attributes=parse_gtf_attributes(attributes),
            line=line,
            line_number=line_num,
        )


def parse_gtf_attributes(attr_string: str) -> Dict[str, str]:
    """Parse a GTF attribute column (`key "value"; key value;`)."""
    attributes = {}
    for attr in attr_string.split(';'):
        attr = attr.strip()
        if not attr:
            continue
        key, _, value = attr.partition(' ')
        value = value.strip()
        if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
            value = value[1:-1]
        # First occurrence wins for repeated keys
        attributes.setdefault(key.strip(), value)
    return attributes
