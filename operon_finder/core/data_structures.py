#!/usr/bin/env python3

"""
Core data structures for the operon finder pipeline.

Defines the transcript record shared by every stage, the parsed annotation
record it is built from, and the transient containers produced while
candidates are classified, clustered and refined.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

MISSING_ID = "NA"


@dataclass
class AnnotationRecord:
    """One parsed line of a GTF file."""
    feature: str
    chrom: str
    start: int
    end: int
    strand: str
    attributes: Dict[str, str] = field(default_factory=dict)
    line: str = ""
    line_number: int = 0

    @property
    def transcript_id(self) -> str:
        return self.attributes.get('transcript_id') or MISSING_ID

    @property
    def gene_id(self) -> str:
        return self.attributes.get('gene_id') or MISSING_ID

    def numeric_attribute(self, key: str) -> float:
        """Float value of an attribute, 0.0 when absent or unparsable."""
        try:
            return float(self.attributes[key])
        except (KeyError, ValueError):
            return 0.0

    @property
    def coverage(self) -> float:
        return self.numeric_attribute('cov')

    @property
    def fpkm(self) -> float:
        return self.numeric_attribute('FPKM')


@dataclass(frozen=True)
class Transcript:
    """Represents an assembled transcript with its exon structure."""
    id: str
    gene_id: str
    chrom: str
    start: int
    end: int
    strand: str
    coverage: float = 0.0
    expression: float = 0.0
    exons: Tuple[Tuple[int, int], ...] = ()
    # Raw annotation text, re-emitted untouched
    annotation_lines: Tuple[str, ...] = field(default=(), repr=False)

    def __post_init__(self):
        """Validate transcript data after initialization."""
        if self.start > self.end:
            raise ValueError(f"Invalid transcript coordinates: {self.start}-{self.end}")
        if self.coverage < 0 or self.expression < 0:
            raise ValueError(f"Negative abundance for transcript {self.id}")

    @property
    def exon_count(self) -> int:
        """Get number of exons."""
        return len(self.exons)

    @property
    def is_multi_exonic(self) -> bool:
        return self.exon_count > 1


@dataclass(frozen=True)
class ContainmentCandidate:
    """A container transcript and the contained transcripts it spans."""
    container: Transcript
    contained: Tuple[Transcript, ...]

    def pairs(self) -> List[Tuple[Transcript, Transcript]]:
        return [(self.container, gene) for gene in self.contained]


@dataclass
class OperonCluster:
    """Overlapping candidate containers merged under one operon id."""
    cluster_id: str
    chrom: str
    strand: str
    members: List[Tuple[Transcript, Transcript]] = field(default_factory=list)

    def add_member(self, container: Transcript, gene: Transcript) -> None:
        self.members.append((container, gene))

    @property
    def genes(self) -> List[Transcript]:
        return [gene for _, gene in self.members]


@dataclass(frozen=True)
class OperonMembership:
    """Final output unit: one gene assigned to one operon."""
    operon_id: str
    operon_transcript_id: str
    gene_id: str

    def to_row(self) -> str:
        return f"{self.operon_id}\t{self.operon_transcript_id}\t{self.gene_id}"


@dataclass
class OperonSummary:
    """Counts reported at the end of a run."""
    operon_count: int = 0
    membership_count: int = 0
    histogram: Dict[str, int] = field(default_factory=dict)
    putative_operons: Dict[Tuple[str, str], int] = field(default_factory=dict)

    def histogram_lines(self) -> List[str]:
        return [f"{category}: {count}" for category, count in self.histogram.items()]


@dataclass
class OperonResult:
    """Everything one run of the core stages produced."""
    candidates: List[ContainmentCandidate] = field(default_factory=list)
    clusters: List[OperonCluster] = field(default_factory=list)
    memberships: List[OperonMembership] = field(default_factory=list)
    summary: Optional[OperonSummary] = None
