#!/usr/bin/env python3

"""
Processing classes for containment classification, non-overlap selection
and operon candidate building.
"""

import logging
from collections import defaultdict
from operator import attrgetter
from typing import Callable, Dict, Iterable, List, Sequence, Tuple

from intervaltree import IntervalTree

from .data_structures import ContainmentCandidate, Transcript

CONTAINMENT_TOLERANCE = 250  # bp
OVERLAP_TOLERANCE = 50  # bp
SINGLE_EXON_FACTOR = 10.0
MIN_OPERON_GENES = 2

RankKey = Callable[[Transcript], tuple]


def rank_by_expression_and_exons(transcript: Transcript) -> tuple:
    return (transcript.expression, transcript.exon_count)


def rank_by_expression(transcript: Transcript) -> tuple:
    return (transcript.expression,)


def no_overlap(a: Transcript, b: Transcript, tolerance: int = OVERLAP_TOLERANCE) -> bool:
    """True when `a` starts after `b` ends, allowing `tolerance` bp of overlap."""
    return a.start > max(b.end - tolerance, 0)


class ContainmentClassifier:
    """Stage 2: decide whether one transcript spans another."""

    def __init__(self, threshold: float = 1.0, tolerance: int = CONTAINMENT_TOLERANCE):
        self.threshold = threshold
        self.tolerance = tolerance

    def _within_bounds(self, outer: Transcript, inner: Transcript) -> bool:
        tol = self.tolerance
        return (outer.start <= inner.start + tol
                and inner.start + tol < outer.end + tol
                and outer.end + tol >= inner.end
                and inner.end > outer.start)

    def contains(self, outer: Transcript, inner: Transcript) -> bool:
        """
        True if `outer` spans `inner` and `inner` is the more expressed one.

        Single-exon inner transcripts need a tenfold stronger coverage
        differential than spliced ones.
        """
        if not self._within_bounds(outer, inner):
            return False
        scaled = outer.coverage * self.threshold
        if not scaled < inner.coverage:
            return False
        return inner.is_multi_exonic or scaled * SINGLE_EXON_FACTOR < inner.coverage

    def dominates(self, outer: Transcript, inner: Transcript) -> bool:
        """True if `outer` spans `inner` and is itself the more expressed one."""
        if not self._within_bounds(outer, inner):
            return False
        scaled = inner.coverage * self.threshold
        if not outer.coverage > scaled:
            return False
        return inner.is_multi_exonic or outer.coverage > scaled * SINGLE_EXON_FACTOR


class NonOverlapSelector:
    """
    Greedy reduction to a set of mutually non-overlapping transcripts.

    Transcripts are visited by start position. Each one is compared only
    with the most recently accepted transcript: it is appended when the two
    do not overlap, replaces it when it ranks strictly higher, and is
    dropped otherwise. This is not optimal interval scheduling and is not
    meant to be.
    """

    def __init__(self, rank_key: RankKey = rank_by_expression_and_exons,
                 tolerance: int = OVERLAP_TOLERANCE):
        self.rank_key = rank_key
        self.tolerance = tolerance

    def select(self, transcripts: Iterable[Transcript]) -> List[Transcript]:
        # sorted() is stable: equal starts keep their input order
        ordered = sorted(transcripts, key=attrgetter('start'))
        accepted: List[Transcript] = []

        for transcript in ordered:
            if not accepted or no_overlap(transcript, accepted[-1], self.tolerance):
                accepted.append(transcript)
            elif self.rank_key(transcript) > self.rank_key(accepted[-1]):
                accepted[-1] = transcript

        return accepted


class OperonCandidateBuilder:
    """Stage 4: find containers spanning at least two independent transcripts."""

    def __init__(self, classifier: ContainmentClassifier,
                 selector: NonOverlapSelector = None,
                 min_genes: int = MIN_OPERON_GENES):
        self.classifier = classifier
        self.selector = selector or NonOverlapSelector(rank_by_expression_and_exons)
        self.min_genes = min_genes

    def build_for_chromosome(self, chrom: str,
                             transcripts: Sequence[Transcript]) -> List[ContainmentCandidate]:
        """Classify every transcript of one chromosome as a potential container."""
        logging.info(f"Processing chromosome {chrom} ({len(transcripts)} transcripts)...")

        trees = self._build_trees(transcripts)
        candidates = []

        for container in transcripts:
            contained, dominated = self._classify_partners(container, trees[container.strand])
            if dominated or len(contained) < self.min_genes:
                continue

            selected = self.selector.select(contained)
            if len(selected) >= self.min_genes:
                candidates.append(ContainmentCandidate(container, tuple(selected)))

        logging.debug(f"Chromosome {chrom}: {len(candidates)} candidate containers")
        return candidates

    def _build_trees(self, transcripts: Sequence[Transcript]) -> Dict[str, IntervalTree]:
        """One interval tree per strand; each interval carries (input position, transcript)."""
        trees: Dict[str, IntervalTree] = defaultdict(IntervalTree)
        for position, transcript in enumerate(transcripts):
            # IntervalTree intervals are half-open
            trees[transcript.strand].addi(transcript.start, transcript.end + 1,
                                          (position, transcript))
        return trees

    def _classify_partners(self, container: Transcript,
                           tree: IntervalTree) -> Tuple[List[Transcript], bool]:
        """
        Collect transcripts contained by `container` and report whether any
        transcript dominates it.

        The query window covers every position either predicate can accept,
        so the outcome matches an all-pairs scan.
        """
        tol = self.classifier.tolerance
        hits = sorted(tree.overlap(container.start - tol, container.end + tol + 1),
                      key=lambda interval: interval.data[0])

        contained = []
        for interval in hits:
            _, other = interval.data
            if other.id == container.id:
                continue
            if self.classifier.dominates(other, container):
                return [], True
            if self.classifier.contains(container, other):
                contained.append(other)

        return contained, False
