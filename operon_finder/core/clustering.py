#!/usr/bin/env python3

"""
Operon clustering and membership refinement.

Candidate containers overlapping on the same chromosome and strand are
merged under sequential ``OPRN.<n>`` ids; each cluster's genes are then
reduced again, ranked by expression alone.
"""

import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Set, Tuple

from .data_structures import (
    ContainmentCandidate, OperonCluster, OperonMembership, Transcript
)
from .exceptions import InvariantError
from .processors import (
    CONTAINMENT_TOLERANCE, MIN_OPERON_GENES, NonOverlapSelector, rank_by_expression
)

OPERON_ID_PREFIX = "OPRN"


def operon_overlap(current: Transcript, anchor: Transcript,
                   tolerance: int = CONTAINMENT_TOLERANCE) -> bool:
    """True if two containers overlap by more than `tolerance` on both sides."""
    return (current.start <= max(anchor.end - tolerance, 0)
            and current.end >= anchor.start + tolerance)


def operon_number(operon_id: str) -> int:
    """Numeric suffix of an operon id (``OPRN.12`` -> 12)."""
    prefix, _, number = operon_id.rpartition('.')
    if not prefix or not number.isdigit():
        raise InvariantError("operon id has no numeric suffix", operon_id)
    return int(number)


def transcript_sort_key(transcript_id: str) -> Tuple[int, int]:
    """
    Sort key for assembler transcript ids of the form ``PREFIX.<gene>.<n>``.

    Both fields compare as integers, so ``STRG.1.9`` sorts before
    ``STRG.1.10``; reading ``<gene>.<n>`` as one decimal number would
    order them the other way round.

    Raises InvariantError for ids without both numeric fields.
    """
    fields = transcript_id.split('.')
    if len(fields) < 3 or not fields[1].isdigit() or not fields[2].isdigit():
        raise InvariantError("transcript id lacks a numeric <gene>.<n> suffix", transcript_id)
    return int(fields[1]), int(fields[2])


class OperonClusterer:
    """Stage 5: merge overlapping candidate containers into operon clusters."""

    def __init__(self, tolerance: int = CONTAINMENT_TOLERANCE, prefix: str = OPERON_ID_PREFIX):
        self.tolerance = tolerance
        self.prefix = prefix
        self.putative_operons: Dict[Tuple[str, str], int] = {}

    def cluster(self, candidates: Iterable[ContainmentCandidate]) -> List[OperonCluster]:
        groups: Dict[Tuple[str, str], List[ContainmentCandidate]] = defaultdict(list)
        for candidate in candidates:
            groups[(candidate.container.chrom, candidate.container.strand)].append(candidate)

        self.putative_operons = {}
        clusters: List[OperonCluster] = []
        assigned_genes: Set[str] = set()

        for chrom, strand in sorted(groups):
            group = sorted(groups[(chrom, strand)], key=lambda c: c.container.start)
            self.putative_operons[(chrom, strand)] = len(group)
            pair_count = sum(len(candidate.contained) for candidate in group)
            logging.info(f"Chromosome {chrom} strand {strand}: {len(group)} putative operons "
                         f"(candidate containers, {pair_count} container-gene pairs)")

            anchor: Optional[Transcript] = None
            for candidate in group:
                for container, gene in candidate.pairs():
                    # First cluster to claim a gene keeps it
                    if gene.id in assigned_genes:
                        continue
                    if anchor is None or not operon_overlap(container, anchor, self.tolerance):
                        clusters.append(OperonCluster(
                            cluster_id=f"{self.prefix}.{len(clusters) + 1}",
                            chrom=chrom,
                            strand=strand,
                        ))
                    clusters[-1].add_member(container, gene)
                    anchor = container
                    assigned_genes.add(gene.id)

        logging.info(f"Merged candidates into {len(clusters)} operon clusters")
        return clusters


class OperonRefiner:
    """Stage 6: re-resolve cluster membership and emit final triples."""

    def __init__(self, selector: NonOverlapSelector = None, min_genes: int = MIN_OPERON_GENES):
        self.selector = selector or NonOverlapSelector(rank_by_expression)
        self.min_genes = min_genes

    def refine_cluster(self, cluster: OperonCluster) -> List[OperonMembership]:
        """Memberships that survive reduction; empty if fewer than `min_genes` remain."""
        survivors = {gene.id for gene in self.selector.select(cluster.genes)}
        if len(survivors) < self.min_genes:
            logging.debug(f"Discarding {cluster.cluster_id}: "
                          f"{len(survivors)} gene(s) after refinement")
            return []

        return [
            OperonMembership(cluster.cluster_id, container.id, gene.id)
            for container, gene in cluster.members
            if gene.id in survivors
        ]

    def refine(self, clusters: Iterable[OperonCluster]) -> List[OperonMembership]:
        memberships: List[OperonMembership] = []
        for cluster in sorted(clusters, key=lambda c: operon_number(c.cluster_id)):
            memberships.extend(self.refine_cluster(cluster))

        memberships.sort(key=lambda m: (transcript_sort_key(m.operon_transcript_id),
                                        operon_number(m.operon_id)))
        return memberships
