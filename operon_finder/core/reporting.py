#!/usr/bin/env python3

"""
Operon size summary.
"""

import logging
from collections import defaultdict
from typing import Dict, Iterable, Mapping, Set, Tuple

from .data_structures import OperonMembership, OperonSummary

GENE_COUNT_CATEGORIES = ("2 genes", "3 genes", "4 genes", "5 genes", ">5 genes")


def gene_count_category(gene_count: int) -> str:
    """Histogram bucket for an operon with `gene_count` genes, '' below two."""
    if gene_count < 2:
        return ""
    if gene_count > 5:
        return ">5 genes"
    return f"{gene_count} genes"


class SummaryReporter:
    """Stage 7: tabulate operons by number of distinct member genes."""

    def summarize(self, memberships: Iterable[OperonMembership],
                  putative_operons: Mapping[Tuple[str, str], int] = None) -> OperonSummary:
        genes_by_operon: Dict[str, Set[str]] = defaultdict(set)
        membership_count = 0
        for membership in memberships:
            genes_by_operon[membership.operon_id].add(membership.gene_id)
            membership_count += 1

        histogram = {category: 0 for category in GENE_COUNT_CATEGORIES}
        for genes in genes_by_operon.values():
            category = gene_count_category(len(genes))
            if category:
                histogram[category] += 1

        return OperonSummary(
            operon_count=len(genes_by_operon),
            membership_count=membership_count,
            histogram=histogram,
            putative_operons=dict(putative_operons or {}),
        )

    def log_summary(self, summary: OperonSummary) -> None:
        logging.info(f"Total number of OPRNs found: {summary.operon_count}")
        logging.info(f"Total number of OpGs found: {summary.membership_count}")
        logging.info("Summary of operons by gene number:")
        for line in summary.histogram_lines():
            logging.info(line)
