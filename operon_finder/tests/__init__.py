#!/usr/bin/env python3

"""
Test suite for the operon finder pipeline.

Unit tests covering:
- Core data structures, parsing and the transcript index
- Configuration management and validation
- Containment classification and non-overlap selection
- Candidate building, clustering, refinement and summaries
- End-to-end runs on small GTF fixtures
"""
