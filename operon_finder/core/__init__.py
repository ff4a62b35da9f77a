#!/usr/bin/env python3

"""
Core module for the operon finder pipeline.

Contains fundamental data structures, exception types, configuration
management and the processing stages.
"""

from .data_structures import (
    AnnotationRecord, Transcript, ContainmentCandidate, OperonCluster,
    OperonMembership, OperonSummary, OperonResult
)
from .exceptions import (
    PipelineError, ParseError, ConfigurationError, InvariantError, MemoryError
)
from .config import PipelineConfig, load_config

__all__ = [
    'AnnotationRecord', 'Transcript', 'ContainmentCandidate', 'OperonCluster',
    'OperonMembership', 'OperonSummary', 'OperonResult',
    'PipelineError', 'ParseError', 'ConfigurationError', 'InvariantError', 'MemoryError',
    'PipelineConfig', 'load_config'
]
